"""
Tests for log setup and secret masking
"""

from loguru import logger

from utils.logging_config import MASK, mask_secrets, register_secrets, setup_logging

SECRET = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


def test_mask_secrets():
    register_secrets([SECRET])

    assert mask_secrets(f"key={SECRET}") == f"key={MASK}"
    # Same key without the prefix
    assert SECRET[2:] not in mask_secrets(f"raw {SECRET[2:]}")


def test_empty_secrets_ignored():
    register_secrets(["", None])

    assert mask_secrets("nothing to hide") == "nothing to hide"


def test_logged_secrets_are_masked(tmp_path):
    log_file = tmp_path / "deploy.log"
    setup_logging("DEBUG", log_file=str(log_file), secrets=[SECRET])

    messages = []
    logger.add(messages.append, format="{message}")

    logger.error(f"Signing failed for key {SECRET}")
    logger.remove()

    assert messages
    assert SECRET not in messages[0]
    assert MASK in messages[0]
    assert SECRET not in log_file.read_text()
