"""
Logging Configuration
loguru sinks for the deployment CLI, with secret masking
"""

import sys
from typing import Iterable, Optional
from loguru import logger

STDERR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"

MASK = "********"

_secrets = set()


def register_secrets(secrets: Iterable[str]):
    """Add values that must never appear in log output"""
    for secret in secrets:
        if secret:
            _secrets.add(secret)
            # Keys are often written with or without the 0x prefix
            if secret.startswith("0x"):
                _secrets.add(secret[2:])


def mask_secrets(text: str) -> str:
    for secret in sorted(_secrets, key=len, reverse=True):
        text = text.replace(secret, MASK)
    return text


def _redact(record):
    record["message"] = mask_secrets(record["message"])


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = "data/logs/deploy.log",
    secrets: Iterable[str] = ()
):
    """
    Configure loguru for a CLI run

    Args:
        level: Minimum level for the stderr sink
        log_file: Rotating debug log, None to disable
        secrets: Credential values to mask in every record
    """
    register_secrets(secrets)

    logger.remove()
    logger.configure(patcher=_redact)
    logger.add(sys.stderr, format=STDERR_FORMAT, level=level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG"
        )
