"""
Unit Tests for constructor argument validation
"""

import pytest

from deployment.address_validation import (
    ZERO_ADDRESS,
    is_valid_contract_address,
    validate_address,
)
from deployment.errors import InvalidConstructorArgument

from conftest import FEE_RECIPIENT


class TestValidateAddress:

    def test_checksummed_address(self):
        assert validate_address(FEE_RECIPIENT) == FEE_RECIPIENT

    def test_lowercase_is_checksummed(self):
        assert validate_address(FEE_RECIPIENT.lower()) == FEE_RECIPIENT

    def test_uppercase_is_checksummed(self):
        assert validate_address("0x" + FEE_RECIPIENT[2:].upper()) == FEE_RECIPIENT

    def test_surrounding_whitespace(self):
        assert validate_address(f"  {FEE_RECIPIENT}\n") == FEE_RECIPIENT

    @pytest.mark.parametrize("value", [
        "not-an-address",
        "",
        "0x",
        FEE_RECIPIENT[2:],
        FEE_RECIPIENT + "00",
        FEE_RECIPIENT[:-1],
        "0xZZb4aEC71F3a772fDE47Bf80B457d72A03d78Aae",
    ])
    def test_malformed(self, value):
        with pytest.raises(InvalidConstructorArgument):
            validate_address(value)

    def test_bad_checksum(self):
        # Flip the case of one letter in a checksummed address
        bad = FEE_RECIPIENT.replace("aEC", "AEC")

        with pytest.raises(InvalidConstructorArgument, match="checksum"):
            validate_address(bad)

    def test_zero_address(self):
        with pytest.raises(InvalidConstructorArgument, match="zero"):
            validate_address(ZERO_ADDRESS)

    @pytest.mark.parametrize("value", [None, 123, b"\x01" * 20])
    def test_non_string(self, value):
        with pytest.raises(InvalidConstructorArgument):
            validate_address(value)

    def test_label_in_message(self):
        with pytest.raises(InvalidConstructorArgument, match="fee recipient"):
            validate_address("nope", label="fee recipient")


class TestContractAddressCheck:

    def test_valid(self):
        assert is_valid_contract_address(FEE_RECIPIENT)

    def test_zero(self):
        assert not is_valid_contract_address(ZERO_ADDRESS)

    def test_not_checksummed(self):
        assert not is_valid_contract_address(FEE_RECIPIENT.lower())

    def test_none(self):
        assert not is_valid_contract_address(None)
