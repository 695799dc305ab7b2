"""
Address Validation
Checks constructor arguments before any transaction is built
"""

from web3 import Web3

from .errors import InvalidConstructorArgument

ZERO_ADDRESS = "0x" + "0" * 40


def validate_address(value, label: str = "address") -> str:
    """
    Validate an address literal and return its checksummed form

    Args:
        value: Candidate address (0x-prefixed hex string)
        label: Name used in the error message

    Returns:
        EIP-55 checksummed address

    Raises:
        InvalidConstructorArgument: malformed, bad checksum or zero address
    """
    if not isinstance(value, str):
        raise InvalidConstructorArgument(
            f"{label} must be a 0x-prefixed hex string, got {type(value).__name__}"
        )

    candidate = value.strip()

    if len(candidate) != 42 or not candidate.startswith("0x"):
        raise InvalidConstructorArgument(
            f"{label} must be 42 characters with a 0x prefix: {value!r}"
        )

    if not Web3.is_address(candidate):
        raise InvalidConstructorArgument(f"{label} is not a valid address: {value!r}")

    # Mixed-case input must carry a valid EIP-55 checksum
    digits = candidate[2:]
    if digits != digits.lower() and digits != digits.upper():
        if not Web3.is_checksum_address(candidate):
            raise InvalidConstructorArgument(f"{label} has an invalid checksum: {value!r}")

    if int(candidate, 16) == 0:
        raise InvalidConstructorArgument(f"{label} must not be the zero address")

    return Web3.to_checksum_address(candidate)


def is_valid_contract_address(value) -> bool:
    """True for a checksummed, non-zero, 42-character address"""
    if not isinstance(value, str) or len(value) != 42 or not value.startswith("0x"):
        return False

    return Web3.is_checksum_address(value) and value != ZERO_ADDRESS
