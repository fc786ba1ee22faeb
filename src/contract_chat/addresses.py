"""Account address validation for contract-chat library."""

import re

from eth_utils import is_checksum_address, to_checksum_address

from .exceptions import InvalidAddressError

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_address(candidate: str) -> str:
    """
    Validate an account address and return its EIP-55 checksummed form.

    Used for typed input, wallet-reported addresses and addresses found in
    free text alike.

    Args:
        candidate: Address string, surrounding whitespace ignored

    Returns:
        Checksummed address

    Raises:
        InvalidAddressError: If the string is not 0x + 40 hex characters, or
                             is mixed case with a wrong checksum
    """
    if not isinstance(candidate, str):
        raise InvalidAddressError(f"Invalid Ethereum address: {candidate!r}")

    value = candidate.strip()
    if not ADDRESS_PATTERN.match(value):
        raise InvalidAddressError(f"Invalid Ethereum address: {candidate!r}")

    body = value[2:]
    mixed_case = body != body.lower() and body != body.upper()
    if mixed_case and not is_checksum_address(value):
        raise InvalidAddressError(f"Address checksum mismatch: {value}")

    return to_checksum_address(value)


def is_valid_address(candidate: str) -> bool:
    """Return True if validate_address() would accept the candidate."""
    try:
        validate_address(candidate)
    except InvalidAddressError:
        return False
    return True
