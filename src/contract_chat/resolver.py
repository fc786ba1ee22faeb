"""Constructor argument inference for generated contracts."""

import logging
import re
from typing import Any, Iterable, List, Optional

from eth_utils import to_checksum_address

from .constants import DEFAULT_TOKEN_SUPPLY
from .types import ConstructorInput

logger = logging.getLogger(__name__)

ADDRESS_IN_TEXT = re.compile(r"0x[a-fA-F0-9]{40}")
INTEGER_IN_TEXT = re.compile(r"\b\d+\b")


def is_token_like(inputs: Iterable[ConstructorInput]) -> bool:
    """
    Check whether a constructor looks like a token constructor.

    A constructor is token-like if any parameter name contains "name" or
    "symbol", ignoring case.
    """
    return any(
        "name" in item.name.lower() or "symbol" in item.name.lower()
        for item in inputs
    )


def _first_address(text: str) -> Optional[str]:
    match = ADDRESS_IN_TEXT.search(text)
    if not match:
        return None
    # Case in free text carries no checksum intent
    return to_checksum_address(match.group(0).lower())


def _first_integer(text: str) -> Optional[str]:
    match = INTEGER_IN_TEXT.search(text)
    return match.group(0) if match else None


def resolve_constructor_args(
    inputs: Iterable[ConstructorInput],
    deployer_address: str,
    description: Optional[str],
    derived_name: str,
) -> List[Any]:
    """
    Derive positional constructor arguments from context.

    Token-like constructors get the derived name, a 4-letter symbol, the
    deployer address and a default supply. Anything else gets the first
    address and the first integer found in the description, falling back to
    the deployer address and "0". Parameters no rule covers get "".

    Every parameter of a given type receives the same first match; no
    attempt is made to tell same-typed parameters apart.

    Args:
        inputs: Constructor parameters in ABI order
        deployer_address: Checksummed signer address
        description: The user's contract description (may be None)
        derived_name: Contract name used for name/symbol parameters

    Returns:
        Argument values in parameter order
    """
    inputs = list(inputs)
    text = description or ""

    if is_token_like(inputs):
        args: List[Any] = []
        for item in inputs:
            lowered = item.name.lower()
            if "name" in lowered:
                args.append(derived_name)
            elif "symbol" in lowered:
                args.append(derived_name[:4].upper())
            elif item.type == "address":
                args.append(deployer_address)
            elif item.type == "uint256":
                args.append(DEFAULT_TOKEN_SUPPLY)
            else:
                args.append("")
        logger.debug("Resolved token constructor args: %s", args)
        return args

    found_address = _first_address(text)
    found_integer = _first_integer(text)

    args = []
    for item in inputs:
        if item.type == "address":
            args.append(found_address or deployer_address)
        elif item.type == "uint256":
            args.append(found_integer or "0")
        else:
            args.append("")
    logger.debug("Resolved constructor args from description: %s", args)
    return args


class ConstructorArgumentResolver:
    """
    Default heuristic resolver.

    The deployment coordinator only calls resolve(); a stricter,
    schema-driven resolver can be swapped in with the same signature.
    """

    def resolve(
        self,
        inputs: Iterable[ConstructorInput],
        deployer_address: str,
        description: Optional[str],
        derived_name: str,
    ) -> List[Any]:
        return resolve_constructor_args(
            inputs, deployer_address, description, derived_name
        )
