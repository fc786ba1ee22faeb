"""Source extraction from generation-service responses."""

import re

SOLIDITY_FENCE = re.compile(r"```solidity\r?\n([\s\S]*?)```")


def extract_solidity_source(text: str) -> str:
    """
    Extract Solidity source from a fenced code block.

    The first ```solidity block wins. Text without such a block is assumed
    to be bare source already and is returned unchanged, which also makes a
    second pass over extracted code a no-op.

    Args:
        text: Generation response text

    Returns:
        Trimmed block interior, or the input itself
    """
    match = SOLIDITY_FENCE.search(text)
    if match:
        return match.group(1).strip()
    return text
