"""Input validation for CLI arguments."""
from typing import List


def split_keys(value: str) -> List[str]:
    """
    Split a comma-separated --keys argument.

    Args:
        value: Raw argument, e.g. "SECRET, ANOTHER_SECRET"

    Returns:
        Key names with surrounding whitespace and empty items removed
    """
    return [part.strip() for part in value.split(",") if part.strip()]
