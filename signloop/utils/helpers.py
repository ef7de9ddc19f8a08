"""
Helper functions for the contract analysis pipeline.
"""

from typing import Tuple


def truncate_text(text: str, max_length: int, marker: str = "") -> Tuple[str, bool]:
    """
    Truncate text to specified length.

    Args:
        text: Text to truncate
        max_length: Maximum number of characters kept from the text
        marker: Appended after the kept text when truncation happened

    Returns:
        The (possibly truncated) text and whether truncation happened
    """
    if not text or len(text) <= max_length:
        return text, False

    return text[:max_length] + marker, True
