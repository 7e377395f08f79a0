"""
Text Processing Utilities.

Small text helpers shared by the chunking strategies.

Functions
---------
**is_blank(text)**
    True for empty or whitespace-only text. Every strategy returns no chunks
    for blank input.

**normalize_whitespace(text)**
    Aggressive cleaning: all whitespace becomes single spaces. Used to compare
    reconstructed chunk text with the source.
"""

import re


def is_blank(text: str) -> bool:
    """Check whether text is empty or whitespace only.

    Examples:
        >>> is_blank("  \\n\\t")
        True
        >>> is_blank(" a ")
        False
    """
    return not text or not text.strip()


def normalize_whitespace(text: str) -> str:
    """Normalize all whitespace to single spaces.

    This replaces ALL whitespace (including newlines, tabs) with single spaces.

    Args:
        text: The text to normalize

    Returns:
        Text with all whitespace normalized to single spaces

    Examples:
        >>> normalize_whitespace("Hello\\n\\tWorld")
        'Hello World'
        >>> normalize_whitespace("Multiple    spaces\\n\\nand lines")
        'Multiple spaces and lines'
    """
    return re.sub(r"\s+", " ", text).strip()

