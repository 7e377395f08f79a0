"""Size measures for chunking.

Every strategy decides when a fragment is "too big" through a size measure,
a plain callable ``str -> int``. Two measures ship with ChunkForge:

- char_count: number of Unicode code points (the default)
- token_sizer(): estimated tokens at ~4 characters per token

The token estimate is a declared heuristic, not a tokenizer. Callers that need
exact counts pass their own measure as ``size_measure`` (or ``get_chunk_size``)
in the chunk config; safe_measure() makes such callables infallible.
"""

from __future__ import annotations

from typing import Callable

from chunkforge.core.logging import get_logger

logger = get_logger(__name__)

SizeMeasure = Callable[[str], int]

DEFAULT_CHARS_PER_TOKEN = 4


def char_count(text: str) -> int:
    """Return the number of code points in text."""
    return len(text)


def estimate_tokens(text: str, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Estimate the token count of text.

    Args:
        text: Text to measure
        chars_per_token: Characters per token ratio

    Returns:
        0 for empty text, otherwise at least 1

    Examples:
        >>> estimate_tokens("")
        0
        >>> estimate_tokens("Hi")
        1
        >>> estimate_tokens("a" * 400)
        100
    """
    if not text:
        return 0
    return max(1, len(text) // chars_per_token)


def token_sizer(chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> SizeMeasure:
    """Build a size measure that counts estimated tokens.

    Examples:
        >>> measure = token_sizer()
        >>> measure("a" * 40)
        10
    """

    def measure(text: str) -> int:
        return estimate_tokens(text, chars_per_token)

    measure._chunkforge_safe = True  # type: ignore[attr-defined]
    measure.__name__ = f"token_sizer_{chars_per_token}"
    return measure


def to_chars(tokens: int, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Convert a token budget into an approximate character budget."""
    return tokens * chars_per_token


def from_chars(chars: int, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Convert a character count into an approximate token count.

    Zero stays zero; any positive count is at least one token.
    """
    if chars <= 0:
        return 0
    return max(1, chars // chars_per_token)


def safe_measure(fn: SizeMeasure) -> SizeMeasure:
    """Wrap a custom size measure so it can never fail.

    A measure that raises is answered with the character count of the text.
    Non-integer results are truncated and negative results clamp to 0.

    Args:
        fn: Caller-supplied measure

    Returns:
        Infallible measure with the same signature
    """
    if fn is char_count or getattr(fn, "_chunkforge_safe", False):
        return fn

    def measure(text: str) -> int:
        try:
            value = fn(text)
        except Exception as e:
            logger.warning(
                "Size measure failed, using character count",
                measure=getattr(fn, "__name__", repr(fn)),
                error=e,
            )
            return len(text)
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            logger.warning(
                "Size measure returned a non-number, using character count",
                value=repr(value),
            )
            return len(text)

    measure._chunkforge_safe = True  # type: ignore[attr-defined]
    measure.__name__ = getattr(fn, "__name__", "custom_measure")
    return measure
