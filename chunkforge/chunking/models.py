"""Chunk data model.

Chunk is the value every strategy returns. It is frozen: once a strategy
emits a chunk nothing downstream can change its content or offsets.

Offsets are UTF-8 byte offsets into the original text, so that
``end_byte - start_byte == len(content.encode("utf-8"))`` always holds.
Strategies work in Python string indices internally and convert through
ByteOffsets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Chunk:
    """A bounded segment of source text plus its position and metadata."""

    content: str
    index: int
    start_byte: int
    end_byte: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        assert self.index >= 0, "index must be non-negative"
        assert self.start_byte >= 0, "start_byte must be non-negative"

    @property
    def start_offset(self) -> int:
        """Alias for start_byte."""
        return self.start_byte

    @property
    def end_offset(self) -> int:
        """Alias for end_byte."""
        return self.end_byte

    @property
    def byte_length(self) -> int:
        """Length of the byte range covered by this chunk."""
        return self.end_byte - self.start_byte

    def to_dict(self) -> Dict[str, Any]:
        """Convert Chunk to dictionary."""
        return {
            "content": self.content,
            "index": self.index,
            "start_byte": self.start_byte,
            "end_byte": self.end_byte,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chunk":
        """Create Chunk from dictionary."""
        known_fields = {f for f in cls.__dataclass_fields__}
        filtered = {k: v for k, v in data.items() if k in known_fields}
        filtered["metadata"] = dict(filtered.get("metadata") or {})
        return cls(**filtered)


@dataclass(frozen=True)
class SentenceSpan:
    """A sentence (or paragraph) located in the source text.

    Segmentation produces spans whose text is the exact source slice
    ``source[start_char:end_char]``; spans merged by join_spans() carry the
    joined text instead.
    """

    text: str
    start_byte: int
    end_byte: int
    start_char: int
    end_char: int


class ByteOffsets:
    """Convert string indices of one text into UTF-8 byte offsets.

    ASCII text maps one to one. For other text a prefix table is built on
    first use.

    Examples:
        >>> offsets = ByteOffsets("héllo")
        >>> offsets.to_byte(2)
        3
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._ascii = text.isascii()
        self._prefix: List[int] = []

    def _build(self) -> None:
        total = 0
        prefix = [0]
        for ch in self.text:
            total += len(ch.encode("utf-8"))
            prefix.append(total)
        self._prefix = prefix

    def to_byte(self, char_index: int) -> int:
        """Byte offset of the character at char_index (clamped to the text)."""
        char_index = max(0, min(char_index, len(self.text)))
        if self._ascii:
            return char_index
        if not self._prefix:
            self._build()
        return self._prefix[char_index]

    @property
    def total(self) -> int:
        """Byte length of the whole text."""
        return self.to_byte(len(self.text))


def byte_size(text: str) -> int:
    """UTF-8 byte length of text."""
    return len(text.encode("utf-8"))
