"""
Chunking and logging configuration.

Provides the application-level settings that select a chunking strategy and
its options. These are plain YAML-friendly values; to_options() turns them
into the option mapping validated by chunkforge.chunking.config.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ChunkingConfig:
    """Chunking configuration."""

    strategy: str = "recursive"  # recursive, character, sentence, paragraph, semantic
    chunk_size: int = 1000
    chunk_overlap: int = 200
    size_unit: str = "characters"  # characters, tokens
    chars_per_token: int = 4
    format: str = "plain"
    separators: Optional[List[str]] = None
    # Character strategy
    boundary: str = "word"  # word, sentence, none
    # Paragraph strategy
    min_paragraph_size: int = 50
    # Semantic strategy
    threshold: float = 0.75
    max_chars: int = 1000
    min_sentences: int = 2
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_options(self) -> Dict[str, Any]:
        """Build the option mapping accepted by the chunk config validator."""
        options: Dict[str, Any] = {
            "chunk_size": self.chunk_size,
            "chunk_overlap": self.chunk_overlap,
            "size_unit": self.size_unit,
            "chars_per_token": self.chars_per_token,
            "format": self.format,
            "boundary": self.boundary,
            "min_paragraph_size": self.min_paragraph_size,
            "threshold": self.threshold,
            "max_chars": self.max_chars,
            "min_sentences": self.min_sentences,
        }
        if self.separators is not None:
            options["separators"] = list(self.separators)
        options.update(self.extra)
        return options


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: Optional[str] = None
    console: bool = True
