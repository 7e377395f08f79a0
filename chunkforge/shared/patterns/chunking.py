"""
Base Interface for Chunking Strategies.

This module defines the IChunkingStrategy interface - the contract that all
text chunking implementations must follow. Chunking splits text into
size-bounded units suitable for embedding and retrieval.

Architecture Context
--------------------
A caller picks one strategy, passes text, an optional format hint and a
config, and receives Chunks:

    ┌───────────────────────────────────────────────────────────────┐
    │                         Source Text                            │
    │  "# Intro\\n\\nThis document explores..."                       │
    └───────────────────────────────┬───────────────────────────────┘
                                    │
                    ┌───────────────┴───────────────┐
                    │     IChunkingStrategy         │
                    │ (recursive/character/sentence │
                    │   /paragraph/semantic)        │
                    └───────────────┬───────────────┘
                                    │
        ┌───────────────────────────┼───────────────────────────────┐
        ↓                           ↓                               ↓
    ┌─────────┐               ┌─────────┐                     ┌─────────┐
    │ Chunk 0 │               │ Chunk 1 │         ...         │ Chunk N │
    └─────────┘               └─────────┘                     └─────────┘

Available Implementations
-------------------------
- RecursiveChunker: Format-aware separator hierarchy (default)
- CharacterChunker: Fixed windows cut at word, sentence or any boundary
- SentenceChunker: Groups whole sentences
- ParagraphChunker: Merges small paragraphs, splits large ones
- SemanticChunker: Groups sentences by embedding similarity

Interface Contract
------------------
Implementors must provide:

    chunk(text, format_hint, config)  - Split text into Chunks (required)
    estimate_chunks(text, config)     - Cheap pre-flight count (required)
    get_strategy_name()               - Return strategy identifier (required)

The base class provides:

    validate_text(text)  - Check if text is suitable for chunking
    get_config()         - Return config dict for logging
    _resolve_config()    - Merge a per-call config over the instance default
    _build_chunks()      - Number chunks densely and attach common metadata

Every strategy is a pure function of (text, config): no strategy keeps
mutable state between calls, so one instance can serve many threads.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from chunkforge.chunking.config import ChunkConfig, ConfigInput, ConfigValidator, validate_config
from chunkforge.chunking.models import Chunk, byte_size
from chunkforge.chunking.separators import Format
from chunkforge.chunking.tokens import estimate_tokens

FormatHint = Union[Format, str, None]
ChunkPiece = Tuple[str, int, Dict[str, Any]]


class IChunkingStrategy(ABC):
    """Interface for text chunking strategies.

    All chunkers implement this interface so that strategies can be swapped
    without changing the calling code.

    Examples:
        >>> chunker = SentenceChunker({"chunk_size": 200})
        >>> chunks = chunker.chunk("First sentence. Second one.")
        >>> chunks[0].metadata["strategy"]
        'sentence'
    """

    def __init__(self, config: ConfigInput = None) -> None:
        """Initialize with a default config used when chunk() gets none.

        Args:
            config: ChunkConfig, option mapping, or None for defaults

        Raises:
            InvalidConfigError: If the options are invalid
        """
        self.config = ConfigValidator.validate(config)

    @abstractmethod
    def chunk(
        self,
        text: str,
        format_hint: FormatHint = None,
        config: ConfigInput = None,
    ) -> List[Chunk]:
        """Split text into chunks.

        Args:
            text: Text to chunk
            format_hint: Content format; overrides config.format when given
            config: Per-call options layered over the instance config

        Returns:
            Chunks in source order; empty for blank text

        Raises:
            InvalidConfigError: If the options are invalid
        """
        pass

    @abstractmethod
    def estimate_chunks(self, text: str, config: ConfigInput = None) -> int:
        """Estimate how many chunks chunk() would produce.

        Must not materialize chunks. Returns 0 only for blank text.
        """
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Get the name of this chunking strategy.

        Returns:
            Strategy name (e.g., "recursive", "semantic")
        """
        pass

    def get_config(self) -> Dict[str, Any]:
        """Get chunker configuration.

        Returns configuration parameters for logging and debugging.
        """
        return {
            "strategy": self.get_strategy_name(),
            "class": self.__class__.__name__,
            "chunk_size": self.config.chunk_size,
            "chunk_overlap": self.config.chunk_overlap,
            "size_unit": self.config.size_unit.value,
            "format": self.config.format.value,
        }

    def validate_text(self, text: str) -> bool:
        """Validate that text is suitable for chunking.

        Examples:
            >>> RecursiveChunker().validate_text("Some content")
            True
            >>> RecursiveChunker().validate_text("   ")
            False
        """
        return bool(text and text.strip())

    def _resolve_config(self, config: ConfigInput) -> ChunkConfig:
        """Layer a per-call config over the instance default."""
        if config is None:
            return self.config
        if isinstance(config, ChunkConfig):
            return config
        if isinstance(config, Mapping):
            return validate_config(self.config, **config) if config else self.config
        return ConfigValidator.validate(config)

    def _build_chunks(
        self, pieces: Iterable[ChunkPiece], config: ChunkConfig
    ) -> List[Chunk]:
        """Create Chunks from (content, start_byte, metadata) pieces.

        Blank pieces are dropped before numbering, so indices stay dense.
        """
        chunks: List[Chunk] = []
        for content, start_byte, extra in pieces:
            if not content.strip():
                continue
            metadata: Dict[str, Any] = {
                "strategy": self.get_strategy_name(),
                "char_count": len(content),
                "token_count": estimate_tokens(content, config.chars_per_token),
            }
            metadata.update(extra)
            chunks.append(
                Chunk(
                    content=content,
                    index=len(chunks),
                    start_byte=start_byte,
                    end_byte=start_byte + byte_size(content),
                    metadata=metadata,
                )
            )
        return chunks

    def __repr__(self) -> str:
        """String representation of chunker."""
        return (
            f"{self.__class__.__name__}(strategy={self.get_strategy_name()}, "
            f"chunk_size={self.config.chunk_size})"
        )


class ChunkValidator:
    """Validator for chunk quality and sequence invariants.

    Checks chunks individually:
    - Content is not just whitespace
    - Size under the config's measure stays within max_size
    - The byte range matches the UTF-8 length of the content

    And as a sequence:
    - Indices run 0..n-1
    - start_byte never decreases
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        config: Optional[ChunkConfig] = None,
        allow_empty: bool = False,
    ):
        """Initialize validator.

        Args:
            max_size: Maximum chunk size; defaults to config.chunk_size
            config: Config providing the size measure
            allow_empty: Whether to allow whitespace-only chunks
        """
        self.config = config or ChunkConfig()
        self.max_size = max_size if max_size is not None else self.config.chunk_size
        self.allow_empty = allow_empty

    def validate(self, chunk: Any) -> bool:
        """Validate a single chunk.

        Examples:
            >>> validator = ChunkValidator(max_size=500)
            >>> validator.validate(chunks[0])
            True
        """
        if not hasattr(chunk, "content"):
            return False

        content = chunk.content
        if not content.strip() and not self.allow_empty:
            return False

        if self.config.measure(content) > self.max_size:
            return False

        return chunk.end_byte - chunk.start_byte == byte_size(content)

    def validate_sequence(self, chunks: List[Chunk]) -> bool:
        """Check dense indices and non-decreasing start offsets."""
        for position, chunk in enumerate(chunks):
            if chunk.index != position:
                return False
            if position and chunk.start_byte < chunks[position - 1].start_byte:
                return False
        return True

    def filter_valid(self, chunks: List[Any]) -> List[Any]:
        """Filter chunks to only valid ones."""
        return [chunk for chunk in chunks if self.validate(chunk)]

    def get_stats(self, chunks: List[Any]) -> Dict[str, Any]:
        """Get validation statistics.

        Examples:
            >>> stats = ChunkValidator(max_size=1000).get_stats(chunks)
            >>> print(f"Valid: {stats['valid_count']}/{stats['total_count']}")
        """
        total = len(chunks)
        valid = sum(1 for chunk in chunks if self.validate(chunk))

        return {
            "total_count": total,
            "valid_count": valid,
            "invalid_count": total - valid,
            "validation_rate": valid / total if total > 0 else 0,
            "ordered": self.validate_sequence(chunks),
        }
