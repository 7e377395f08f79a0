"""Semantic chunking strategy.

Groups consecutive sentences by embedding similarity. The caller supplies
the embedder as ``embedding_fn`` (str -> vector) in the chunk config;
ChunkForge never loads a model itself.

Grouping Rules
--------------
Sentences are embedded one at a time, in order. Sentence i starts a new group
when the group already holds at least min_sentences sentences and either

- the joined group plus sentence i would exceed max_chars, or
- cosine(vector[i - 1], vector[i]) is below threshold.

Fallback
--------
If any embedding call raises or returns something that is not a flat numeric
vector, the whole call falls back to size-only grouping bounded by
max_chars. A warning is logged and every chunk is marked
``metadata["fallback"] = True``. Results are never mixed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from chunkforge.chunking.config import ChunkConfig, ConfigInput
from chunkforge.chunking.models import ByteOffsets, Chunk, SentenceSpan
from chunkforge.chunking.segmentation import SentenceSegmenter, group_spans
from chunkforge.core.exceptions import (
    EmbeddingError,
    EmbeddingFailedError,
    InvalidEmbeddingShapeError,
    NoEmbeddingFunctionError,
)
from chunkforge.core.logging import get_logger
from chunkforge.shared.patterns.chunking import FormatHint, IChunkingStrategy
from chunkforge.shared.text_utils import is_blank

logger = get_logger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 when the vectors differ in length, are empty, or either has
    zero magnitude.

    Examples:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([1.0, 0.0], [0.0, 1.0])
        0.0
    """
    vec1 = np.asarray(a, dtype=float)
    vec2 = np.asarray(b, dtype=float)
    if vec1.shape != vec2.shape or vec1.size == 0:
        return 0.0

    magnitude1 = np.linalg.norm(vec1)
    magnitude2 = np.linalg.norm(vec2)
    if magnitude1 == 0.0 or magnitude2 == 0.0:
        return 0.0

    return float(np.dot(vec1, vec2) / (magnitude1 * magnitude2))


def coerce_vector(result: Any) -> np.ndarray:
    """Turn an embedding callback result into a 1-D float array.

    Accepts a sequence or array of numbers, a mapping with a "vector" key,
    or an object with a ``vector`` attribute.

    Raises:
        InvalidEmbeddingShapeError: If no finite, non-empty 1-D vector results
    """
    if isinstance(result, Mapping):
        result = result.get("vector")
    elif not isinstance(result, (list, tuple, np.ndarray)) and hasattr(result, "vector"):
        result = result.vector

    try:
        vector = np.asarray(result, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidEmbeddingShapeError(
            f"embedding is not numeric: {type(result).__name__}"
        ) from e

    if vector.ndim != 1 or vector.size == 0:
        raise InvalidEmbeddingShapeError(
            f"embedding must be a non-empty 1-D vector, got shape {vector.shape}"
        )
    if not np.all(np.isfinite(vector)):
        raise InvalidEmbeddingShapeError("embedding contains NaN or infinite values")
    return vector


class SemanticChunker(IChunkingStrategy):
    """Groups sentences into topically coherent chunks.

    Examples:
        >>> chunker = SemanticChunker({"embedding_fn": embed, "threshold": 0.8})
        >>> chunks = chunker.chunk(text)
        >>> chunks[0].metadata["fallback"]
        False
    """

    def __init__(
        self, config: ConfigInput = None, segmenter: Optional[SentenceSegmenter] = None
    ) -> None:
        super().__init__(config)
        self.segmenter = segmenter or SentenceSegmenter()

    def get_strategy_name(self) -> str:
        return "semantic"

    def get_config(self) -> Dict[str, Any]:
        info = super().get_config()
        info.update(
            threshold=self.config.threshold,
            max_chars=self.config.max_chars,
            min_sentences=self.config.min_sentences,
            has_embedding_fn=self.config.embedding_fn is not None,
        )
        return info

    def chunk(
        self,
        text: str,
        format_hint: FormatHint = None,
        config: ConfigInput = None,
    ) -> List[Chunk]:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return []
        if cfg.embedding_fn is None:
            raise NoEmbeddingFunctionError("semantic chunking requires embedding_fn")

        offsets = ByteOffsets(text)
        spans = self.segmenter.segment(text, offsets=offsets)
        if len(spans) <= cfg.min_sentences:
            return self._whole_text(text, offsets, len(spans), cfg)

        try:
            vectors = self._embed(spans, cfg)
        except EmbeddingError as e:
            logger.warning(
                "Embedding failed, falling back to size-based grouping",
                error_code=e.error_code,
                error=e,
                sentences=len(spans),
            )
            groups = group_spans(spans, cfg.size_measure, cfg.max_chars, " ")
            return self._to_chunks(groups, cfg, fallback=True)

        groups = self._group_by_similarity(spans, vectors, cfg)
        chunks = self._to_chunks(groups, cfg, fallback=False)
        logger.debug(
            "Semantic chunking complete",
            sentences=len(spans),
            chunks=len(chunks),
            threshold=cfg.threshold,
        )
        return chunks

    def estimate_chunks(self, text: str, config: ConfigInput = None) -> int:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return 0
        size = cfg.measure(text)
        if size <= cfg.max_chars:
            return 1
        return size // cfg.max_chars + 1

    # ------------------------------------------------------------------
    # Embedding
    # ------------------------------------------------------------------

    def _embed(self, spans: List[SentenceSpan], cfg: ChunkConfig) -> List[np.ndarray]:
        """Embed every sentence, raising EmbeddingError on the first bad result."""
        vectors: List[np.ndarray] = []
        for position, span in enumerate(spans):
            try:
                result = cfg.embedding_fn(span.text)
            except Exception as e:
                raise EmbeddingFailedError(
                    f"embedding_fn raised on sentence {position}: {e}"
                ) from e
            vectors.append(coerce_vector(result))
        return vectors

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------

    def _group_by_similarity(
        self,
        spans: List[SentenceSpan],
        vectors: List[np.ndarray],
        cfg: ChunkConfig,
    ) -> List[List[SentenceSpan]]:
        """Split the sentence sequence at size limits and similarity drops."""
        groups: List[List[SentenceSpan]] = []
        current: List[SentenceSpan] = [spans[0]]

        for i in range(1, len(spans)):
            if len(current) >= cfg.min_sentences and self._is_boundary(
                current, spans[i], vectors[i - 1], vectors[i], cfg
            ):
                groups.append(current)
                current = [spans[i]]
            else:
                current.append(spans[i])

        groups.append(current)
        return groups

    @staticmethod
    def _is_boundary(
        current: List[SentenceSpan],
        span: SentenceSpan,
        previous_vector: np.ndarray,
        vector: np.ndarray,
        cfg: ChunkConfig,
    ) -> bool:
        joined = " ".join(s.text for s in current + [span])
        if cfg.measure(joined) > cfg.max_chars:
            return True
        return cosine_similarity(previous_vector, vector) < cfg.threshold

    # ------------------------------------------------------------------
    # Chunk construction
    # ------------------------------------------------------------------

    def _whole_text(
        self, text: str, offsets: ByteOffsets, sentences: int, cfg: ChunkConfig
    ) -> List[Chunk]:
        lead = len(text) - len(text.lstrip())
        metadata = {"sentence_count": sentences, "fallback": False}
        piece = (text.strip(), offsets.to_byte(lead), metadata)
        return self._build_chunks([piece], cfg)

    def _to_chunks(
        self, groups: List[List[SentenceSpan]], cfg: ChunkConfig, fallback: bool
    ) -> List[Chunk]:
        pieces = [
            (
                " ".join(span.text for span in group),
                group[0].start_byte,
                {"sentence_count": len(group), "fallback": fallback},
            )
            for group in groups
        ]
        return self._build_chunks(pieces, cfg)
