"""Sentence-boundary chunking.

Segments text into sentences (abbreviation-aware, see segmentation.py) and
packs whole sentences into chunks:

- A new chunk starts when adding the next sentence would push the joined
  group past chunk_size.
- Each new chunk opens with the trailing sentences of the previous chunk
  whose joined size fits chunk_overlap.
- A sentence longer than chunk_size is emitted whole as its own chunk.

Chunk offsets come straight from the sentence spans, so identical sentences
keep their own positions.
"""

from __future__ import annotations

from typing import List

from chunkforge.chunking.config import ConfigInput
from chunkforge.chunking.models import ByteOffsets, Chunk, SentenceSpan
from chunkforge.chunking.segmentation import SentenceSegmenter, group_spans, trailing_spans
from chunkforge.core.logging import get_logger
from chunkforge.shared.patterns.chunking import FormatHint, IChunkingStrategy
from chunkforge.shared.text_utils import is_blank

logger = get_logger(__name__)


class SentenceChunker(IChunkingStrategy):
    """Groups consecutive sentences up to chunk_size.

    Examples:
        >>> chunker = SentenceChunker({"chunk_size": 40, "chunk_overlap": 0})
        >>> [c.content for c in chunker.chunk("Dr. Smith arrived. He left soon.")]
        ['Dr. Smith arrived. He left soon.']
    """

    def __init__(self, config: ConfigInput = None, segmenter: SentenceSegmenter = None) -> None:
        super().__init__(config)
        self.segmenter = segmenter or SentenceSegmenter()

    def get_strategy_name(self) -> str:
        return "sentence"

    def split_sentences(self, text: str) -> List[SentenceSpan]:
        """Sentence spans of text, in order."""
        return self.segmenter.segment(text)

    def chunk(
        self,
        text: str,
        format_hint: FormatHint = None,
        config: ConfigInput = None,
    ) -> List[Chunk]:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return []

        spans = self.segmenter.segment(text, offsets=ByteOffsets(text))
        groups = group_spans(
            spans,
            cfg.size_measure,
            cfg.chunk_size,
            " ",
            lambda group: trailing_spans(group, cfg.size_measure, cfg.chunk_overlap, " "),
        )

        pieces = [
            (
                " ".join(span.text for span in group),
                group[0].start_byte,
                {"sentence_count": len(group)},
            )
            for group in groups
        ]
        chunks = self._build_chunks(pieces, cfg)
        logger.debug(
            "Sentence chunking complete",
            sentences=len(spans),
            chunks=len(chunks),
        )
        return chunks

    def estimate_chunks(self, text: str, config: ConfigInput = None) -> int:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return 0
        if cfg.measure(text) <= cfg.chunk_size:
            return 1

        spans = self.segmenter.segment(text)
        average = sum(cfg.measure(span.text) for span in spans) // max(len(spans), 1)
        per_chunk = max(cfg.chunk_size // max(average, 1), 1)
        return len(spans) // per_chunk + 1
