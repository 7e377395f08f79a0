"""Paragraph-boundary chunking.

Pipeline
--------
1. Split on blank lines into trimmed paragraph spans.
2. Merge small paragraphs forward. A paragraph joins the buffer when the
   buffer is still below min_paragraph_size, or when the paragraph itself is
   small and the combined size stays under three times the minimum.
3. Units still larger than chunk_size are re-split at sentence boundaries.
   A single sentence larger than chunk_size stays whole.
4. Units are grouped up to chunk_size, separated by a blank line. The next
   group opens with the whole trailing units that fit chunk_overlap, or, when
   none fit, with the last chunk_overlap characters of the last unit.

metadata["paragraph_count"] is the number of source paragraphs a chunk
touches.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import List, Optional

from chunkforge.chunking.config import ChunkConfig, ConfigInput
from chunkforge.chunking.models import ByteOffsets, Chunk, SentenceSpan, byte_size
from chunkforge.chunking.segmentation import (
    SentenceSegmenter,
    group_spans,
    join_spans,
    paragraph_spans,
    trailing_spans,
)
from chunkforge.core.logging import get_logger
from chunkforge.shared.patterns.chunking import FormatHint, IChunkingStrategy
from chunkforge.shared.text_utils import is_blank

logger = get_logger(__name__)

PARAGRAPH_JOINER = "\n\n"


class ParagraphChunker(IChunkingStrategy):
    """Chunker that keeps paragraphs together where it can."""

    def __init__(
        self, config: ConfigInput = None, segmenter: Optional[SentenceSegmenter] = None
    ) -> None:
        super().__init__(config)
        self.segmenter = segmenter or SentenceSegmenter()

    def get_strategy_name(self) -> str:
        return "paragraph"

    def chunk(
        self,
        text: str,
        format_hint: FormatHint = None,
        config: ConfigInput = None,
    ) -> List[Chunk]:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return []

        offsets = ByteOffsets(text)
        paragraphs = paragraph_spans(text, offsets)
        units: List[SentenceSpan] = []
        for unit in self._merge_small(paragraphs, cfg):
            units.extend(self._split_large(unit, text, cfg, offsets))

        groups = group_spans(
            units,
            cfg.size_measure,
            cfg.chunk_size,
            PARAGRAPH_JOINER,
            lambda group: self._overlap_seed(group, cfg),
        )

        starts = [p.start_char for p in paragraphs]
        ends = [p.end_char for p in paragraphs]
        pieces = []
        for group in groups:
            first, last = group[0], group[-1]
            touched = bisect_left(starts, last.end_char) - bisect_right(ends, first.start_char)
            pieces.append(
                (
                    PARAGRAPH_JOINER.join(span.text for span in group),
                    first.start_byte,
                    {"paragraph_count": max(touched, 1)},
                )
            )

        chunks = self._build_chunks(pieces, cfg)
        logger.debug(
            "Paragraph chunking complete",
            paragraphs=len(paragraphs),
            units=len(units),
            chunks=len(chunks),
        )
        return chunks

    def estimate_chunks(self, text: str, config: ConfigInput = None) -> int:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return 0
        paragraphs = len(paragraph_spans(text))
        return max(cfg.measure(text) // cfg.chunk_size + 1, paragraphs // 3 + 1)

    # ------------------------------------------------------------------
    # Unit preparation
    # ------------------------------------------------------------------

    def _merge_small(
        self, paragraphs: List[SentenceSpan], cfg: ChunkConfig
    ) -> List[SentenceSpan]:
        """Merge paragraphs below min_paragraph_size into their neighbours."""
        minimum = cfg.min_paragraph_size
        if minimum <= 0:
            return list(paragraphs)

        units: List[SentenceSpan] = []
        buffer: List[SentenceSpan] = []
        for paragraph in paragraphs:
            if not buffer:
                buffer = [paragraph]
                continue
            buffered = cfg.measure(PARAGRAPH_JOINER.join(p.text for p in buffer))
            size = cfg.measure(paragraph.text)
            if buffered < minimum or (size < minimum and buffered + size < 3 * minimum):
                buffer.append(paragraph)
            else:
                units.append(join_spans(buffer, PARAGRAPH_JOINER))
                buffer = [paragraph]

        if buffer:
            units.append(join_spans(buffer, PARAGRAPH_JOINER))
        return units

    def _split_large(
        self, unit: SentenceSpan, text: str, cfg: ChunkConfig, offsets: ByteOffsets
    ) -> List[SentenceSpan]:
        """Re-split an oversized unit into sentence groups that fit chunk_size."""
        if cfg.measure(unit.text) <= cfg.chunk_size:
            return [unit]

        sentences = self.segmenter.segment(text, unit.start_char, unit.end_char, offsets)
        if len(sentences) <= 1:
            return [unit]
        groups = group_spans(sentences, cfg.size_measure, cfg.chunk_size, " ")
        return [join_spans(group, " ") for group in groups]

    def _overlap_seed(self, group: List[SentenceSpan], cfg: ChunkConfig) -> List[SentenceSpan]:
        """Trailing units that fit chunk_overlap, else the tail of the last unit."""
        overlap = cfg.chunk_overlap
        carried = trailing_spans(group, cfg.size_measure, overlap, PARAGRAPH_JOINER)
        if carried or overlap <= 0:
            return carried

        last = group[-1]
        partial = last.text[-overlap:].lstrip()
        if not partial:
            return []
        return [
            SentenceSpan(
                text=partial,
                start_byte=max(last.end_byte - byte_size(partial), last.start_byte),
                end_byte=last.end_byte,
                start_char=max(last.end_char - len(partial), last.start_char),
                end_char=last.end_char,
            )
        ]
