"""Character-window chunking with configurable cut boundaries.

Boundary modes (config.boundary):

- ``none``: fixed windows of chunk_size characters, stepping
  chunk_size - chunk_overlap (at least 1). Trailing partial windows count.
- ``word``: whitespace-delimited words accumulate until the next word would
  push the chunk past chunk_size. The next chunk is seeded with the last
  chunk_overlap characters of the finished one, moved forward to a word
  start. Words are never split; a word longer than chunk_size becomes its
  own chunk.
- ``sentence``: whole sentences accumulate the same way, joined by a single
  space; the seed is the run of trailing sentences that fits chunk_overlap.

Positions are tracked while accumulating, so repeated content always maps to
the occurrence it was cut from.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from chunkforge.chunking.config import Boundary, ChunkConfig, ConfigInput
from chunkforge.chunking.models import ByteOffsets, Chunk
from chunkforge.chunking.segmentation import SentenceSegmenter, group_spans, trailing_spans
from chunkforge.core.logging import get_logger
from chunkforge.shared.patterns.chunking import ChunkPiece, FormatHint, IChunkingStrategy
from chunkforge.shared.text_utils import is_blank

logger = get_logger(__name__)

_WORD_RE = re.compile(r"\S+")
_SPACE_RE = re.compile(r"\s+")

# (start_char, end_char) of a chunk inside the source text
Window = Tuple[int, int]


class CharacterChunker(IChunkingStrategy):
    """Fixed-size chunker that cuts at word, sentence, or any boundary."""

    def __init__(
        self, config: ConfigInput = None, segmenter: Optional[SentenceSegmenter] = None
    ) -> None:
        super().__init__(config)
        self.segmenter = segmenter or SentenceSegmenter()

    def get_strategy_name(self) -> str:
        return "character"

    def get_config(self) -> Dict[str, Any]:
        info = super().get_config()
        info["boundary"] = self.config.boundary.value
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

        offsets = ByteOffsets(text)
        if cfg.boundary is Boundary.SENTENCE:
            pieces = self._sentence_pieces(text, cfg, offsets)
        elif cfg.boundary is Boundary.NONE:
            pieces = self._window_pieces(self._fixed_windows(text, cfg), text, cfg, offsets)
        else:
            pieces = self._window_pieces(self._word_windows(text, cfg), text, cfg, offsets)

        chunks = self._build_chunks(pieces, cfg)
        logger.debug(
            "Character chunking complete",
            boundary=cfg.boundary.value,
            chars=len(text),
            chunks=len(chunks),
        )
        return chunks

    def estimate_chunks(self, text: str, config: ConfigInput = None) -> int:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return 0
        size = cfg.measure(text)
        if size <= cfg.chunk_size:
            return 1
        return size // max(cfg.chunk_size - cfg.chunk_overlap, 1) + 1

    # ------------------------------------------------------------------
    # Window builders
    # ------------------------------------------------------------------

    def _window_pieces(
        self, windows: List[Window], text: str, cfg: ChunkConfig, offsets: ByteOffsets
    ) -> List[ChunkPiece]:
        boundary = {"boundary": cfg.boundary.value}
        return [(text[start:end], offsets.to_byte(start), dict(boundary)) for start, end in windows]

    def _fixed_windows(self, text: str, cfg: ChunkConfig) -> List[Window]:
        """Sliding windows of chunk_size characters."""
        total = len(text)
        if total <= cfg.chunk_size:
            return [(0, total)]
        step = max(cfg.chunk_size - cfg.chunk_overlap, 1)
        return [(start, min(start + cfg.chunk_size, total)) for start in range(0, total, step)]

    def _word_windows(self, text: str, cfg: ChunkConfig) -> List[Window]:
        """Accumulate words into windows of at most chunk_size.

        Windows always start and end on a word, so whitespace between words
        never opens or closes a chunk.
        """
        measure = cfg.size_measure
        windows: List[Window] = []
        start: Optional[int] = None
        end = 0

        for match in _WORD_RE.finditer(text):
            word_start, word_end = match.span()
            if start is None:
                start, end = word_start, word_end
                continue
            if measure(text[start:word_end]) <= cfg.chunk_size:
                end = word_end
                continue

            windows.append((start, end))
            seed = self._word_seed(text, start, end, cfg.chunk_overlap)
            if seed is not None and measure(text[seed:word_end]) <= cfg.chunk_size:
                start = seed
            else:
                start = word_start
            end = word_end

        if start is not None:
            windows.append((start, end))
        return windows

    @staticmethod
    def _word_seed(text: str, start: int, end: int, overlap: int) -> Optional[int]:
        """Start index of the overlap carried from window [start, end).

        The seed is the last chunk_overlap characters, moved forward to the
        next word start when it lands inside a word.
        """
        if overlap <= 0:
            return None
        if end - start <= overlap:
            return start
        seed = end - overlap
        if text[seed].isspace() or not text[seed - 1].isspace():
            gap = _SPACE_RE.search(text, seed, end)
            if gap is None:
                return None
            seed = gap.end()
        return seed if seed < end else None

    def _sentence_pieces(
        self, text: str, cfg: ChunkConfig, offsets: ByteOffsets
    ) -> List[ChunkPiece]:
        """Group whole sentences, seeding each chunk with trailing sentences."""
        spans = self.segmenter.segment(text, offsets=offsets)

        def seed(group):
            return trailing_spans(group, cfg.size_measure, cfg.chunk_overlap, " ")

        groups = group_spans(spans, cfg.size_measure, cfg.chunk_size, " ", seed)
        return [
            (" ".join(span.text for span in group), group[0].start_byte, {"boundary": "sentence"})
            for group in groups
        ]
