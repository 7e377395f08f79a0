"""Recursive, format-aware chunking (the default strategy).

Splits text with the separator hierarchy of its format, largest separator
first, descending to smaller separators only for pieces that are still too
big:

1. Text that fits chunk_size is returned whole.
2. Otherwise split on the next separator. If it is absent, try the next one.
   If it splits, recurse into oversized parts and put the trimmed separator
   back between parts. The empty separator (or running out of separators)
   cuts fixed windows of chunk_size characters.
3. Merge pass: greedily join neighbouring fragments while the result still
   fits chunk_size. Fragments are joined with a space, except consecutive
   windows of one cut, which are joined back with nothing between them.
4. Overlap pass: prefix every chunk after the first with the last
   chunk_overlap characters of the previous merged chunk.
5. Whitespace-only fragments are dropped.

Offsets
-------
Merged content is rebuilt from fragments and separators, so it is not a
verbatim slice of the source. Chunk i starts at the running byte sum of the
pre-overlap contents of chunks 0..i-1; this is an approximation. The length
of the overlap prefix is recorded in metadata["overlap_chars"].
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from chunkforge.chunking.config import ConfigInput
from chunkforge.chunking.models import Chunk, byte_size
from chunkforge.chunking.separators import CHARACTER_SPLIT, resolve_format
from chunkforge.chunking.tokens import SizeMeasure
from chunkforge.core.logging import get_logger
from chunkforge.shared.patterns.chunking import FormatHint, IChunkingStrategy
from chunkforge.shared.text_utils import is_blank

logger = get_logger(__name__)

# (glue to the previous fragment, text)
Fragment = Tuple[str, str]


def _window_split(text: str, size: int) -> List[Fragment]:
    """Cut text into consecutive windows of size characters.

    Only the first window is glued with a space; the rest continue it.
    """
    return [("" if i else " ", text[i : i + size]) for i in range(0, len(text), size)]


def _drop_blank(fragments: List[Fragment]) -> List[Fragment]:
    """Remove whitespace-only fragments, keeping a space where one was."""
    kept: List[Fragment] = []
    pending = ""
    for glue, fragment in fragments:
        if is_blank(fragment):
            pending = " "
            continue
        kept.append((pending or glue, fragment))
        pending = ""
    return kept


def first_separator_in(content: str, separators: Sequence[str]) -> Optional[str]:
    """First non-empty separator of the hierarchy that occurs in content."""
    for separator in separators:
        if separator and separator in content:
            return separator
    return None


class RecursiveChunker(IChunkingStrategy):
    """Recursive separator-hierarchy chunker.

    Examples:
        >>> chunker = RecursiveChunker({"chunk_size": 12, "chunk_overlap": 0})
        >>> [c.content for c in chunker.chunk("para one.\\n\\npara two.")]
        ['para one.', 'para two.']
    """

    def get_strategy_name(self) -> str:
        return "recursive"

    def chunk(
        self,
        text: str,
        format_hint: FormatHint = None,
        config: ConfigInput = None,
    ) -> List[Chunk]:
        cfg = self._resolve_config(config)
        if is_blank(text):
            return []

        fmt = resolve_format(format_hint) if format_hint is not None else cfg.format
        separators = cfg.separator_hierarchy(format_hint)

        fragments = self._split(text, separators, cfg.chunk_size, cfg.size_measure)
        merged = self._merge(fragments, cfg.chunk_size, cfg.size_measure)
        merged = [fragment for fragment in merged if not is_blank(fragment)]

        pieces = []
        running = 0
        for position, content in enumerate(merged):
            prefix = ""
            if position and cfg.chunk_overlap > 0:
                prefix = merged[position - 1][-cfg.chunk_overlap :]
            pieces.append(
                (
                    prefix + content,
                    running,
                    {
                        "format": fmt.value,
                        "separator_used": first_separator_in(content, separators),
                        "overlap_chars": len(prefix),
                    },
                )
            )
            running += byte_size(content)

        chunks = self._build_chunks(pieces, cfg)
        logger.debug(
            "Recursive chunking complete",
            format=fmt.value,
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
    # Splitting
    # ------------------------------------------------------------------

    def _split(
        self,
        text: str,
        separators: Sequence[str],
        chunk_size: int,
        measure: SizeMeasure,
    ) -> List[Fragment]:
        """Recursively split text until every fragment fits or is atomic."""
        if measure(text) <= chunk_size:
            return [(" ", text)]
        if not separators or separators[0] == CHARACTER_SPLIT:
            return _window_split(text, chunk_size)

        separator, rest = separators[0], separators[1:]
        parts = text.split(separator)
        if len(parts) == 1:
            return self._split(text, rest, chunk_size, measure)

        joiner = separator.strip()
        fragments: List[Fragment] = []
        for position, part in enumerate(parts):
            if position and joiner:
                fragments.append((" ", joiner))
            if measure(part) > chunk_size:
                fragments.extend(self._split(part, rest, chunk_size, measure))
            else:
                fragments.append((" ", part))
        # Separators like "\n## " leave whitespace-only shards behind
        return _drop_blank(fragments)

    def _merge(
        self, fragments: List[Fragment], chunk_size: int, measure: SizeMeasure
    ) -> List[str]:
        """Greedily join neighbours with their glue while they still fit."""
        merged: List[str] = []
        for glue, fragment in fragments:
            if merged:
                combined = merged[-1] + glue + fragment
                if measure(combined) <= chunk_size:
                    merged[-1] = combined
                    continue
            merged.append(fragment)
        return merged
