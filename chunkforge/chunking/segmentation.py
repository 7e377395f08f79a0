"""Sentence and paragraph segmentation with exact source positions.

Used by the sentence, paragraph, semantic and character (sentence boundary)
strategies. Every span records where it sits in the original text, so chunk
offsets never depend on searching for content after the fact.

Sentence Boundaries
-------------------
A sentence ends at ``.``, ``!`` or ``?`` (optionally followed by closing quotes
or brackets) when whitespace and then an uppercase letter, a digit or an
opening quote follow. A blank line always ends a sentence.

Abbreviations are handled in two passes without touching the text:

1. Collect the positions of periods that belong to known abbreviations
   ("Dr.", "etc.", "e.g.", ...) and to runs of initials
   ("J.R.R.", "U. S.", "J. R. Tolkien").
2. Scan for boundaries and ignore any whose final punctuation mark sits on a
   protected position.

Example:
    >>> [s.text for s in SentenceSegmenter().segment("Dr. Smith arrived. He left soon.")]
    ['Dr. Smith arrived.', 'He left soon.']
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, Set

from chunkforge.chunking.models import ByteOffsets, SentenceSpan, byte_size
from chunkforge.chunking.tokens import SizeMeasure

ABBREVIATIONS = (
    "Mr",
    "Mrs",
    "Ms",
    "Dr",
    "Prof",
    "Sr",
    "Jr",
    "St",
    "Rev",
    "Gen",
    "Col",
    "Capt",
    "Lt",
    "Sgt",
    "vs",
    "etc",
    "approx",
    "Inc",
    "Ltd",
    "Corp",
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Sept",
    "Oct",
    "Nov",
    "Dec",
    "Ph.D",
    "i.e",
    "e.g",
)

_ABBREVIATION_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(a) for a in ABBREVIATIONS) + r")\.",
    re.IGNORECASE,
)
_INITIAL_RE = re.compile(
    r"\b[A-Z]\.(?=\s?[A-Z]\.)|(?<=\b[A-Z]\.)[A-Z]\.|(?<=\b[A-Z]\.\s)[A-Z]\."
)

_CLOSERS = "\"'”’)]"
_BOUNDARY_RE = re.compile(
    r"(?P<end>[.!?]+[\"'”’)\]]*)(?P<gap>\s+)(?=[\"'“‘(\[]?[A-Z0-9])"
    r"|(?P<blank>\n[ \t\r\f\v]*\n\s*)"
)
_PARAGRAPH_RE = re.compile(r"\n\s*\n")

SeedFn = Callable[[List[SentenceSpan]], List[SentenceSpan]]


def _make_span(
    text: str, start: int, end: int, offsets: ByteOffsets
) -> Optional[SentenceSpan]:
    """Trim text[start:end] and wrap it in a span, or None when blank."""
    piece = text[start:end]
    stripped = piece.strip()
    if not stripped:
        return None
    start += len(piece) - len(piece.lstrip())
    end = start + len(stripped)
    return SentenceSpan(
        text=stripped,
        start_byte=offsets.to_byte(start),
        end_byte=offsets.to_byte(end),
        start_char=start,
        end_char=end,
    )


class SentenceSegmenter:
    """Split text into SentenceSpans with protected abbreviations."""

    def __init__(self, extra_abbreviations: Sequence[str] = ()) -> None:
        self._extra: Optional[re.Pattern[str]] = None
        if extra_abbreviations:
            self._extra = re.compile(
                r"\b(?:"
                + "|".join(re.escape(a.rstrip(".")) for a in extra_abbreviations)
                + r")\.",
                re.IGNORECASE,
            )

    def protected_positions(self, text: str, start: int = 0, end: Optional[int] = None) -> Set[int]:
        """Indices of periods that must not end a sentence."""
        end = len(text) if end is None else end
        patterns = [_ABBREVIATION_RE, _INITIAL_RE]
        if self._extra is not None:
            patterns.append(self._extra)

        protected: Set[int] = set()
        for pattern in patterns:
            for match in pattern.finditer(text, start, end):
                protected.add(match.end() - 1)
        return protected

    def segment(
        self,
        text: str,
        start: int = 0,
        end: Optional[int] = None,
        offsets: Optional[ByteOffsets] = None,
    ) -> List[SentenceSpan]:
        """Segment text[start:end] into sentences.

        Args:
            text: Full source text
            start: First character index of the region to segment
            end: End character index (exclusive), defaults to len(text)
            offsets: Byte offset table for text, built when omitted

        Returns:
            Sentence spans with offsets into the full text, in order
        """
        end = len(text) if end is None else end
        offsets = offsets or ByteOffsets(text)
        protected = self.protected_positions(text, start, end)

        spans: List[SentenceSpan] = []
        cursor = start
        for match in _BOUNDARY_RE.finditer(text, start, end):
            if match.group("end"):
                mark = match.start("end") + len(match.group("end").rstrip(_CLOSERS)) - 1
                if mark in protected:
                    continue
                cut = match.end("end")
            else:
                cut = match.start("blank")
            span = _make_span(text, cursor, cut, offsets)
            if span is not None:
                spans.append(span)
            cursor = match.end()

        span = _make_span(text, cursor, end, offsets)
        if span is not None:
            spans.append(span)
        return spans


def paragraph_spans(text: str, offsets: Optional[ByteOffsets] = None) -> List[SentenceSpan]:
    """Split text on blank lines into trimmed, non-empty paragraph spans."""
    offsets = offsets or ByteOffsets(text)
    spans: List[SentenceSpan] = []
    cursor = 0
    for match in _PARAGRAPH_RE.finditer(text):
        span = _make_span(text, cursor, match.start(), offsets)
        if span is not None:
            spans.append(span)
        cursor = match.end()
    span = _make_span(text, cursor, len(text), offsets)
    if span is not None:
        spans.append(span)
    return spans


def join_spans(spans: Sequence[SentenceSpan], joiner: str) -> SentenceSpan:
    """Combine consecutive spans into one span whose text is joined by joiner.

    The result starts where the first span starts. Its text is only an exact
    source slice when the joiner matches the source whitespace.
    """
    first, last = spans[0], spans[-1]
    if len(spans) == 1:
        return first
    joined = joiner.join(span.text for span in spans)
    return SentenceSpan(
        text=joined,
        start_byte=first.start_byte,
        end_byte=first.start_byte + byte_size(joined),
        start_char=first.start_char,
        end_char=last.end_char,
    )


def trailing_spans(
    group: Sequence[SentenceSpan], measure: SizeMeasure, budget: int, joiner: str
) -> List[SentenceSpan]:
    """Longest run of whole trailing spans whose joined size fits budget."""
    if budget <= 0:
        return []
    taken: List[SentenceSpan] = []
    for span in reversed(group):
        candidate = [span] + taken
        if measure(joiner.join(s.text for s in candidate)) > budget:
            break
        taken = candidate
    return taken


def group_spans(
    spans: Sequence[SentenceSpan],
    measure: SizeMeasure,
    limit: int,
    joiner: str = " ",
    seed: Optional[SeedFn] = None,
) -> List[List[SentenceSpan]]:
    """Greedily pack spans into groups whose joined size stays within limit.

    A span that alone exceeds limit forms its own group. When a group is
    closed, seed(group) supplies trailing spans that open the next group;
    the seed is dropped if the seed plus the next span would not fit.

    Args:
        spans: Spans in source order
        measure: Size measure
        limit: Maximum joined size per group
        joiner: String placed between span texts
        seed: Optional overlap provider

    Returns:
        Groups of spans in source order
    """
    groups: List[List[SentenceSpan]] = []
    current: List[SentenceSpan] = []

    for span in spans:
        if not current:
            current = [span]
            continue
        candidate = current + [span]
        if measure(joiner.join(s.text for s in candidate)) <= limit:
            current = candidate
            continue

        groups.append(current)
        carried = seed(current) if seed is not None else []
        if carried and measure(joiner.join(s.text for s in carried + [span])) > limit:
            carried = []
        current = carried + [span]

    if current:
        groups.append(current)
    return groups
