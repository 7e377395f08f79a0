"""
Tests for Sentence and Paragraph Segmentation.

This module tests sentence boundary detection, abbreviation protection,
exact span positions and the span grouping helpers.

Test Strategy
-------------
- Assert on span texts first, positions second
- Build grouping inputs by hand so sizes are obvious
- Keep tests simple and readable (NASA JPL Rule #1)

Organization
------------
- TestSentenceBoundaries: Where sentences end
- TestAbbreviations: Periods that must not end a sentence
- TestSpanPositions: Char and byte offsets
- TestParagraphSpans: Blank-line splitting
- TestGroupSpans: Greedy packing with overlap seeds
"""

from chunkforge.chunking.models import SentenceSpan
from chunkforge.chunking.segmentation import (
    SentenceSegmenter,
    group_spans,
    join_spans,
    paragraph_spans,
    trailing_spans,
)
from chunkforge.chunking.tokens import char_count


# ============================================================================
# Test Helpers
# ============================================================================


def texts(spans):
    """Texts of a list of spans."""
    return [span.text for span in spans]


def make_spans(*words):
    """Build ASCII spans laid out as words separated by single spaces."""
    spans = []
    cursor = 0
    for word in words:
        spans.append(SentenceSpan(word, cursor, cursor + len(word), cursor, cursor + len(word)))
        cursor += len(word) + 1
    return spans


# ============================================================================
# Test Classes
# ============================================================================


class TestSentenceBoundaries:
    """Tests for sentence end detection.

    Rule #4: Focused test class
    """

    def test_simple_sentences(self):
        """Test periods followed by capitals end sentences."""
        spans = SentenceSegmenter().segment("One here. Two here. Three here.")
        assert texts(spans) == ["One here.", "Two here.", "Three here."]

    def test_question_and_exclamation(self):
        """Test ? and ! end sentences, including runs of them."""
        spans = SentenceSegmenter().segment("Really?! Yes. Wow! Done.")
        assert texts(spans) == ["Really?!", "Yes.", "Wow!", "Done."]

    def test_lowercase_continuation(self):
        """Test a lowercase word after a period does not start a sentence."""
        spans = SentenceSegmenter().segment("Version 2. then more text.")
        assert texts(spans) == ["Version 2. then more text."]

    def test_closing_quote_stays_with_sentence(self):
        """Test closing quotes belong to the sentence they end."""
        spans = SentenceSegmenter().segment('He said "Stop." Then he left.')
        assert texts(spans) == ['He said "Stop."', "Then he left."]

    def test_blank_line_ends_sentence(self):
        """Test a blank line is always a boundary."""
        spans = SentenceSegmenter().segment("A heading\n\nBody text here.")
        assert texts(spans) == ["A heading", "Body text here."]

    def test_no_terminal_punctuation(self):
        """Test text without punctuation is one sentence."""
        assert texts(SentenceSegmenter().segment("just some words")) == ["just some words"]

    def test_blank_text(self):
        """Test blank text has no sentences."""
        assert SentenceSegmenter().segment("   \n ") == []
        assert SentenceSegmenter().segment("") == []


class TestAbbreviations:
    """Tests for abbreviation protection.

    Rule #4: Focused test class
    """

    def test_title_abbreviation(self):
        """Test Dr. does not end a sentence."""
        spans = SentenceSegmenter().segment("Dr. Smith arrived. He left soon.")
        assert texts(spans) == ["Dr. Smith arrived.", "He left soon."]

    def test_several_abbreviations(self):
        """Test Mr., Mrs. and Prof. in one sentence."""
        text = "Mr. and Mrs. Brown met Prof. Green. They talked."
        assert texts(SentenceSegmenter().segment(text)) == [
            "Mr. and Mrs. Brown met Prof. Green.",
            "They talked.",
        ]

    def test_latin_abbreviation(self):
        """Test e.g. before a capitalized word stays inside the sentence."""
        text = "Use a fruit, e.g. Apples. Then eat it."
        assert texts(SentenceSegmenter().segment(text)) == [
            "Use a fruit, e.g. Apples.",
            "Then eat it.",
        ]

    def test_spaced_initials(self):
        """Test a run of initials does not end a sentence."""
        text = "The book by J. R. Tolkien sold well. Fans loved it."
        assert texts(SentenceSegmenter().segment(text)) == [
            "The book by J. R. Tolkien sold well.",
            "Fans loved it.",
        ]

    def test_extra_abbreviations(self):
        """Test custom abbreviations can be added."""
        text = "See Fig. Two for details. It helps."
        default = SentenceSegmenter().segment(text)
        custom = SentenceSegmenter(extra_abbreviations=["Fig."]).segment(text)

        assert len(default) == 3
        assert texts(custom) == ["See Fig. Two for details.", "It helps."]

    def test_protected_positions(self):
        """Test protected positions point at abbreviation periods."""
        positions = SentenceSegmenter().protected_positions("Dr. Who")
        assert positions == {2}


class TestSpanPositions:
    """Tests for span offsets."""

    def test_char_offsets_are_source_slices(self):
        """Test every span text equals its source slice."""
        text = "  First one.   Second one.\n\nThird one."
        for span in SentenceSegmenter().segment(text):
            assert text[span.start_char : span.end_char] == span.text

    def test_repeated_sentences_have_distinct_offsets(self):
        """Test identical sentences keep their own positions."""
        spans = SentenceSegmenter().segment("Same. Same. Same.")
        assert [s.start_char for s in spans] == [0, 6, 12]

    def test_byte_offsets_multibyte(self):
        """Test byte offsets account for multi-byte characters."""
        spans = SentenceSegmenter().segment("Café. Über alles.")

        assert (spans[0].start_byte, spans[0].end_byte) == (0, 6)
        assert spans[1].start_byte == 7
        assert spans[1].end_byte - spans[1].start_byte == len("Über alles.".encode("utf-8"))

    def test_region_segmentation(self):
        """Test segmenting a region reports offsets into the full text."""
        text = "Skip this. Keep one. Keep two."
        spans = SentenceSegmenter().segment(text, start=11)

        assert texts(spans) == ["Keep one.", "Keep two."]
        assert spans[0].start_char == 11


class TestParagraphSpans:
    """Tests for paragraph_spans()."""

    def test_split_on_blank_lines(self):
        """Test paragraphs split on blank lines, whitespace-only lines included."""
        spans = paragraph_spans("first\n\nsecond\n  \n\nthird")
        assert texts(spans) == ["first", "second", "third"]

    def test_single_newlines_kept(self):
        """Test single newlines stay inside a paragraph."""
        assert texts(paragraph_spans("line one\nline two")) == ["line one\nline two"]

    def test_positions(self):
        """Test paragraph offsets are exact."""
        text = "alpha\n\n  beta"
        spans = paragraph_spans(text)
        assert spans[1].start_char == 9
        assert text[spans[1].start_char : spans[1].end_char] == "beta"


class TestGroupSpans:
    """Tests for group_spans(), trailing_spans() and join_spans().

    Rule #4: Focused test class
    """

    def test_greedy_packing(self):
        """Test spans pack until the joined size would exceed the limit."""
        groups = group_spans(make_spans("aaaa", "bbbb", "cccc"), char_count, 9)
        assert [texts(g) for g in groups] == [["aaaa", "bbbb"], ["cccc"]]

    def test_seed_carries_trailing_spans(self):
        """Test the seed opens the next group."""
        spans = make_spans("aaaa", "bbbb", "cccc")

        def seed(group):
            return trailing_spans(group, char_count, 4, " ")

        groups = group_spans(spans, char_count, 9, " ", seed)
        assert [texts(g) for g in groups] == [["aaaa", "bbbb"], ["bbbb", "cccc"]]

    def test_seed_dropped_when_too_big(self):
        """Test a seed that would overflow the next group is dropped."""
        spans = make_spans("aaaa", "bbbb", "cccccc")

        def seed(group):
            return trailing_spans(group, char_count, 4, " ")

        groups = group_spans(spans, char_count, 9, " ", seed)
        assert [texts(g) for g in groups] == [["aaaa", "bbbb"], ["cccccc"]]

    def test_oversized_span_alone(self):
        """Test a span larger than the limit forms its own group."""
        groups = group_spans(make_spans("ab", "x" * 12, "cd"), char_count, 5)
        assert [texts(g) for g in groups] == [["ab"], ["x" * 12], ["cd"]]

    def test_trailing_spans_zero_budget(self):
        """Test zero overlap carries nothing."""
        assert trailing_spans(make_spans("aa", "bb"), char_count, 0, " ") == []

    def test_trailing_spans_takes_run(self):
        """Test the longest fitting run of trailing spans is taken."""
        carried = trailing_spans(make_spans("aa", "bb", "cc"), char_count, 5, " ")
        assert texts(carried) == ["bb", "cc"]

    def test_join_spans(self):
        """Test joined span starts at the first span and spans the group."""
        spans = make_spans("aa", "bb")
        joined = join_spans(spans, " ")

        assert joined.text == "aa bb"
        assert (joined.start_char, joined.end_char) == (0, 5)
        assert joined.end_byte - joined.start_byte == 5
        assert join_spans(spans[:1], " ") is spans[0]
