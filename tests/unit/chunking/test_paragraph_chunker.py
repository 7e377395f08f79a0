"""
Tests for the Paragraph Chunker.

This module tests small-paragraph merging, sentence re-splitting of large
paragraphs, paragraph overlap and the estimate.

Test Strategy
-------------
- Exercise the merge rule directly on paragraph spans
- Check full chunk() output on short inputs
- Keep tests simple and readable (NASA JPL Rule #1)

Organization
------------
- TestMergeSmall: min_paragraph_size rule
- TestParagraphChunking: End-to-end chunking
- TestParagraphOverlap: Whole-unit and partial overlap
- TestParagraphEstimate: estimate_chunks()
"""

from chunkforge.chunking.config import validate_config
from chunkforge.chunking.paragraph_chunker import ParagraphChunker
from chunkforge.chunking.segmentation import paragraph_spans


# ============================================================================
# Test Helpers
# ============================================================================


def contents(chunks):
    """Contents of a list of chunks."""
    return [chunk.content for chunk in chunks]


def merged(text, minimum):
    """Unit texts after merging small paragraphs."""
    cfg = validate_config(min_paragraph_size=minimum)
    return [unit.text for unit in ParagraphChunker(cfg)._merge_small(paragraph_spans(text), cfg)]


# ============================================================================
# Test Classes
# ============================================================================


class TestMergeSmall:
    """Tests for merging paragraphs below min_paragraph_size.

    Rule #4: Focused test class
    """

    def test_small_buffer_absorbs_next(self):
        """Test a buffer below the minimum takes the next paragraph."""
        assert merged("Hi.\n\nA long enough paragraph.", 10) == [
            "Hi.\n\nA long enough paragraph."
        ]

    def test_small_next_paragraph_merged(self):
        """Test a small paragraph joins a buffer within three times the minimum."""
        assert merged("A long enough paragraph.\n\nTiny.", 10) == [
            "A long enough paragraph.\n\nTiny."
        ]

    def test_combined_size_limit(self):
        """Test merging stops at three times the minimum."""
        assert merged("A long enough paragraph.\n\nTiny.", 9) == [
            "A long enough paragraph.",
            "Tiny.",
        ]

    def test_large_paragraphs_untouched(self):
        """Test paragraphs above the minimum are not merged."""
        assert merged("A long enough paragraph.\n\nTiny.", 5) == [
            "A long enough paragraph.",
            "Tiny.",
        ]

    def test_zero_minimum_disables_merging(self):
        """Test min_paragraph_size=0 keeps every paragraph."""
        assert merged("a\n\nb\n\nc", 0) == ["a", "b", "c"]


class TestParagraphChunking:
    """Tests for chunk().

    Rule #4: Focused test class
    """

    def test_one_chunk_per_paragraph(self):
        """Test paragraphs that do not fit together stay separate."""
        text = "First paragraph here.\n\nSecond paragraph here.\n\nThird one."
        chunker = ParagraphChunker({"chunk_size": 30, "chunk_overlap": 0, "min_paragraph_size": 0})
        chunks = chunker.chunk(text)

        assert contents(chunks) == [
            "First paragraph here.",
            "Second paragraph here.",
            "Third one.",
        ]
        assert [c.metadata["paragraph_count"] for c in chunks] == [1, 1, 1]
        assert [c.start_byte for c in chunks] == [0, 23, 47]

    def test_paragraphs_grouped(self):
        """Test paragraphs that fit share a chunk, joined by a blank line."""
        chunker = ParagraphChunker({"chunk_size": 100, "chunk_overlap": 0, "min_paragraph_size": 0})
        chunks = chunker.chunk("alpha\n\n\n\nbeta\n  \ngamma")

        assert contents(chunks) == ["alpha\n\nbeta\n\ngamma"]
        assert chunks[0].metadata["paragraph_count"] == 3

    def test_merged_small_paragraphs(self):
        """Test small paragraphs merge and count as several paragraphs."""
        text = (
            "Hi.\n\nShort one.\n\n"
            "This paragraph is comfortably longer than the minimum size."
        )
        chunker = ParagraphChunker({"chunk_size": 40, "chunk_overlap": 0, "min_paragraph_size": 10})
        chunks = chunker.chunk(text)

        assert contents(chunks)[0] == "Hi.\n\nShort one."
        assert chunks[0].metadata["paragraph_count"] == 2
        assert chunks[1].metadata["paragraph_count"] == 1
        assert chunks[1].start_byte == 17

    def test_large_paragraph_split_at_sentences(self):
        """Test an oversized paragraph is split at sentence boundaries."""
        text = "First sentence is here. Second sentence is here. Third one."
        chunker = ParagraphChunker({"chunk_size": 30, "chunk_overlap": 0, "min_paragraph_size": 0})

        assert contents(chunker.chunk(text)) == [
            "First sentence is here.",
            "Second sentence is here.",
            "Third one.",
        ]

    def test_single_long_sentence_kept_whole(self):
        """Test a paragraph of one long sentence is not cut."""
        text = "This paragraph is one sentence that is longer than the limit."
        chunker = ParagraphChunker({"chunk_size": 20, "chunk_overlap": 0, "min_paragraph_size": 0})
        assert contents(chunker.chunk(text)) == [text]

    def test_empty_text(self):
        """Test blank text produces no chunks."""
        assert ParagraphChunker().chunk("\n\n  \n") == []

    def test_invariants(self, prose_text, check_invariants):
        """Test dense indices and ordered offsets on prose."""
        chunks = ParagraphChunker({"chunk_size": 90, "chunk_overlap": 20}).chunk(prose_text)

        assert len(chunks) > 1
        check_invariants(chunks)


class TestParagraphOverlap:
    """Tests for paragraph overlap."""

    def test_whole_unit_overlap(self):
        """Test trailing paragraphs that fit chunk_overlap are repeated."""
        chunker = ParagraphChunker({"chunk_size": 12, "chunk_overlap": 5, "min_paragraph_size": 0})
        chunks = chunker.chunk("aaaa.\n\nbbbb.\n\ncccc.")

        assert contents(chunks) == ["aaaa.\n\nbbbb.", "bbbb.\n\ncccc."]
        assert chunks[1].start_byte == 7

    def test_partial_overlap(self):
        """Test the tail of the last paragraph is carried when no unit fits."""
        chunker = ParagraphChunker({"chunk_size": 15, "chunk_overlap": 4, "min_paragraph_size": 0})
        chunks = chunker.chunk("aaaaaaaa.\n\nbbbbbbbb.")

        assert contents(chunks) == ["aaaaaaaa.", "aaa.\n\nbbbbbbbb."]
        assert chunks[1].start_byte == 5
        assert chunks[1].end_byte - chunks[1].start_byte == len(chunks[1].content)


class TestParagraphEstimate:
    """Tests for estimate_chunks()."""

    def test_blank(self):
        """Test blank text estimates zero."""
        assert ParagraphChunker().estimate_chunks(" ") == 0

    def test_paragraph_count_dominates(self):
        """Test many short paragraphs raise the estimate."""
        text = "\n\n".join(["p."] * 6)
        assert ParagraphChunker({"chunk_size": 1000}).estimate_chunks(text) == 3

    def test_size_dominates(self):
        """Test size-based estimate when paragraphs are few."""
        assert ParagraphChunker({"chunk_size": 10}).estimate_chunks("x" * 35) == 4
