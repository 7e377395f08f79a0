"""
Integration tests across all chunking strategies.

Runs every registered strategy on the shared sample documents and checks
the properties every strategy promises:

- blank input yields no chunks and an estimate of 0
- non-blank input yields at least one chunk and an estimate of at least 1
- indices are dense, content is never blank, byte ranges match content
- start offsets never decrease
- every chunk is tagged with the producing strategy
"""

import pytest

from chunkforge.chunking.registry import (
    available_strategies,
    chunker_from_config,
    get_chunking_strategy,
)
from chunkforge.core.config import ChunkingConfig, Config
from chunkforge.core.config_loaders import load_config
from chunkforge.shared.text_utils import normalize_whitespace

pytestmark = pytest.mark.integration

SAMPLES = ["prose_text", "markdown_text", "python_source", "unicode_text"]


def build_chunker(name, embedder, **options):
    """Build a strategy, giving the semantic one an embedder."""
    if name == "semantic":
        options.setdefault("embedding_fn", embedder)
        options.setdefault("max_chars", options.get("chunk_size", 1000))
    return get_chunking_strategy(name, options)


@pytest.mark.parametrize("name", available_strategies())
class TestEveryStrategy:
    """Invariants shared by all strategies.

    Rule #4: Focused test class
    """

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t"])
    def test_blank_input(self, name, text, topic_embedder):
        """Test blank text gives no chunks and an estimate of 0."""
        chunker = build_chunker(name, topic_embedder)

        assert chunker.chunk(text) == []
        assert chunker.estimate_chunks(text) == 0

    @pytest.mark.parametrize("sample", SAMPLES)
    def test_invariants_hold(self, name, sample, request, topic_embedder, check_invariants):
        """Test chunk invariants on every sample document."""
        text = request.getfixturevalue(sample)
        chunker = build_chunker(name, topic_embedder, chunk_size=60, chunk_overlap=10)

        chunks = chunker.chunk(text)

        assert chunks
        check_invariants(chunks)
        assert all(chunk.metadata["strategy"] == name for chunk in chunks)
        assert chunker.estimate_chunks(text) >= 1

    def test_small_text_single_chunk(self, name, topic_embedder):
        """Test text smaller than chunk_size stays in one chunk."""
        chunker = build_chunker(name, topic_embedder, chunk_size=500, chunk_overlap=0)

        chunks = chunker.chunk("A short note. Nothing else.")

        assert [chunk.content for chunk in chunks] == ["A short note. Nothing else."]
        assert chunks[0].start_byte == 0

    def test_token_unit(self, name, topic_embedder, prose_text, check_invariants):
        """Test every strategy accepts token-based sizing."""
        chunker = build_chunker(
            name, topic_embedder, chunk_size=20, chunk_overlap=0, size_unit="tokens"
        )

        chunks = chunker.chunk(prose_text)

        assert chunks
        check_invariants(chunks)

    def test_per_call_custom_measure(self, name, topic_embedder, prose_text, check_invariants):
        """Test every strategy accepts get_chunk_size in a per-call config."""
        chunker = build_chunker(name, topic_embedder)
        options = {"get_chunk_size": lambda t: len(t.split()), "chunk_size": 12, "chunk_overlap": 0}

        chunks = chunker.chunk(prose_text, None, options)

        assert chunks
        check_invariants(chunks)
        assert chunker.estimate_chunks(prose_text, options) >= 1


class TestConfigDrivenPipeline:
    """End-to-end: YAML file to chunks.

    Rule #4: Focused test class
    """

    def test_yaml_selects_strategy(self, temp_dir, prose_text, check_invariants, monkeypatch):
        """Test a YAML config file drives strategy and size."""
        for variable in ("CHUNKFORGE_STRATEGY", "CHUNKFORGE_CHUNK_SIZE", "CHUNKFORGE_CHUNK_OVERLAP"):
            monkeypatch.delenv(variable, raising=False)
        (temp_dir / "chunkforge.yaml").write_text(
            "chunking:\n  strategy: sentence\n  chunk_size: 80\n  chunk_overlap: 0\n",
            encoding="utf-8",
        )

        config = load_config(base_path=temp_dir)
        chunks = chunker_from_config(config).chunk(prose_text)

        assert config.chunking.strategy == "sentence"
        assert len(chunks) > 1
        check_invariants(chunks)
        assert all(chunk.metadata["strategy"] == "sentence" for chunk in chunks)

    def test_env_override_beats_yaml(self, temp_dir, prose_text, monkeypatch):
        """Test CHUNKFORGE_STRATEGY overrides the YAML strategy."""
        monkeypatch.setenv("CHUNKFORGE_STRATEGY", "paragraph")
        (temp_dir / "chunkforge.yaml").write_text(
            "chunking:\n  strategy: sentence\n", encoding="utf-8"
        )

        chunker = chunker_from_config(load_config(base_path=temp_dir))

        assert chunker.get_strategy_name() == "paragraph"

    def test_default_config_object(self, markdown_text):
        """Test the default Config chunks markdown in one piece."""
        chunks = chunker_from_config(Config(chunking=ChunkingConfig(format="markdown"))).chunk(
            markdown_text
        )

        assert len(chunks) == 1
        assert chunks[0].metadata["format"] == "markdown"


class TestCoverage:
    """Without overlap, chunks reconstruct the source modulo whitespace.

    Rule #4: Focused test class
    """

    @pytest.mark.parametrize("name", available_strategies())
    def test_prose_reconstruction(self, name, prose_text, topic_embedder):
        """Test joined chunk contents equal the normalized source."""
        chunker = build_chunker(name, topic_embedder, chunk_size=60, chunk_overlap=0)

        chunks = chunker.chunk(prose_text)
        rebuilt = " ".join(chunk.content for chunk in chunks)

        assert normalize_whitespace(rebuilt) == normalize_whitespace(prose_text)

    @pytest.mark.parametrize("name", available_strategies())
    def test_prose_reconstruction_in_tokens(self, name, prose_text, topic_embedder):
        """Test token sizing keeps the same coverage guarantee."""
        chunker = build_chunker(
            name, topic_embedder, chunk_size=15, chunk_overlap=0, size_unit="tokens"
        )

        chunks = chunker.chunk(prose_text)
        rebuilt = " ".join(chunk.content for chunk in chunks)

        assert normalize_whitespace(rebuilt) == normalize_whitespace(prose_text)

    @pytest.mark.parametrize("name", available_strategies())
    @pytest.mark.parametrize("size_unit", ["characters", "tokens"])
    def test_long_word_reconstruction(self, name, size_unit, topic_embedder):
        """Test a word far longer than chunk_size is never padded with spaces."""
        text = "x" * 100
        chunker = build_chunker(
            name, topic_embedder, chunk_size=5, chunk_overlap=0, size_unit=size_unit
        )

        chunks = chunker.chunk(text)

        assert "".join(chunk.content for chunk in chunks) == text
