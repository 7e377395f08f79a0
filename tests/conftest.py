"""
Shared pytest fixtures and configuration for ChunkForge tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **temp_dir**: Temporary directory for config files
- **sample texts**: Prose, markdown, python and multi-byte documents
- **embedders**: Deterministic embedding callbacks for the semantic strategy
- **check_invariants**: Invariant checks shared by the strategy tests

All fixtures are designed to be reusable, generic, and composable.
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator, List

import numpy as np
import pytest

from chunkforge.chunking.models import Chunk


# ============================================================================
# Path and Directory Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Sample Text Fixtures
# ============================================================================


@pytest.fixture
def prose_text() -> str:
    """Several paragraphs of plain prose with abbreviations."""
    return (
        "Dr. Smith arrived at the lab early. He checked the samples twice.\n\n"
        "The results were surprising. Mrs. Jones wrote them down, e.g. the "
        "growth rates and the temperatures.\n\n"
        "Nobody expected the culture to survive the weekend. It did anyway. "
        "The team celebrated on Monday."
    )


@pytest.fixture
def markdown_text() -> str:
    """A small markdown document with two headed sections."""
    return (
        "# Title\n\n"
        "Intro paragraph that explains the document.\n\n"
        "## Install\n\n"
        "Run the installer and follow the prompts.\n\n"
        "## Usage\n\n"
        "Import the package and call chunk_text on your documents."
    )


@pytest.fixture
def python_source() -> str:
    """Python source with a class and top-level functions."""
    return (
        "import os\n"
        "\n"
        "class Loader:\n"
        "    def load(self, path):\n"
        "        return open(path).read()\n"
        "\n"
        "def main():\n"
        "    loader = Loader()\n"
        "    print(loader.load(os.environ['FILE']))\n"
        "\n"
        "def helper():\n"
        "    return 42\n"
    )


@pytest.fixture
def unicode_text() -> str:
    """Prose with multi-byte characters."""
    return (
        "Café culture thrives in Zürich. Naïve visitors order crème brûlée. "
        "Locals prefer espresso. 東京 is far away."
    )


# ============================================================================
# Embedding Fixtures
# ============================================================================


def keyword_embedder(topics: List[str]) -> Callable[[str], List[float]]:
    """Embed a sentence as a one-hot vector over topic keywords.

    Sentences sharing a topic word get identical vectors (cosine 1.0);
    sentences about different topics are orthogonal (cosine 0.0).
    """

    def embed(text: str) -> List[float]:
        lowered = text.lower()
        vector = [1.0 if topic in lowered else 0.0 for topic in topics]
        if not any(vector):
            vector.append(1.0)
        else:
            vector.append(0.0)
        return vector

    return embed


@pytest.fixture
def topic_embedder() -> Callable[[str], List[float]]:
    """Embedder that separates cat sentences from stock market sentences."""
    return keyword_embedder(["cat", "stock"])


@pytest.fixture
def constant_embedder() -> Callable[[str], np.ndarray]:
    """Embedder returning the same vector for every sentence."""
    return lambda text: np.array([0.5, 0.5, 0.5])


@pytest.fixture
def failing_embedder() -> Callable[[str], List[float]]:
    """Embedder that always raises."""

    def embed(text: str) -> List[float]:
        raise RuntimeError("embedding service unavailable")

    return embed


# ============================================================================
# Invariant Helpers
# ============================================================================


def assert_chunk_invariants(chunks: List[Chunk]) -> None:
    """Assert dense indices, monotonic offsets and byte-length agreement."""
    for position, chunk in enumerate(chunks):
        assert chunk.index == position
        assert chunk.content.strip()
        assert chunk.end_byte - chunk.start_byte == len(chunk.content.encode("utf-8"))
        if position:
            assert chunk.start_byte >= chunks[position - 1].start_byte


@pytest.fixture
def check_invariants() -> Callable[[List[Chunk]], None]:
    """Fixture form of assert_chunk_invariants."""
    return assert_chunk_invariants
