"""
Chunking Strategies for RAG Indexing.

This module splits text into size-bounded chunks ready for embedding and
retrieval. Every strategy implements IChunkingStrategy and returns frozen
Chunk values with UTF-8 byte offsets into the source text.

Architecture Position
---------------------
    **Chunking** (you are here)
      └── Shared (IChunkingStrategy, text utilities)
            └── Core (config, logging, exceptions)

Chunking Strategies
-------------------
**RecursiveChunker** (default)
    Splits with the separator hierarchy of the content format (markdown
    headings, Python defs, HTML tags, ...), descending only where needed.

**CharacterChunker**
    Fixed windows that cut at word, sentence, or any boundary.

**SentenceChunker**
    Groups whole sentences; abbreviation-aware segmentation.

**ParagraphChunker**
    Merges small paragraphs and splits oversized ones at sentences.

**SemanticChunker**
    Groups sentences by embedding similarity, with a size-based fallback.

Usage Example
-------------
    from chunkforge.chunking import chunk_text, get_chunking_strategy

    chunks = chunk_text(source, strategy="recursive", format_hint="python")

    chunker = get_chunking_strategy("sentence", {"chunk_size": 400})
    for chunk in chunker.chunk(text):
        print(chunk.index, chunk.start_byte, chunk.end_byte)
"""

from typing import Any

# Strategies import shared.patterns, which imports this package's config and
# models modules, so everything here is loaded on first access.
_LAZY_ITEMS = {
    "Chunk": "chunkforge.chunking.models",
    "SentenceSpan": "chunkforge.chunking.models",
    "ChunkConfig": "chunkforge.chunking.config",
    "ConfigValidator": "chunkforge.chunking.config",
    "validate_config": "chunkforge.chunking.config",
    "merge_with_defaults": "chunkforge.chunking.config",
    "Format": "chunkforge.chunking.separators",
    "get_separators": "chunkforge.chunking.separators",
    "SentenceSegmenter": "chunkforge.chunking.segmentation",
    "RecursiveChunker": "chunkforge.chunking.recursive_chunker",
    "CharacterChunker": "chunkforge.chunking.character_chunker",
    "SentenceChunker": "chunkforge.chunking.sentence_chunker",
    "ParagraphChunker": "chunkforge.chunking.paragraph_chunker",
    "SemanticChunker": "chunkforge.chunking.semantic_chunker",
    "cosine_similarity": "chunkforge.chunking.semantic_chunker",
    "STRATEGIES": "chunkforge.chunking.registry",
    "available_strategies": "chunkforge.chunking.registry",
    "get_chunking_strategy": "chunkforge.chunking.registry",
    "chunk_text": "chunkforge.chunking.registry",
    "chunker_from_config": "chunkforge.chunking.registry",
}


def __getattr__(name: str) -> Any:
    """Lazy-load public names to avoid circular imports."""
    if name in _LAZY_ITEMS:
        module = __import__(_LAZY_ITEMS[name], fromlist=[name])
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = list(_LAZY_ITEMS)
