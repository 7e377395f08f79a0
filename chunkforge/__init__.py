"""ChunkForge - Multi-strategy text chunking for RAG indexing.

This package splits documents (source code, markdown, prose, HTML) into
size-bounded, overlap-preserving chunks ready for embedding and retrieval.
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
