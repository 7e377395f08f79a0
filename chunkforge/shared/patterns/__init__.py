"""
Shared Interfaces.

**IChunkingStrategy** (chunking.py)
    Contract for text chunking. Implementations split text into Chunks:
    - RecursiveChunker: Separator hierarchy per content format
    - SentenceChunker: Whole sentences
    - SemanticChunker: Embedding similarity

    Example implementation:
        class MyChunker(IChunkingStrategy):
            def chunk(self, text, format_hint=None, config=None): ...
            def estimate_chunks(self, text, config=None): ...
            def get_strategy_name(self): ...

Import from the submodule directly:

    from chunkforge.shared.patterns.chunking import IChunkingStrategy
"""
