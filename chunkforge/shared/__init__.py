"""
Shared Utilities and Patterns for ChunkForge.

Sits between Core (config, logging, exceptions) and the chunking strategies:

**text_utils**
    Blank checks and whitespace normalization used by every strategy.

**patterns/**
    IChunkingStrategy, the contract every strategy implements, and
    ChunkValidator for checking chunk invariants.

Shared depends only on Core and on the chunking data model; it never imports
a concrete strategy.
"""
