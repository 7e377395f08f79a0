"""
Core Infrastructure for ChunkForge.

This module forms the innermost layer of ChunkForge, providing the foundational
services every chunking strategy depends on.

Architecture Position
---------------------
    Chunking strategies (recursive, character, sentence, paragraph, semantic)
      └── Shared (patterns, text utilities)
            └── **Core** (innermost - you are here)

The Core layer has NO dependencies on other ChunkForge modules.

Components
----------
**Configuration (config/, config_loaders.py)**
    Application settings as nested dataclasses with YAML persistence and
    environment variable overrides (${VAR_NAME} expansion, CHUNKFORGE_*).

**Logging (logging.py)**
    Structured logging with key=value fields and context binding, rendered
    through rich on the console.

**Exceptions (exceptions.py)**
    The ChunkForgeError hierarchy. Every error carries an error code, an
    explanation and actionable fixes.

Usage Example
-------------
    from chunkforge.core.config_loaders import load_config
    from chunkforge.core.logging import get_logger

    config = load_config()
    logger = get_logger(__name__)
    logger.info("Loaded config", strategy=config.chunking.strategy)
"""

from chunkforge.core.exceptions import (
    ChunkForgeError,
    ChunkingError,
    ConfigValidationError,
    EmbeddingError,
    EmbeddingFailedError,
    InvalidConfigError,
    InvalidEmbeddingShapeError,
    NoEmbeddingFunctionError,
    ProcessingError,
    ValidationError,
)

__all__ = [
    "ChunkForgeError",
    "ProcessingError",
    "ChunkingError",
    "NoEmbeddingFunctionError",
    "EmbeddingError",
    "EmbeddingFailedError",
    "InvalidEmbeddingShapeError",
    "ValidationError",
    "ConfigValidationError",
    "InvalidConfigError",
]
