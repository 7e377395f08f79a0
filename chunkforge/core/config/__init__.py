"""
Configuration Management for ChunkForge.

This module provides the application's configuration system using a hierarchy
of dataclasses that map to YAML configuration files.

Public API
----------
    from chunkforge.core.config import Config, ChunkingConfig
    from chunkforge.core.config_loaders import load_config

Architecture
------------
    config/
    ├── chunking.py      # ChunkingConfig, LoggingConfig
    └── config.py        # Main Config class

Usage Example
-------------
    config = load_config()
    size = config.chunking.chunk_size
"""

from chunkforge.core.config.chunking import ChunkingConfig, LoggingConfig
from chunkforge.core.config.config import STRATEGY_NAMES, Config

__all__ = [
    "Config",
    "ChunkingConfig",
    "LoggingConfig",
    "STRATEGY_NAMES",
]
