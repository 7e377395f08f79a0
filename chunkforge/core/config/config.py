"""
Main configuration class for ChunkForge.

This module provides the Config dataclass that aggregates all sub-configs
and handles initialization, validation, and dictionary parsing.

Architecture Context
--------------------
Configuration sits at the Core layer. The Config object is typically created
once at startup and handed to chunker_from_config() to build a strategy:

    User's chunkforge.yaml
           ↓
    load_config() → Config object
           ↓
    chunker_from_config(config) → IChunkingStrategy

Configuration Hierarchy
-----------------------
    Config
    ├── ChunkingConfig     # Strategy name and chunk options
    └── LoggingConfig      # Level, log file, console output

Environment Variables
---------------------
Deployment-specific values use ${VAR_NAME} syntax:

    chunking:
      chunk_size: ${CHUNK_SIZE:800}

The expand_env_vars() function recursively processes all string values.
"""

from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from chunkforge.core.config.chunking import ChunkingConfig, LoggingConfig

STRATEGY_NAMES = frozenset(["recursive", "character", "sentence", "paragraph", "semantic"])


@dataclass
class Config:
    """Main ChunkForge configuration."""

    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Runtime paths (set after loading)
    _base_path: Path = field(default_factory=Path.cwd, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Validates:
        - Nested config types
        - Strategy name
        """
        assert isinstance(
            self.chunking, ChunkingConfig
        ), "chunking must be ChunkingConfig"
        assert isinstance(self.logging, LoggingConfig), "logging must be LoggingConfig"

        if self.chunking.strategy not in STRATEGY_NAMES:
            raise ValueError(
                f"chunking.strategy must be one of {sorted(STRATEGY_NAMES)}, "
                f"got: {self.chunking.strategy}"
            )

    @property
    def log_path(self) -> Optional[Path]:
        """Get absolute path to the log file, if one is configured."""
        if not self.logging.file:
            return None
        path = Path(self.logging.file)
        if path.is_absolute():
            return path
        return self._base_path / path

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            result[key] = value
        return result

    @staticmethod
    def _filter_fields(cls_type: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None."""
        if not data:
            return {}
        valid_keys = {f.name for f in fields(cls_type)}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        # Import here to avoid circular dependency
        from chunkforge.core.config_loaders import expand_env_vars

        data = expand_env_vars(data or {})

        config = cls(
            chunking=ChunkingConfig(
                **cls._filter_fields(ChunkingConfig, data.get("chunking"))
            ),
            logging=LoggingConfig(
                **cls._filter_fields(LoggingConfig, data.get("logging"))
            ),
        )

        if base_path:
            config._base_path = base_path

        return config
