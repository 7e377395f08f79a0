"""
Configuration Loading and Management Functions.

Handles loading, saving, and applying environment overrides to ChunkForge
configuration.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults.

Environment Variables
---------------------
    CHUNKFORGE_STRATEGY       recursive | character | sentence | paragraph | semantic
    CHUNKFORGE_CHUNK_SIZE     positive integer
    CHUNKFORGE_CHUNK_OVERLAP  non-negative integer
    CHUNKFORGE_SIZE_UNIT      characters | tokens
    CHUNKFORGE_FORMAT         separator format tag (plain, markdown, python, ...)
    CHUNKFORGE_LOG_LEVEL      DEBUG | INFO | WARNING | ERROR | CRITICAL
"""

import os
import re
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

import yaml

from chunkforge.core.env import LOG_LEVELS, SIZE_UNITS, get_env_int, get_env_whitelist

if TYPE_CHECKING:
    from chunkforge.core.config import Config


CONFIG_FILENAMES = ("chunkforge.yaml", "config.yaml")


class _Logger:
    """Lazy logger holder.

    Rule #6: Encapsulates logger state in smallest scope.
    Avoids slow startup from rich library import.
    """

    _instance = None

    @classmethod
    def get(cls) -> Any:
        """Get logger (lazy-loaded)."""
        if cls._instance is None:
            from chunkforge.core.logging import get_logger

            cls._instance = get_logger(__name__)
        return cls._instance


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles nested structures including:
    - Strings with ${VAR_NAME} or ${VAR_NAME:default} syntax
    - Nested dictionaries
    - Nested lists

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    # Return primitives (int, float, bool, None) unchanged
    return value


def _coerce_numeric_strings(config: "Config") -> None:
    """Convert numeric strings produced by ${VAR} expansion back to numbers."""
    chunking = config.chunking
    for name in ("chunk_size", "chunk_overlap", "chars_per_token", "min_paragraph_size",
                 "max_chars", "min_sentences"):
        value = getattr(chunking, name)
        if isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()):
            setattr(chunking, name, int(value))
    if isinstance(chunking.threshold, str):
        try:
            chunking.threshold = float(chunking.threshold)
        except ValueError:
            _Logger.get().warning(
                "Invalid threshold value, keeping it for validation",
                threshold=chunking.threshold,
            )


def _apply_env_overrides(config: "Config") -> "Config":
    """
    Apply environment variable overrides to configuration.

    Environment variables take precedence over config file values.
    """
    _apply_chunking_overrides(config)
    _apply_logging_overrides(config)
    return config


def _apply_chunking_overrides(config: "Config") -> None:
    """Apply chunk strategy, size and format overrides.

    Security:
        Uses get_env_int with bounds and get_env_whitelist for enum values.
    """
    from chunkforge.core.config import STRATEGY_NAMES

    strategy = get_env_whitelist("CHUNKFORGE_STRATEGY", STRATEGY_NAMES)
    if strategy:
        config.chunking.strategy = strategy

    chunk_size = get_env_int("CHUNKFORGE_CHUNK_SIZE", min_value=1)
    if chunk_size is not None:
        config.chunking.chunk_size = chunk_size

    chunk_overlap = get_env_int("CHUNKFORGE_CHUNK_OVERLAP", min_value=0)
    if chunk_overlap is not None:
        config.chunking.chunk_overlap = chunk_overlap

    size_unit = get_env_whitelist("CHUNKFORGE_SIZE_UNIT", SIZE_UNITS)
    if size_unit:
        config.chunking.size_unit = size_unit

    # Format tags are lowercase identifiers; unknown tags fall back to plain later
    fmt = os.environ.get("CHUNKFORGE_FORMAT")
    if fmt and re.match(r"^[a-zA-Z]+$", fmt):
        config.chunking.format = fmt.lower()


def _apply_logging_overrides(config: "Config") -> None:
    """Apply log level override."""
    level = get_env_whitelist("CHUNKFORGE_LOG_LEVEL", LOG_LEVELS)
    if level:
        config.logging.level = level


def _find_config_file(base_path: Path) -> Optional[Path]:
    """Return the first known config file in base_path, if any."""
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> "Config":
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

    Args:
        config_path: Path to config file. Defaults to chunkforge.yaml or
            config.yaml in base_path.
        base_path: Base path for the project. Defaults to current directory.

    Returns:
        Config object with all settings.
    """
    from chunkforge.core.config import Config

    base_path = base_path or Path.cwd()

    if config_path is None:
        config_path = _find_config_file(base_path)
        if config_path is None:
            return _create_default_config(base_path)
    if not config_path.exists():
        return _create_default_config(base_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"config root must be a mapping, got {type(data).__name__}")
        config = Config.from_dict(data, base_path)
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        _Logger.get().warning(
            "Could not load config, using defaults", path=config_path, error=e
        )
        return _create_default_config(base_path)

    _coerce_numeric_strings(config)
    return _apply_env_overrides(config)


def _create_default_config(base_path: Path) -> "Config":
    """Create default configuration with environment overrides."""
    from chunkforge.core.config import Config

    config = Config()
    config._base_path = base_path
    return _apply_env_overrides(config)


def save_config(config: "Config", config_path: Optional[Path] = None) -> None:
    """Save configuration to YAML file."""
    if config_path is None:
        config_path = config._base_path / CONFIG_FILENAMES[0]

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)


def apply_logging_config(config: "Config") -> None:
    """Install the logging section of config as the global logging setup."""
    from chunkforge.core.logging import configure_logging

    configure_logging(
        level=config.logging.level,
        log_file=config.log_path,
        console=config.logging.console,
    )
