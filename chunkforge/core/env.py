"""
Safe environment variable parsing with validation.

Provides type-safe functions for reading environment variables with
bounds checking and whitelist validation. Used by the config loader to
apply CHUNKFORGE_* overrides.

Usage Pattern
-------------
Instead of unsafe direct environment access:

    # DANGEROUS - no validation
    size = int(os.environ.get("CHUNKFORGE_CHUNK_SIZE", "1000"))

Use safe getters:

    # SAFE - bounds checked
    size = get_env_int("CHUNKFORGE_CHUNK_SIZE", default=1000, min_value=1)
"""

import os
from typing import FrozenSet, Optional

from chunkforge.core.logging import get_logger

logger = get_logger(__name__)


SIZE_UNITS: FrozenSet[str] = frozenset(["characters", "tokens"])

LOG_LEVELS: FrozenSet[str] = frozenset(
    ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
)


def get_env_int(
    name: str,
    default: Optional[int] = None,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> Optional[int]:
    """
    Get integer from environment variable with bounds validation.

    Args:
        name: Environment variable name.
        default: Default value if not set or invalid.
        min_value: Minimum allowed value (clamped if exceeded).
        max_value: Maximum allowed value (clamped if exceeded).

    Returns:
        Validated integer or default.

    Example:
        >>> # With CHUNKFORGE_CHUNK_SIZE=0
        >>> get_env_int("CHUNKFORGE_CHUNK_SIZE", min_value=1)
        1  # Clamped to min
    """
    value = os.environ.get(name)
    if value is None:
        return default

    try:
        int_value = int(value)
    except ValueError:
        logger.warning(
            "Invalid integer value in environment", variable=name, value=value
        )
        return default

    if min_value is not None and int_value < min_value:
        return min_value
    if max_value is not None and int_value > max_value:
        return max_value

    return int_value


def get_env_whitelist(
    name: str,
    allowed: FrozenSet[str],
    default: Optional[str] = None,
    case_sensitive: bool = False,
) -> Optional[str]:
    """
    Get string from environment variable with whitelist validation.

    Only returns value if it matches one of the allowed values.

    Args:
        name: Environment variable name.
        allowed: Set of allowed values.
        default: Default value if not set or not in whitelist.
        case_sensitive: If False (default), comparison is case-insensitive.

    Returns:
        Validated string or default.
    """
    value = os.environ.get(name)
    if value is None:
        return default

    if case_sensitive:
        if value in allowed:
            return value
    else:
        normalized = value.lower()
        for allowed_value in allowed:
            if normalized == allowed_value.lower():
                return allowed_value

    logger.warning("Ignoring environment value outside whitelist", variable=name)
    return default
