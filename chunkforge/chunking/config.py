"""Chunk configuration and validation.

Every chunk() call resolves its options into one immutable ChunkConfig before
any splitting runs. Options may arrive as a ChunkConfig, a plain mapping
(for example straight from YAML), or nothing at all for defaults.

Option Reference
----------------
    chunk_size          positive int, soft upper bound per chunk (1000)
    chunk_overlap       non-negative int, no upper bound enforced (200)
    size_unit           "characters" | "tokens" ("characters")
    get_chunk_size      callable str -> int; wins over size_unit
    size_measure        alias of get_chunk_size
    chars_per_token     positive int used by the token measure (4)
    format              separator format tag; unknown tags mean plain
    separators          explicit separator list; bypasses format lookup
    boundary            "word" | "sentence" | "none" (character strategy)
    min_paragraph_size  non-negative int (paragraph strategy, 50)
    threshold           number in [-1, 1] (semantic strategy, 0.75)
    max_chars           positive int (semantic strategy, 1000)
    min_sentences       non-negative int (semantic strategy, 2)
    embedding_fn        callable str -> vector (semantic strategy, required)

Validation raises InvalidConfigError; merge_with_defaults() is the lenient
variant that replaces bad values with defaults instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from numbers import Real
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from chunkforge.chunking.separators import (
    Format,
    get_separators,
    is_supported_format,
    resolve_format,
)
from chunkforge.chunking.tokens import (
    DEFAULT_CHARS_PER_TOKEN,
    SizeMeasure,
    char_count,
    safe_measure,
    token_sizer,
)
from chunkforge.core.exceptions import InvalidConfigError
from chunkforge.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200
DEFAULT_MIN_PARAGRAPH_SIZE = 50
DEFAULT_THRESHOLD = 0.75
DEFAULT_MAX_CHARS = 1000
DEFAULT_MIN_SENTENCES = 2

EmbeddingFn = Callable[[str], Any]
ConfigInput = Union["ChunkConfig", Mapping[str, Any], None]


class SizeUnit(str, Enum):
    """Unit in which chunk_size and chunk_overlap are measured."""

    CHARACTERS = "characters"
    TOKENS = "tokens"


class Boundary(str, Enum):
    """Where the character strategy may cut."""

    WORD = "word"
    SENTENCE = "sentence"
    NONE = "none"


@dataclass(frozen=True)
class ChunkConfig:
    """Validated, immutable chunking configuration.

    Build it through ConfigValidator.validate() (or validate_config()) so that
    string options are normalized and custom measures are made infallible.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
    size_measure: SizeMeasure = char_count
    size_unit: SizeUnit = SizeUnit.CHARACTERS
    format: Format = Format.PLAIN
    separators: Optional[Tuple[str, ...]] = None
    boundary: Boundary = Boundary.WORD
    min_paragraph_size: int = DEFAULT_MIN_PARAGRAPH_SIZE
    threshold: float = DEFAULT_THRESHOLD
    max_chars: int = DEFAULT_MAX_CHARS
    min_sentences: int = DEFAULT_MIN_SENTENCES
    chars_per_token: int = DEFAULT_CHARS_PER_TOKEN
    embedding_fn: Optional[EmbeddingFn] = None

    def __post_init__(self) -> None:
        for name in _NUMERIC_FIELDS:
            _FIELD_RULES[name](name, getattr(self, name))

    def measure(self, text: str) -> int:
        """Size of text under this config's measure."""
        return self.size_measure(text)

    def separator_hierarchy(self, format_hint: Union[Format, str, None] = None) -> List[str]:
        """Separators to use: explicit override, else format_hint, else format."""
        if self.separators is not None:
            return list(self.separators)
        if format_hint is not None:
            return get_separators(format_hint)
        return get_separators(self.format)

    def to_options(self) -> Dict[str, Any]:
        """Return the options mapping that rebuilds this config."""
        options = {f.name: getattr(self, f.name) for f in fields(self)}
        if options["separators"] is not None:
            options["separators"] = list(options["separators"])
        return options

    def replace(self, **changes: Any) -> "ChunkConfig":
        """Return a validated copy with some options changed."""
        options = self.to_options()
        if "get_chunk_size" in changes or "size_measure" in changes:
            # A new custom measure replaces the inherited one
            options.pop("size_measure")
        elif "size_unit" in changes or "chars_per_token" in changes:
            # Let the new unit choose the measure again
            if options["size_measure"] is char_count or getattr(
                options["size_measure"], "__name__", ""
            ).startswith("token_sizer_"):
                options.pop("size_measure")
        options.update(changes)
        return ConfigValidator.validate(options)


# ============================================================================
# Field rules
# ============================================================================


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _positive_int(name: str, value: Any) -> int:
    if not _is_int(value) or value <= 0:
        raise InvalidConfigError(
            f"{name} must be a positive integer, got {value!r}", field=name, value=value
        )
    return value


def _non_negative_int(name: str, value: Any) -> int:
    if not _is_int(value) or value < 0:
        raise InvalidConfigError(
            f"{name} must be a non-negative integer, got {value!r}",
            field=name,
            value=value,
        )
    return value


def _threshold(name: str, value: Any) -> float:
    if (
        isinstance(value, bool)
        or not isinstance(value, Real)
        or not math.isfinite(float(value))
        or not -1.0 <= float(value) <= 1.0
    ):
        raise InvalidConfigError(
            f"{name} must be a number between -1 and 1, got {value!r}",
            field=name,
            value=value,
        )
    return float(value)


def _enum_rule(enum_type: type) -> Callable[[str, Any], Any]:
    def rule(name: str, value: Any) -> Any:
        if isinstance(value, enum_type):
            return value
        if isinstance(value, str):
            try:
                return enum_type(value.strip().lower())
            except ValueError:
                pass
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidConfigError(
            f"{name} must be one of: {allowed}; got {value!r}", field=name, value=value
        )

    return rule


def _format(name: str, value: Any) -> Format:
    if value is None:
        return Format.PLAIN
    if not isinstance(value, (str, Format)):
        raise InvalidConfigError(
            f"{name} must be a format tag string, got {value!r}", field=name, value=value
        )
    if not is_supported_format(value):
        logger.debug("Unknown format, using plain separators", format=value)
    return resolve_format(value)


def _separators(name: str, value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise InvalidConfigError(
            f"{name} must be a list of strings, got {value!r}", field=name, value=value
        )
    if not all(isinstance(sep, str) for sep in value):
        raise InvalidConfigError(
            f"{name} must only contain strings", field=name, value=value
        )
    return tuple(value)


def _callable(name: str, value: Any) -> Callable[..., Any]:
    if not callable(value):
        raise InvalidConfigError(
            f"{name} must be callable, got {value!r}", field=name, value=value
        )
    return value


def _optional_callable(name: str, value: Any) -> Optional[Callable[..., Any]]:
    if value is None:
        return None
    return _callable(name, value)


_FIELD_RULES: Dict[str, Callable[[str, Any], Any]] = {
    "chunk_size": _positive_int,
    "chunk_overlap": _non_negative_int,
    "size_unit": _enum_rule(SizeUnit),
    "get_chunk_size": _callable,
    "size_measure": _callable,
    "chars_per_token": _positive_int,
    "format": _format,
    "separators": _separators,
    "boundary": _enum_rule(Boundary),
    "min_paragraph_size": _non_negative_int,
    "threshold": _threshold,
    "max_chars": _positive_int,
    "min_sentences": _non_negative_int,
    "embedding_fn": _optional_callable,
}

_NUMERIC_FIELDS = (
    "chunk_size",
    "chunk_overlap",
    "chars_per_token",
    "min_paragraph_size",
    "threshold",
    "max_chars",
    "min_sentences",
)

KNOWN_OPTIONS = frozenset(_FIELD_RULES)


class ConfigValidator:
    """Turn raw chunk options into a ChunkConfig.

    Examples:
        >>> config = ConfigValidator.validate({"chunk_size": 500})
        >>> config.chunk_overlap
        200
        >>> ConfigValidator.validate({"chunk_size": 0})
        Traceback (most recent call last):
        ...
        chunkforge.core.exceptions.InvalidConfigError: chunk_size must be a positive integer, got 0
    """

    @classmethod
    def validate(cls, options: ConfigInput = None) -> ChunkConfig:
        """Validate options, raising InvalidConfigError on the first bad field.

        Args:
            options: ChunkConfig (returned unchanged), mapping, or None

        Returns:
            Validated ChunkConfig
        """
        if isinstance(options, ChunkConfig):
            return options
        if options is None:
            return ChunkConfig()
        if not isinstance(options, Mapping):
            raise InvalidConfigError(
                f"chunk options must be a mapping, got {type(options).__name__}",
                field="options",
                value=options,
            )

        unknown = sorted(set(options) - KNOWN_OPTIONS)
        if unknown:
            raise InvalidConfigError(
                f"unknown chunk option(s): {', '.join(map(str, unknown))}",
                field=str(unknown[0]),
                value=options[unknown[0]],
            )

        values = {name: _FIELD_RULES[name](name, value) for name, value in options.items()}
        return cls._build(values)

    @classmethod
    def merge_with_defaults(cls, options: ConfigInput = None) -> ChunkConfig:
        """Lenient validation: invalid or unknown options fall back to defaults."""
        if isinstance(options, ChunkConfig):
            return options
        if not isinstance(options, Mapping):
            return ChunkConfig()

        values: Dict[str, Any] = {}
        for name, value in options.items():
            rule = _FIELD_RULES.get(name)
            if rule is None:
                logger.debug("Ignoring unknown chunk option", option=name)
                continue
            try:
                values[name] = rule(name, value)
            except InvalidConfigError as e:
                logger.debug("Replacing invalid chunk option with default", option=name, error=e)
        return cls._build(values)

    @staticmethod
    def _build(values: Dict[str, Any]) -> ChunkConfig:
        """Resolve the size measure and construct the config."""
        explicit = values.pop("size_measure", None)
        alias = values.pop("get_chunk_size", None)
        if explicit is not None and alias is not None and explicit is not alias:
            raise InvalidConfigError(
                "give either get_chunk_size or size_measure, not both",
                field="get_chunk_size",
                value=alias,
            )
        custom = explicit or alias

        size_unit = values.get("size_unit", SizeUnit.CHARACTERS)
        chars_per_token = values.get("chars_per_token", DEFAULT_CHARS_PER_TOKEN)
        if custom is not None:
            measure = safe_measure(custom)
        elif size_unit is SizeUnit.TOKENS:
            measure = token_sizer(chars_per_token)
        else:
            measure = char_count

        return ChunkConfig(size_measure=measure, **values)


def validate_config(options: ConfigInput = None, **overrides: Any) -> ChunkConfig:
    """Validate chunk options, with keyword overrides applied on top.

    Examples:
        >>> validate_config(chunk_size=300, size_unit="tokens").measure("a" * 40)
        10
    """
    if overrides:
        if isinstance(options, ChunkConfig):
            return options.replace(**overrides)
        merged = dict(options or {})
        merged.update(overrides)
        return ConfigValidator.validate(merged)
    return ConfigValidator.validate(options)


def merge_with_defaults(options: ConfigInput = None) -> ChunkConfig:
    """Module-level shortcut for ConfigValidator.merge_with_defaults()."""
    return ConfigValidator.merge_with_defaults(options)
