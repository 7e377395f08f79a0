"""Strategy registry and one-call chunking helpers.

Maps strategy names to IChunkingStrategy implementations so callers (and the
YAML configuration) can select a strategy by name:

    chunks = chunk_text(source, strategy="recursive", format_hint="python",
                        chunk_size=800, chunk_overlap=100)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

from chunkforge.chunking.character_chunker import CharacterChunker
from chunkforge.chunking.config import ConfigInput
from chunkforge.chunking.models import Chunk
from chunkforge.chunking.paragraph_chunker import ParagraphChunker
from chunkforge.chunking.recursive_chunker import RecursiveChunker
from chunkforge.chunking.semantic_chunker import SemanticChunker
from chunkforge.chunking.sentence_chunker import SentenceChunker
from chunkforge.core.config import Config
from chunkforge.core.exceptions import InvalidConfigError
from chunkforge.core.logging import get_logger
from chunkforge.shared.patterns.chunking import FormatHint, IChunkingStrategy

logger = get_logger(__name__)

DEFAULT_STRATEGY = "recursive"

STRATEGIES: Dict[str, Type[IChunkingStrategy]] = {
    "recursive": RecursiveChunker,
    "character": CharacterChunker,
    "sentence": SentenceChunker,
    "paragraph": ParagraphChunker,
    "semantic": SemanticChunker,
}


def available_strategies() -> List[str]:
    """Names accepted by get_chunking_strategy(), sorted."""
    return sorted(STRATEGIES)


def get_chunking_strategy(name: str, config: ConfigInput = None) -> IChunkingStrategy:
    """Instantiate a strategy by name.

    Args:
        name: Strategy name (case-insensitive)
        config: Default config for the new chunker

    Returns:
        Configured chunker

    Raises:
        InvalidConfigError: If the name is unknown or the config is invalid
    """
    key = name.strip().lower() if isinstance(name, str) else name
    strategy_cls = STRATEGIES.get(key)
    if strategy_cls is None:
        raise InvalidConfigError(
            f"unknown chunking strategy {name!r}; choose one of: "
            f"{', '.join(available_strategies())}",
            field="strategy",
            value=name,
        )
    return strategy_cls(config)


def chunk_text(
    text: str,
    strategy: str = DEFAULT_STRATEGY,
    format_hint: FormatHint = None,
    **options: Any,
) -> List[Chunk]:
    """Chunk text in one call.

    Examples:
        >>> [c.content for c in chunk_text("para one.\\n\\npara two.", chunk_size=12, chunk_overlap=0)]
        ['para one.', 'para two.']
    """
    chunker = get_chunking_strategy(strategy, options or None)
    return chunker.chunk(text, format_hint=format_hint)


def chunker_from_config(
    config: Optional[Config] = None, **overrides: Any
) -> IChunkingStrategy:
    """Build the strategy selected by the application config.

    Keyword overrides are merged into the configured options; this is how
    callers supply values YAML cannot hold, such as embedding_fn.
    """
    config = config or Config()
    chunking = config.chunking
    logger.debug(
        "Building chunker from config",
        strategy=chunking.strategy,
        chunk_size=chunking.chunk_size,
    )
    options = chunking.to_options()
    options.update(overrides)
    return get_chunking_strategy(chunking.strategy, options)
