"""
Centralized Exception Hierarchy for ChunkForge.

This module defines all custom exceptions used throughout ChunkForge.
All exceptions inherit from ChunkForgeError for easy catching.

Helpful Error Messages
----------------------
Each exception includes:
- user_message: Human-readable description of what went wrong
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue
- error_code: Unique identifier for documentation lookup (e.g., "CF-VAL-001")

Usage
-----
    from chunkforge.core.exceptions import (
        ChunkForgeError,
        InvalidConfigError,
        NoEmbeddingFunctionError,
    )

    try:
        chunks = SemanticChunker().chunk(text, config={"threshold": 0.8})
    except NoEmbeddingFunctionError:
        chunks = RecursiveChunker().chunk(text)
    except ChunkForgeError as e:
        logger.error(f"Chunking failed: {e}")

Exception Hierarchy
-------------------
    ChunkForgeError (base)
    ├── ProcessingError
    │   ├── ChunkingError
    │   │   └── NoEmbeddingFunctionError
    │   └── EmbeddingError
    │       └── EmbeddingFailedError
    │           └── InvalidEmbeddingShapeError
    └── ValidationError
        └── ConfigValidationError
            └── InvalidConfigError

Design Principles
-----------------
1. All exceptions inherit from ChunkForgeError
2. Configuration problems surface before any text is split
3. Embedding failures never escape the semantic chunker; they trigger
   its size-based fallback
4. Every exception provides "why" and "how to fix" guidance
"""

from typing import Any, List, Optional
import re


def sanitize_message(message: str) -> str:
    """Sanitize an error message to avoid leaking sensitive info.

    Embedding callbacks frequently wrap remote providers, so their error
    text may carry API keys or bearer tokens.

    Args:
        message: Original error message

    Returns:
        Sanitized message with sensitive info replaced
    """
    if not message:
        return message

    patterns = [
        (r"(sk-|pk-|api_key[=:][\s]*)[a-zA-Z0-9_-]{20,}", r"\1<api-key>"),
        (r"(OPENAI_API_KEY|ANTHROPIC_API_KEY|API_KEY)[=:]\s*[^\s]+", r"\1=<hidden>"),
        (r"Bearer\s+[a-zA-Z0-9_.-]+", r"Bearer <token>"),
        (r"://[^:/\s]+:[^@\s]+@", r"://<user>:<pass>@"),
    ]

    result = message
    for pattern, replacement in patterns:
        result = re.sub(pattern, replacement, result)
    return result


def get_root_cause(exc: BaseException) -> BaseException:
    """Extract the root cause from a chain of exceptions.

    Follows nested __cause__ and __context__ attributes to find
    the original error that started the chain.

    Args:
        exc: Exception to analyze

    Returns:
        Root cause exception (may be the same as input)
    """
    seen = set()
    current = exc

    while current is not None:
        if id(current) in seen:
            break
        seen.add(id(current))

        # Prefer explicit cause over implicit context
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None:
            current = current.__context__
        else:
            break

    return current


class ChunkForgeError(Exception):
    """
    Base exception for all ChunkForge errors.

    Includes helpful error information:
    - error_code: Unique code for documentation lookup (e.g., "CF-ERR-001")
    - why_it_happened: Explanation of the root cause
    - how_to_fix: List of actionable suggestions

    Example
    -------
        try:
            chunks = chunk_text(text, strategy="semantic")
        except ChunkForgeError as e:
            logger.error(f"Chunking failed: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    error_code: str = "CF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        """Initialize ChunkForgeError with helpful information.

        Args:
            message: Human-readable error message
            error_code: Unique identifier (e.g., "CF-VAL-001")
            why_it_happened: Explanation of root cause
            how_to_fix: List of actionable fix suggestions
        """
        super().__init__(sanitize_message(message))

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)

    def get_root_cause(self) -> BaseException:
        """Get the root cause of this exception chain."""
        return get_root_cause(self)


# ============================================================================
# Processing Exceptions
# ============================================================================


class ProcessingError(ChunkForgeError):
    """
    Base exception for text processing errors.

    Raised when a chunking strategy or one of its collaborators fails.
    """

    error_code = "CF-PROC-000"
    why_it_happened = "Text processing failed at some stage"
    how_to_fix = [
        "Check that the input is a decoded str, not bytes",
        "Try the default recursive strategy",
    ]


class ChunkingError(ProcessingError):
    """
    Raised when a chunking strategy cannot run.

    Only strategies with external requirements raise it; every strategy is
    infallible once its configuration is valid and its collaborators exist.
    """

    error_code = "CF-PROC-001"
    why_it_happened = "The chunking strategy could not be executed"
    how_to_fix = [
        "Check the strategy requirements in its documentation",
        "Switch to a strategy without external requirements (recursive)",
    ]


class NoEmbeddingFunctionError(ChunkingError):
    """
    Raised when semantic chunking is requested without an embedding callback.

    Example
    -------
        SemanticChunker().chunk("One. Two. Three.")
        # Raises: NoEmbeddingFunctionError("semantic chunking requires embedding_fn")
    """

    error_code = "CF-PROC-002"
    why_it_happened = (
        "Semantic chunking compares sentence embeddings, but no embedding_fn "
        "was provided in the configuration"
    )
    how_to_fix = [
        "Pass embedding_fn=<callable str -> vector> in the chunk config",
        "Use the sentence or paragraph strategy when no embedder is available",
    ]


class EmbeddingError(ProcessingError):
    """
    Base exception for embedding callback problems.

    The semantic chunker raises these internally and converts them into its
    size-based fallback; callers never see them from chunk().
    """

    error_code = "CF-EMB-000"
    why_it_happened = "The embedding callback did not produce a usable vector"
    how_to_fix = [
        "Check that the embedding provider is reachable",
        "Verify the callback returns a list of floats",
    ]


class EmbeddingFailedError(EmbeddingError):
    """Raised when the embedding callback itself raises."""

    error_code = "CF-EMB-001"
    why_it_happened = "The embedding callback raised an exception"
    how_to_fix = [
        "Inspect the root cause with get_root_cause()",
        "Add retries inside the embedding callback",
    ]


class InvalidEmbeddingShapeError(EmbeddingFailedError):
    """Raised when the callback returns something that is not a 1-D vector."""

    error_code = "CF-EMB-002"
    why_it_happened = (
        "The embedding callback returned an empty, nested, or non-numeric value"
    )
    how_to_fix = [
        "Return a flat sequence of floats, a mapping with a 'vector' key, "
        "or an object with a 'vector' attribute",
    ]


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(ChunkForgeError):
    """
    Raised when validation fails.

    This can occur when:
    - Chunk options are invalid
    - The application configuration file has wrong values
    """

    error_code = "CF-VAL-000"
    why_it_happened = "Validation failed for input data or configuration"
    how_to_fix = [
        "Check the error message for specific validation failures",
        "Review the expected format or value constraints",
    ]


class ConfigValidationError(ValidationError):
    """
    Raised when configuration validation fails.

    Attributes
    ----------
    field : str
        The configuration field that failed validation
    value : any
        The invalid value
    """

    error_code = "CF-VAL-001"
    why_it_happened = (
        "A configuration value is invalid. "
        "The chunkforge.yaml file may have incorrect settings"
    )
    how_to_fix = [
        "Check chunkforge.yaml for syntax errors",
        "Verify the value type matches what's expected",
        "See documentation for valid configuration options",
    ]

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.field = field
        self.value = value


class InvalidConfigError(ConfigValidationError):
    """
    Raised when chunk options fail validation.

    Raised before any splitting happens, so a chunker never returns
    partial output for a bad configuration.

    Example
    -------
        validate_config({"chunk_size": 0})
        # Raises: InvalidConfigError("chunk_size must be a positive integer, got 0")
    """

    error_code = "CF-VAL-002"
    why_it_happened = "A chunk option has the wrong type or is out of range"
    how_to_fix = [
        "chunk_size must be a positive integer",
        "chunk_overlap must be a non-negative integer",
        "size_unit must be 'characters' or 'tokens'",
        "threshold must be a number between -1 and 1",
    ]
