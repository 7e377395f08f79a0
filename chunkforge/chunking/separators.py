"""Format-specific separator hierarchies.

Separators are ordered by significance: structural boundaries first (module,
class and function keywords for code; header levels and fenced-code ends for
markdown; heading tags for HTML), then paragraphs, lines and words. Every list
ends with the universal fallback ``["\\n\\n", "\\n", " "]``.

The empty string is reserved: it means "split into individual characters" and
is the implicit last resort of every hierarchy (see CHARACTER_SPLIT).

Unknown formats resolve to the plain-text list; get_separators() never raises.

Examples:
    >>> "\\ndefmodule " in get_separators(Format.ELIXIR)
    True
    >>> get_separators("no-such-format")
    ['\\n\\n', '\\n', ' ']
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, List, Tuple, Union


class Format(str, Enum):
    """Content formats understood by the separator registry."""

    PLAIN = "plain"
    MARKDOWN = "markdown"
    ELIXIR = "elixir"
    CODE = "code"
    RUBY = "ruby"
    PHP = "php"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    VUE = "vue"
    HTML = "html"
    DOC = "doc"
    DOCX = "docx"
    EPUB = "epub"
    LATEX = "latex"
    ODT = "odt"
    PDF = "pdf"
    RTF = "rtf"


CHARACTER_SPLIT = ""

FALLBACK_SEPARATORS: Tuple[str, ...] = ("\n\n", "\n", " ")

# Extracted documents arrive as plain text, whatever their container format
PLAINTEXT_FORMATS: FrozenSet[Format] = frozenset(
    [
        Format.DOC,
        Format.DOCX,
        Format.EPUB,
        Format.LATEX,
        Format.ODT,
        Format.PDF,
        Format.RTF,
    ]
)

_MARKDOWN = (
    "\n## ",
    "\n### ",
    "\n#### ",
    "\n##### ",
    "\n###### ",
    "```\n\n",
    "\n\n___\n\n",
    "\n\n---\n\n",
    "\n\n***\n\n",
)

_ELIXIR = (
    "\ndefmodule ",
    "\ndefprotocol ",
    "\ndefimpl ",
    "  defmodule ",
    "  defprotocol ",
    "  defimpl ",
    "@doc \"\"\"",
    "  def ",
    "  defp ",
    "  with ",
    "  cond ",
    "  case ",
    "  if ",
)

_RUBY = (
    "\nclass ",
    "  class ",
    "\n##",
    "  ##",
    "  private\n",
    "\ndef ",
    "  def ",
    "  if ",
    "  unless ",
    "  while ",
    "  for ",
    "  do ",
    "  begin ",
    "  rescue ",
)

_PHP = (
    "\nclass ",
    "  class ",
    "\n/**",
    "  /**",
    "\nfunction ",
    "  function ",
    "public function ",
    "protected function ",
    "private function ",
    "  if ",
    "  foreach ",
    "  while ",
    "  do ",
    "  switch ",
    "  case ",
)

_PYTHON = (
    "\nclass ",
    "\ndef ",
    "\n\tdef ",
)

_JAVASCRIPT = (
    "\nclass ",
    "  class ",
    "\nfunction ",
    "  function ",
    "\nexport const ",
    "\nexport default ",
    "\nconst ",
    "  const ",
    "  let ",
    "  var ",
    "  if ",
    "  for ",
    "  while ",
    "  switch ",
    "  case ",
    "  default ",
)

_VUE = (
    "<script",
    "<section",
    "<table",
    "<template",
)

_HTML = (
    "<h1",
    "<h2",
    "<h3",
    "<h4",
    "<h5",
    "<h6",
    "<p",
    "<ul",
    "<ol",
    "<li",
    "<article",
    "<section",
    "<table",
)

_HIERARCHIES: Dict[Format, Tuple[str, ...]] = {
    Format.PLAIN: FALLBACK_SEPARATORS,
    Format.MARKDOWN: _MARKDOWN + FALLBACK_SEPARATORS,
    Format.ELIXIR: _ELIXIR + FALLBACK_SEPARATORS,
    Format.CODE: _ELIXIR + FALLBACK_SEPARATORS,
    Format.RUBY: _RUBY + FALLBACK_SEPARATORS,
    Format.PHP: _PHP + FALLBACK_SEPARATORS,
    Format.PYTHON: _PYTHON + FALLBACK_SEPARATORS,
    Format.JAVASCRIPT: _JAVASCRIPT + FALLBACK_SEPARATORS,
    Format.TYPESCRIPT: _JAVASCRIPT + FALLBACK_SEPARATORS,
    Format.VUE: _VUE + _JAVASCRIPT + FALLBACK_SEPARATORS,
    Format.HTML: _HTML + FALLBACK_SEPARATORS,
}
for _fmt in PLAINTEXT_FORMATS:
    _HIERARCHIES[_fmt] = FALLBACK_SEPARATORS


def resolve_format(value: Union[Format, str, None]) -> Format:
    """Map a format tag to a Format, falling back to plain.

    Accepts Format members and their string values, case-insensitively.
    """
    if isinstance(value, Format):
        return value
    if isinstance(value, str):
        try:
            return Format(value.strip().lower())
        except ValueError:
            return Format.PLAIN
    return Format.PLAIN


def is_supported_format(value: Union[Format, str, None]) -> bool:
    """Check whether value names a registered format."""
    if isinstance(value, Format):
        return True
    if not isinstance(value, str):
        return False
    return value.strip().lower() in {f.value for f in Format}


def get_separators(fmt: Union[Format, str, None] = Format.PLAIN) -> List[str]:
    """Return the separator hierarchy for a format.

    Args:
        fmt: Format member or tag string; unknown tags mean plain

    Returns:
        New list of separators, most significant first
    """
    return list(_HIERARCHIES[resolve_format(fmt)])


def supported_formats() -> FrozenSet[Format]:
    """Return every format with a registered hierarchy."""
    return frozenset(_HIERARCHIES)


def fallback_separators() -> List[str]:
    """Return the universal paragraph/line/word fallback."""
    return list(FALLBACK_SEPARATORS)
