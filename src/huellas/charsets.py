"""Character sets and classification for O(1) dispatch.

All sets are frozensets for:
- O(1) membership testing
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

Codes handed out by the feed are single characters, ``"\\n"`` for any
line ending, ``VIRTUAL_SPACE`` for the extra columns of an expanded tab,
and ``None`` at the end of the input.

Reference: CommonMark 0.31.2 specification
"""

from __future__ import annotations

import unicodedata
from enum import Enum, auto

# Filler code for the columns of a tab after its first
VIRTUAL_SPACE = "\x00vs"

LINE_ENDING = "\n"

SPACE_OR_TAB: frozenset[str] = frozenset({" ", "\t", VIRTUAL_SPACE})

# CommonMark: ASCII punctuation characters
# https://spec.commonmark.org/0.31.2/#ascii-punctuation-character
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

ASCII_DIGITS: frozenset[str] = frozenset("0123456789")
ASCII_HEX_DIGITS: frozenset[str] = frozenset("0123456789abcdefABCDEF")
ASCII_ALPHA: frozenset[str] = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
ASCII_ALPHANUMERIC: frozenset[str] = ASCII_ALPHA | ASCII_DIGITS

# Valid fence characters
FENCE_CHARS: frozenset[str] = frozenset("`~")

# List marker characters
UNORDERED_LIST_MARKERS: frozenset[str] = frozenset("-*+")
ORDERED_LIST_DELIMITERS: frozenset[str] = frozenset(".)")

# Thematic break characters
THEMATIC_BREAK_CHARS: frozenset[str] = frozenset("-*_")

# Emphasis delimiter characters
ATTENTION_MARKERS: frozenset[str] = frozenset("*_")

# CommonMark HTML block type 1 tags (case-insensitive)
HTML_RAW_NAMES: frozenset[str] = frozenset({"pre", "script", "style", "textarea"})

# CommonMark HTML block type 6 tags (case-insensitive)
# These are "block-level" HTML tags that end on blank line
HTML_BLOCK_NAMES: frozenset[str] = frozenset(
    {
        "address", "article", "aside", "base", "basefont", "blockquote",
        "body", "caption", "center", "col", "colgroup", "dd", "details",
        "dialog", "dir", "div", "dl", "dt", "fieldset", "figcaption",
        "figure", "footer", "form", "frame", "frameset", "h1", "h2", "h3",
        "h4", "h5", "h6", "head", "header", "hr", "html", "iframe",
        "legend", "li", "link", "main", "menu", "menuitem", "nav",
        "noframes", "ol", "optgroup", "option", "p", "param", "search",
        "section", "summary", "table", "tbody", "td", "tfoot", "th",
        "thead", "title", "tr", "track", "ul",
    }
)


class CharacterKind(Enum):
    """Classification used by the attention flanking rules."""

    WHITESPACE = auto()
    PUNCTUATION = auto()
    OTHER = auto()


def is_space_or_tab(code: str | None) -> bool:
    return code in SPACE_OR_TAB


def is_unicode_punctuation(char: str) -> bool:
    """Check if character is Unicode punctuation (P* or S* categories).

    CommonMark uses Unicode punctuation categories for flanking rules.
    This includes ASCII punctuation as a subset.

    """
    if char in ASCII_PUNCTUATION:
        return True
    cat = unicodedata.category(char)
    return cat.startswith("P") or cat.startswith("S")


def is_unicode_whitespace(char: str) -> bool:
    """Check if character is Unicode whitespace (Zs, or tab, LF, FF, CR, space)."""
    if char in "\t\n\f\r ":
        return True
    return unicodedata.category(char) == "Zs"


def classify_character(code: str | None) -> CharacterKind:
    """Classify a code for the attention flanking rules.

    The start and end of the content (None) count as whitespace, as do
    line endings and virtual spaces.
    """
    if code is None or code == LINE_ENDING or code == VIRTUAL_SPACE:
        return CharacterKind.WHITESPACE
    if is_unicode_whitespace(code):
        return CharacterKind.WHITESPACE
    if is_unicode_punctuation(code):
        return CharacterKind.PUNCTUATION
    return CharacterKind.OTHER
