"""List items: a bullet or an ordered number, then content indented past it.

The prefix fixes the item's content indentation: everything up to the
first non-whitespace after the marker, unless that is five or more
columns away (then the content is indented code one column after the
marker) or the line ends (then one column after the marker).

CommonMark limits interruption: when a paragraph is open, an item may
only start it if the item is not empty and, when ordered, starts at 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.charsets import (
    ASCII_DIGITS,
    LINE_ENDING,
    ORDERED_LIST_DELIMITERS,
    SPACE_OR_TAB,
    UNORDERED_LIST_MARKERS,
)
from huellas.constructs.partial import count_space_or_tab, rest_is_blank, space_or_tab
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

PADDING_MAX = 4


@dataclass(frozen=True, slots=True)
class ListItemStart:
    """What a list item prefix established.

    Attributes:
        ordered: Whether the item is numbered
        marker: Bullet (``-``, ``*``, ``+``) or delimiter (``.``, ``)``)
        value: Number of an ordered item
        indent: Columns of content indentation, counted from where the
            prefix's own indentation starts
        blank: Whether nothing followed the marker on its line
    """

    ordered: bool
    marker: str
    value: int | None
    indent: int
    blank: bool

    def continues(self, other: ListItemStart) -> bool:
        """Whether an item with prefix ``other`` belongs to the same list."""
        return self.ordered == other.ordered and self.marker == other.marker


def list_item(t: Tokenizer) -> bool:
    """Item prefix; stores a ListItemStart in ``t.scratch``."""
    indent = count_space_or_tab(t)
    if indent > 3:
        return False
    code = t.peek(indent)
    value: int | None = None
    digits = 0
    if code is not None and code in UNORDERED_LIST_MARKERS:
        marker = code
    else:
        while t.peek(indent + digits) in ASCII_DIGITS:
            digits += 1
        if not 1 <= digits <= t.config.list_item_value_size_max:
            return False
        marker = t.peek(indent + digits)
        if marker is None or marker not in ORDERED_LIST_DELIMITERS:
            return False
        value = int("".join(t.peek(indent + i) for i in range(digits)))

    after = indent + digits + 1
    code = t.peek(after)
    if code is not None and code != LINE_ENDING and code not in SPACE_OR_TAB:
        return False
    padding = count_space_or_tab(t, after)
    blank = t.peek(after + padding) in (None, LINE_ENDING)
    ordered = value is not None
    if t.interrupt and (blank or (ordered and value != 1)):
        return False
    if blank:
        padding = 0
    elif padding > PADDING_MAX:
        padding = 1

    space_or_tab(t, 0)
    t.enter(TokenType.LIST_ITEM_PREFIX)
    if ordered:
        t.token(TokenType.LIST_ITEM_VALUE, digits)
    t.token(TokenType.LIST_ITEM_MARKER)
    if padding:
        t.token(TokenType.SPACE_OR_TAB, padding)
    t.exit(TokenType.LIST_ITEM_PREFIX)
    t.scratch = ListItemStart(ordered, marker, value, after + max(padding, 1), blank)
    return True


def list_item_continuation(t: Tokenizer, indent: int) -> bool:
    """Content indentation of an open item, or any whitespace on a blank line."""
    if rest_is_blank(t):
        return space_or_tab(t, 0)
    return space_or_tab(t, indent, indent)
