"""Character references: ``&amp;``, ``&#35;`` and ``&#x1F600;``.

Named references must be known HTML5 entities; numeric ones are limited
to 7 decimal or 6 hexadecimal digits. Anything else is not a reference
and stays literal.
"""

from __future__ import annotations

from html.entities import html5
from typing import TYPE_CHECKING

from huellas.charsets import ASCII_ALPHANUMERIC, ASCII_DIGITS, ASCII_HEX_DIGITS
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

NAMED_SIZE_MAX = 31
DECIMAL_SIZE_MAX = 7
HEXADECIMAL_SIZE_MAX = 6


def character_reference(t: Tokenizer) -> bool:
    if t.current != "&":
        return False
    t.enter(TokenType.CHARACTER_REFERENCE)
    t.token(TokenType.CHARACTER_REFERENCE_MARKER)

    allowed = ASCII_ALPHANUMERIC
    size_max = NAMED_SIZE_MAX
    named = True
    if t.current == "#":
        t.token(TokenType.CHARACTER_REFERENCE_MARKER_NUMERIC)
        named = False
        if t.current in ("x", "X"):
            t.token(TokenType.CHARACTER_REFERENCE_MARKER_HEXADECIMAL)
            allowed = ASCII_HEX_DIGITS
            size_max = HEXADECIMAL_SIZE_MAX
        else:
            allowed = ASCII_DIGITS
            size_max = DECIMAL_SIZE_MAX

    start = t.index
    size = 0
    while t.peek(size) in allowed and size <= size_max:
        size += 1
    if size == 0 or size > size_max or t.peek(size) != ";":
        return False
    if named and t.serialize(start, start + size) + ";" not in html5:
        return False

    t.token(TokenType.CHARACTER_REFERENCE_VALUE, size)
    t.token(TokenType.CHARACTER_REFERENCE_MARKER_SEMI)
    t.exit(TokenType.CHARACTER_REFERENCE)
    return True
