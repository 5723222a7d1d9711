"""Character escapes: a backslash before ASCII punctuation (``\\*``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import ASCII_PUNCTUATION
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def character_escape(t: Tokenizer) -> bool:
    if t.current != "\\" or t.peek() not in ASCII_PUNCTUATION:
        return False
    t.enter(TokenType.CHARACTER_ESCAPE)
    t.token(TokenType.CHARACTER_ESCAPE_MARKER)
    t.token(TokenType.CHARACTER_ESCAPE_VALUE)
    t.exit(TokenType.CHARACTER_ESCAPE)
    return True
