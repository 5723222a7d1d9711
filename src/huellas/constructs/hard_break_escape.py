"""Hard break (escape): a backslash right before a line ending."""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def hard_break_escape(t: Tokenizer) -> bool:
    if t.current != "\\" or t.peek() != LINE_ENDING:
        return False
    t.token(TokenType.HARD_BREAK_ESCAPE)
    return True
