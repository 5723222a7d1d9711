"""Code spans: a backtick run closed by a run of the same length."""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def _run(t: Tokenizer, ahead: int) -> int:
    size = 0
    while t.peek(ahead + size) == "`":
        size += 1
    return size


def code_text(t: Tokenizer) -> bool:
    if t.current != "`":
        return False
    # Inside a backtick run only its first backtick can open, unless the one before was escaped
    if t.previous == "`" and not (t.events and t.events[-1].name is TokenType.CHARACTER_ESCAPE):
        return False

    size = _run(t, 0)
    ahead = size
    while True:
        code = t.peek(ahead)
        if code is None:
            return False
        if code == "`":
            closing = _run(t, ahead)
            if closing == size:
                break
            ahead += closing
        else:
            ahead += 1
    content_end = t.index + ahead

    t.enter(TokenType.CODE_TEXT)
    t.token(TokenType.CODE_TEXT_SEQUENCE, size)
    while t.index < content_end:
        if t.current == LINE_ENDING:
            t.token(TokenType.LINE_ENDING)
            continue
        t.enter(TokenType.CODE_TEXT_DATA)
        while t.index < content_end and t.current != LINE_ENDING:
            t.consume()
        t.exit(TokenType.CODE_TEXT_DATA)
    t.token(TokenType.CODE_TEXT_SEQUENCE, size)
    t.exit(TokenType.CODE_TEXT)
    return True
