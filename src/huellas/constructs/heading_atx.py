"""ATX headings: one to six ``#``, then text, then an optional closing run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING, SPACE_OR_TAB
from huellas.constructs.partial import space_or_tab
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

HEADING_ATX_SIZE_MAX = 6


def heading_atx(t: Tokenizer) -> bool:
    space_or_tab(t, 0, 3)
    size = 0
    while t.peek(size) == "#":
        size += 1
    if not 1 <= size <= HEADING_ATX_SIZE_MAX:
        return False
    after = t.peek(size)
    if after is not None and after != LINE_ENDING and after not in SPACE_OR_TAB:
        return False

    t.enter(TokenType.HEADING_ATX)
    t.token(TokenType.HEADING_ATX_SEQUENCE, size)
    space_or_tab(t, 0)
    start = t.index
    line_end = start
    while t.code_at(line_end) is not None and t.code_at(line_end) != LINE_ENDING:
        line_end += 1
    content_end = _trim_end(t, start, line_end)

    # A closing run counts only after whitespace (or right after the opening run)
    closing = content_end
    while closing > start and t.code_at(closing - 1) == "#":
        closing -= 1
    if closing < content_end and (closing == start or t.code_at(closing - 1) in SPACE_OR_TAB):
        text_end = _trim_end(t, start, closing)
    else:
        closing = text_end = content_end

    if text_end > start:
        t.enter(TokenType.HEADING_ATX_TEXT)
        t.enter(TokenType.CHUNK_TEXT)
        while t.index < text_end:
            t.consume()
        t.exit(TokenType.CHUNK_TEXT)
        t.exit(TokenType.HEADING_ATX_TEXT)
    space_or_tab(t, 0)
    if closing < content_end:
        t.token(TokenType.HEADING_ATX_SEQUENCE, content_end - closing)
        space_or_tab(t, 0)
    t.exit(TokenType.HEADING_ATX)
    return True


def _trim_end(t: Tokenizer, start: int, end: int) -> int:
    while end > start and t.code_at(end - 1) in SPACE_OR_TAB:
        end -= 1
    return end
