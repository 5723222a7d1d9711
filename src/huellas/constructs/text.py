"""Text and string content: the inline tokenizing loops.

Both loops dispatch on the current code to the constructs that can start
there, in declaration order, and fall back to data. Text also knows
line endings and trailing whitespace (hard breaks); string is the small
subset used inside destinations, titles, labels and info strings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING, SPACE_OR_TAB
from huellas.constructs.partial import count_space_or_tab
from huellas.tokens import ContentType, TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def tokenize_text(t: Tokenizer) -> None:
    _inline(t, ContentType.TEXT)
    t.register_resolver("data")


def tokenize_string(t: Tokenizer) -> None:
    _inline(t, ContentType.STRING)
    t.register_resolver("data")


def _inline(t: Tokenizer, content_type: ContentType) -> None:
    table = t.table
    markers = table.markers(content_type)
    while not t.at_end:
        code = t.current
        if code == LINE_ENDING:
            t.token(TokenType.LINE_ENDING)
            continue
        if code in SPACE_OR_TAB and _trailing_whitespace(t, content_type):
            continue
        if code in markers and any(
            t.attempt(construct.tokenize) for construct in table.starting_with(content_type, code)
        ):
            continue
        _data(t, markers)


def _trailing_whitespace(t: Tokenizer, content_type: ContentType) -> bool:
    """Whitespace right before a line ending or the end of the content.

    Two or more spaces before a line ending in text make a hard break;
    anything else is plain whitespace that renders as nothing.
    """
    size = count_space_or_tab(t)
    after = t.peek(size)
    if after is not None and after != LINE_ENDING:
        return False
    name = TokenType.SPACE_OR_TAB
    if (
        content_type is ContentType.TEXT
        and after == LINE_ENDING
        and size >= 2
        and all(t.peek(i) == " " for i in range(size))
    ):
        name = TokenType.HARD_BREAK_TRAILING
    t.token(name, size)
    return True


def _data(t: Tokenizer, markers: frozenset[str]) -> None:
    t.enter(TokenType.DATA)
    t.consume()
    while True:
        code = t.current
        if code is None or code == LINE_ENDING or code in markers:
            break
        if code in SPACE_OR_TAB:
            size = count_space_or_tab(t)
            after = t.peek(size)
            if after is None or after == LINE_ENDING:
                break
            for _ in range(size):
                t.consume()
            continue
        t.consume()
    t.exit(TokenType.DATA)
