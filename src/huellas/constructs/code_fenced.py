"""Fenced code: a run of three or more backticks or tildes, then raw lines.

Fenced code is concrete. Once the opening fence is in, every line that
its containers continue belongs to it until a closing fence of the
same character, at least as long, with nothing but whitespace after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.charsets import FENCE_CHARS, LINE_ENDING, SPACE_OR_TAB
from huellas.constructs.partial import count_space_or_tab, space_or_tab
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

FENCE_SIZE_MIN = 3


@dataclass(frozen=True, slots=True)
class Fence:
    """Opening fence of an open code block.

    Attributes:
        marker: ``"`"`` or ``"~"``
        size: Length of the opening run
        indent: Columns of indentation before the opening run, stripped
            from each content line
    """

    marker: str
    size: int
    indent: int


def _run(t: Tokenizer, marker: str) -> int:
    size = 0
    while t.peek(size) == marker:
        size += 1
    return size


def _rest_has_backtick(t: Tokenizer) -> bool:
    ahead = 0
    while True:
        code = t.peek(ahead)
        if code is None or code == LINE_ENDING:
            return False
        if code == "`":
            return True
        ahead += 1


def _string(t: Tokenizer, name: TokenType, stop_at_whitespace: bool) -> None:
    end = t.index
    while True:
        code = t.code_at(end)
        if code is None or code == LINE_ENDING or (stop_at_whitespace and code in SPACE_OR_TAB):
            break
        end += 1
    if not stop_at_whitespace:
        while t.code_at(end - 1) in SPACE_OR_TAB:
            end -= 1
    t.enter(name)
    t.enter(TokenType.CHUNK_STRING)
    while t.index < end:
        t.consume()
    t.exit(TokenType.CHUNK_STRING)
    t.exit(name)


def code_fenced(t: Tokenizer) -> bool:
    """Opening fence with its info string and meta; stores the Fence in ``t.scratch``."""
    indent = count_space_or_tab(t)
    if indent > 3:
        return False
    space_or_tab(t, 0)
    marker = t.current
    if marker is None or marker not in FENCE_CHARS:
        return False
    size = _run(t, marker)
    if size < FENCE_SIZE_MIN:
        return False
    t.enter(TokenType.CODE_FENCED_FENCE)
    t.token(TokenType.CODE_FENCED_FENCE_SEQUENCE, size)
    if marker == "`" and _rest_has_backtick(t):
        return False
    space_or_tab(t, 0)
    if t.current is not None and t.current != LINE_ENDING:
        _string(t, TokenType.CODE_FENCED_FENCE_INFO, stop_at_whitespace=True)
        space_or_tab(t, 0)
        if t.current is not None and t.current != LINE_ENDING:
            _string(t, TokenType.CODE_FENCED_FENCE_META, stop_at_whitespace=False)
            space_or_tab(t, 0)
    t.exit(TokenType.CODE_FENCED_FENCE)
    t.scratch = Fence(marker, size, indent)
    return True


def code_fenced_close(t: Tokenizer, fence: Fence) -> bool:
    if count_space_or_tab(t) > 3:
        return False
    space_or_tab(t, 0)
    size = _run(t, fence.marker)
    if size < fence.size:
        return False
    t.enter(TokenType.CODE_FENCED_FENCE)
    t.token(TokenType.CODE_FENCED_FENCE_SEQUENCE, size)
    space_or_tab(t, 0)
    if t.current is not None and t.current != LINE_ENDING:
        return False
    t.exit(TokenType.CODE_FENCED_FENCE)
    return True


def code_fenced_line(t: Tokenizer, fence: Fence) -> bool:
    """A content line, minus up to the opening fence's indentation."""
    space_or_tab(t, 0, fence.indent)
    code_flow_chunk(t)
    return True


def code_flow_chunk(t: Tokenizer) -> None:
    """The rest of the line as raw code, if anything is left."""
    if t.current is None or t.current == LINE_ENDING:
        return
    t.enter(TokenType.CODE_FLOW_CHUNK)
    while t.current is not None and t.current != LINE_ENDING:
        t.consume()
    t.exit(TokenType.CODE_FLOW_CHUNK)
