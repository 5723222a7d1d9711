"""Building blocks shared by several constructs.

Whitespace runs, link destinations, link labels and link titles appear in
both definitions (content) and resources/references (text). Each helper
is a construct-shaped function: it consumes and emits on success and
returns False when the caller should roll back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from huellas.charsets import ASCII_PUNCTUATION, LINE_ENDING, SPACE_OR_TAB
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


class DestinationNames(NamedTuple):
    destination: TokenType
    literal: TokenType
    literal_marker: TokenType
    raw: TokenType
    string: TokenType


class LabelNames(NamedTuple):
    label: TokenType
    marker: TokenType
    string: TokenType


class TitleNames(NamedTuple):
    title: TokenType
    marker: TokenType
    string: TokenType


def count_space_or_tab(t: Tokenizer, ahead: int = 0) -> int:
    """Width of the whitespace run starting ``ahead`` codes from the current one."""
    return t.space_run(ahead)


def space_or_tab(
    t: Tokenizer,
    minimum: int = 1,
    maximum: int | None = None,
    name: TokenType = TokenType.SPACE_OR_TAB,
) -> bool:
    """Consume ``minimum`` to ``maximum`` columns of spaces and tabs as one token.

    Succeeds without emitting anything when ``minimum`` is 0 and there is
    no whitespace.
    """
    size = count_space_or_tab(t)
    if maximum is not None:
        size = min(size, maximum)
    if size < minimum:
        return False
    if size:
        t.token(name, size)
    return True


def space_or_tab_eol(t: Tokenizer) -> bool:
    """Whitespace with at most one line ending in it; at least something is required."""
    start = t.index
    space_or_tab(t, 0)
    if t.current == LINE_ENDING:
        t.token(TokenType.LINE_ENDING)
        space_or_tab(t, 0)
    return t.index > start


def rest_is_blank(t: Tokenizer) -> bool:
    """Whether only whitespace remains before the line ending."""
    return t.peek(count_space_or_tab(t)) in (LINE_ENDING, None)


def destination(t: Tokenizer, names: DestinationNames) -> bool:
    """Link destination: ``<literal>`` or a raw run with balanced parentheses."""
    if t.current == "<":
        return _destination_literal(t, names)
    return _destination_raw(t, names)


def _destination_literal(t: Tokenizer, names: DestinationNames) -> bool:
    t.enter(names.destination)
    t.enter(names.literal)
    t.token(names.literal_marker)
    size_max = t.config.destination_size_max
    size = 0
    opened = False
    while True:
        code = t.current
        if code == ">":
            break
        if code is None or code == LINE_ENDING or code == "<":
            return False
        if not opened:
            t.enter(names.string)
            t.enter(TokenType.CHUNK_STRING)
            opened = True
        step = 2 if code == "\\" and t.peek() in ("<", ">", "\\") else 1
        for _ in range(step):
            t.consume()
        size += step
        if size_max is not None and size > size_max:
            return False
    if opened:
        t.exit(TokenType.CHUNK_STRING)
        t.exit(names.string)
    t.token(names.literal_marker)
    t.exit(names.literal)
    t.exit(names.destination)
    return True


def _is_ascii_control(code: str | None) -> bool:
    return code is not None and len(code) == 1 and (ord(code) < 0x20 or ord(code) == 0x7F)


def _destination_raw(t: Tokenizer, names: DestinationNames) -> bool:
    code = t.current
    if code is None or code == ")" or code in SPACE_OR_TAB or code == LINE_ENDING:
        return False
    if _is_ascii_control(code):
        return False

    balance_max = t.config.destination_balance_max
    size_max = t.config.destination_size_max
    t.enter(names.destination)
    t.enter(names.raw)
    t.enter(names.string)
    t.enter(TokenType.CHUNK_STRING)
    balance = 0
    size = 0
    while True:
        code = t.current
        if code == "(":
            if balance >= balance_max:
                return False
            balance += 1
        elif code == ")":
            if balance == 0:
                break
            balance -= 1
        elif code is None or code == LINE_ENDING or code in SPACE_OR_TAB or _is_ascii_control(code):
            if balance:
                return False
            break
        elif code == "\\" and t.peek() in ASCII_PUNCTUATION:
            t.consume()
            size += 1
        t.consume()
        size += 1
        if size_max is not None and size > size_max:
            return False
    t.exit(TokenType.CHUNK_STRING)
    t.exit(names.string)
    t.exit(names.raw)
    t.exit(names.destination)
    return True


def label(t: Tokenizer, names: LabelNames) -> bool:
    """Link label: ``[`` text ``]`` with at least one non-whitespace character.

    The label may span lines but holds no unescaped brackets and at most
    ``config.label_size_max`` characters.
    """
    if t.current != "[":
        return False
    size_max = t.config.label_size_max
    t.enter(names.label)
    t.token(names.marker)
    size = 0
    seen = False
    opened = False
    while True:
        code = t.current
        if code == "]":
            break
        if code is None or code == "[" or size > size_max:
            return False
        if not opened:
            t.enter(names.string)
            t.enter(TokenType.CHUNK_STRING)
            opened = True
        if code not in SPACE_OR_TAB and code != LINE_ENDING:
            seen = True
        if code == "\\" and t.peek() in ("[", "\\", "]"):
            t.consume()
            size += 1
        t.consume()
        size += 1
    if not seen or size > size_max:
        return False
    t.exit(TokenType.CHUNK_STRING)
    t.exit(names.string)
    t.token(names.marker)
    t.exit(names.label)
    return True


def title(t: Tokenizer, names: TitleNames) -> bool:
    """Link title in double quotes, single quotes or parentheses."""
    opening = t.current
    if opening not in ('"', "'", "("):
        return False
    closing = ")" if opening == "(" else opening
    t.enter(names.title)
    t.token(names.marker)
    opened = False
    while True:
        code = t.current
        if code == closing:
            break
        if code is None or (opening == "(" and code == "("):
            return False
        if not opened:
            t.enter(names.string)
            t.enter(TokenType.CHUNK_STRING)
            opened = True
        if code == "\\" and t.peek() in (closing, "\\"):
            t.consume()
        t.consume()
    if opened:
        t.exit(TokenType.CHUNK_STRING)
        t.exit(names.string)
    t.token(names.marker)
    t.exit(names.title)
    return True
