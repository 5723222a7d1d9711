"""Recover source text from event spans.

Events only carry points. Position pairs an Enter and Exit point, and
Slice turns a position back into text, rendering the unconsumed columns
of a split tab as spaces.

Also decodes the string content of destinations, titles and info strings:
backslash escapes and character references.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from html.entities import html5

from huellas.errors import InvariantError
from huellas.feed import TAB_SIZE
from huellas.location import Point
from huellas.tokens import Event, EventKind

# CommonMark: ASCII punctuation that can be backslash-escaped, or a character reference
_STRING_PATTERN = re.compile(
    r"\\([!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])"
    r"|&(?:#[xX]([0-9a-fA-F]{1,6})|#([0-9]{1,7})|([a-zA-Z][a-zA-Z0-9]{0,31}));"
)


@dataclass(frozen=True, slots=True)
class Position:
    """Start and end points of a span."""

    start: Point
    end: Point

    @classmethod
    def from_exit_event(cls, events: Sequence[Event], index: int) -> Position:
        """Position of the token whose Exit event is at ``index``.

        Raises:
            InvariantError: If ``index`` is not an Exit or has no Enter.
        """
        exit_event = events[index]
        if exit_event.kind is not EventKind.EXIT:
            raise InvariantError("expected an exit event", exit_event.point)
        depth = 1
        cursor = index
        while cursor > 0:
            cursor -= 1
            event = events[cursor]
            if event.name is exit_event.name:
                depth += -1 if event.kind is EventKind.ENTER else 1
                if depth == 0:
                    return cls(event.point, exit_event.point)
        raise InvariantError(f"no enter for {exit_event.name.name}", exit_event.point)

    def to_indices(self) -> tuple[int, int]:
        return self.start.offset, self.end.offset


@dataclass(frozen=True, slots=True)
class Slice:
    """A run of source text plus virtual spaces on either side.

    Attributes:
        text: Source text between the two points
        before: Spaces standing for the rest of a tab the span starts inside
        after: Spaces standing for the part of a tab the span ends inside
    """

    text: str
    before: int = 0
    after: int = 0

    @classmethod
    def from_position(cls, source: str, position: Position) -> Slice:
        start, end = position.start, position.end
        before = 0
        start_offset = start.offset
        if start.vs:
            tab_column = start.column - start.vs
            before = TAB_SIZE - ((tab_column - 1) % TAB_SIZE) - start.vs
            start_offset += 1
        text = source[start_offset : end.offset] if end.offset > start_offset else ""
        return cls(text, before, end.vs)

    @classmethod
    def from_exit_event(cls, source: str, events: Sequence[Event], index: int) -> Slice:
        return cls.from_position(source, Position.from_exit_event(events, index))

    def __len__(self) -> int:
        return self.before + len(self.text) + self.after

    def as_str(self) -> str:
        """Source text only, without virtual spaces."""
        return self.text

    def serialize(self) -> str:
        return " " * self.before + self.text + " " * self.after


def decode_character_reference(value: str, marker: str = "&") -> str | None:
    """Decode a character reference body.

    Args:
        value: Name, decimal digits or hex digits (without ``&``, ``#``, ``x`` or ``;``)
        marker: ``"&"`` for named, ``"#"`` for decimal, ``"x"`` for hexadecimal

    Returns:
        The decoded character(s), or None for an unknown name.

    Example:
        >>> decode_character_reference("amp")
        '&'
        >>> decode_character_reference("0", "#")
        '\\ufffd'
    """
    if marker == "&":
        return html5.get(value + ";")
    codepoint = int(value, 16 if marker == "x" else 10)
    if codepoint == 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return "\ufffd"
    return chr(codepoint)


def _decode_match(match: re.Match[str]) -> str:
    escaped, hexadecimal, decimal, name = match.groups()
    if escaped is not None:
        return escaped
    if hexadecimal is not None:
        return decode_character_reference(hexadecimal, "x") or match.group(0)
    if decimal is not None:
        return decode_character_reference(decimal, "#") or match.group(0)
    return decode_character_reference(name) or match.group(0)


def decode_string(text: str) -> str:
    """Resolve backslash escapes and character references in string content.

    Example:
        >>> decode_string(r"/u\\*&amp;")
        '/u*&'
    """
    if "\\" not in text and "&" not in text:
        return text
    return _STRING_PATTERN.sub(_decode_match, text)
