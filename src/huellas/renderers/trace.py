"""Trace renderer: the event stream as an indented outline.

Each token is one line with its start and end points. Tokens with no
children also show the source text they cover, so a trace reads as the
document's token tree with its leaves spelled out:

    PARAGRAPH 1:1-1:4
      EMPHASIS 1:1-1:4
        EMPHASIS_SEQUENCE 1:1-1:2 '*'
        EMPHASIS_TEXT 1:2-1:3
          DATA 1:2-1:3 'a'
        EMPHASIS_SEQUENCE 1:3-1:4 '*'

Used for debugging and in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.errors import InvariantError
from huellas.slice import Position, Slice

if TYPE_CHECKING:
    from huellas.parser import ParseResult
    from huellas.tokens import Event


class TraceRenderer:
    """Render events as an indented enter/exit outline.

    Usage:
            >>> from huellas import parse
            >>> print(TraceRenderer().render(parse("a")))
            PARAGRAPH 1:1-1:2
              DATA 1:1-1:2 'a'

    Thread Safety:
        Stateless apart from options; safe for concurrent use.

    """

    __slots__ = ("_indent", "_show_text")

    def __init__(self, indent: int = 2, *, show_text: bool = True) -> None:
        self._indent = indent
        self._show_text = show_text

    def render(self, result: ParseResult) -> str:
        return self.render_events(result.events, result.source)

    def render_events(self, events: tuple[Event, ...] | list[Event], source: str) -> str:
        """Render a raw event sequence against its source.

        Raises:
            InvariantError: If an Exit does not close the innermost Enter.
        """
        lines: list[str] = []
        # Per open token: index of its outline line, index of its Enter event
        stack: list[tuple[int, int]] = []
        for index, event in enumerate(events):
            if event.is_enter:
                stack.append((len(lines), index))
                lines.append("")
                continue
            if not stack:
                raise InvariantError(f"exit of {event.name.name} with nothing open", event.point)
            line_index, enter_index = stack.pop()
            enter = events[enter_index]
            if enter.name is not event.name:
                raise InvariantError(
                    f"exit of {event.name.name} while {enter.name.name} is open", event.point
                )
            pad = " " * (self._indent * len(stack))
            text = f"{pad}{event.name.name} {enter.point}-{event.point}"
            if self._show_text and enter_index == index - 1:
                value = Slice.from_position(source, Position(enter.point, event.point))
                text += f" {value.serialize()!r}"
            lines[line_index] = text
        if stack:
            enter = events[stack[-1][1]]
            raise InvariantError(f"{enter.name.name} is never closed", enter.point)
        return "\n".join(lines)


def render_trace(result: ParseResult) -> str:
    """Shorthand for ``TraceRenderer().render(result)``."""
    return TraceRenderer().render(result)


__all__ = ["TraceRenderer", "render_trace"]
