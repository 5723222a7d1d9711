"""Data merging: adjacent data spans become one."""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.tokens import Event, EventKind, TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def resolve_data(t: Tokenizer) -> None:
    events = t.events
    merged: list[Event] = []
    index = 0
    while index < len(events):
        event = events[index]
        if (
            event.kind is EventKind.EXIT
            and event.name is TokenType.DATA
            and index + 1 < len(events)
            and events[index + 1].kind is EventKind.ENTER
            and events[index + 1].name is TokenType.DATA
            and events[index + 1].point == event.point
        ):
            index += 2
            continue
        merged.append(event)
        index += 1
    t.events = merged
