"""Media resolution: turning matched labels into links and images.

Runs after the whole text scope is tokenized. Each matched label becomes

    Link|Image
      Label
        LabelLink|LabelImage
        LabelText (when not empty)
        LabelEnd
      Resource|Reference (when present)

and every label start that never matched becomes plain data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.edit_map import EditMap
from huellas.tokens import Event, EventKind, TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def resolve_media(t: Tokenizer) -> None:
    events = t.events
    edits = EditMap()

    loose = t.label_starts_loose + t.label_starts
    t.label_starts_loose = []
    t.label_starts = []
    media = t.media
    t.media = []

    for start in loose:
        enter_index, exit_index = start.start
        edits.add(
            enter_index,
            exit_index - enter_index + 1,
            [
                Event(EventKind.ENTER, TokenType.DATA, events[enter_index].point),
                Event(EventKind.EXIT, TokenType.DATA, events[exit_index].point),
            ],
        )

    for item in media:
        group_enter_index = item.start[0]
        group_point = events[group_enter_index].point
        group = TokenType.LINK if item.kind is TokenType.LABEL_LINK else TokenType.IMAGE
        text_enter_index = item.start[1] + 1
        text_exit_index = item.end[0]
        label_exit_index = item.end[0] + 3
        group_end_index = item.end[1]

        edits.add(
            group_enter_index,
            0,
            [
                Event(EventKind.ENTER, group, group_point),
                Event(EventKind.ENTER, TokenType.LABEL, group_point),
            ],
        )
        if text_enter_index != text_exit_index:
            # Before anything an inner image or a loose start puts at the same index
            edits.add_before(
                text_enter_index,
                0,
                [Event(EventKind.ENTER, TokenType.LABEL_TEXT, events[text_enter_index].point)],
            )
            edits.add(
                text_exit_index,
                0,
                [Event(EventKind.EXIT, TokenType.LABEL_TEXT, events[text_exit_index].point)],
            )
        edits.add(
            label_exit_index + 1,
            0,
            [Event(EventKind.EXIT, TokenType.LABEL, events[label_exit_index].point)],
        )
        edits.add(
            group_end_index + 1,
            0,
            [Event(EventKind.EXIT, group, events[group_end_index].point)],
        )

    t.events = edits.consume(events)
