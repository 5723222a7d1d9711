"""Attention resolution: turning ``*`` and ``_`` runs into emphasis and strong.

CommonMark delimiter algorithm:
- A run can open when it is left-flanking and close when it is
  right-flanking; ``_`` additionally may not open or close intraword.
- Closers are processed left to right; each looks back for the nearest
  opener with the same marker at the same nesting depth.
- Rule of 3: if either run can both open and close, the closer's size is
  not a multiple of 3, and the sizes sum to a multiple of 3, they cannot
  pair.
- Two markers are used when both runs have at least two (strong),
  otherwise one (emphasis).
- Openers between a matched pair can no longer open.
- Unmatched markers become data.

Nesting depth ("balance") keeps emphasis from crossing link boundaries,
which is why media resolution runs first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.charsets import CharacterKind, classify_character
from huellas.edit_map import EditMap
from huellas.location import Point
from huellas.tokens import Event, EventKind, TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


@dataclass(slots=True)
class Sequence:
    """An attention run awaiting resolution.

    Attributes:
        marker: ``*`` or ``_``
        balance: Nesting depth of the run's Enter event
        event_index: Index of the run's Enter event
        start: Point of the first unused marker
        end: Point after the last unused marker
        size: Markers left
        open: Whether the run can open
        close: Whether the run can close
    """

    marker: str
    balance: int
    event_index: int
    start: Point
    end: Point
    size: int
    open: bool
    close: bool


def _shift(point: Point, columns: int) -> Point:
    return Point(point.line, point.column + columns, point.offset + columns)


def collect_sequences(t: Tokenizer) -> list[Sequence]:
    """Find every attention run with its flanking classification."""
    feed = t.feed
    sequences: list[Sequence] = []
    balance = 0
    events = t.events
    for index, event in enumerate(events):
        if event.kind is not EventKind.ENTER:
            balance -= 1
            continue
        balance += 1
        if event.name is not TokenType.ATTENTION_SEQUENCE:
            continue

        exit_event = events[index + 1]
        start_index = feed.index_of(event.point)
        end_index = feed.index_of(exit_event.point)
        marker = feed.codes[start_index]
        before = classify_character(feed.code(start_index - 1) if start_index else None)
        after = classify_character(feed.code(end_index))

        open_ = after is CharacterKind.OTHER or (
            after is CharacterKind.PUNCTUATION and before is not CharacterKind.OTHER
        )
        close = before is CharacterKind.OTHER or (
            before is CharacterKind.PUNCTUATION and after is not CharacterKind.OTHER
        )
        if marker == "_":
            open_, close = (
                open_ and (before is not CharacterKind.OTHER or not close),
                close and (after is not CharacterKind.OTHER or not open_),
            )

        sequences.append(
            Sequence(
                marker=marker,
                balance=balance,
                event_index=index,
                start=event.point,
                end=exit_event.point,
                size=exit_event.point.offset - event.point.offset,
                open=open_,
                close=close,
            )
        )
    return sequences


def resolve_attention(t: Tokenizer) -> None:
    events = t.events
    sequences = collect_sequences(t)
    edits = EditMap()

    close = 0
    while close < len(sequences):
        closer = sequences[close]
        next_index = close + 1

        if closer.close:
            open_ = close
            while open_ > 0:
                open_ -= 1
                opener = sequences[open_]
                if not (
                    opener.open
                    and opener.marker == closer.marker
                    and opener.balance == closer.balance
                ):
                    continue
                if (
                    (opener.close or closer.open)
                    and closer.size % 3 != 0
                    and (opener.size + closer.size) % 3 == 0
                ):
                    continue

                take = 2 if opener.size > 1 and closer.size > 1 else 1
                group, sequence_name, text_name = (
                    (TokenType.EMPHASIS, TokenType.EMPHASIS_SEQUENCE, TokenType.EMPHASIS_TEXT)
                    if take == 1
                    else (TokenType.STRONG, TokenType.STRONG_SEQUENCE, TokenType.STRONG_TEXT)
                )

                for between in sequences[open_ + 1 : close]:
                    between.open = False

                close_enter = closer.start
                closer.size -= take
                closer.start = _shift(closer.start, take)
                close_exit = closer.start
                next_index -= 1
                if closer.size == 0:
                    sequences.pop(close)
                    edits.add(closer.event_index, 2, [])
                else:
                    events[closer.event_index] = Event(
                        EventKind.ENTER, TokenType.ATTENTION_SEQUENCE, close_exit
                    )

                open_exit = opener.end
                opener.size -= take
                opener.end = _shift(opener.end, -take)
                open_enter = opener.end
                if opener.size == 0:
                    sequences.pop(open_)
                    edits.add(opener.event_index, 2, [])
                    next_index -= 1
                else:
                    events[opener.event_index + 1] = Event(
                        EventKind.EXIT, TokenType.ATTENTION_SEQUENCE, open_enter
                    )

                edits.add_before(
                    opener.event_index + 2,
                    0,
                    [
                        Event(EventKind.ENTER, group, open_enter),
                        Event(EventKind.ENTER, sequence_name, open_enter),
                        Event(EventKind.EXIT, sequence_name, open_exit),
                        Event(EventKind.ENTER, text_name, open_exit),
                    ],
                )
                edits.add(
                    closer.event_index,
                    0,
                    [
                        Event(EventKind.EXIT, text_name, close_enter),
                        Event(EventKind.ENTER, sequence_name, close_enter),
                        Event(EventKind.EXIT, sequence_name, close_exit),
                        Event(EventKind.EXIT, group, close_exit),
                    ],
                )
                break

        close = next_index

    for sequence in sequences:
        events[sequence.event_index] = events[sequence.event_index].renamed(TokenType.DATA)
        events[sequence.event_index + 1] = events[sequence.event_index + 1].renamed(TokenType.DATA)

    t.events = edits.consume(events)
