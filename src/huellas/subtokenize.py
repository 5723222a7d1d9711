"""Subtokenization: re-tokenizing chunk spans under their own content type.

The document pass leaves paragraph content, heading text, link labels,
destinations and titles as opaque chunks (``ChunkContent``,
``ChunkText``, ``ChunkString``). Expanding a chunk runs a fresh
tokenizer over exactly the codes the chunk covers and splices the result
in place of the chunk.

Events nested inside a chunk belong to the enclosing flow: container
prefixes and stripped indentation on continuation lines. Their codes are
left out of the child tokenizer's view, and the events themselves are
merged back by position: a child event at or before the start of such a
group goes before it, everything later after it. Points are absolute,
so nothing after the chunk moves.

Expansion is depth first, and the chunk's own Enter and Exit are
dropped, so a fully expanded stream contains no chunks and expanding it
again changes nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from huellas.errors import InvariantError
from huellas.tokenizer import Tokenizer

if TYPE_CHECKING:
    from huellas.config import ParseConfig
    from huellas.definitions import DefinitionTable
    from huellas.feed import Feed
    from huellas.location import Point
    from huellas.tokens import Event


class Gap(NamedTuple):
    """A group of foreign events inside a chunk and the source it covers."""

    start: Point
    end: Point
    events: list[Event]


def find_gaps(events: list[Event], enter_index: int, exit_index: int) -> list[Gap]:
    """Balanced groups of events strictly between a chunk's Enter and Exit.

    Raises:
        InvariantError: If the events inside the chunk do not nest.
    """
    gaps: list[Gap] = []
    depth = 0
    group_start = enter_index + 1
    for index in range(enter_index + 1, exit_index):
        event = events[index]
        if depth == 0:
            group_start = index
        depth += 1 if event.is_enter else -1
        if depth < 0:
            raise InvariantError(f"unbalanced {event.name.name} inside a chunk", event.point)
        if depth == 0:
            group = events[group_start : index + 1]
            gaps.append(Gap(events[group_start].point, event.point, group))
    if depth:
        raise InvariantError("unclosed event inside a chunk", events[exit_index].point)
    return gaps


def exit_index_of(events: list[Event], enter_index: int) -> int:
    """Index of the Exit matching the Enter at ``enter_index``.

    Raises:
        InvariantError: If the Enter is never closed.
    """
    depth = 0
    for index in range(enter_index, len(events)):
        depth += 1 if events[index].is_enter else -1
        if depth == 0:
            return index
    enter = events[enter_index]
    raise InvariantError(f"{enter.name.name} is never closed", enter.point)


def subtokenize(
    feed: Feed,
    events: list[Event],
    enter_index: int,
    exit_index: int,
    config: ParseConfig,
    definitions: DefinitionTable | None = None,
) -> tuple[list[Event], Tokenizer]:
    """Tokenize one chunk.

    Args:
        feed: Feed the events point into
        events: Event list holding the chunk
        enter_index: Index of the chunk's Enter event
        exit_index: Index of the chunk's Exit event
        config: Active parse configuration
        definitions: Definition table for text chunks

    Returns:
        The events that replace the chunk (child events merged with the
        chunk's foreign events) and the child tokenizer, whose
        ``found_definitions`` hold what a content chunk defined.

    Raises:
        InvariantError: If the span is not a chunk or the child does not
            consume exactly the chunk's codes.
    """
    enter = events[enter_index]
    exit_event = events[exit_index]
    content_type = enter.name.content_type
    if content_type is None or exit_event.name is not enter.name or exit_event.is_enter:
        raise InvariantError(f"{enter.name.name} span is not a chunk", enter.point)

    gaps = find_gaps(events, enter_index, exit_index)
    indices: list[int] = []
    cursor = feed.index_of(enter.point)
    for gap in gaps:
        indices.extend(range(cursor, feed.index_of(gap.start)))
        cursor = feed.index_of(gap.end)
    indices.extend(range(cursor, feed.index_of(exit_event.point)))

    child = Tokenizer(feed, content_type, config, indices, definitions)
    child_events = child.run()

    merged: list[Event] = []
    pending = iter(gaps)
    gap = next(pending, None)
    for event in child_events:
        while gap is not None and event.point > gap.start:
            merged.extend(gap.events)
            gap = next(pending, None)
        merged.append(event)
    while gap is not None:
        merged.extend(gap.events)
        gap = next(pending, None)
    return merged, child


def expand(
    feed: Feed,
    events: list[Event],
    config: ParseConfig,
    definitions: DefinitionTable | None = None,
) -> list[Event]:
    """Replace every chunk in ``events`` with its tokenized content, depth first."""
    result: list[Event] = []
    index = 0
    while index < len(events):
        event = events[index]
        if event.is_enter and event.name.is_chunk:
            exit_index = exit_index_of(events, index)
            replacement, _ = subtokenize(feed, events, index, exit_index, config, definitions)
            result.extend(expand(feed, replacement, config, definitions))
            index = exit_index + 1
        else:
            result.append(event)
            index += 1
    return result


__all__ = ["Gap", "exit_index_of", "expand", "find_gaps", "subtokenize"]
