"""Batched edits to an event list.

Resolvers decide on many insertions and removals while walking events by
their original indices. Recording the edits and applying them all at once
keeps those indices valid until the end.
"""

from __future__ import annotations

from collections.abc import Sequence

from huellas.errors import InvariantError
from huellas.tokens import Event


class EditMap:
    """Pending splices keyed by original event index.

    Usage:
            >>> edits = EditMap()
            >>> edits.add(2, 1, [replacement])
            >>> events = edits.consume(events)

    """

    __slots__ = ("_map", "_consumed")

    def __init__(self) -> None:
        self._map: dict[int, tuple[int, list[Event]]] = {}
        self._consumed = False

    def add(self, index: int, remove: int, events: Sequence[Event]) -> None:
        """Remove ``remove`` events at ``index`` and insert ``events`` there.

        Edits at the same index accumulate; later insertions go after
        earlier ones.
        """
        self._add(index, remove, list(events), before=False)

    def add_before(self, index: int, remove: int, events: Sequence[Event]) -> None:
        """Like add, but insertions go before earlier ones at the same index."""
        self._add(index, remove, list(events), before=True)

    def _add(self, index: int, remove: int, events: list[Event], *, before: bool) -> None:
        if self._consumed:
            raise InvariantError("cannot add to an edit map after consuming it")
        if index in self._map:
            removed, existing = self._map[index]
            events = events + existing if before else existing + events
            remove += removed
        self._map[index] = (remove, events)

    def __bool__(self) -> bool:
        return bool(self._map)

    def consume(self, events: Sequence[Event]) -> list[Event]:
        """Apply every edit and return the new event list."""
        if self._consumed:
            raise InvariantError("cannot consume an edit map twice")
        self._consumed = True

        result: list[Event] = []
        start = 0
        for index in sorted(self._map):
            remove, add = self._map[index]
            if start < index:
                result.extend(events[start:index])
            result.extend(add)
            start = max(start, index + remove)
        result.extend(events[start:])
        return result
