"""Link reference definitions.

The table is filled while the document pass closes paragraphs and is
frozen before any text is tokenized, so a reference may come before or
after its definition. After freezing it is read-only.

Thread Safety:
    A frozen DefinitionTable is never mutated and safe to share.

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from huellas.errors import InvariantError
from huellas.tokens import Event, TokenType

_WHITESPACE_RUN = re.compile(r"[ \t\r\n]+")

_CONTAINER_PREFIXES = frozenset({TokenType.BLOCK_QUOTE_PREFIX, TokenType.LIST_ITEM_PREFIX})


def normalize_identifier(label: str) -> str:
    """Normalize a link label for matching.

    CommonMark: strip, collapse internal whitespace to a single space,
    and perform Unicode case folding.

    Example:
        >>> normalize_identifier("  Foo\\n  BAR ")
        'foo bar'
    """
    return _WHITESPACE_RUN.sub(" ", label).strip(" ").casefold()


@dataclass(frozen=True, slots=True)
class Definition:
    """A resolved definition.

    Attributes:
        identifier: Normalized label
        label: Label as written
        destination: Destination with escapes and references decoded
        title: Title with escapes and references decoded (None if absent)
    """

    identifier: str
    label: str
    destination: str
    title: str | None = None


class DefinitionTable(Mapping[str, Definition]):
    """Normalized identifier to Definition, single writer then frozen.

    The first definition of an identifier wins; later duplicates are kept
    out of the table (they still appear as Definition events).

    Usage:
            >>> table = DefinitionTable()
            >>> table.add(Definition("foo", "Foo", "/url"))
            True
            >>> table.freeze()
            >>> "foo" in table
            True

    """

    __slots__ = ("_entries", "_frozen")

    def __init__(self) -> None:
        self._entries: dict[str, Definition] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, definition: Definition) -> bool:
        """Record a definition; return False if the identifier was already taken.

        Raises:
            InvariantError: If the table is frozen.
        """
        if self._frozen:
            raise InvariantError(f"definition {definition.label!r} added after freeze")
        if definition.identifier in self._entries:
            return False
        self._entries[definition.identifier] = definition
        return True

    def freeze(self) -> None:
        self._frozen = True

    def lookup(self, label: str) -> Definition | None:
        """Find the definition for a label as written (normalized here)."""
        return self._entries.get(normalize_identifier(label))

    def __getitem__(self, identifier: str) -> Definition:
        return self._entries[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"DefinitionTable({len(self)} entries, {state})"

    def unused(self, events: Iterable[Event], source: str) -> list[Definition]:
        """Definitions no reference link or image resolved to.

        Args:
            events: Final event stream of the document
            source: Source text the events point into

        Returns:
            Unused definitions in definition order
        """
        used: set[str] = set()
        # One frame per open link or image: [label text, reference, has resource]
        frames: list[list] = []
        starts: dict[TokenType, list[int]] = {
            TokenType.LABEL_TEXT: [],
            TokenType.REFERENCE_STRING: [],
        }
        # Container prefixes met inside open links, as (start, end) offsets
        gaps: list[tuple[int, int]] = []
        gap_start = 0
        for event in events:
            name = event.name
            if name is TokenType.LINK or name is TokenType.IMAGE:
                if event.is_enter:
                    frames.append([None, None, False])
                else:
                    label, reference, resource = frames.pop()
                    if not resource:
                        used.add(normalize_identifier(reference or label or ""))
                    if not frames:
                        gaps.clear()
            elif not frames:
                continue
            elif name is TokenType.RESOURCE:
                frames[-1][2] = True
            elif name in _CONTAINER_PREFIXES:
                if event.is_enter:
                    gap_start = event.point.offset
                else:
                    gaps.append((gap_start, event.point.offset))
            elif name is TokenType.LABEL_TEXT or name is TokenType.REFERENCE_STRING:
                if event.is_enter:
                    starts[name].append(event.point.offset)
                else:
                    text = _text_between(source, starts[name].pop(), event.point.offset, gaps)
                    frames[-1][0 if name is TokenType.LABEL_TEXT else 1] = text
        return [d for d in self._entries.values() if d.identifier not in used]


def _text_between(source: str, start: int, end: int, gaps: list[tuple[int, int]]) -> str:
    """Source text from ``start`` to ``end`` with container prefixes cut out."""
    parts = []
    for gap_start, gap_end in gaps:
        if start <= gap_start and gap_end <= end:
            parts.append(source[start:gap_start])
            start = gap_end
    parts.append(source[start:end])
    return " ".join(parts)
