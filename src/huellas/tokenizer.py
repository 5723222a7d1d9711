"""Core tokenizer state machine.

A Tokenizer walks a run of feed codes for one content type and records
Enter/Exit events. Constructs are plain functions ``construct(t) -> bool``
that consume codes and emit events; a construct that cannot complete
returns False and the caller rolls everything back with ``attempt``.

Backtracking is a checkpoint ``(index, event count, open stack)``:
abandoning truncates the events and resets the index and stack,
committing simply keeps them.

A tokenizer can run over a gapped view of the feed: ``indices`` lists the
feed codes it may see, in order. Subtokenizers use this to skip container
prefixes inside a chunk while keeping every point absolute.

Thread Safety:
Tokenizer instances are single-use. Create one per scope.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from huellas.charsets import VIRTUAL_SPACE
from huellas.errors import InvariantError
from huellas.tokens import ContentType, Event, EventKind, TokenType

if TYPE_CHECKING:
    from huellas.config import ParseConfig
    from huellas.constructs import ConstructTable
    from huellas.definitions import Definition, DefinitionTable
    from huellas.feed import Feed
    from huellas.location import Point


class Checkpoint(NamedTuple):
    """Saved tokenizer position for backtracking."""

    index: int
    events: int
    stack: tuple[tuple[TokenType, int, Point], ...]


@dataclass(slots=True)
class LabelStart:
    """A provisional ``[`` or ``![`` that may open a link or image.

    Attributes:
        kind: TokenType.LABEL_LINK or TokenType.LABEL_IMAGE
        start: Event indices of the label start's Enter and Exit
        text_start: Tokenizer index right after the opener
        inactive: Set when an enclosing link already matched (links
            cannot contain links)
        balanced: Set when a label end already failed to close it
    """

    kind: TokenType
    start: tuple[int, int]
    text_start: int
    inactive: bool = False
    balanced: bool = False


@dataclass(frozen=True, slots=True)
class Media:
    """A matched label: label start events plus label end (and resource or reference) events."""

    kind: TokenType
    start: tuple[int, int]
    end: tuple[int, int]


class Tokenizer:
    """Event-producing state machine over a run of feed codes.

    Usage:
            >>> feed = Feed("*a*")
            >>> t = Tokenizer(feed, ContentType.TEXT, ParseConfig())
            >>> events = t.run()

    """

    __slots__ = (
        "feed",
        "content_type",
        "config",
        "table",
        "definitions",
        "indices",
        "index",
        "events",
        "stack",
        "resolvers",
        # Flow state
        "interrupt",
        "lazy",
        "scratch",
        # Content state
        "found_definitions",
        # Text state
        "label_starts",
        "label_starts_loose",
        "media",
        "_end",
        "_end_point",
        "_view",
    )

    def __init__(
        self,
        feed: Feed,
        content_type: ContentType,
        config: ParseConfig,
        indices: Sequence[int] | None = None,
        definitions: DefinitionTable | None = None,
    ) -> None:
        """Initialize tokenizer.

        Args:
            feed: Shared character feed of the document
            content_type: Which construct subset runs
            config: Active parse configuration
            indices: Feed codes to tokenize, in order (all codes if None)
            definitions: Definition table consulted by label ends
        """
        from huellas.constructs import ConstructTable

        self.feed = feed
        self.content_type = content_type
        self.config = config
        self.table: ConstructTable = ConstructTable.for_config(config)
        self.definitions = definitions
        self.indices: Sequence[int] = range(feed.end) if indices is None else indices
        self.index = 0
        self.events: list[Event] = []
        self.stack: list[tuple[TokenType, int, Point]] = []
        self.resolvers: list[str] = []

        self.interrupt = False
        self.lazy = False
        self.scratch: object = None

        self.found_definitions: list[Definition] = []

        self.label_starts: list[LabelStart] = []
        self.label_starts_loose: list[LabelStart] = []
        self.media: list[Media] = []

        self._end = len(self.indices)
        if self._end:
            self._end_point = feed.points[self.indices[-1] + 1]
        else:
            self._end_point = feed.points[feed.end]
        self._view: str | None = None

    # -- Reading -----------------------------------------------------------

    @property
    def current(self) -> str | None:
        """Code at the current position (None at the end)."""
        if self.index < self._end:
            return self.feed.codes[self.indices[self.index]]
        return None

    @property
    def previous(self) -> str | None:
        """Code before the current position (None at the start)."""
        if 0 < self.index <= self._end:
            return self.feed.codes[self.indices[self.index - 1]]
        return None

    def peek(self, ahead: int = 1) -> str | None:
        """Code ``ahead`` positions after the current one."""
        index = self.index + ahead
        if 0 <= index < self._end:
            return self.feed.codes[self.indices[index]]
        return None

    def space_run(self, ahead: int = 0) -> int:
        """Width of the space and tab run starting ``ahead`` positions on.

        Uses the feed's precomputed runs, so asking again at every
        container prefix on a line stays constant time. Where the view has
        a gap inside a run the codes are counted one at a time.
        """
        indices = self.indices
        runs = self.feed.space_runs
        size = 0
        while True:
            index = self.index + ahead + size
            if not 0 <= index < self._end:
                return size
            start = indices[index]
            run = min(runs[start], self._end - index)
            if run == 0:
                return size
            if indices[index + run - 1] - start != run - 1:
                run = 1
            size += run

    def code_at(self, index: int) -> str | None:
        if 0 <= index < self._end:
            return self.feed.codes[self.indices[index]]
        return None

    @property
    def at_end(self) -> bool:
        return self.index >= self._end

    @property
    def end(self) -> int:
        return self._end

    def point(self) -> Point:
        """Start point of the current code."""
        return self.point_at(self.index)

    def point_at(self, index: int) -> Point:
        if index < self._end:
            return self.feed.points[self.indices[index]]
        return self._end_point

    def point_after(self, index: int) -> Point:
        """End point of the code at ``index`` (before any gap that follows it)."""
        return self.feed.points[self.indices[index] + 1]

    def view(self) -> str:
        """All codes of this tokenizer as one string, one character per code.

        Virtual spaces read as spaces. Regular expressions can then match at
        ``self.index`` and the match length is the number of codes.
        """
        if self._view is None:
            codes = self.feed.codes
            self._view = "".join(
                " " if codes[i] == VIRTUAL_SPACE else codes[i] for i in self.indices
            )
        return self._view

    def serialize(self, start: int, end: int) -> str:
        """Source text of logical positions ``start`` to ``end``."""
        return self.feed.serialize([self.indices[i] for i in range(start, end)])

    # -- Writing -----------------------------------------------------------

    def consume(self) -> None:
        """Move past the current code."""
        if self.index >= self._end:
            raise InvariantError("cannot consume past the end", self.point())
        self.index += 1

    def enter(self, name: TokenType) -> None:
        point = self.point()
        self.events.append(Event(EventKind.ENTER, name, point))
        self.stack.append((name, self.index, point))

    def exit(self, name: TokenType) -> None:
        if not self.stack:
            raise InvariantError(f"exit {name.name} without an open token", self.point())
        open_name, start, point = self.stack.pop()
        if open_name is not name:
            raise InvariantError(
                f"exit {name.name} does not match open {open_name.name}", self.point()
            )
        if self.index > start:
            point = self.point_after(self.index - 1)
        self.events.append(Event(EventKind.EXIT, name, point))

    def token(self, name: TokenType, size: int = 1) -> None:
        """Enter, consume ``size`` codes, exit."""
        self.enter(name)
        for _ in range(size):
            self.consume()
        self.exit(name)

    # -- Backtracking ------------------------------------------------------

    def checkpoint(self) -> Checkpoint:
        return Checkpoint(self.index, len(self.events), tuple(self.stack))

    def restore(self, checkpoint: Checkpoint) -> None:
        self.index = checkpoint.index
        del self.events[checkpoint.events :]
        self.stack[:] = checkpoint.stack

    def attempt(self, construct: Callable[..., bool], *args: object) -> bool:
        """Run a construct; on failure roll back everything it did."""
        checkpoint = self.checkpoint()
        if construct(self, *args):
            return True
        self.restore(checkpoint)
        return False

    def check(self, construct: Callable[..., bool], *args: object) -> bool:
        """Run a construct and always roll back; report whether it matched."""
        checkpoint = self.checkpoint()
        ok = construct(self, *args)
        self.restore(checkpoint)
        return bool(ok)

    # -- Resolution --------------------------------------------------------

    def register_resolver(self, name: str) -> None:
        if name not in self.resolvers:
            self.resolvers.append(name)

    def register_resolver_before(self, name: str) -> None:
        if name not in self.resolvers:
            self.resolvers.insert(0, name)

    def run(self) -> list[Event]:
        """Tokenize everything under this tokenizer's content type and resolve."""
        from huellas.constructs.content import tokenize_content
        from huellas.constructs.text import tokenize_string, tokenize_text

        if self.content_type is ContentType.TEXT:
            tokenize_text(self)
        elif self.content_type is ContentType.STRING:
            tokenize_string(self)
        elif self.content_type is ContentType.CONTENT:
            tokenize_content(self)
        else:
            raise InvariantError(f"cannot run a {self.content_type.name} tokenizer directly")
        return self.flush()

    def flush(self) -> list[Event]:
        """Run registered resolvers and return the finished events.

        Raises:
            InvariantError: If a token is still open or input is left over.
        """
        from huellas.resolvers import RESOLVERS

        if self.stack:
            name, _, point = self.stack[-1]
            raise InvariantError(f"{name.name} is still open at flush", point)
        if self.index != self._end:
            raise InvariantError("tokenizer stopped before the end of its input", self.point())
        for name in self.resolvers:
            RESOLVERS[name](self)
        return self.events
