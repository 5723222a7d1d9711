"""Document engine: block containers, interruption and lazy continuation.

The engine walks the feed one line at a time, in the manner of the
CommonMark reference parser:

1. Open containers (block quotes, lists, list items) are continued outer
   to inner, each consuming its prefix. The first one that fails ends
   the matched part of the stack.
2. Unless the open leaf owns the line (fenced code, HTML, indented code),
   new blocks are looked for in order: block quote, ATX heading, fenced
   code, HTML, setext underline, thematic break, list item, indented
   code. Containers open and the search goes on after them; a leaf start
   ends the search.
3. A non-blank line that opens nothing while a paragraph is open and
   some container did not match is a lazy continuation: nothing closes.
   Otherwise unmatched containers close, and the open leaf closes unless
   the line continues it.
4. The rest of the line goes to the leaf: an existing one, a new one, or
   a new paragraph.

The construct table's flags drive these steps: ``concrete`` leaves own
their lines, only ``interrupts`` constructs may start while a paragraph
is open, and only a ``lazy`` leaf continues on a lazy line.

Events are written in source order. Steps 1 and 2 run before closing is
decided, so the prefix events they emit are cut out, the closing Exit
events (placed at the end of the previous line's content) and the
previous line ending are written, and the prefixes are put back.

Paragraphs are ``ChunkContent`` spans while open. When one closes its
content is tokenized right away, so definitions reach the definition
table during this pass and a setext underline can turn the result into a
heading.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.constructs.block_quote import block_quote
from huellas.constructs.code_fenced import Fence, code_fenced_close, code_fenced_line
from huellas.constructs.code_indented import code_indented_continues, code_indented_line
from huellas.constructs.html_flow import html_flow_line
from huellas.constructs.list_item import ListItemStart, list_item_continuation
from huellas.constructs.partial import count_space_or_tab, rest_is_blank, space_or_tab
from huellas.errors import InvariantError
from huellas.subtokenize import subtokenize
from huellas.tokenizer import Tokenizer
from huellas.tokens import ContentType, Event, EventKind, TokenType
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.config import ParseConfig
    from huellas.constructs import Construct
    from huellas.definitions import DefinitionTable
    from huellas.feed import Feed
    from huellas.location import Point

logger = get_logger(__name__)

# Flow constructs decided by the line's whitespace before any marker is looked at
WHITESPACE_STARTS = frozenset({"blank_line", "code_indented"})

LISTS = (TokenType.LIST_ORDERED, TokenType.LIST_UNORDERED)


@dataclass(slots=True)
class Container:
    """An open block.

    Containers (block quotes, lists, list items) hold other blocks; at
    most one leaf (paragraph chunk, fenced code, indented code, HTML) is
    open at a time, inside the innermost container.

    Attributes:
        name: Token type of the block's Enter event
        item: Prefix of a list item, or of a list's first item
        has_content: List item holds a block
        fence: Opening fence of fenced code
        html_kind: Kind (1-7) of an HTML block
        event_index: Index of a leaf's Enter event
        content_end: Event count after the last non-blank line of
            indented code
        content_point: End of the last non-blank line of indented code
        construct: Construct that opened a leaf
    """

    name: TokenType
    item: ListItemStart | None = None
    has_content: bool = False
    fence: Fence | None = None
    html_kind: int = 0
    event_index: int = 0
    content_end: int = 0
    content_point: Point | None = None
    construct: Construct | None = None

    @property
    def is_list(self) -> bool:
        return self.name in LISTS

    @property
    def lazy(self) -> bool:
        """Whether the leaf may continue on a line whose container markers are missing."""
        return self.construct is not None and self.construct.lazy


class DocumentEngine:
    """Line-by-line block structure over a feed.

    Usage:
            >>> engine = DocumentEngine(Feed("> a\\nb"), ParseConfig(), DefinitionTable())
            >>> events = engine.run()

    The returned events still hold chunks; ``huellas.subtokenize.expand``
    replaces them once the definition table is frozen.

    """

    __slots__ = (
        "feed",
        "config",
        "definitions",
        "t",
        "table",
        "containers",
        "leaf",
        "_eol",
        "_eol_blank",
        "_eol_blank_depth",
        "_mark",
        "_setext",
        "_leaf_starts",
    )

    def __init__(self, feed: Feed, config: ParseConfig, definitions: DefinitionTable) -> None:
        self.feed = feed
        self.config = config
        self.definitions = definitions
        self.t = Tokenizer(feed, ContentType.DOCUMENT, config, definitions=definitions)
        self.table = self.t.table
        self.containers: list[Container] = []
        self.leaf: Container | None = None
        # Line ending of the previous line, written once closing is decided
        self._eol: int | None = None
        self._eol_blank = False
        self._eol_blank_depth = 0
        self._mark = 0
        self._setext = False
        # Flow starts tried between block quote and list item, in declaration order
        self._leaf_starts = tuple(
            c for c in self.table.of(ContentType.FLOW) if c.name not in WHITESPACE_STARTS
        )

    @property
    def events(self) -> list[Event]:
        return self.t.events

    def run(self) -> list[Event]:
        """Process every line and close what is left open.

        Raises:
            InvariantError: If the block structure comes out unbalanced.
        """
        codes = self.feed.codes
        end = self.feed.end
        start = 0
        lines = 0
        while start < end:
            eol = start
            while eol < end and codes[eol] != LINE_ENDING:
                eol += 1
            self._line(start, eol)
            lines += 1
            start = eol + 1

        self._close(self._close_point(), 0, close_leaf=True)
        self._write_eol(raw=False)
        self.t.index = end
        events = self.t.flush()
        logger.debug("document pass: %d lines, %d events", lines, len(events))
        return events

    # -- Lines -------------------------------------------------------------

    def _line(self, start: int, eol: int) -> None:
        t = self.t
        t.index = start
        t.interrupt = t.lazy = False
        self._mark = len(self.events)
        self._setext = False

        # Number of container prefixes after which the line is blank
        blank_depth = 0 if rest_is_blank(t) else None
        matched = 0
        for container in self.containers:
            if not self._continue(container):
                break
            matched += 1
            if blank_depth is None and rest_is_blank(t):
                blank_depth = matched
        all_matched = matched == len(self.containers)
        blank = blank_depth is not None
        leaf = self.leaf
        paragraph = leaf is not None and leaf.name is TokenType.CHUNK_CONTENT

        opened: list[Container] = []
        start_name: str | None = None
        keeps_leaf = leaf is not None and all_matched and self._owns_line(leaf, blank)
        if not keeps_leaf:
            start_name = self._starts(opened, matched, paragraph, all_matched)

        line_blank = rest_is_blank(t)
        lazy = (
            leaf is not None
            and leaf.lazy
            and not all_matched
            and not opened
            and start_name is None
            and not blank
        )
        if lazy:
            keeps_leaf = True
            matched = len(self.containers)
        elif paragraph and all_matched and not opened and start_name is None and not blank:
            keeps_leaf = True
        elif start_name == "heading_setext":
            self._setext = True

        # A list only holds items: anything else added to it ends it
        adds_block = bool(opened) or start_name is not None or not (line_blank or keeps_leaf)
        if (
            adds_block
            and matched
            and self.containers[matched - 1].is_list
            and not (opened and opened[0].name is TokenType.LIST_ITEM)
        ):
            matched -= 1

        segment = self.events[self._mark :]
        del self.events[self._mark :]
        self._close(self._close_point(), matched, close_leaf=not keeps_leaf)
        self._write_eol(raw=keeps_leaf and self._is_paragraph(self.leaf))
        self.events.extend(segment)
        self.containers.extend(opened)
        if blank_depth is None and line_blank:
            blank_depth = len(self.containers)

        if start_name is not None:
            self._start_leaf(start_name)
        elif self.leaf is not None:
            self._leaf_line(line_blank)
        elif line_blank:
            t.attempt(self.table.get("blank_line").tokenize)
        else:
            self._open_paragraph()

        if t.index != eol:
            raise InvariantError("line not fully consumed", t.point())
        self._mark_content(line_blank)
        self._eol = eol if eol < self.feed.end else None
        self._eol_blank = blank_depth is not None and self.leaf is None
        self._eol_blank_depth = blank_depth or 0
        t.interrupt = t.lazy = False

    def _continue(self, container: Container) -> bool:
        t = self.t
        if container.name is TokenType.BLOCK_QUOTE:
            return t.attempt(block_quote)
        if container.is_list:
            return True
        item = container.item
        if item is None:
            raise InvariantError("list item without a prefix", t.point())
        if rest_is_blank(t) and not container.has_content:
            return False
        return t.attempt(list_item_continuation, item.indent)

    def _owns_line(self, leaf: Container, blank: bool) -> bool:
        """Whether an open leaf takes the line before any new block is considered."""
        construct = leaf.construct
        if construct is not None and construct.concrete:
            # HTML blocks of kinds 6 and 7 end at a blank line
            return not (blank and leaf.html_kind >= 6)
        if leaf.name is TokenType.CODE_INDENTED:
            return code_indented_continues(self.t)
        return False

    def _may_start(self, construct: Construct) -> bool:
        """While a paragraph is open only interrupting constructs may start."""
        t = self.t
        return construct.interrupts or not (t.interrupt or t.lazy)

    def _starts(
        self,
        opened: list[Container],
        matched: int,
        paragraph: bool,
        all_matched: bool,
    ) -> str | None:
        """Open new containers; return the name of a leaf that starts after them."""
        t = self.t
        table = self.table
        while True:
            t.interrupt = paragraph and all_matched and not opened
            t.lazy = paragraph and not all_matched and not opened
            if rest_is_blank(t):
                return None
            if count_space_or_tab(t) >= 4:
                if table.enabled("code_indented"):
                    code = table.get("code_indented")
                    if self._may_start(code):
                        return code.name
                return None
            if self._open_block_quote(opened):
                continue
            for construct in self._leaf_starts:
                name = construct.name
                if not self._may_start(construct):
                    continue
                if name == "heading_setext" and not t.interrupt:
                    continue
                if not t.check(construct.tokenize):
                    continue
                # An underline under nothing but definitions is not a heading
                if name == "heading_setext" and not self._paragraph_has_text():
                    continue
                return name
            if self._open_list_item(opened, matched):
                continue
            return None

    def _open_block_quote(self, opened: list[Container]) -> bool:
        t = self.t
        if not self.table.enabled("block_quote"):
            return False
        construct = self.table.get("block_quote")
        if not self._may_start(construct):
            return False
        point = t.point()
        mark = len(self.events)
        if not t.attempt(construct.tokenize):
            return False
        self.events.insert(mark, Event(EventKind.ENTER, TokenType.BLOCK_QUOTE, point))
        opened.append(Container(TokenType.BLOCK_QUOTE))
        return True

    def _open_list_item(self, opened: list[Container], matched: int) -> bool:
        t = self.t
        if not self.table.enabled("list_item"):
            return False
        construct = self.table.get("list_item")
        if not self._may_start(construct):
            return False
        point = t.point()
        mark = len(self.events)
        if not t.attempt(construct.tokenize):
            return False
        item = t.scratch
        if not isinstance(item, ListItemStart):
            raise InvariantError("list item prefix left no item", point)

        if opened:
            parent = opened[-1]
        elif matched:
            parent = self.containers[matched - 1]
        else:
            parent = None
        added: list[Event] = []
        same_list = (
            parent is not None
            and parent.is_list
            and parent.item is not None
            and parent.item.continues(item)
        )
        if not same_list:
            wrapper = TokenType.LIST_ORDERED if item.ordered else TokenType.LIST_UNORDERED
            opened.append(Container(wrapper, item=item))
            added.append(Event(EventKind.ENTER, wrapper, point))
        added.append(Event(EventKind.ENTER, TokenType.LIST_ITEM, point))
        self.events[mark:mark] = added
        opened.append(Container(TokenType.LIST_ITEM, item=item))
        return True

    # -- Closing -----------------------------------------------------------

    def _close_point(self) -> Point:
        """Where blocks ending before the current line end: before the previous line ending."""
        if self._eol is not None:
            return self.feed.points[self._eol]
        return self.t.point()

    def _close(self, point: Point, matched: int, close_leaf: bool) -> None:
        if close_leaf and self.leaf is not None:
            self._close_leaf(point)
        for container in reversed(self.containers[matched:]):
            self.events.append(Event(EventKind.EXIT, container.name, point))
        del self.containers[matched:]

    def _close_leaf(self, point: Point) -> None:
        leaf = self.leaf
        if leaf is None:
            return
        self.leaf = None
        events = self.events
        if leaf.name is TokenType.CHUNK_CONTENT:
            events.append(Event(EventKind.EXIT, TokenType.CHUNK_CONTENT, point))
            replacement = self._content(leaf.event_index, len(events) - 1)
            if self._setext:
                replacement = _setext_heading(replacement)
            events[leaf.event_index :] = replacement
        elif leaf.name is TokenType.CODE_INDENTED:
            self._close_code_indented(leaf)
        else:
            events.append(Event(EventKind.EXIT, leaf.name, point))

    def _close_code_indented(self, leaf: Container) -> None:
        """Close indented code after its last non-blank line.

        Blank lines after that line are not part of the code: their line
        endings become blank line endings and their whitespace stays
        whitespace.
        """
        if leaf.content_point is None:
            raise InvariantError("indented code without content", self.t.point())
        tail: list[Event] = []
        endings = 0
        for event in self.events[leaf.content_end :]:
            name = event.name
            if name is TokenType.LINE_ENDING:
                if endings:
                    event = event.renamed(TokenType.BLANK_LINE_ENDING)
                if not event.is_enter:
                    endings += 1
            elif name is TokenType.CODE_FLOW_CHUNK:
                event = event.renamed(TokenType.SPACE_OR_TAB)
            tail.append(event)
        self.events[leaf.content_end :] = [
            Event(EventKind.EXIT, TokenType.CODE_INDENTED, leaf.content_point),
            *tail,
        ]
        # The pending line ending follows a blank line if the code ended earlier
        if endings:
            self._eol_blank = True
            self._eol_blank_depth = 0

    def _content(self, enter_index: int, exit_index: int) -> list[Event]:
        """Tokenize a closed paragraph chunk and record its definitions."""
        replacement, child = subtokenize(
            self.feed, self.events, enter_index, exit_index, self.config, self.definitions
        )
        for found in child.found_definitions:
            if not self.definitions.add(found):
                logger.debug("duplicate definition %r ignored", found.label)
        return replacement

    def _paragraph_has_text(self) -> bool:
        """Whether the open paragraph holds more than definitions."""
        leaf = self.leaf
        if leaf is None or leaf.name is not TokenType.CHUNK_CONTENT or self._eol is None:
            return False
        span = self.events[leaf.event_index : self._mark]
        span.append(Event(EventKind.EXIT, TokenType.CHUNK_CONTENT, self.feed.points[self._eol]))
        trial, _ = subtokenize(self.feed, span, 0, len(span) - 1, self.config)
        return any(e.name is TokenType.PARAGRAPH for e in trial)

    def _write_eol(self, raw: bool) -> None:
        """Write the previous line's ending, unless it stays inside a paragraph chunk."""
        eol = self._eol
        if eol is None or raw:
            return
        # A line blank only inside a container that just closed is not blank here
        blank = self._eol_blank and self._eol_blank_depth <= len(self.containers)
        name = TokenType.BLANK_LINE_ENDING if blank else TokenType.LINE_ENDING
        points = self.feed.points
        self.events.append(Event(EventKind.ENTER, name, points[eol]))
        self.events.append(Event(EventKind.EXIT, name, points[eol + 1]))

    # -- Leaves ------------------------------------------------------------

    def _start_leaf(self, name: str) -> None:
        t = self.t
        events = self.events
        point = t.point()
        mark = len(events)
        construct = self.table.get(name)
        if not t.attempt(construct.tokenize):
            raise InvariantError(f"{name} matched when checked but not when run", point)

        if name == "heading_setext":
            events.append(Event(EventKind.EXIT, TokenType.HEADING_SETEXT, t.point()))
        elif name == "code_fenced":
            if not isinstance(t.scratch, Fence):
                raise InvariantError("fenced code opened without a fence", point)
            leaf = Container(TokenType.CODE_FENCED, fence=t.scratch, construct=construct)
            self._open_leaf(leaf, mark, point)
        elif name == "html_flow":
            kind, ended = t.scratch  # type: ignore[misc]
            leaf = Container(TokenType.HTML_FLOW, html_kind=kind, construct=construct)
            self._open_leaf(leaf, mark, point)
            if ended:
                self._close_leaf(t.point())
        elif name == "code_indented":
            leaf = Container(TokenType.CODE_INDENTED, construct=construct)
            self._open_leaf(leaf, mark, point)
            leaf.content_end = len(events)
            leaf.content_point = t.point()

    def _open_leaf(self, leaf: Container, mark: int, point: Point) -> None:
        self.events.insert(mark, Event(EventKind.ENTER, leaf.name, point))
        leaf.event_index = mark
        self.leaf = leaf

    def _leaf_line(self, blank: bool) -> None:
        t = self.t
        leaf = self.leaf
        if leaf is None:
            return
        if leaf.name is TokenType.CODE_FENCED and leaf.fence is not None:
            if t.attempt(code_fenced_close, leaf.fence):
                self._close_leaf(t.point())
            else:
                code_fenced_line(t, leaf.fence)
        elif leaf.name is TokenType.HTML_FLOW:
            if html_flow_line(t, leaf.html_kind):
                self._close_leaf(t.point())
        elif leaf.name is TokenType.CODE_INDENTED:
            code_indented_line(t)
            if not blank:
                leaf.content_end = len(self.events)
                leaf.content_point = t.point()
        else:
            # Paragraph continuation: indentation is not content
            space_or_tab(t, 0)
            self._skip_line()

    def _open_paragraph(self) -> None:
        t = self.t
        space_or_tab(t, 0)
        leaf = Container(
            TokenType.CHUNK_CONTENT,
            event_index=len(self.events),
            construct=self.table.get("paragraph"),
        )
        self.events.append(Event(EventKind.ENTER, TokenType.CHUNK_CONTENT, t.point()))
        self.leaf = leaf
        self._skip_line()

    def _skip_line(self) -> None:
        t = self.t
        while t.current is not None and t.current != LINE_ENDING:
            t.consume()

    def _mark_content(self, line_blank: bool) -> None:
        containers = self.containers
        for container in containers[:-1]:
            if container.name is TokenType.LIST_ITEM:
                container.has_content = True
        if containers and containers[-1].name is TokenType.LIST_ITEM:
            if not line_blank or self.leaf is not None:
                containers[-1].has_content = True

    @staticmethod
    def _is_paragraph(leaf: Container | None) -> bool:
        return leaf is not None and leaf.name is TokenType.CHUNK_CONTENT


def _setext_heading(events: list[Event]) -> list[Event]:
    """Turn the paragraph at the end of tokenized content into setext heading text.

    The heading's Exit is written after its underline.
    """
    for index in range(len(events) - 1, -1, -1):
        event = events[index]
        if event.is_enter and event.name is TokenType.PARAGRAPH:
            exit_index = len(events) - 1
            while events[exit_index].name is not TokenType.PARAGRAPH:
                exit_index -= 1
            result = events[:index]
            result.append(Event(EventKind.ENTER, TokenType.HEADING_SETEXT, event.point))
            result.append(event.renamed(TokenType.HEADING_SETEXT_TEXT))
            result.extend(events[index + 1 : exit_index])
            result.append(events[exit_index].renamed(TokenType.HEADING_SETEXT_TEXT))
            result.extend(events[exit_index + 1 :])
            return result
    raise InvariantError("setext underline without heading text")


__all__ = ["Container", "DocumentEngine"]
