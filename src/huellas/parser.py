"""Parse orchestration: document pass, freeze, expansion.

A parse runs in three strictly ordered phases:

1. The document engine walks the feed line by line, producing block
   structure with paragraph content tokenized as each paragraph closes.
   Definitions land in the definition table during this phase.
2. The definition table is frozen.
3. Remaining chunks (inline text, link labels, destinations, titles) are
   expanded depth first; the media resolver consults the frozen table.

Thread Safety:
    Parser instances are single-use and not thread-safe. Configuration is
    read from a ContextVar (thread-local). ParseResult is immutable and
    safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from huellas.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
)
from huellas.definitions import Definition, DefinitionTable
from huellas.document import DocumentEngine
from huellas.feed import Feed
from huellas.subtokenize import expand
from huellas.utils.logger import get_logger

if TYPE_CHECKING:
    from huellas.tokens import Event

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """The outcome of a parse.

    Attributes:
        source: The source text every event points into
        events: Fully expanded, well-nested event stream
        definitions: Frozen definition table
        line_ending: Line ending a compiler should write: the configured
            style, else the first one in the source, else ``"\\n"``
    """

    source: str
    events: tuple[Event, ...]
    definitions: DefinitionTable
    line_ending: str = "\n"

    def unused_definitions(self) -> list[Definition]:
        """Definitions that no reference link or image points to."""
        return self.definitions.unused(self.events, self.source)

    def __len__(self) -> int:
        return len(self.events)


class Parser:
    """Tokenizer front end for one document.

    Usage:
            >>> result = Parser("*a*").parse()
            >>> [e.name.name for e in result.events][:3]
            ['PARAGRAPH', 'EMPHASIS', 'EMPHASIS_SEQUENCE']

    Thread Safety:
        Single-use. Configuration is read from ContextVar when the parser
        is created; use parse_config_context() to change it.

    """

    __slots__ = ("_source", "_config", "_feed", "_definitions")

    def __init__(self, source: str) -> None:
        self._source = source
        self._config = get_parse_config()
        self._feed = Feed(source)
        self._definitions = DefinitionTable()

    def parse(self) -> ParseResult:
        """Run all three phases.

        Raises:
            InvariantError: If a construct or resolver breaks nesting.
        """
        engine = DocumentEngine(self._feed, self._config, self._definitions)
        events = engine.run()
        self._definitions.freeze()
        logger.debug("definitions frozen: %d", len(self._definitions))

        chunks = sum(1 for event in events if event.is_enter and event.name.is_chunk)
        expanded = expand(self._feed, events, self._config, self._definitions)
        logger.debug("expanded %d chunks into %d events", chunks, len(expanded))

        line_ending = self._config.line_ending or self._feed.line_ending or "\n"
        return ParseResult(self._source, tuple(expanded), self._definitions, line_ending)


def parse(source: str, config: ParseConfig | None = None) -> ParseResult:
    """Tokenize Markdown source into an event stream.

    Args:
        source: Markdown source text
        config: Configuration for this parse; the context's configuration
            (see ``parse_config_context``) when None

    Returns:
        ParseResult holding the events and the frozen definition table

    Example:
        >>> result = parse("> a\\nb")
        >>> result.events[0].name.name
        'BLOCK_QUOTE'
    """
    if config is None:
        return Parser(source).parse()

    with parse_config_context(config):
        return Parser(source).parse()


def tokenize(source: str, config: ParseConfig | None = None) -> tuple[Event, ...]:
    """Shorthand for ``parse(source, config).events``."""
    return parse(source, config).events


__all__ = ["ParseResult", "Parser", "parse", "tokenize"]
