"""Event and TokenType definitions for the huellas tokenizer.

The tokenizer produces a flat, ordered sequence of Event objects. Each
Event enters or exits a token of some TokenType at a Point; read as a
sequence the events form a well-nested tree.

Thread Safety:
    Event is frozen (immutable) and safe to share across threads.
    TokenType, ContentType and EventKind are enums (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from huellas.location import Point


class ContentType(Enum):
    """Kinds of content, each with its own subset of constructs."""

    DOCUMENT = auto()  # Containers (block quote, list item)
    FLOW = auto()  # Blocks inside containers
    CONTENT = auto()  # Definitions and paragraphs
    TEXT = auto()  # Inline constructs (emphasis, links, code)
    STRING = auto()  # Escapes and references only (titles, info strings)


class EventKind(Enum):
    """Whether an event opens or closes a token."""

    ENTER = auto()
    EXIT = auto()


class TokenType(Enum):
    """Token types in the event stream.

    Organized by the construct that produces them:
    - Whitespace and data
    - Containers (block quote, list)
    - Flow (headings, code, HTML, thematic break, paragraph)
    - Definitions
    - Text (escapes, references, code, autolinks, labels, attention)
    - Chunks (opaque spans awaiting subtokenization)

    """

    # Whitespace and data
    DATA = auto()
    LINE_ENDING = auto()
    BLANK_LINE_ENDING = auto()
    SPACE_OR_TAB = auto()

    # Containers
    BLOCK_QUOTE = auto()
    BLOCK_QUOTE_PREFIX = auto()
    BLOCK_QUOTE_MARKER = auto()  # >
    LIST_ORDERED = auto()
    LIST_UNORDERED = auto()
    LIST_ITEM = auto()
    LIST_ITEM_PREFIX = auto()
    LIST_ITEM_MARKER = auto()  # -, *, +, . or )
    LIST_ITEM_VALUE = auto()  # 1 in 1.

    # Flow
    THEMATIC_BREAK = auto()
    THEMATIC_BREAK_SEQUENCE = auto()
    HEADING_ATX = auto()
    HEADING_ATX_SEQUENCE = auto()
    HEADING_ATX_TEXT = auto()
    HEADING_SETEXT = auto()
    HEADING_SETEXT_TEXT = auto()
    HEADING_SETEXT_UNDERLINE = auto()
    HEADING_SETEXT_UNDERLINE_SEQUENCE = auto()
    CODE_FENCED = auto()
    CODE_FENCED_FENCE = auto()
    CODE_FENCED_FENCE_SEQUENCE = auto()  # ``` or ~~~
    CODE_FENCED_FENCE_INFO = auto()
    CODE_FENCED_FENCE_META = auto()
    CODE_FLOW_CHUNK = auto()
    CODE_INDENTED = auto()
    HTML_FLOW = auto()
    HTML_FLOW_DATA = auto()
    PARAGRAPH = auto()

    # Definitions
    DEFINITION = auto()
    DEFINITION_MARKER = auto()  # :
    DEFINITION_LABEL = auto()
    DEFINITION_LABEL_MARKER = auto()
    DEFINITION_LABEL_STRING = auto()
    DEFINITION_DESTINATION = auto()
    DEFINITION_DESTINATION_LITERAL = auto()
    DEFINITION_DESTINATION_LITERAL_MARKER = auto()
    DEFINITION_DESTINATION_RAW = auto()
    DEFINITION_DESTINATION_STRING = auto()
    DEFINITION_TITLE = auto()
    DEFINITION_TITLE_MARKER = auto()
    DEFINITION_TITLE_STRING = auto()

    # Text - escapes and references
    CHARACTER_ESCAPE = auto()
    CHARACTER_ESCAPE_MARKER = auto()
    CHARACTER_ESCAPE_VALUE = auto()
    CHARACTER_REFERENCE = auto()
    CHARACTER_REFERENCE_MARKER = auto()  # &
    CHARACTER_REFERENCE_MARKER_NUMERIC = auto()  # #
    CHARACTER_REFERENCE_MARKER_HEXADECIMAL = auto()  # x or X
    CHARACTER_REFERENCE_MARKER_SEMI = auto()  # ;
    CHARACTER_REFERENCE_VALUE = auto()

    # Text - code, autolinks, raw HTML, breaks
    CODE_TEXT = auto()
    CODE_TEXT_SEQUENCE = auto()
    CODE_TEXT_DATA = auto()
    AUTOLINK = auto()
    AUTOLINK_MARKER = auto()
    AUTOLINK_PROTOCOL = auto()
    AUTOLINK_EMAIL = auto()
    HTML_TEXT = auto()
    HTML_TEXT_DATA = auto()
    HARD_BREAK_ESCAPE = auto()
    HARD_BREAK_TRAILING = auto()

    # Text - labels, links and images
    LABEL_LINK = auto()  # [
    LABEL_IMAGE = auto()  # ![
    LABEL_IMAGE_MARKER = auto()  # !
    LABEL_MARKER = auto()  # [ or ]
    LABEL_END = auto()
    LABEL = auto()
    LABEL_TEXT = auto()
    LINK = auto()
    IMAGE = auto()
    RESOURCE = auto()
    RESOURCE_MARKER = auto()  # ( or )
    RESOURCE_DESTINATION = auto()
    RESOURCE_DESTINATION_LITERAL = auto()
    RESOURCE_DESTINATION_LITERAL_MARKER = auto()
    RESOURCE_DESTINATION_RAW = auto()
    RESOURCE_DESTINATION_STRING = auto()
    RESOURCE_TITLE = auto()
    RESOURCE_TITLE_MARKER = auto()
    RESOURCE_TITLE_STRING = auto()
    REFERENCE = auto()
    REFERENCE_MARKER = auto()
    REFERENCE_STRING = auto()

    # Text - attention
    ATTENTION_SEQUENCE = auto()  # Unresolved run of * or _
    EMPHASIS = auto()
    EMPHASIS_SEQUENCE = auto()
    EMPHASIS_TEXT = auto()
    STRONG = auto()
    STRONG_SEQUENCE = auto()
    STRONG_TEXT = auto()

    # Chunks, replaced during subtokenization
    CHUNK_CONTENT = auto()
    CHUNK_TEXT = auto()
    CHUNK_STRING = auto()

    @property
    def content_type(self) -> ContentType | None:
        """Content type a chunk is re-tokenized as (None for other tokens)."""
        return _CHUNK_CONTENT_TYPES.get(self)

    @property
    def is_chunk(self) -> bool:
        return self in _CHUNK_CONTENT_TYPES


_CHUNK_CONTENT_TYPES: dict[TokenType, ContentType] = {
    TokenType.CHUNK_CONTENT: ContentType.CONTENT,
    TokenType.CHUNK_TEXT: ContentType.TEXT,
    TokenType.CHUNK_STRING: ContentType.STRING,
}


@dataclass(frozen=True, slots=True)
class Event:
    """An Enter or Exit marker for a token.

    Attributes:
        kind: EventKind.ENTER or EventKind.EXIT
        name: Token type being entered or exited
        point: Source position (start for Enter, end for Exit)

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    kind: EventKind
    name: TokenType
    point: Point

    @property
    def is_enter(self) -> bool:
        return self.kind is EventKind.ENTER

    def renamed(self, name: TokenType) -> Event:
        """Return a copy of this event with a different token type."""
        return Event(self.kind, name, self.point)

    def __repr__(self) -> str:
        """Compact representation for debugging."""
        arrow = "enter" if self.kind is EventKind.ENTER else "exit"
        return f"Event({arrow} {self.name.name}, {self.point})"


def enter(name: TokenType, point: Point) -> Event:
    """Build an Enter event."""
    return Event(EventKind.ENTER, name, point)


def exit_(name: TokenType, point: Point) -> Event:
    """Build an Exit event."""
    return Event(EventKind.EXIT, name, point)
