"""Construct table: every grammar rule, grouped by content type.

A construct is a plain function ``construct(t) -> bool`` over a
Tokenizer. The table is closed: the set of constructs is fixed here and
a configuration can only switch members off. Within a content type the
declaration order is the order in which constructs are tried, which
matters where two constructs can start on the same code (``<`` is an
autolink before it is raw HTML, ``\\`` an escape before a hard break).

Text and string constructs declare the codes they can start on, so the
inline loop only attempts the ones that can match.

Thread Safety:
    Tables are immutable and cached per disabled set; safe to share.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from huellas.constructs.attention import attention
from huellas.constructs.autolink import autolink
from huellas.constructs.blank_line import blank_line
from huellas.constructs.block_quote import block_quote
from huellas.constructs.character_escape import character_escape
from huellas.constructs.character_reference import character_reference
from huellas.constructs.code_fenced import code_fenced
from huellas.constructs.code_indented import code_indented
from huellas.constructs.code_text import code_text
from huellas.constructs.content import paragraph
from huellas.constructs.definition import definition
from huellas.constructs.hard_break_escape import hard_break_escape
from huellas.constructs.heading_atx import heading_atx
from huellas.constructs.heading_setext import heading_setext_underline
from huellas.constructs.html_flow import html_flow
from huellas.constructs.html_text import html_text
from huellas.constructs.label_end import label_end
from huellas.constructs.label_start import label_start_image, label_start_link
from huellas.constructs.list_item import list_item
from huellas.constructs.thematic_break import thematic_break
from huellas.errors import InvariantError
from huellas.tokens import ContentType

if TYPE_CHECKING:
    from huellas.config import ParseConfig
    from huellas.tokenizer import Tokenizer


@dataclass(frozen=True, slots=True)
class Construct:
    """A named grammar rule.

    Attributes:
        name: Name used in ``ParseConfig.disabled``
        content_type: Content type the construct belongs to
        tokenize: The construct itself
        markers: Codes it can start on (text and string constructs)
        concrete: Owns every line its containers continue until its own
            end condition; nothing else starts inside it
        interrupts: May start while a paragraph is open, ending it
        lazy: May continue on a line whose container markers are missing
    """

    name: str
    content_type: ContentType
    tokenize: Callable[[Tokenizer], bool]
    markers: frozenset[str] = frozenset()
    concrete: bool = False
    interrupts: bool = False
    lazy: bool = False


CONSTRUCTS: tuple[Construct, ...] = (
    # Containers
    Construct("block_quote", ContentType.DOCUMENT, block_quote, interrupts=True),
    Construct("list_item", ContentType.DOCUMENT, list_item, interrupts=True),
    # Flow
    Construct("blank_line", ContentType.FLOW, blank_line),
    Construct("code_indented", ContentType.FLOW, code_indented),
    Construct("heading_atx", ContentType.FLOW, heading_atx, interrupts=True),
    Construct("code_fenced", ContentType.FLOW, code_fenced, concrete=True, interrupts=True),
    Construct("html_flow", ContentType.FLOW, html_flow, concrete=True, interrupts=True),
    Construct("heading_setext", ContentType.FLOW, heading_setext_underline, interrupts=True),
    Construct("thematic_break", ContentType.FLOW, thematic_break, interrupts=True),
    # Content
    Construct("definition", ContentType.CONTENT, definition),
    Construct("paragraph", ContentType.CONTENT, paragraph, lazy=True),
    # Text
    Construct("label_start_image", ContentType.TEXT, label_start_image, frozenset("!")),
    Construct("character_reference", ContentType.TEXT, character_reference, frozenset("&")),
    Construct("attention", ContentType.TEXT, attention, frozenset("*_")),
    Construct("autolink", ContentType.TEXT, autolink, frozenset("<")),
    Construct("html_text", ContentType.TEXT, html_text, frozenset("<")),
    Construct("label_start_link", ContentType.TEXT, label_start_link, frozenset("[")),
    Construct("character_escape", ContentType.TEXT, character_escape, frozenset("\\")),
    Construct("hard_break_escape", ContentType.TEXT, hard_break_escape, frozenset("\\")),
    Construct("label_end", ContentType.TEXT, label_end, frozenset("]")),
    Construct("code_text", ContentType.TEXT, code_text, frozenset("`")),
    # String
    Construct("character_reference", ContentType.STRING, character_reference, frozenset("&")),
    Construct("character_escape", ContentType.STRING, character_escape, frozenset("\\")),
)

CONSTRUCT_NAMES: frozenset[str] = frozenset(c.name for c in CONSTRUCTS)

# Constructs the document engine relies on; configuration cannot remove them
REQUIRED_CONSTRUCTS: frozenset[str] = frozenset({"blank_line", "paragraph"})


class ConstructTable:
    """The enabled constructs, indexed for dispatch.

    Usage:
            >>> table = ConstructTable(frozenset({"attention"}))
            >>> table.enabled("attention")
            False
            >>> [c.name for c in table.starting_with(ContentType.TEXT, "<")]
            ['autolink', 'html_text']

    """

    __slots__ = ("disabled", "_by_type", "_by_name", "_by_marker", "_markers")

    def __init__(self, disabled: frozenset[str] = frozenset()) -> None:
        self.disabled = disabled
        self._by_type: dict[ContentType, tuple[Construct, ...]] = {}
        self._by_name: dict[str, Construct] = {}
        self._by_marker: dict[tuple[ContentType, str], tuple[Construct, ...]] = {}
        self._markers: dict[ContentType, frozenset[str]] = {}

        for content_type in ContentType:
            enabled = tuple(
                c for c in CONSTRUCTS if c.content_type is content_type and c.name not in disabled
            )
            self._by_type[content_type] = enabled
            markers = frozenset(code for c in enabled for code in c.markers)
            self._markers[content_type] = markers
            for code in markers:
                self._by_marker[(content_type, code)] = tuple(
                    c for c in enabled if code in c.markers
                )
        for construct in CONSTRUCTS:
            if construct.name not in disabled:
                self._by_name.setdefault(construct.name, construct)

    @classmethod
    def for_config(cls, config: ParseConfig) -> ConstructTable:
        return _table_for(config.disabled)

    def of(self, content_type: ContentType) -> tuple[Construct, ...]:
        """Enabled constructs of a content type, in declaration order."""
        return self._by_type[content_type]

    def starting_with(self, content_type: ContentType, code: str) -> tuple[Construct, ...]:
        return self._by_marker.get((content_type, code), ())

    def markers(self, content_type: ContentType) -> frozenset[str]:
        """Codes that can start an enabled construct of ``content_type``."""
        return self._markers[content_type]

    def enabled(self, name: str) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Construct:
        """Look up an enabled construct by name.

        Raises:
            InvariantError: If the construct is unknown or disabled.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise InvariantError(f"construct {name!r} is not enabled") from None

    def __repr__(self) -> str:
        return f"ConstructTable(disabled={sorted(self.disabled)})"


@lru_cache(maxsize=64)
def _table_for(disabled: frozenset[str]) -> ConstructTable:
    return ConstructTable(disabled)


__all__ = [
    "CONSTRUCTS",
    "CONSTRUCT_NAMES",
    "REQUIRED_CONSTRUCTS",
    "Construct",
    "ConstructTable",
]
