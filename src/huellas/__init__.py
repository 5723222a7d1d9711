"""
Huellas: a streaming CommonMark tokenizer producing Enter/Exit events.

Huellas does not build a tree. It walks Markdown source once and emits a
flat, well-nested sequence of events, each entering or exiting a token at
a source point. Renderers and compilers consume that stream in order.

Quick Start:
    >>> from huellas import parse
    >>> result = parse("*a*")
    >>> [(e.kind.name, e.name.name) for e in result.events][:2]
    [('ENTER', 'PARAGRAPH'), ('ENTER', 'EMPHASIS')]

    >>> # Outline view for debugging
    >>> from huellas import TraceRenderer
    >>> print(TraceRenderer().render(parse("> a\\nb")))

Configuration:
    >>> from huellas import ParseConfig, parse_config_context
    >>> with parse_config_context(ParseConfig(disabled=frozenset({"html_flow"}))):
    ...     result = parse("<div>")

Installation:
    pip install huellas              # Core tokenizer (zero deps)
    pip install huellas[test]        # + pytest and hypothesis
"""

from huellas.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from huellas.constructs import CONSTRUCT_NAMES, Construct, ConstructTable
from huellas.definitions import Definition, DefinitionTable, normalize_identifier
from huellas.errors import ConfigError, HuellasError, InvariantError
from huellas.feed import Feed
from huellas.location import Point
from huellas.parser import ParseResult, Parser, parse, tokenize
from huellas.renderers.protocol import EventRenderer
from huellas.renderers.trace import TraceRenderer, render_trace
from huellas.slice import Position, Slice
from huellas.subtokenize import expand, subtokenize
from huellas.tokenizer import Tokenizer
from huellas.tokens import ContentType, Event, EventKind, TokenType

__version__ = "0.1.0"

__all__ = [
    # Main API
    "parse",
    "tokenize",
    "Parser",
    "ParseResult",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Events
    "Event",
    "EventKind",
    "TokenType",
    "ContentType",
    "Point",
    "Position",
    "Slice",
    # Machinery
    "Feed",
    "Tokenizer",
    "Construct",
    "ConstructTable",
    "CONSTRUCT_NAMES",
    "subtokenize",
    "expand",
    # Definitions
    "Definition",
    "DefinitionTable",
    "normalize_identifier",
    # Rendering
    "EventRenderer",
    "TraceRenderer",
    "render_trace",
    # Errors
    "HuellasError",
    "ConfigError",
    "InvariantError",
]
