"""Link reference definitions: ``[label]: destination "title"``.

Recognized in content (the text of a closed paragraph chunk), one per
line group, before the paragraph proper. Each successful definition is
recorded on the tokenizer for the document's definition table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.constructs.partial import (
    DestinationNames,
    LabelNames,
    TitleNames,
    destination,
    label,
    space_or_tab,
    space_or_tab_eol,
    title,
)
from huellas.definitions import Definition, normalize_identifier
from huellas.slice import decode_string
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

LABEL = LabelNames(
    TokenType.DEFINITION_LABEL,
    TokenType.DEFINITION_LABEL_MARKER,
    TokenType.DEFINITION_LABEL_STRING,
)

DESTINATION = DestinationNames(
    TokenType.DEFINITION_DESTINATION,
    TokenType.DEFINITION_DESTINATION_LITERAL,
    TokenType.DEFINITION_DESTINATION_LITERAL_MARKER,
    TokenType.DEFINITION_DESTINATION_RAW,
    TokenType.DEFINITION_DESTINATION_STRING,
)

TITLE = TitleNames(
    TokenType.DEFINITION_TITLE,
    TokenType.DEFINITION_TITLE_MARKER,
    TokenType.DEFINITION_TITLE_STRING,
)


def _at_line_end(t: Tokenizer) -> bool:
    space_or_tab(t, 0)
    return t.current is None or t.current == LINE_ENDING


def _title_then_end(t: Tokenizer) -> bool:
    if not space_or_tab_eol(t):
        return False
    start = t.index
    if not title(t, TITLE):
        return False
    t.scratch = t.serialize(start + 1, t.index - 1)
    return _at_line_end(t)


def definition(t: Tokenizer) -> bool:
    t.enter(TokenType.DEFINITION)

    label_start = t.index
    if not label(t, LABEL):
        return False
    raw_label = t.serialize(label_start + 1, t.index - 1)
    identifier = normalize_identifier(raw_label)
    if not identifier:
        return False

    if t.current != ":":
        return False
    t.token(TokenType.DEFINITION_MARKER)

    space_or_tab_eol(t)
    destination_start = t.index
    literal = t.current == "<"
    if not destination(t, DESTINATION):
        return False
    if literal:
        raw_destination = t.serialize(destination_start + 1, t.index - 1)
    else:
        raw_destination = t.serialize(destination_start, t.index)

    raw_title: str | None = None
    t.scratch = None
    if t.attempt(_title_then_end):
        raw_title = t.scratch
    elif not _at_line_end(t):
        return False
    t.scratch = None

    t.exit(TokenType.DEFINITION)
    t.found_definitions.append(
        Definition(
            identifier=identifier,
            label=raw_label,
            destination=decode_string(raw_destination),
            title=None if raw_title is None else decode_string(raw_title),
        )
    )
    return True
