"""Label ends: ``]``, possibly followed by a resource or a reference.

At a ``]`` the nearest label start that has not already failed decides
what happens. The label matches when it is followed by a resource
``(destination "title")``, or when its reference (full ``[ref]``,
collapsed ``[]`` or the label text itself) is a known definition.

A matched link deactivates every earlier link start, since links cannot
contain other links. Matches are only recorded here; the media resolver
rewrites the events into Link and Image spans.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.constructs.partial import (
    DestinationNames,
    LabelNames,
    TitleNames,
    destination,
    label,
    space_or_tab_eol,
    title,
)
from huellas.definitions import normalize_identifier
from huellas.tokenizer import Media
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

DESTINATION = DestinationNames(
    TokenType.RESOURCE_DESTINATION,
    TokenType.RESOURCE_DESTINATION_LITERAL,
    TokenType.RESOURCE_DESTINATION_LITERAL_MARKER,
    TokenType.RESOURCE_DESTINATION_RAW,
    TokenType.RESOURCE_DESTINATION_STRING,
)

TITLE = TitleNames(
    TokenType.RESOURCE_TITLE,
    TokenType.RESOURCE_TITLE_MARKER,
    TokenType.RESOURCE_TITLE_STRING,
)

REFERENCE = LabelNames(
    TokenType.REFERENCE,
    TokenType.REFERENCE_MARKER,
    TokenType.REFERENCE_STRING,
)


def _defined(t: Tokenizer, text: str) -> bool:
    if t.definitions is None or len(text) > t.config.label_size_max:
        return False
    identifier = normalize_identifier(text)
    return bool(identifier) and identifier in t.definitions


def label_end(t: Tokenizer) -> bool:
    if t.current != "]":
        return False

    position = len(t.label_starts) - 1
    while position >= 0 and t.label_starts[position].balanced:
        position -= 1
    if position < 0:
        return False
    start = t.label_starts[position]
    if start.inactive:
        start.balanced = True
        return False

    defined = _defined(t, t.serialize(start.text_start, t.index))
    end_enter = len(t.events)
    t.enter(TokenType.LABEL_END)
    t.token(TokenType.LABEL_MARKER)
    t.exit(TokenType.LABEL_END)

    if t.current == "(":
        matched = t.attempt(_resource) or defined
    elif t.current == "[" and t.check(label, REFERENCE):
        matched = t.attempt(_full_reference)
    elif t.current == "[" and t.peek() == "]":
        matched = defined and t.attempt(_collapsed_reference)
    else:
        matched = defined

    if not matched:
        start.balanced = True
        return False

    t.label_starts_loose.extend(t.label_starts[position + 1 :])
    del t.label_starts[position:]
    if start.kind is TokenType.LABEL_LINK:
        for other in t.label_starts:
            if other.kind is TokenType.LABEL_LINK:
                other.inactive = True
    t.media.append(Media(start.kind, start.start, (end_enter, len(t.events) - 1)))
    t.register_resolver_before("media")
    return True


def _resource(t: Tokenizer) -> bool:
    t.enter(TokenType.RESOURCE)
    t.token(TokenType.RESOURCE_MARKER)
    space_or_tab_eol(t)
    if t.current != ")":
        if not destination(t, DESTINATION):
            return False
        if space_or_tab_eol(t) and t.current in ('"', "'", "("):
            if not title(t, TITLE):
                return False
            space_or_tab_eol(t)
    if t.current != ")":
        return False
    t.token(TokenType.RESOURCE_MARKER)
    t.exit(TokenType.RESOURCE)
    return True


def _full_reference(t: Tokenizer) -> bool:
    start = t.index
    if not label(t, REFERENCE):
        return False
    return _defined(t, t.serialize(start + 1, t.index - 1))


def _collapsed_reference(t: Tokenizer) -> bool:
    t.enter(TokenType.REFERENCE)
    t.token(TokenType.REFERENCE_MARKER)
    t.token(TokenType.REFERENCE_MARKER)
    t.exit(TokenType.REFERENCE)
    return True
