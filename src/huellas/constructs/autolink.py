"""Autolinks: ``<https://example.com>`` and ``<user@example.com>``."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

# CommonMark: scheme of 2-32 characters, then anything but controls, space, < and >
_URI = re.compile(r"<([a-zA-Z][a-zA-Z0-9+.\-]{1,31}:[^\x00-\x20<>]*)>")

_EMAIL = re.compile(
    r"<([a-zA-Z0-9.!#$%&'*+/=?^_`{|}~\-]+@[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*)>"
)


def autolink(t: Tokenizer) -> bool:
    if t.current != "<":
        return False
    view = t.view()
    name = TokenType.AUTOLINK_PROTOCOL
    match = _URI.match(view, t.index)
    if match is None:
        name = TokenType.AUTOLINK_EMAIL
        match = _EMAIL.match(view, t.index)
    if match is None:
        return False

    t.enter(TokenType.AUTOLINK)
    t.token(TokenType.AUTOLINK_MARKER)
    t.token(name, len(match.group(1)))
    t.token(TokenType.AUTOLINK_MARKER)
    t.exit(TokenType.AUTOLINK)
    return True
