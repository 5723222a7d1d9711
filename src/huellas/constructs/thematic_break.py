"""Thematic breaks: three or more ``-``, ``*`` or ``_``, spaces allowed between."""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING, SPACE_OR_TAB, THEMATIC_BREAK_CHARS
from huellas.constructs.partial import space_or_tab
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def _marker_count(t: Tokenizer, marker: str) -> int:
    """Markers on the rest of the line, or 0 if anything else is on it."""
    count = 0
    ahead = 0
    while True:
        code = t.peek(ahead)
        if code is None or code == LINE_ENDING:
            return count
        if code == marker:
            count += 1
        elif code not in SPACE_OR_TAB:
            return 0
        ahead += 1


def thematic_break(t: Tokenizer) -> bool:
    space_or_tab(t, 0, 3)
    marker = t.current
    if marker is None or marker not in THEMATIC_BREAK_CHARS:
        return False
    if _marker_count(t, marker) < 3:
        return False

    t.enter(TokenType.THEMATIC_BREAK)
    while t.current is not None and t.current != LINE_ENDING:
        if t.current == marker:
            t.enter(TokenType.THEMATIC_BREAK_SEQUENCE)
            while t.current == marker:
                t.consume()
            t.exit(TokenType.THEMATIC_BREAK_SEQUENCE)
        else:
            space_or_tab(t)
    t.exit(TokenType.THEMATIC_BREAK)
    return True
