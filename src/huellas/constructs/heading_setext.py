"""Setext heading underlines: a run of ``=`` or ``-`` under a paragraph.

Only the underline is recognized here. The document engine decides
whether a paragraph is open for it to apply to, and turns that
paragraph into the heading text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.constructs.partial import space_or_tab
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def heading_setext_underline(t: Tokenizer) -> bool:
    space_or_tab(t, 0, 3)
    marker = t.current
    if marker != "=" and marker != "-":
        return False
    t.enter(TokenType.HEADING_SETEXT_UNDERLINE)
    t.enter(TokenType.HEADING_SETEXT_UNDERLINE_SEQUENCE)
    while t.current == marker:
        t.consume()
    t.exit(TokenType.HEADING_SETEXT_UNDERLINE_SEQUENCE)
    space_or_tab(t, 0)
    if t.current is not None and t.current != LINE_ENDING:
        return False
    t.exit(TokenType.HEADING_SETEXT_UNDERLINE)
    return True
