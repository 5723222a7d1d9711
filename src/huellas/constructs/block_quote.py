"""Block quotes: ``>`` at up to three columns of indentation.

The same prefix opens a block quote and continues it on later lines.
One space (or one column of a tab) after the marker belongs to the
prefix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.constructs.partial import count_space_or_tab, space_or_tab
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def block_quote(t: Tokenizer) -> bool:
    indent = count_space_or_tab(t)
    if indent > 3 or t.peek(indent) != ">":
        return False
    space_or_tab(t, 0)
    t.enter(TokenType.BLOCK_QUOTE_PREFIX)
    t.token(TokenType.BLOCK_QUOTE_MARKER)
    space_or_tab(t, 0, 1)
    t.exit(TokenType.BLOCK_QUOTE_PREFIX)
    return True
