"""Attention: a run of ``*`` or ``_`` that may become emphasis or strong.

Only the run is recorded here; pairing happens in the attention resolver
once the whole text is known.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import ATTENTION_MARKERS
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def attention(t: Tokenizer) -> bool:
    marker = t.current
    if marker is None or marker not in ATTENTION_MARKERS:
        return False
    t.enter(TokenType.ATTENTION_SEQUENCE)
    while t.current == marker:
        t.consume()
    t.exit(TokenType.ATTENTION_SEQUENCE)
    t.register_resolver("attention")
    return True
