"""Content: the definitions and paragraph inside a closed paragraph chunk.

A paragraph chunk is only split once it is complete, because a definition
title may continue on the next line and a setext underline turns the
remainder into a heading.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.constructs.definition import definition
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def tokenize_content(t: Tokenizer) -> None:
    allow_definitions = t.table.enabled("definition")
    while not t.at_end:
        if allow_definitions and t.attempt(definition):
            if t.current == LINE_ENDING:
                t.token(TokenType.LINE_ENDING)
            continue
        paragraph(t)


def paragraph(t: Tokenizer) -> bool:
    """Everything left is one paragraph whose text is tokenized later."""
    t.enter(TokenType.PARAGRAPH)
    t.enter(TokenType.CHUNK_TEXT)
    while not t.at_end:
        t.consume()
    t.exit(TokenType.CHUNK_TEXT)
    t.exit(TokenType.PARAGRAPH)
    return True
