"""Label starts: ``[`` for links and ``![`` for images.

A label start only records a possible opener. Whether it opens anything
is decided by a later label end; unmatched starts turn back into data
when the media resolver runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.tokenizer import LabelStart
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def label_start_link(t: Tokenizer) -> bool:
    if t.current != "[":
        return False
    enter_index = len(t.events)
    t.enter(TokenType.LABEL_LINK)
    t.token(TokenType.LABEL_MARKER)
    t.exit(TokenType.LABEL_LINK)
    _push(t, TokenType.LABEL_LINK, enter_index)
    return True


def label_start_image(t: Tokenizer) -> bool:
    if t.current != "!" or t.peek() != "[":
        return False
    enter_index = len(t.events)
    t.enter(TokenType.LABEL_IMAGE)
    t.token(TokenType.LABEL_IMAGE_MARKER)
    t.token(TokenType.LABEL_MARKER)
    t.exit(TokenType.LABEL_IMAGE)
    _push(t, TokenType.LABEL_IMAGE, enter_index)
    return True


def _push(t: Tokenizer, kind: TokenType, enter_index: int) -> None:
    t.label_starts.append(LabelStart(kind, (enter_index, len(t.events) - 1), t.index))
    t.register_resolver_before("media")
