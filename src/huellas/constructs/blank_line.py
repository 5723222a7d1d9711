"""Blank lines: nothing but spaces and tabs before the line ending."""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.constructs.partial import space_or_tab

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer


def blank_line(t: Tokenizer) -> bool:
    space_or_tab(t, 0)
    return t.current is None or t.current == LINE_ENDING
