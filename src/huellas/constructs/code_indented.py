"""Indented code: lines indented by four or more columns.

Indented code cannot interrupt a paragraph. Blank lines inside it are
kept; trailing blank lines are handed back to the surrounding flow when
the block closes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from huellas.constructs.code_fenced import code_flow_chunk
from huellas.constructs.partial import count_space_or_tab, rest_is_blank, space_or_tab

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

CODE_INDENT = 4


def code_indented(t: Tokenizer) -> bool:
    if t.interrupt or t.lazy:
        return False
    if count_space_or_tab(t) < CODE_INDENT or rest_is_blank(t):
        return False
    return code_indented_line(t)


def code_indented_continues(t: Tokenizer) -> bool:
    """Whether the current line can stay in an open indented code block."""
    return rest_is_blank(t) or count_space_or_tab(t) >= CODE_INDENT


def code_indented_line(t: Tokenizer) -> bool:
    space_or_tab(t, 0, CODE_INDENT)
    code_flow_chunk(t)
    return True
