"""HTML blocks: raw HTML lines passed through as they are.

The seven CommonMark kinds differ in how they start and end:

1. ``<pre``, ``<script``, ``<style`` or ``<textarea``, until the matching
   closing tag
2. ``<!--``, until ``-->``
3. ``<?``, until ``?>``
4. ``<!`` and a letter, until ``>``
5. ``<![CDATA[``, until ``]]>``
6. a block-level tag name, until a blank line
7. any other complete open or closing tag alone on its line, until a
   blank line; kind 7 cannot interrupt a paragraph

Kinds 1 to 5 may end on the line they start on. The indentation of each
line is part of the data.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from huellas.charsets import HTML_BLOCK_NAMES, HTML_RAW_NAMES, LINE_ENDING
from huellas.constructs.html_text import CLOSE_TAG, OPEN_TAG
from huellas.constructs.partial import count_space_or_tab
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

_RAW_START = re.compile(r"<(?:pre|script|style|textarea)(?:[ \t>]|$)", re.IGNORECASE)
_BLOCK_START = re.compile(r"</?([A-Za-z][A-Za-z0-9\-]*)(?:[ \t]|/?>|$)")
_COMPLETE_TAG = re.compile(rf"(?:{OPEN_TAG}|{CLOSE_TAG})[ \t]*$")
_TAG_NAME = re.compile(r"</?([A-Za-z][A-Za-z0-9\-]*)")

_ENDS: dict[int, re.Pattern[str]] = {
    1: re.compile(r"</(?:pre|script|style|textarea)>", re.IGNORECASE),
    2: re.compile(r"-->"),
    3: re.compile(r"\?>"),
    4: re.compile(r">"),
    5: re.compile(r"\]\]>"),
}


def html_flow_kind(line: str, interrupt: bool) -> int | None:
    """Kind of HTML block ``line`` starts (indentation already removed), or None."""
    if not line.startswith("<"):
        return None
    if _RAW_START.match(line):
        return 1
    if line.startswith("<!--"):
        return 2
    if line.startswith("<?"):
        return 3
    if line.startswith("<![CDATA["):
        return 5
    if len(line) > 2 and line[1] == "!" and line[2].isascii() and line[2].isalpha():
        return 4
    match = _BLOCK_START.match(line)
    if match is not None and match.group(1).lower() in HTML_BLOCK_NAMES:
        return 6
    if interrupt:
        return None
    if _COMPLETE_TAG.match(line):
        name = _TAG_NAME.match(line)
        if name is not None and name.group(1).lower() not in HTML_RAW_NAMES:
            return 7
    return None


def _line_text(t: Tokenizer) -> str:
    view = t.view()
    end = view.find(LINE_ENDING, t.index)
    return view[t.index : end if end != -1 else len(view)]


def html_flow(t: Tokenizer) -> bool:
    """First line of an HTML block; stores ``(kind, ended)`` in ``t.scratch``."""
    indent = count_space_or_tab(t)
    if indent > 3:
        return False
    line = _line_text(t)
    kind = html_flow_kind(line[indent:], t.interrupt or t.lazy)
    if kind is None:
        return False
    t.scratch = (kind, html_flow_line(t, kind))
    return True


def html_flow_line(t: Tokenizer, kind: int) -> bool:
    """Consume one line of an HTML block; return whether it ends the block."""
    end = _ENDS.get(kind)
    ended = end is not None and end.search(_line_text(t)) is not None
    if t.current is not None and t.current != LINE_ENDING:
        t.enter(TokenType.HTML_FLOW_DATA)
        while t.current is not None and t.current != LINE_ENDING:
            t.consume()
        t.exit(TokenType.HTML_FLOW_DATA)
    return ended
