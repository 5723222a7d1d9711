"""Raw inline HTML: tags, comments, processing instructions, declarations, CDATA.

Matched with the CommonMark regular expressions against the tokenizer's
view, where line endings are ``"\\n"`` and container prefixes are
already cut out, so a tag may span lines.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from huellas.charsets import LINE_ENDING
from huellas.tokens import TokenType

if TYPE_CHECKING:
    from huellas.tokenizer import Tokenizer

_WS = r"[ \t\n]"
_TAG_NAME = r"[A-Za-z][A-Za-z0-9\-]*"
_ATTRIBUTE_NAME = r"[a-zA-Z_:][a-zA-Z0-9_.:\-]*"
_ATTRIBUTE_VALUE = r"(?:[^\"'=<>`\x00-\x20]+|'[^']*'|\"[^\"]*\")"
_ATTRIBUTE = rf"(?:{_WS}+{_ATTRIBUTE_NAME}(?:{_WS}*={_WS}*{_ATTRIBUTE_VALUE})?)"
OPEN_TAG = rf"<{_TAG_NAME}{_ATTRIBUTE}*{_WS}*/?>"
CLOSE_TAG = rf"</{_TAG_NAME}{_WS}*>"
_COMMENT = r"<!-->|<!--->|<!--[\s\S]*?-->"
_INSTRUCTION = r"<\?[\s\S]*?\?>"
_DECLARATION = r"<![A-Za-z][^>]*>"
_CDATA = r"<!\[CDATA\[[\s\S]*?\]\]>"

HTML_TAG = re.compile(
    f"(?:{OPEN_TAG}|{CLOSE_TAG}|{_COMMENT}|{_INSTRUCTION}|{_DECLARATION}|{_CDATA})"
)


def html_text(t: Tokenizer) -> bool:
    if t.current != "<":
        return False
    match = HTML_TAG.match(t.view(), t.index)
    if match is None:
        return False

    end = match.end()
    t.enter(TokenType.HTML_TEXT)
    while t.index < end:
        if t.current == LINE_ENDING:
            t.token(TokenType.LINE_ENDING)
            continue
        t.enter(TokenType.HTML_TEXT_DATA)
        while t.index < end and t.current != LINE_ENDING:
            t.consume()
        t.exit(TokenType.HTML_TEXT_DATA)
    t.exit(TokenType.HTML_TEXT)
    return True
