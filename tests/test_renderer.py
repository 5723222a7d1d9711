"""Tests for the trace renderer."""

from __future__ import annotations

import pytest

from huellas import TokenType, parse
from huellas.errors import InvariantError
from huellas.location import Point
from huellas.renderers import EventRenderer, TraceRenderer, render_trace
from huellas.tokens import enter, exit_


class TestTraceRenderer:
    """Outline rendering of event streams."""

    def test_paragraph(self) -> None:
        assert render_trace(parse("a")) == "PARAGRAPH 1:1-1:2\n  DATA 1:1-1:2 'a'"

    def test_lazy_block_quote(self) -> None:
        expected = "\n".join(
            [
                "BLOCK_QUOTE 1:1-2:2",
                "  BLOCK_QUOTE_PREFIX 1:1-1:3",
                "    BLOCK_QUOTE_MARKER 1:1-1:2 '>'",
                "    SPACE_OR_TAB 1:2-1:3 ' '",
                "  PARAGRAPH 1:3-2:2",
                "    DATA 1:3-1:4 'a'",
                "    LINE_ENDING 1:4-2:1 '\\n'",
                "    DATA 2:1-2:2 'b'",
            ]
        )
        assert render_trace(parse("> a\nb")) == expected

    def test_emphasis(self) -> None:
        trace = render_trace(parse("*a*"))
        assert trace.splitlines()[1:3] == [
            "  EMPHASIS 1:1-1:4",
            "    EMPHASIS_SEQUENCE 1:1-1:2 '*'",
        ]

    def test_custom_indent_without_text(self) -> None:
        trace = TraceRenderer(indent=4, show_text=False).render(parse("a"))
        assert trace == "PARAGRAPH 1:1-1:2\n    DATA 1:1-1:2"

    def test_split_tab_renders_as_spaces(self) -> None:
        lines = render_trace(parse(">\t\ta")).splitlines()
        assert lines[3] == "    SPACE_OR_TAB 1:2-1:3 ' '"
        assert lines[4].startswith("  CODE_INDENTED ")

    def test_empty_document(self) -> None:
        assert render_trace(parse("")) == ""

    def test_is_event_renderer(self) -> None:
        assert isinstance(TraceRenderer(), EventRenderer)


class TestMalformedStreams:
    """Streams that are not well nested are rejected."""

    def test_mismatched_exit(self) -> None:
        start = Point.start()
        events = [enter(TokenType.EMPHASIS, start), exit_(TokenType.STRONG, start)]
        with pytest.raises(InvariantError, match="while EMPHASIS is open"):
            TraceRenderer().render_events(events, "")

    def test_exit_with_nothing_open(self) -> None:
        with pytest.raises(InvariantError, match="nothing open"):
            TraceRenderer().render_events([exit_(TokenType.DATA, Point.start())], "")

    def test_unclosed(self) -> None:
        with pytest.raises(InvariantError, match="never closed"):
            TraceRenderer().render_events([enter(TokenType.DATA, Point.start())], "")
