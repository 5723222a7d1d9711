"""Tests for the construct table and switching constructs off."""

import pytest

from huellas import ParseConfig, TokenType, parse
from huellas.constructs import CONSTRUCT_NAMES, CONSTRUCTS, REQUIRED_CONSTRUCTS, ConstructTable
from huellas.errors import InvariantError
from huellas.tokens import ContentType

T = TokenType


def names(constructs) -> list[str]:
    return [c.name for c in constructs]


def entered(source: str, *disabled: str) -> list[TokenType]:
    config = ParseConfig(disabled=frozenset(disabled))
    return [e.name for e in parse(source, config).events if e.is_enter]


class TestConstructTable:
    """Lookup and dispatch order."""

    def test_names_are_closed_set(self) -> None:
        assert CONSTRUCT_NAMES == {c.name for c in CONSTRUCTS}
        assert REQUIRED_CONSTRUCTS <= CONSTRUCT_NAMES

    def test_angle_bracket_tries_autolink_first(self) -> None:
        table = ConstructTable()
        assert names(table.starting_with(ContentType.TEXT, "<")) == ["autolink", "html_text"]

    def test_backslash_tries_escape_first(self) -> None:
        table = ConstructTable()
        assert names(table.starting_with(ContentType.TEXT, "\\")) == [
            "character_escape",
            "hard_break_escape",
        ]

    def test_string_constructs(self) -> None:
        table = ConstructTable()
        assert table.markers(ContentType.STRING) == {"&", "\\"}
        assert table.starting_with(ContentType.STRING, "*") == ()

    def test_flow_order(self) -> None:
        assert names(ConstructTable().of(ContentType.FLOW)) == [
            "blank_line",
            "code_indented",
            "heading_atx",
            "code_fenced",
            "html_flow",
            "heading_setext",
            "thematic_break",
        ]

    def test_disabled_construct_drops_out(self) -> None:
        table = ConstructTable(frozenset({"autolink", "list_item"}))
        assert not table.enabled("autolink")
        assert names(table.starting_with(ContentType.TEXT, "<")) == ["html_text"]
        assert names(table.of(ContentType.DOCUMENT)) == ["block_quote"]

    def test_get_disabled_raises(self) -> None:
        table = ConstructTable(frozenset({"attention"}))
        with pytest.raises(InvariantError, match="not enabled"):
            table.get("attention")

    def test_get_enabled(self) -> None:
        assert ConstructTable().get("code_text").content_type is ContentType.TEXT

    def test_tables_are_cached_per_config(self) -> None:
        first = ConstructTable.for_config(ParseConfig())
        assert ConstructTable.for_config(ParseConfig()) is first
        other = ConstructTable.for_config(ParseConfig(disabled=frozenset({"attention"})))
        assert other is not first

    def test_repr(self) -> None:
        table = ConstructTable(frozenset({"html_text", "autolink"}))
        assert repr(table) == "ConstructTable(disabled=['autolink', 'html_text'])"


class TestDisabling:
    """Disabled constructs degrade to other constructs or text."""

    def test_code_fenced_becomes_code_text(self) -> None:
        tokens = entered("```\na\n```", "code_fenced")
        assert T.CODE_FENCED not in tokens
        assert T.CODE_TEXT in tokens

    def test_html_flow_becomes_html_text(self) -> None:
        tokens = entered("<div>", "html_flow")
        assert T.HTML_FLOW not in tokens
        assert tokens == [T.PARAGRAPH, T.HTML_TEXT, T.HTML_TEXT_DATA]

    def test_attention(self) -> None:
        assert entered("*a*", "attention") == [T.PARAGRAPH, T.DATA]

    def test_heading_atx(self) -> None:
        assert entered("# a", "heading_atx") == [T.PARAGRAPH, T.DATA]

    def test_block_quote(self) -> None:
        assert entered("> a", "block_quote") == [T.PARAGRAPH, T.DATA]

    def test_list_item(self) -> None:
        assert entered("- a", "list_item") == [T.PARAGRAPH, T.DATA]

    def test_thematic_break(self) -> None:
        tokens = entered("___", "thematic_break")
        assert T.THEMATIC_BREAK not in tokens
        assert tokens[0] is T.PARAGRAPH

    def test_heading_setext(self) -> None:
        tokens = entered("a\n=", "heading_setext")
        assert T.HEADING_SETEXT not in tokens
        assert tokens[0] is T.PARAGRAPH

    def test_code_indented(self) -> None:
        tokens = entered("    a", "code_indented")
        assert T.CODE_INDENTED not in tokens
        assert T.PARAGRAPH in tokens

    def test_definition(self) -> None:
        result = parse("[a]: /b\n\n[a]", ParseConfig(disabled=frozenset({"definition"})))
        tokens = [e.name for e in result.events if e.is_enter]
        assert T.DEFINITION not in tokens
        assert T.LINK not in tokens
        assert len(result.definitions) == 0

    def test_label_end(self) -> None:
        assert T.LINK not in entered("[a](b)", "label_end")

    def test_character_escape(self) -> None:
        tokens = entered("\\*a*", "character_escape")
        assert T.CHARACTER_ESCAPE not in tokens
        assert T.EMPHASIS in tokens

    def test_character_reference(self) -> None:
        assert entered("&amp;", "character_reference") == [T.PARAGRAPH, T.DATA]

    def test_code_text(self) -> None:
        assert entered("`a`", "code_text") == [T.PARAGRAPH, T.DATA]
