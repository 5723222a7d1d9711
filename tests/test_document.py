"""Block structure: containers, leaves, interruption and laziness."""

from collections.abc import Callable, Iterator
from dataclasses import replace

import pytest

from huellas import TokenType, constructs, parse
from huellas.config import ParseConfig
from huellas.definitions import DefinitionTable
from huellas.document import DocumentEngine
from huellas.feed import Feed
from huellas.tokenizer import Tokenizer

T = TokenType


def entered(source: str) -> list[TokenType]:
    return [e.name for e in parse(source).events if e.is_enter]


def top_level(source: str) -> list[TokenType]:
    names = []
    depth = 0
    for event in parse(source).events:
        if event.is_enter:
            if depth == 0:
                names.append(event.name)
            depth += 1
        else:
            depth -= 1
    return names


def parent_of(source: str, name: TokenType) -> TokenType | None:
    """Token that encloses the first ``name`` token of the document."""
    stack: list[TokenType] = []
    for event in parse(source).events:
        if event.is_enter:
            if event.name is name:
                return stack[-1] if stack else None
            stack.append(event.name)
        else:
            stack.pop()
    raise AssertionError(f"no {name.name} in {source!r}")


class TestDocumentEngine:
    """The document pass on its own."""

    def test_leaves_text_chunks(self) -> None:
        engine = DocumentEngine(Feed("a"), ParseConfig(), DefinitionTable())
        names = [e.name for e in engine.run() if e.is_enter]
        assert names == [T.PARAGRAPH, T.CHUNK_TEXT]

    def test_records_definitions(self) -> None:
        table = DefinitionTable()
        DocumentEngine(Feed("[a]: /b"), ParseConfig(), table).run()
        assert table["a"].destination == "/b"


class TestLists:
    """List items and list grouping."""

    def test_items_share_a_list(self) -> None:
        names = entered("- a\n- b")
        assert names.count(T.LIST_UNORDERED) == 1
        assert names.count(T.LIST_ITEM) == 2

    def test_marker_change_starts_new_list(self) -> None:
        assert top_level("- a\n* b") == [T.LIST_UNORDERED, T.LINE_ENDING, T.LIST_UNORDERED]

    def test_ordered(self) -> None:
        names = entered("1. a\n2. b")
        assert names[:3] == [T.LIST_ORDERED, T.LIST_ITEM, T.LIST_ITEM_PREFIX]
        assert names.count(T.LIST_ITEM_VALUE) == 2

    def test_delimiter_change_starts_new_list(self) -> None:
        assert entered("1. a\n2) b").count(T.LIST_ORDERED) == 2

    def test_only_one_can_interrupt_paragraph(self) -> None:
        assert T.LIST_ORDERED not in entered("a\n2. b")
        assert T.LIST_ORDERED in entered("a\n1. b")

    def test_empty_item_cannot_interrupt_paragraph(self) -> None:
        assert T.LIST_UNORDERED not in entered("a\n*")

    def test_value_too_long(self) -> None:
        assert T.LIST_ORDERED not in entered("1234567890. a")
        config = ParseConfig(list_item_value_size_max=3)
        assert T.LIST_ORDERED not in [e.name for e in parse("1234. a", config).events]

    def test_lazy_paragraph_continuation(self) -> None:
        names = entered("- a\nb")
        assert names.count(T.PARAGRAPH) == 1
        assert names.count(T.LIST_ITEM) == 1

    def test_continuation_needs_content_indent(self) -> None:
        assert top_level("- a\n\n  b") == [T.LIST_UNORDERED]
        # The first line ending stays inside the item, which survives the blank line
        assert top_level("- a\n\nb") == [T.LIST_UNORDERED, T.BLANK_LINE_ENDING, T.PARAGRAPH]

    def test_nested_list(self) -> None:
        names = entered("- a\n  - b")
        assert names.count(T.LIST_UNORDERED) == 2

    def test_list_item_starting_blank(self) -> None:
        names = entered("-\n  a")
        assert names.count(T.LIST_ITEM) == 1
        assert T.PARAGRAPH in names

    def test_empty_quote_line_keeps_list_tight(self) -> None:
        """A line blank only inside a quote that then closes is not blank in the list."""
        source = "* a\n  > b\n  >\n* c"
        assert T.BLANK_LINE_ENDING not in entered(source)
        # The empty quote line ends at offset 13
        ending = next(e for e in parse(source).events if e.is_enter and e.point.offset == 13)
        assert ending.name is T.LINE_ENDING
        assert top_level(source) == [T.LIST_UNORDERED]

    def test_blank_line_between_items_is_list_level(self) -> None:
        assert parent_of("* a\n  > b\n\n* c", T.BLANK_LINE_ENDING) is T.LIST_UNORDERED

    @pytest.mark.parametrize("source", ["- a\n  >\n  > b", "- a\n  > x\n  >\n  > b"])
    def test_empty_quote_line_is_blank_inside_quote(self, source: str) -> None:
        """Opening or continuing the quote, an empty quote line is blank inside it."""
        assert parent_of(source, T.BLANK_LINE_ENDING) is T.BLOCK_QUOTE

    def test_nested_lists_scale_linearly(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Container prefixes do not rescan the whitespace of deeply nested lines."""
        calls = 0
        peek = Tokenizer.peek

        def counting_peek(self: Tokenizer, ahead: int = 1) -> str | None:
            nonlocal calls
            calls += 1
            return peek(self, ahead)

        monkeypatch.setattr(Tokenizer, "peek", counting_peek)

        def work(depth: int) -> int:
            nonlocal calls
            calls = 0
            parse("\n".join("  " * level + "- a" for level in range(depth)))
            return calls

        small, large = work(25), work(100)
        # Four times the depth is about sixteen times the input
        assert large < 30 * small


class TestBlockQuotes:
    """Block quote prefixes and laziness."""

    def test_nested(self) -> None:
        assert entered("> > a").count(T.BLOCK_QUOTE) == 2

    def test_blank_line_ends_quote(self) -> None:
        assert top_level("> a\n\nb") == [
            T.BLOCK_QUOTE,
            T.LINE_ENDING,
            T.BLANK_LINE_ENDING,
            T.PARAGRAPH,
        ]

    def test_laziness_does_not_apply_to_code(self) -> None:
        assert top_level("> ```\na") == [T.BLOCK_QUOTE, T.LINE_ENDING, T.PARAGRAPH]

    def test_quote_in_list_item(self) -> None:
        names = entered("- > a")
        assert names[:3] == [T.LIST_UNORDERED, T.LIST_ITEM, T.LIST_ITEM_PREFIX]
        assert T.BLOCK_QUOTE in names

    def test_closing_exit_precedes_line_ending(self) -> None:
        events = parse("> a\n\nb").events
        exit_quote = next(e for e in events if e.name is T.BLOCK_QUOTE and not e.is_enter)
        assert exit_quote.point.offset == 3


class TestHeadings:
    """ATX and setext headings."""

    def test_atx(self) -> None:
        assert entered("# a #") == [
            T.HEADING_ATX,
            T.HEADING_ATX_SEQUENCE,
            T.SPACE_OR_TAB,
            T.HEADING_ATX_TEXT,
            T.DATA,
            T.SPACE_OR_TAB,
            T.HEADING_ATX_SEQUENCE,
        ]

    @pytest.mark.parametrize("source", ["#5 bolt", "####### a", "#hashtag"])
    def test_not_atx(self, source: str) -> None:
        assert entered(source)[0] is T.PARAGRAPH

    def test_empty_atx(self) -> None:
        assert entered("#") == [T.HEADING_ATX, T.HEADING_ATX_SEQUENCE]

    def test_atx_interrupts_paragraph(self) -> None:
        assert top_level("a\n# b") == [T.PARAGRAPH, T.LINE_ENDING, T.HEADING_ATX]

    def test_setext(self) -> None:
        assert entered("a\n===") == [
            T.HEADING_SETEXT,
            T.HEADING_SETEXT_TEXT,
            T.DATA,
            T.LINE_ENDING,
            T.HEADING_SETEXT_UNDERLINE,
            T.HEADING_SETEXT_UNDERLINE_SEQUENCE,
        ]

    def test_setext_spans_underline(self) -> None:
        events = parse("a\nb\n--").events
        assert [e.point.offset for e in events if e.name is T.HEADING_SETEXT] == [0, 6]
        text = [e.point.offset for e in events if e.name is T.HEADING_SETEXT_TEXT]
        assert text == [0, 3]

    def test_underline_under_definitions_only(self) -> None:
        names = entered("[a]: /b\n===")
        assert T.HEADING_SETEXT not in names
        assert T.DEFINITION in names
        assert T.PARAGRAPH in names

    def test_underline_after_definition_and_text(self) -> None:
        names = entered("[a]: /b\nc\n---")
        assert names[0] is T.DEFINITION
        assert T.HEADING_SETEXT in names

    def test_setext_needs_paragraph(self) -> None:
        assert entered("===") == [T.PARAGRAPH, T.DATA]

    def test_dash_underline_wins_over_thematic_break(self) -> None:
        assert top_level("a\n---") == [T.HEADING_SETEXT]


class TestThematicBreaks:
    """Thematic breaks and their precedence."""

    def test_spaced(self) -> None:
        assert entered("* * *") == [
            T.THEMATIC_BREAK,
            T.THEMATIC_BREAK_SEQUENCE,
            T.SPACE_OR_TAB,
            T.THEMATIC_BREAK_SEQUENCE,
            T.SPACE_OR_TAB,
            T.THEMATIC_BREAK_SEQUENCE,
        ]

    def test_before_list_item(self) -> None:
        assert top_level("- - -") == [T.THEMATIC_BREAK]

    def test_two_markers_are_not_enough(self) -> None:
        assert T.THEMATIC_BREAK not in entered("**")

    def test_interrupts_paragraph(self) -> None:
        assert top_level("a\n***") == [T.PARAGRAPH, T.LINE_ENDING, T.THEMATIC_BREAK]


class TestCode:
    """Indented and fenced code."""

    def test_indented_trailing_blank_lines(self) -> None:
        assert top_level("    a\n\n\nb") == [
            T.CODE_INDENTED,
            T.LINE_ENDING,
            T.BLANK_LINE_ENDING,
            T.BLANK_LINE_ENDING,
            T.PARAGRAPH,
        ]

    def test_indented_cannot_interrupt_paragraph(self) -> None:
        assert entered("a\n    b") == [
            T.PARAGRAPH,
            T.DATA,
            T.LINE_ENDING,
            T.SPACE_OR_TAB,
            T.DATA,
        ]

    def test_indented_keeps_inner_blank_lines(self) -> None:
        assert top_level("    a\n\n    b") == [T.CODE_INDENTED]

    def test_fenced_info_and_meta(self) -> None:
        names = entered("```py title\n```")
        assert T.CODE_FENCED_FENCE_INFO in names
        assert T.CODE_FENCED_FENCE_META in names

    def test_backtick_fence_info_cannot_hold_backtick(self) -> None:
        # The first line is text; the second opens an empty fence
        assert top_level("``` a`b\n```") == [T.PARAGRAPH, T.LINE_ENDING, T.CODE_FENCED]

    def test_tilde_fence_info_can_hold_backtick(self) -> None:
        assert top_level("~~~ a`b\n~~~") == [T.CODE_FENCED]

    def test_unclosed_fence_runs_to_end(self) -> None:
        assert top_level("```\na\n\nb") == [T.CODE_FENCED]

    def test_closing_fence_must_be_long_enough(self) -> None:
        assert top_level("````\na\n```\n````") == [T.CODE_FENCED]

    def test_fence_closed_by_container_end(self) -> None:
        assert top_level("> ```\n> a\n\nb") == [
            T.BLOCK_QUOTE,
            T.LINE_ENDING,
            T.BLANK_LINE_ENDING,
            T.PARAGRAPH,
        ]


class TestHtmlFlow:
    """HTML blocks."""

    def test_block_tag_ends_at_blank_line(self) -> None:
        names = entered("<div>\n*a*\n\nb")
        assert names[0] is T.HTML_FLOW
        assert T.EMPHASIS not in names
        assert names[-2:] == [T.PARAGRAPH, T.DATA]

    def test_comment_ends_at_terminator(self) -> None:
        assert top_level("<!-- a\n\nb -->\nc") == [T.HTML_FLOW, T.LINE_ENDING, T.PARAGRAPH]

    def test_kind_seven_cannot_interrupt_paragraph(self) -> None:
        assert top_level("a\n<x-y>") == [T.PARAGRAPH]

    def test_script_block(self) -> None:
        assert top_level("<script>\n\na\n</script>") == [T.HTML_FLOW]


@pytest.fixture
def flagged(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[..., None]]:
    """Rebuild the construct tables with one construct's flags changed."""

    def change(name: str, **flags: bool) -> None:
        changed = tuple(
            replace(c, **flags) if c.name == name else c for c in constructs.CONSTRUCTS
        )
        monkeypatch.setattr(constructs, "CONSTRUCTS", changed)
        constructs._table_for.cache_clear()

    yield change
    constructs._table_for.cache_clear()


class TestConstructFlags:
    """The engine takes its interruption, ownership and laziness rules from the table."""

    def test_interrupts(self, flagged: Callable[..., None]) -> None:
        assert top_level("a\n***") == [T.PARAGRAPH, T.LINE_ENDING, T.THEMATIC_BREAK]
        flagged("thematic_break", interrupts=False)
        assert top_level("a\n***") == [T.PARAGRAPH]

    def test_concrete(self, flagged: Callable[..., None]) -> None:
        assert T.HEADING_ATX not in entered("```\n# a\n```")
        flagged("code_fenced", concrete=False)
        assert T.HEADING_ATX in entered("```\n# a\n```")

    def test_lazy(self, flagged: Callable[..., None]) -> None:
        assert top_level("> a\nb") == [T.BLOCK_QUOTE]
        flagged("paragraph", lazy=False)
        assert top_level("> a\nb") == [T.BLOCK_QUOTE, T.LINE_ENDING, T.PARAGRAPH]
