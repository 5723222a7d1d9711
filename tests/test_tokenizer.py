"""Tests for the core tokenizer state machine.

Backtracking, enter/exit bookkeeping and the gapped view used by
subtokenizers.
"""

import pytest

from huellas import ContentType, ParseConfig, TokenType
from huellas.errors import InvariantError
from huellas.feed import Feed
from huellas.tokenizer import Tokenizer

T = TokenType


def make(source: str, content_type: ContentType = ContentType.TEXT, **kwargs) -> Tokenizer:
    return Tokenizer(Feed(source), content_type, ParseConfig(), **kwargs)


def consume_two(t: Tokenizer) -> bool:
    t.enter(T.DATA)
    t.consume()
    t.consume()
    t.exit(T.DATA)
    return True


def consume_then_fail(t: Tokenizer) -> bool:
    t.enter(T.DATA)
    t.consume()
    return False


class TestReading:
    """Position and lookahead."""

    def test_current_previous_peek(self) -> None:
        t = make("abc")
        assert t.current == "a"
        assert t.previous is None
        assert t.peek() == "b"
        t.consume()
        assert t.previous == "a"
        assert t.peek(5) is None

    def test_consume_past_end(self) -> None:
        t = make("")
        assert t.at_end
        with pytest.raises(InvariantError, match="past the end"):
            t.consume()

    def test_view_reads_virtual_spaces_as_spaces(self) -> None:
        assert make("\ta").view() == "\t   a"

    def test_space_run(self) -> None:
        t = make("a \tb")
        assert t.space_run() == 0
        assert t.space_run(1) == 3  # space, tab and one virtual space
        t.consume()
        assert t.space_run() == 3
        assert t.space_run(3) == 0

    def test_space_run_stops_at_end(self) -> None:
        assert make("a  ").space_run(1) == 2
        assert make("a ", indices=[0, 1]).space_run(5) == 0

    def test_space_run_across_gaps(self) -> None:
        # The view skips the "b" and joins the spaces around it
        assert make("a  b  c", indices=[0, 1, 2, 4, 5, 6]).space_run(1) == 4
        # A gap inside a run removes codes from it
        assert make("a   c", indices=[0, 1, 3, 4]).space_run(1) == 2

    def test_gapped_indices(self) -> None:
        t = make("ab> cd", indices=[0, 1, 4, 5])
        assert t.view() == "abcd"
        t.index = 2
        assert t.current == "c"
        assert t.point().offset == 4
        assert t.point_after(1).offset == 2


class TestEnterExit:
    """Events and the open stack."""

    def test_token(self) -> None:
        t = make("ab")
        t.token(T.DATA, 2)
        assert [(e.name, e.point.offset) for e in t.events] == [(T.DATA, 0), (T.DATA, 2)]
        assert t.stack == []

    def test_exit_without_enter(self) -> None:
        with pytest.raises(InvariantError, match="without an open token"):
            make("a").exit(T.DATA)

    def test_mismatched_exit(self) -> None:
        t = make("a")
        t.enter(T.EMPHASIS)
        with pytest.raises(InvariantError, match="does not match open EMPHASIS"):
            t.exit(T.STRONG)

    def test_empty_token_ends_where_it_starts(self) -> None:
        t = make("a")
        t.enter(T.LABEL)
        t.exit(T.LABEL)
        assert t.events[0].point == t.events[1].point


class TestBacktracking:
    """attempt, check and checkpoints."""

    def test_attempt_commits(self) -> None:
        t = make("ab")
        assert t.attempt(consume_two)
        assert t.index == 2
        assert len(t.events) == 2

    def test_attempt_rolls_back(self) -> None:
        t = make("ab")
        assert not t.attempt(consume_then_fail)
        assert t.index == 0
        assert t.events == []
        assert t.stack == []

    def test_check_always_rolls_back(self) -> None:
        t = make("ab")
        assert t.check(consume_two)
        assert t.index == 0
        assert t.events == []

    def test_restore_checkpoint(self) -> None:
        t = make("abc")
        checkpoint = t.checkpoint()
        t.enter(T.DATA)
        t.consume()
        t.restore(checkpoint)
        assert (t.index, t.events, t.stack) == (0, [], [])


class TestRunAndFlush:
    """Running a whole content type and finishing."""

    def test_run_text(self) -> None:
        events = make("*a*").run()
        assert [e.name for e in events if e.is_enter][0] is T.EMPHASIS

    def test_run_string_ignores_text_constructs(self) -> None:
        events = make("*a* &amp;", ContentType.STRING).run()
        names = [e.name for e in events if e.is_enter]
        assert T.EMPHASIS not in names
        assert T.CHARACTER_REFERENCE in names

    def test_document_cannot_run_directly(self) -> None:
        with pytest.raises(InvariantError, match="DOCUMENT"):
            make("a", ContentType.DOCUMENT).run()

    def test_flush_with_open_token(self) -> None:
        t = make("a")
        t.enter(T.DATA)
        t.consume()
        with pytest.raises(InvariantError, match="still open"):
            t.flush()

    def test_flush_before_end(self) -> None:
        with pytest.raises(InvariantError, match="before the end"):
            make("a").flush()

    def test_resolvers_registered_once(self) -> None:
        t = make("a")
        t.register_resolver("data")
        t.register_resolver("data")
        t.register_resolver_before("media")
        assert t.resolvers == ["media", "data"]
