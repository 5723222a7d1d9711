"""Tests for positions, slices and string decoding."""

import pytest

from huellas import TokenType, parse
from huellas.errors import InvariantError
from huellas.location import Point
from huellas.slice import Position, Slice, decode_character_reference, decode_string


class TestPosition:
    """Spans recovered from exit events."""

    def test_from_exit_event(self) -> None:
        events = parse("*a*").events
        exit_index = max(i for i, e in enumerate(events) if e.name is TokenType.EMPHASIS)
        position = Position.from_exit_event(events, exit_index)
        assert position.to_indices() == (0, 3)

    def test_nested_same_type(self) -> None:
        events = parse("> > a").events
        position = Position.from_exit_event(events, len(events) - 2)
        assert events[-2].name is TokenType.BLOCK_QUOTE
        assert position.to_indices() == (2, 5)

    def test_enter_event_rejected(self) -> None:
        with pytest.raises(InvariantError, match="expected an exit"):
            Position.from_exit_event(parse("a").events, 0)


class TestSlice:
    """Source text of a span."""

    def test_plain(self) -> None:
        source = "*a*"
        events = parse(source).events
        assert Slice.from_exit_event(source, events, len(events) - 1).as_str() == "*a*"

    def test_starts_inside_tab(self) -> None:
        position = Position(Point(1, 2, 0, 1), Point(1, 6, 2))
        value = Slice.from_position("\tb", position)
        assert (value.text, value.before, value.after) == ("b", 3, 0)
        assert value.serialize() == "   b"
        assert len(value) == 4

    def test_ends_inside_tab(self) -> None:
        value = Slice.from_position("a\tb", Position(Point(1, 1, 0), Point(1, 3, 1, 1)))
        assert value.serialize() == "a "
        assert value.as_str() == "a"


class TestDecodeCharacterReference:
    """Named, decimal and hexadecimal references."""

    @pytest.mark.parametrize(
        ("value", "marker", "expected"),
        [
            ("amp", "&", "&"),
            ("ngE", "&", "\u2267\u0338"),
            ("35", "#", "#"),
            ("0", "#", "\ufffd"),
            ("41", "x", "A"),
            ("D800", "x", "\ufffd"),
            ("110000", "x", "\ufffd"),
            ("bogus", "&", None),
        ],
    )
    def test_decode(self, value: str, marker: str, expected: str | None) -> None:
        assert decode_character_reference(value, marker) == expected


class TestDecodeString:
    """Escapes and references in string content."""

    def test_plain_text_unchanged(self) -> None:
        assert decode_string("/url") == "/url"

    def test_escapes_and_references(self) -> None:
        assert decode_string(r"\*&amp;&#65;&#x42;") == "*&AB"

    def test_unknown_reference_kept(self) -> None:
        assert decode_string("&bogus;") == "&bogus;"

    def test_non_punctuation_escape_kept(self) -> None:
        assert decode_string(r"\a") == r"\a"
