"""Error types and the paths that raise them.

Markdown input never raises; configuration mistakes and broken internal
invariants do.
"""

import pytest

from huellas import ParseConfig, parse
from huellas.definitions import Definition, DefinitionTable
from huellas.errors import ConfigError, HuellasError, InvariantError
from huellas.location import Point


class TestConfigError:
    """ConfigError formatting and hierarchy."""

    def test_message_only(self) -> None:
        err = ConfigError("bad value")
        assert str(err) == "bad value"
        assert err.field is None

    def test_with_field(self) -> None:
        err = ConfigError("bad value", "label_size_max")
        assert str(err) == "label_size_max: bad value"
        assert err.message == "bad value"

    def test_is_huellas_error(self) -> None:
        assert isinstance(ConfigError("x"), HuellasError)


class TestInvariantError:
    """InvariantError formatting and hierarchy."""

    def test_message_only(self) -> None:
        err = InvariantError("stack not empty")
        assert str(err) == "stack not empty"
        assert err.point is None

    def test_with_point(self) -> None:
        err = InvariantError("stack not empty", Point(3, 7, 20))
        assert str(err) == "3:7 stack not empty"

    def test_is_huellas_error(self) -> None:
        assert isinstance(InvariantError("x"), HuellasError)


class TestRaisingPaths:
    """Where each error surfaces."""

    def test_bad_config_fails_before_parsing(self) -> None:
        with pytest.raises(ConfigError):
            parse("a", ParseConfig(disabled=frozenset({"nope"})))

    def test_frozen_definition_table_rejects_writes(self) -> None:
        table = DefinitionTable()
        table.freeze()
        with pytest.raises(InvariantError, match="after freeze"):
            table.add(Definition("a", "A", "/a"))


class TestMalformedInput:
    """Malformed Markdown degrades instead of raising."""

    @pytest.mark.parametrize(
        "source",
        [
            "[",
            "![",
            "[a](",
            "[a](<b",
            "<",
            "<a",
            "<!--",
            "`",
            "```",
            "&#;",
            "&#x110000;",
            "\\",
            "> ",
            "-",
            "1.",
            "[a]:",
            "[a]: <",
            '[a]: b "',
            "*" * 50,
            "[" * 50 + "]" * 50,
            "\0",
            "\t\t>\t-\t```",
        ],
    )
    def test_no_exception(self, source: str) -> None:
        result = parse(source)
        assert result.events
        assert result.events[-1].point.offset == len(source)
