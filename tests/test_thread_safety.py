"""Thread safety of parsing.

Configuration lives in a ContextVar and every parse builds its own feed,
tokenizers and definition table, so concurrent parses with different
configurations must not interfere. These tests use real threads.
"""

from concurrent.futures import ThreadPoolExecutor

from huellas import ParseConfig, TokenType, parse, parse_config_context

SOURCE = "# *a*\n\n> [b]\n\n[b]: /u\n\n```\nc\n```"

CONFIGS = [
    ParseConfig(),
    ParseConfig(disabled=frozenset({"attention"})),
    ParseConfig(disabled=frozenset({"block_quote", "code_fenced"})),
    ParseConfig(disabled=frozenset({"definition"})),
]


class TestConcurrentParsing:
    """Parallel parses agree with sequential ones."""

    def test_explicit_configs(self) -> None:
        expected = [parse(SOURCE, config).events for config in CONFIGS]
        jobs = CONFIGS * 25
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda config: parse(SOURCE, config).events, jobs))
        for index, events in enumerate(results):
            assert events == expected[index % len(CONFIGS)]

    def test_context_configs(self) -> None:
        def run(config: ParseConfig) -> bool:
            with parse_config_context(config):
                names = {e.name for e in parse(SOURCE).events}
            return TokenType.EMPHASIS in names

        jobs = CONFIGS * 25
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(run, jobs))
        for config, has_emphasis in zip(jobs, results):
            assert has_emphasis is ("attention" not in config.disabled)

    def test_shared_result(self) -> None:
        """A finished result can be read from many threads."""
        result = parse(SOURCE)

        def read(_: int) -> int:
            return len(result.unused_definitions()) + len(result.events)

        with ThreadPoolExecutor(max_workers=8) as pool:
            counts = set(pool.map(read, range(50)))
        assert counts == {len(result.events)}
