"""ContextVar-based parse configuration for huellas.

Provides thread-local configuration using Python's ContextVars (PEP 567).
The configuration is validated when it is built, so a bad construct name
or limit fails before any parsing starts.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    from huellas.config import ParseConfig, parse_config_context
    from huellas import parse

    # Explicit configuration
    result = parse(source, ParseConfig(disabled=frozenset({"html_flow"})))

    # Or configure a whole context
    with parse_config_context(ParseConfig(line_ending="\\r\\n")):
        result = parse(source)

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from huellas.errors import ConfigError

LINE_ENDINGS = ("\n", "\r\n", "\r")


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        disabled: Names of constructs to switch off (see
            ``huellas.constructs.CONSTRUCT_NAMES``). Disabled constructs
            degrade to paragraphs or literal text.
        label_size_max: Maximum characters inside a link label
        destination_balance_max: Maximum nesting of unescaped parentheses
            in a raw link destination
        destination_size_max: Maximum characters in a link destination
            (None for unlimited)
        list_item_value_size_max: Maximum digits in an ordered list value
        line_ending: Preferred output line ending, recorded on the result.
            None means "use the first line ending found in the source".

    """

    disabled: frozenset[str] = field(default_factory=frozenset)
    label_size_max: int = 999
    destination_balance_max: int = 32
    destination_size_max: int | None = None
    list_item_value_size_max: int = 9
    line_ending: str | None = None

    def __post_init__(self) -> None:
        from huellas.constructs import CONSTRUCT_NAMES, REQUIRED_CONSTRUCTS

        if not isinstance(self.disabled, frozenset):
            raise ConfigError("expected a frozenset of construct names", "disabled")
        unknown = sorted(self.disabled - CONSTRUCT_NAMES)
        if unknown:
            raise ConfigError(f"unknown construct(s): {', '.join(unknown)}", "disabled")
        required = sorted(self.disabled & REQUIRED_CONSTRUCTS)
        if required:
            raise ConfigError(f"cannot disable {', '.join(required)}", "disabled")

        for name in ("label_size_max", "destination_balance_max", "list_item_value_size_max"):
            _check_limit(name, getattr(self, name))
        if self.destination_size_max is not None:
            _check_limit("destination_size_max", self.destination_size_max)

        if self.line_ending is not None and self.line_ending not in LINE_ENDINGS:
            raise ConfigError(f"unsupported line ending {self.line_ending!r}", "line_ending")

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> ParseConfig:
        """Create ParseConfig from dictionary.

        Useful when configuration comes from an external source (YAML,
        TOML, command line). Unknown keys are silently ignored. ``disabled``
        may be any iterable of names; repeating a name is an error.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ParseConfig attribute names.

        Returns:
            New ParseConfig instance with values from dict.

        Raises:
            ConfigError: If a value is invalid.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "disabled": ["html_flow", "html_text"],
            ...     "unknown_key": "ignored",
            ... })
            >>> sorted(config.disabled)
            ['html_flow', 'html_text']

        """
        valid_fields = {f for f in cls.__dataclass_fields__}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "disabled" in filtered:
            filtered["disabled"] = _construct_set(filtered["disabled"])
        return cls(**filtered)


def _check_limit(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"expected a positive integer, got {value!r}", name)


def _construct_set(names: Iterable[str] | str) -> frozenset[str]:
    if isinstance(names, str):
        names = [names]
    names = list(names)
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ConfigError(f"construct {name!r} listed twice", "disabled")
        seen.add(name)
    return frozenset(seen)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

# Thread-local configuration via ContextVar
_parse_config: ContextVar[ParseConfig] = ContextVar(
    "parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local)."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for current context.

    Args:
        config: ParseConfig instance to use for this context.

    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: ParseConfig to use within the context.

    Example:
        >>> with parse_config_context(ParseConfig(disabled=frozenset({"attention"}))):
        ...     result = parse("*not emphasis*")
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "LINE_ENDINGS",
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
