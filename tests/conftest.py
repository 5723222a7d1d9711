"""Shared fixtures for huellas tests."""

from collections.abc import Iterator

import pytest

from huellas.config import reset_parse_config


@pytest.fixture(autouse=True)
def _default_parse_config() -> Iterator[None]:
    """Every test starts and ends with the default configuration."""
    reset_parse_config()
    yield
    reset_parse_config()
