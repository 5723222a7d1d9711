"""Verify package imports work correctly."""


def test_import_huellas() -> None:
    """Test that huellas can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import huellas

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert huellas.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from huellas import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_names_resolve() -> None:
    """Everything in __all__ is importable from the package root."""
    import huellas

    for name in huellas.__all__:
        assert getattr(huellas, name) is not None, name
