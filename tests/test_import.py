"""Verify package imports work correctly."""


def test_import_tejido() -> None:
    """Test that tejido can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import tejido

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert tejido.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from tejido import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_api_resolves() -> None:
    """Every name in __all__ is importable from the package root."""
    import tejido

    missing = [name for name in tejido.__all__ if not hasattr(tejido, name)]
    assert missing == []
