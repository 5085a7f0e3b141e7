"""Verify package imports work correctly."""


def test_import_chatmark() -> None:
    """Test that chatmark can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import chatmark

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert chatmark.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from chatmark import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_api_exports() -> None:
    """Every name in __all__ resolves on the package."""
    import chatmark

    for name in chatmark.__all__:
        assert hasattr(chatmark, name), name
