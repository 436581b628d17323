"""Shared test fixtures for toto."""

from __future__ import annotations

from pathlib import Path

import pytest

from chirp.http.response import Response


@pytest.fixture
def beer_menu() -> list[object]:
    """The two-object menu used across the suite, in flat-pairs form."""
    return [
        "beer", {"many": ["search", "browse"], "one": ["picture"]},
        "pub", {"many": ["map"], "one": ["info"]},
    ]


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    """Create an app root with an empty templates/ directory."""
    (tmp_path / "templates").mkdir()
    return tmp_path


def write_template(root: Path, name: str, content: str) -> Path:
    """Write a template under ``root/templates`` and return its path."""
    path = root / "templates" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def location(response: Response) -> str:
    """Return the Location header of a redirect response."""
    for name, value in response.headers:
        if name.lower() == "location":
            return value
    return ""
