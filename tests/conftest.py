"""Pytest fixtures for scanner tests."""

import json
from pathlib import Path

import pytest


def pytest_configure(config):
    """Register the asyncio marker."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture
def make_project(tmp_path):
    """Build a miniature project under tmp_path.

    Values may be text, or dicts/lists which are written as JSON. A key
    ending in "/" creates an empty directory.

        root = make_project({"package.json": {...}, "src/providers/": None})
    """

    def _make(files: dict | None = None, root: Path | None = None) -> Path:
        root = root or tmp_path
        for relative_path, content in (files or {}).items():
            path = root / relative_path
            if relative_path.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            path.write_text(content or "", encoding="utf-8")
        return root

    return _make
