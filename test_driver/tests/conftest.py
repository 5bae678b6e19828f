"""Shared fixtures for gig tests."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from gig import index as index_mod
from gig.assets import assets_from_mapping
from gig.index import TemplateIndex, build_index


@pytest.fixture(autouse=True)
def reset_index_cache():
    """Save and restore the process-wide index cache around each test."""
    saved = index_mod._INDEXES.copy()
    yield
    index_mod._INDEXES.clear()
    index_mod._INDEXES.update(saved)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point $GIG_CONFIG at a (missing) file so the user's config is never read."""
    path = tmp_path / "gig-config.yaml"
    monkeypatch.setenv("GIG_CONFIG", str(path))
    return path


@pytest.fixture
def make_tree(tmp_path: Path):
    """Factory that writes a template tree into a temp directory.

    Usage::

        root = make_tree({
            "Python.gitignore": "*.pyc\\n",
            "Global/macOS.gitignore": ".DS_Store\\n",
        })
    """
    _counter = 0

    def _make(files: dict[str, str | bytes]) -> Path:
        nonlocal _counter
        root = tmp_path / f"templates_{_counter}"
        root.mkdir()
        _counter += 1
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_bytes(content.encode("utf-8"))
        return root

    return _make


@pytest.fixture
def make_index():
    """Factory that builds a TemplateIndex from an in-memory ``{path: content}`` mapping."""

    def _make(files: dict[str, str]) -> TemplateIndex:
        return build_index(assets_from_mapping(files))

    return _make


@pytest.fixture
def capture_logs():
    """Capture gig logger output into a StringIO buffer.

    The logger has propagate=False and its own StreamHandler bound to the
    original sys.stderr, so capsys/caplog cannot see it.
    """
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("gig")
    logger.addHandler(handler)
    yield buf
    logger.removeHandler(handler)
