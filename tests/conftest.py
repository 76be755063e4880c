"""Shared fixtures for docindex tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def doc_tree(tmp_path: Path) -> Path:
    """Directory with one top-level and one nested document."""
    root = tmp_path / "docs"
    (root / "subdir").mkdir(parents=True)
    (root / "foo.txt").write_bytes(b'{"Title":"foo"}\n\nHello from foo.\n')
    (root / "subdir" / "bar.txt").write_bytes(b'{"Title":"bar"}\n\nThis is bar.\n')
    return root
