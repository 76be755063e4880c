"""Utility helpers for walking a document tree."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterator

from docindex.errors import DocumentReadError, RootNotADirectoryError, RootNotFoundError

LOGGER = logging.getLogger(__name__)


def check_root(root: Path) -> Path:
    """Ensure ``root`` is an existing directory."""
    root = Path(root)
    try:
        info = root.stat()
    except FileNotFoundError as exc:
        raise RootNotFoundError(root) from exc
    except NotADirectoryError as exc:
        # a parent component is a regular file
        raise RootNotADirectoryError(root) from exc
    except OSError as exc:
        raise DocumentReadError(root, exc.strerror or str(exc)) from exc
    if not stat.S_ISDIR(info.st_mode):
        raise RootNotADirectoryError(root)
    return root


def _raise_walk_error(exc: OSError) -> None:
    raise DocumentReadError(exc.filename or "", exc.strerror or str(exc)) from exc


def _is_regular(path: Path, follow_symlinks: bool) -> bool:
    if not follow_symlinks:
        return stat.S_ISREG(path.lstat().st_mode)
    try:
        info = path.stat()
    except FileNotFoundError:
        # dangling symlink: the link exists but its target does not
        if stat.S_ISLNK(path.lstat().st_mode):
            return False
        raise
    return stat.S_ISREG(info.st_mode)


def iter_documents(root: Path, *, follow_symlinks: bool = False) -> Iterator[tuple[Path, bytes]]:
    """Yield ``(path, content)`` for every regular file under ``root``.

    Order is whatever the walk produces. Any read failure stops the walk
    with :class:`DocumentReadError`.
    """
    root = check_root(root)
    for dirpath, _dirnames, filenames in os.walk(
        root, onerror=_raise_walk_error, followlinks=follow_symlinks
    ):
        for name in filenames:
            path = Path(dirpath) / name
            try:
                if not _is_regular(path, follow_symlinks):
                    LOGGER.debug("Skipping non-regular file %s", path)
                    continue
                data = path.read_bytes()
            except OSError as exc:
                raise DocumentReadError(path, exc.strerror or str(exc)) from exc
            yield path, data
