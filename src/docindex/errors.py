"""Exceptions raised by the document index."""

from __future__ import annotations

from pathlib import Path


class DocIndexError(Exception):
    """Base class for all document index failures."""


class ConfigurationError(DocIndexError):
    """The index root cannot be used."""


class RootNotFoundError(ConfigurationError, FileNotFoundError):
    """The index root does not exist."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"index root not found: {str(root)!r}")
        self.root = root


class RootNotADirectoryError(ConfigurationError, NotADirectoryError):
    """The index root exists but is not a directory."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"not a directory: {str(root)!r}")
        self.root = root


class DocumentReadError(DocIndexError, OSError):
    """A file or directory under the root could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"failed to read {str(path)!r}: {reason}")
        self.path = Path(path)


class MetadataDecodeError(DocIndexError, ValueError):
    """A metadata block could not be decoded into the index schema."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"invalid metadata in {filename!r}: {reason}")
        self.filename = filename


class DocumentNotFoundError(DocIndexError, KeyError):
    """The requested document is not part of the current snapshot."""

    def __init__(self, filename: str) -> None:
        super().__init__(filename)
        self.filename = filename

    def __str__(self) -> str:
        # KeyError would otherwise render the repr of its argument
        return f"doc not found: {self.filename!r}"


def is_not_found(exc: BaseException) -> bool:
    """Return True if ``exc`` reports a document missing from the index."""
    return isinstance(exc, DocumentNotFoundError)
