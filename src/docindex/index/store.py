"""In-memory document index with atomic reloads."""

from __future__ import annotations

import logging
import threading
from collections.abc import MutableMapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from docindex.config import IndexConfig
from docindex.errors import DocumentNotFoundError
from docindex.ingestion.splitter import parse_document
from docindex.models import Document, MetadataCodec
from docindex.utils.files import check_root, iter_documents

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Every loaded document at one point in time.

    ``filenames`` is the sorted key set of ``bodies``; ``metadata`` only holds
    documents that had a metadata block.
    """

    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    bodies: Mapping[str, bytes] = field(default_factory=lambda: MappingProxyType({}))
    filenames: tuple[str, ...] = ()

    @classmethod
    def build(cls, metadata: dict[str, Any], bodies: dict[str, bytes]) -> "Snapshot":
        return cls(
            metadata=MappingProxyType(metadata),
            bodies=MappingProxyType(bodies),
            filenames=tuple(sorted(bodies)),
        )


class DocIndex:
    """Documents under a directory, cached with their decoded metadata.

    ``schema`` is a pydantic model class or a :class:`MetadataCodec`. All
    public methods serialize on a single lock; :meth:`reload` holds it for
    the entire walk so readers always see one complete snapshot.
    """

    def __init__(
        self,
        root: Path | str,
        schema: Any,
        *,
        config: IndexConfig | None = None,
        base_dir: Path | None = None,
    ) -> None:
        if config is None:
            config = IndexConfig(root=Path(root))
        else:
            config = replace(config, root=Path(root))
        self.config = config
        self.codec = MetadataCodec.coerce(schema)
        # relative roots are taken against base_dir when one is given
        self._root = check_root(self.config.resolve_root(base_dir))
        self._lock = threading.Lock()
        self._snapshot = Snapshot()
        self.reload()

    @classmethod
    def open(
        cls,
        root: Path | str,
        schema: Any,
        *,
        base_dir: Path | None = None,
        **options: Any,
    ) -> "DocIndex":
        """Read every document under ``root``; ``options`` go to :class:`IndexConfig`."""
        return cls(
            root,
            schema,
            config=IndexConfig(root=Path(root), **options),
            base_dir=base_dir,
        )

    @property
    def root(self) -> Path:
        return self._root

    @property
    def schema(self) -> type:
        return self.codec.schema

    def _key(self, path: Path) -> str:
        if self.config.relative_keys:
            return path.relative_to(self._root).as_posix()
        return str(path)

    def _load(self) -> Snapshot:
        metadata: dict[str, Any] = {}
        bodies: dict[str, bytes] = {}
        for path, data in iter_documents(self._root, follow_symlinks=self.config.follow_symlinks):
            key = self._key(path)
            parsed = parse_document(key, data, self.codec, delimiter=self.config.delimiter)
            if parsed.metadata is not None:
                metadata[key] = parsed.metadata
            bodies[key] = parsed.body
        return Snapshot.build(metadata, bodies)

    def reload(self) -> None:
        """Re-read the whole tree and swap in the result.

        On failure the previous snapshot stays in place and the error is
        raised to the caller.
        """
        with self._lock:
            try:
                snapshot = self._load()
            except Exception:
                LOGGER.warning("Reload of %s aborted; keeping previous snapshot", self._root)
                raise
            self._snapshot = snapshot
        LOGGER.info(
            "Loaded %d documents (%d with metadata) from %s",
            len(snapshot.filenames),
            len(snapshot.metadata),
            self._root,
        )

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    def filenames(self) -> tuple[str, ...]:
        """Sorted filenames loaded by the last successful reload."""
        with self._lock:
            return self._snapshot.filenames

    def _metadata_for(self, snapshot: Snapshot, filename: str) -> Any:
        stored = snapshot.metadata.get(filename)
        if stored is None:
            return self.codec.empty()
        return self.codec.copy(stored)

    def doc(self, filename: str) -> Document[Any]:
        """Return the body and metadata of ``filename``.

        Documents without a metadata block get a zero-valued record.
        Unknown names raise :class:`DocumentNotFoundError`.
        """
        with self._lock:
            snapshot = self._snapshot
            if filename not in snapshot.bodies:
                raise DocumentNotFoundError(filename)
            return Document(
                filename=filename,
                metadata=self._metadata_for(snapshot, filename),
                body=snapshot.bodies[filename],
                has_metadata=filename in snapshot.metadata,
            )

    def body(self, filename: str) -> bytes:
        return self.doc(filename).body

    def metadata(self, filename: str) -> Any:
        return self.doc(filename).metadata

    def all_metadata(self, out: MutableMapping[str, Any] | None = None) -> MutableMapping[str, Any]:
        """Fill ``out`` with the metadata of every document and return it.

        Existing entries in ``out`` are discarded first, so afterwards its keys
        are exactly :meth:`filenames`.
        """
        if out is None:
            out = {}
        elif not isinstance(out, MutableMapping):
            raise TypeError(f"out must be a mutable mapping, got {type(out).__name__}")
        with self._lock:
            snapshot = self._snapshot
            out.clear()
            for filename in snapshot.filenames:
                out[filename] = self._metadata_for(snapshot, filename)
        return out

    def __len__(self) -> int:
        return len(self.filenames())

    def __contains__(self, filename: object) -> bool:
        with self._lock:
            return filename in self._snapshot.bodies

    def __iter__(self) -> Iterator[str]:
        return iter(self.filenames())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(root={str(self._root)!r}, schema={self.schema.__name__})"
