"""Index configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_DELIMITER = b"\n\n"


@dataclass(slots=True)
class IndexConfig:
    root: Path
    delimiter: bytes = DEFAULT_DELIMITER
    follow_symlinks: bool = False
    relative_keys: bool = True

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        if not isinstance(self.delimiter, bytes) or not self.delimiter:
            raise ValueError("delimiter must be a non-empty bytes value")

    def resolve_root(self, base_dir: Path | None = None) -> Path:
        if self.root.is_absolute() or base_dir is None:
            return self.root
        return base_dir / self.root
