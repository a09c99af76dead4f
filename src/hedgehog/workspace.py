"""Workspace selection for analysis runs."""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"
SOURCE_SUFFIX = ".rs"


@dataclass(frozen=True)
class Workspace:
    """A Rust workspace chosen for analysis."""
    root: Path

    @classmethod
    def select(cls, path: str | Path) -> "Workspace":
        """Build a workspace from a folder or its Cargo.toml.

        Raises:
            FileNotFoundError: If the path does not exist
        """
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Workspace path does not exist: {path}")
        if path.is_file():
            path = path.parent
        return cls(root=path.resolve())

    @property
    def manifest(self) -> Path:
        return self.root / MANIFEST_NAME

    def source_files(self) -> list[Path]:
        """``.rs`` files at the root and directly in ``src/``, each sorted by name."""
        files = _rust_files(self.root)
        src_dir = self.root / "src"
        if src_dir.is_dir():
            files.extend(_rust_files(src_dir))
        return files

    def describe(self) -> str:
        return f"Loaded: {self.root} ({len(self.source_files())} {SOURCE_SUFFIX} files)"


def _rust_files(directory: Path) -> list[Path]:
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix == SOURCE_SUFFIX),
        key=lambda p: p.name,
    )
