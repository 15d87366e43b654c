"""Persistence adapter and atomic file operations.

This module provides:
- PersistenceAdapter: the file-system contract the engine depends on
- LocalFileAdapter: the shipped implementation over the local disk
- atomic_write: temp file + os.replace write primitive

The engine only ever talks to the adapter, so tests and embedding
applications can substitute their own storage.
"""

import contextlib
import logging
import os
import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable

__all__ = [
    "PersistenceAdapter",
    "LocalFileAdapter",
    "atomic_write",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class PersistenceAdapter(Protocol):
    """File-system primitives used by the config engine.

    Implementations must surface failures as OSError (or a subclass)
    and must never silently truncate a destination.
    """

    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path, limit: int | None = None) -> str: ...

    def write_text(self, path: Path, content: str) -> None: ...

    def copy(self, src: Path, dest: Path) -> None: ...

    def modified_time(self, path: Path) -> float | None: ...


def atomic_write(path: Path, content: str) -> None:
    """Write content to path atomically using temp file + os.replace.

    Uses PID in temp filename to prevent collisions when multiple
    processes write simultaneously.

    Args:
        path: Target file path.
        content: Content to write.

    Raises:
        OSError: If write fails.

    """
    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = path.parent / f".{path.name}.{os.getpid()}.tmp"
    try:
        # newline="" keeps "\n" as-is on every platform
        with open(temp_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(temp_path, path)
    except OSError:
        # Cleanup temp file if it exists, ignoring errors
        with contextlib.suppress(OSError):
            if temp_path.exists():
                temp_path.unlink()
        raise


class LocalFileAdapter:
    """PersistenceAdapter over the local file system."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path, limit: int | None = None) -> str:
        """Read path as UTF-8, stopping after limit characters when given."""
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read(-1 if limit is None else limit)

    def write_text(self, path: Path, content: str) -> None:
        atomic_write(path, content)

    def copy(self, src: Path, dest: Path) -> None:
        """Copy src over dest byte-for-byte, creating dest's parent directory."""
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
        logger.debug("Copied %s -> %s", src, dest)

    def modified_time(self, path: Path) -> float | None:
        try:
            return path.stat().st_mtime
        except OSError:
            return None
