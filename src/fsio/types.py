"""fsio domain types."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Source(Protocol):
    """Anything that can hand out bytes or characters in order."""

    def read(self, size: int = -1, /) -> bytes | str: ...


@runtime_checkable
class Sink(Protocol):
    """Anything that accepts bytes or characters in order."""

    def write(self, data, /) -> int | None: ...  # type: ignore[no-untyped-def]


PathFilter = Callable[[Path], bool]


class DirectoryEntry(BaseModel):
    path: Path
    is_dir: bool
    is_symlink: bool
    is_file: bool
    mtime: float
    size: int

    @classmethod
    def from_dir_entry(cls, entry: os.DirEntry[str]) -> DirectoryEntry:
        """Snapshot an os.scandir() entry without following symlinks for the stat."""
        st = entry.stat(follow_symlinks=False)
        return cls(
            path=Path(entry.path),
            is_dir=entry.is_dir(),
            is_symlink=entry.is_symlink(),
            is_file=entry.is_file(),
            mtime=st.st_mtime,
            size=st.st_size,
        )

    @classmethod
    def from_path(cls, path: Path) -> DirectoryEntry:
        st = path.lstat()
        return cls(
            path=path,
            is_dir=path.is_dir(),
            is_symlink=path.is_symlink(),
            is_file=path.is_file(),
            mtime=st.st_mtime,
            size=st.st_size,
        )
