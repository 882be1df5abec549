"""Path canonicalization and precondition checks shared by the file helpers."""

from __future__ import annotations

import errno
import os
from pathlib import Path


def as_path(value: str | os.PathLike[str], name: str = "path") -> Path:
    if value is None:
        raise TypeError(f"{name} must not be None")
    return Path(value)


def canonical_path(path: str | os.PathLike[str]) -> Path:
    """Absolute path with ``..`` segments and symlinks resolved."""
    return Path(os.path.realpath(path))


def is_within(child: Path, parent: Path) -> bool:
    """True if canonical *child* lies strictly below canonical *parent*."""
    return child != parent and child.is_relative_to(parent)


def lexists(path: Path) -> bool:
    """True if anything, including a dangling symlink, is at *path*."""
    return path.exists() or path.is_symlink()


def require_exists(path: Path, name: str) -> None:
    if not lexists(path):
        raise FileNotFoundError(errno.ENOENT, f"{name} does not exist", str(path))


def require_file(path: Path, name: str) -> None:
    require_exists(path, name)
    if path.is_dir():
        raise IsADirectoryError(errno.EISDIR, f"{name} is a directory, not a file", str(path))


def require_directory(path: Path, name: str) -> None:
    require_exists(path, name)
    if not path.is_dir():
        raise NotADirectoryError(errno.ENOTDIR, f"{name} is not a directory", str(path))


def require_directory_if_exists(path: Path, name: str) -> None:
    if lexists(path) and not path.is_dir():
        raise NotADirectoryError(errno.ENOTDIR, f"{name} exists but is not a directory", str(path))


def require_absent(path: Path, name: str) -> None:
    if lexists(path):
        raise FileExistsError(errno.EEXIST, f"{name} already exists", str(path))


def require_writable(path: Path, name: str) -> None:
    if lexists(path) and not os.access(path, os.W_OK):
        raise PermissionError(errno.EACCES, f"{name} is not writable", str(path))


def require_not_same(path1: Path, path2: Path) -> None:
    """Reject two paths that name the same file once canonicalized."""
    if canonical_path(path1) == canonical_path(path2):
        raise ValueError(f"File canonical paths are equal: '{canonical_path(path1)}' (file1='{path1}', file2='{path2}')")
