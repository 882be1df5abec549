"""Path predicates for listing and tree operations.

A filter is any ``Callable[[Path], bool]``. These helpers cover the common
cases; callers compose them however they like.
"""

from __future__ import annotations

import fnmatch
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from fsio.types import PathFilter


def directory_filter(path: Path) -> bool:
    return path.is_dir()


def file_filter(path: Path) -> bool:
    return path.is_file()


def suffix_filter(*suffixes: str, case_sensitive: bool = True) -> PathFilter:
    """Accept paths whose name ends with one of *suffixes* (e.g. ``".txt"``)."""
    wanted = tuple(suffixes if case_sensitive else (s.lower() for s in suffixes))

    def accept(path: Path) -> bool:
        name = path.name if case_sensitive else path.name.lower()
        return name.endswith(wanted)

    return accept


def name_filter(*patterns: str) -> PathFilter:
    """Accept paths whose name matches one of the fnmatch *patterns*."""

    def accept(path: Path) -> bool:
        return any(fnmatch.fnmatchcase(path.name, p) for p in patterns)

    return accept


def and_filter(*filters: PathFilter) -> PathFilter:
    def accept(path: Path) -> bool:
        return all(f(path) for f in filters)

    return accept


def or_filter(*filters: PathFilter) -> PathFilter:
    def accept(path: Path) -> bool:
        return any(f(path) for f in filters)

    return accept


def not_filter(inner: PathFilter) -> PathFilter:
    def accept(path: Path) -> bool:
        return not inner(path)

    return accept
