"""Recursive directory operations: copy, clean, delete, move, size, listing.

Directory listings are taken fresh at every level, so concurrent changes to
the tree by other processes show up as-is. Symbolic links are never followed
into: they are copied as links, deleted as links, and count as zero bytes.
"""

from __future__ import annotations

import atexit
import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from fsio.exceptions import IOErrorList
from fsio.files.file_ops import copy_file, copy_file_to_directory, copy_times, force_mkdir
from fsio.files.paths import (
    as_path,
    canonical_path,
    is_within,
    lexists,
    require_absent,
    require_directory,
    require_directory_if_exists,
    require_exists,
    require_file,
    require_not_same,
    require_writable,
)
from fsio.infrastructure.logger import logger
from fsio.types import DirectoryEntry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from fsio.types import PathFilter

PathLike = str | os.PathLike[str]


def _list_children(directory: Path, path_filter: PathFilter | None = None) -> list[Path]:
    """Immediate children of *directory* accepted by *path_filter*, sorted by name."""
    require_directory(directory, "directory")
    with os.scandir(directory) as it:
        children = sorted(Path(entry.path) for entry in it)
    if path_filter is None:
        return children
    return [child for child in children if path_filter(child)]


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


def list_entries(directory: PathLike, path_filter: PathFilter | None = None) -> list[DirectoryEntry]:
    """Snapshot the immediate children of *directory*."""
    directory = as_path(directory, "directory")
    require_directory(directory, "directory")
    with os.scandir(directory) as it:
        entries = [DirectoryEntry.from_dir_entry(entry) for entry in it]
    entries.sort(key=lambda e: e.path)
    if path_filter is None:
        return entries
    return [e for e in entries if path_filter(e.path)]


def iterate_files(
    directory: PathLike,
    path_filter: PathFilter | None = None,
    *,
    recursive: bool = False,
    dir_filter: PathFilter | None = None,
) -> Iterator[Path]:
    """Yield the non-directory entries of *directory* accepted by *path_filter*.

    With *recursive*, subdirectories accepted by *dir_filter* (all, when it
    is None) are descended into. Symlinks to directories are neither
    descended nor yielded.
    """
    directory = as_path(directory, "directory")
    for child in _list_children(directory):
        if child.is_dir():
            if recursive and not child.is_symlink() and (dir_filter is None or dir_filter(child)):
                yield from iterate_files(child, path_filter, recursive=True, dir_filter=dir_filter)
        elif path_filter is None or path_filter(child):
            yield child


def list_files(
    directory: PathLike,
    path_filter: PathFilter | None = None,
    *,
    recursive: bool = False,
    dir_filter: PathFilter | None = None,
) -> list[Path]:
    return list(iterate_files(directory, path_filter, recursive=recursive, dir_filter=dir_filter))


def list_files_and_dirs(
    directory: PathLike,
    path_filter: PathFilter | None = None,
    *,
    dir_filter: PathFilter | None = None,
) -> list[Path]:
    """List *directory* itself, its subdirectories and the files inside them.

    Subdirectories accepted by *dir_filter* (all, when it is None) are listed
    and descended; a rejected one hides its whole subtree. Files are listed
    when *path_filter* accepts them. Symlinks to directories are skipped.
    """
    directory = as_path(directory, "directory")
    require_directory(directory, "directory")
    found = [directory]

    def walk(current: Path) -> None:
        for child in _list_children(current):
            if child.is_dir():
                if not child.is_symlink() and (dir_filter is None or dir_filter(child)):
                    found.append(child)
                    walk(child)
            elif path_filter is None or path_filter(child):
                found.append(child)

    walk(directory)
    return found


def is_empty_directory(directory: PathLike) -> bool:
    directory = as_path(directory, "directory")
    require_directory(directory, "directory")
    with os.scandir(directory) as it:
        return next(it, None) is None


def directory_contains(directory: PathLike, child: PathLike | None) -> bool:
    """True if *child* exists strictly inside *directory* (a directory does not contain itself)."""
    directory = as_path(directory, "directory")
    require_directory(directory, "directory")
    if child is None or not lexists(Path(child)):
        return False
    return is_within(canonical_path(child), canonical_path(directory))


# ---------------------------------------------------------------------------
# Copy
# ---------------------------------------------------------------------------


def _copy_symlink(link: Path, target: Path) -> None:
    if target.is_dir() and not target.is_symlink():
        raise IsADirectoryError(f"Cannot replace directory '{target}' with symlink '{link}'")
    if lexists(target):
        target.unlink()
    target.symlink_to(os.readlink(link))


def _copy_tree(
    src: Path,
    dst: Path,
    path_filter: PathFilter | None,
    exclusions: frozenset[Path],
    preserve_times: bool,
    buffer: bytearray | None,
) -> None:
    children = _list_children(src, path_filter)
    require_directory_if_exists(dst, "dst")
    dst.mkdir(parents=True, exist_ok=True)
    # Symlinks are compared by their own location, not their target.
    src_canonical = canonical_path(src) if exclusions else src
    for child in children:
        if exclusions and src_canonical / child.name in exclusions:
            continue
        target = dst / child.name
        if child.is_symlink():
            _copy_symlink(child, target)
        elif child.is_dir():
            _copy_tree(child, target, path_filter, exclusions, preserve_times, buffer)
        else:
            copy_file(child, target, preserve_times=preserve_times, buffer=buffer)
    # Children changed dst's mtime, so this must come last.
    if preserve_times:
        copy_times(src, dst)


def copy_directory(
    src: PathLike,
    dst: PathLike,
    *,
    path_filter: PathFilter | None = None,
    preserve_times: bool = True,
    buffer: bytearray | None = None,
) -> None:
    """Copy the tree under *src* into *dst*, merging with anything already there.

    Files in *dst* that also exist in *src* are overwritten; other files in
    *dst* are left alone. When *path_filter* rejects a directory, its whole
    subtree is skipped. *dst* may lie inside *src*: the copies being made are
    never copied again.
    """
    src = as_path(src, "src")
    dst = as_path(dst, "dst")
    require_directory(src, "src")
    require_not_same(src, dst)
    require_directory_if_exists(dst, "dst")
    require_writable(dst, "dst")

    exclusions: frozenset[Path] = frozenset()
    src_canonical = canonical_path(src)
    dst_canonical = canonical_path(dst)
    if is_within(dst_canonical, src_canonical):
        exclusions = frozenset(dst_canonical / child.name for child in _list_children(src, path_filter))

    logger.debug("Copying directory", src=str(src), dst=str(dst), exclusions=len(exclusions))
    _copy_tree(src, dst, path_filter, exclusions, preserve_times, buffer)


def copy_directory_to_directory(src: PathLike, dst_dir: PathLike, *, preserve_times: bool = True) -> Path:
    """Copy *src* to ``dst_dir / src.name``. Returns the new directory."""
    src = as_path(src, "src")
    dst_dir = as_path(dst_dir, "dst_dir")
    require_directory(src, "src")
    require_directory_if_exists(dst_dir, "dst_dir")
    dst = dst_dir / src.name
    copy_directory(src, dst, preserve_times=preserve_times)
    return dst


def copy_to_directory(src: PathLike, dst_dir: PathLike, *, preserve_times: bool = True) -> Path:
    """Copy a file or a directory into *dst_dir*."""
    src = as_path(src, "src")
    require_exists(src, "src")
    if src.is_dir():
        return copy_directory_to_directory(src, dst_dir, preserve_times=preserve_times)
    return copy_file_to_directory(src, dst_dir, preserve_times=preserve_times)


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def _unlink(path: Path) -> None:
    """Unlink *path*, clearing a read-only flag first if that is what blocks it."""
    try:
        path.unlink()
    except PermissionError:
        if path.is_symlink() or os.access(path, os.W_OK):
            raise
        os.chmod(path, stat.S_IMODE(path.stat().st_mode) | stat.S_IWRITE)
        path.unlink()


def clean_directory(directory: PathLike) -> None:
    """Delete everything inside *directory*, keeping the directory itself.

    Every child is attempted even when some fail; the failures are raised
    together as an IOErrorList.
    """
    directory = as_path(directory, "directory")
    causes: list[OSError] = []
    for child in _list_children(directory):
        try:
            force_delete(child)
        except OSError as err:
            causes.append(err)
    if causes:
        logger.warning("Failed to clean directory", directory=str(directory), failures=len(causes))
        raise IOErrorList(f"Cannot clean directory '{directory}': {len(causes)} failure(s)", causes)


def delete_directory(directory: PathLike) -> None:
    """Delete *directory* and everything under it.

    A missing directory is not an error. A symlink is removed without
    touching what it points to.
    """
    directory = as_path(directory, "directory")
    if not lexists(directory):
        return
    if directory.is_symlink():
        directory.unlink()
        return
    clean_directory(directory)
    directory.rmdir()
    logger.debug("Deleted directory", directory=str(directory))


def force_delete(path: PathLike) -> None:
    """Delete the file or directory tree at *path*.

    Raises FileNotFoundError if nothing is there.
    """
    path = as_path(path)
    require_exists(path, "path")
    if path.is_dir() and not path.is_symlink():
        delete_directory(path)
    else:
        _unlink(path)


def ensure_absent(path: PathLike) -> None:
    """Make sure nothing exists at *path*; already absent is success."""
    path = as_path(path)
    if lexists(path):
        force_delete(path)


def remove_existing(path: PathLike) -> None:
    """Delete something that must exist at *path* (see :func:`force_delete`)."""
    force_delete(path)


def delete_quietly(path: PathLike | None) -> bool:
    """Best-effort delete that never raises. Returns True if *path* was removed."""
    if path is None:
        return False
    try:
        path = Path(path)
        is_real_dir = path.is_dir() and not path.is_symlink()
    except Exception:
        return False
    if is_real_dir:
        try:
            clean_directory(path)
        except Exception:
            logger.debug("Ignoring failure while cleaning directory", path=str(path), exc_info=True)
    try:
        if is_real_dir:
            path.rmdir()
        else:
            path.unlink()
    except Exception:
        logger.debug("Quiet delete failed", path=str(path), exc_info=True)
        return False
    return True


_pending_on_exit: list[Path] = []
_exit_hook_registered = False


def force_delete_on_exit(path: PathLike) -> None:
    """Schedule *path* (a file or a whole tree) for deletion at interpreter exit.

    Paths are deleted in reverse order of scheduling. A path that is already
    gone at exit is not an error.
    """
    global _exit_hook_registered
    path = as_path(path)
    if not _exit_hook_registered:
        atexit.register(_delete_on_exit)
        _exit_hook_registered = True
    _pending_on_exit.append(path)
    logger.debug("Scheduled delete on exit", path=str(path))


def clean_directory_on_exit(directory: PathLike) -> None:
    """Schedule every child of *directory* for deletion at exit, keeping the directory."""
    directory = as_path(directory, "directory")
    for child in _list_children(directory):
        force_delete_on_exit(child)


def delete_pending_on_exit() -> None:
    """Delete everything scheduled so far, collecting failures into an IOErrorList."""
    causes: list[OSError] = []
    while _pending_on_exit:
        path = _pending_on_exit.pop()
        try:
            ensure_absent(path)
        except OSError as err:
            causes.append(err)
    IOErrorList.check_empty(causes, f"Cannot delete on exit: {len(causes)} failure(s)")


def _delete_on_exit() -> None:
    # Nothing can catch an error raised from an atexit hook.
    try:
        delete_pending_on_exit()
    except IOErrorList as err:
        logger.warning("Failed to delete paths on exit", failures=len(err.causes), errors=[str(c) for c in err])


# ---------------------------------------------------------------------------
# Move
# ---------------------------------------------------------------------------


def _count_entries(directory: Path) -> int:
    total = 0
    try:
        with os.scandir(directory) as it:
            for entry in it:
                total += 1
                if entry.is_dir(follow_symlinks=False):
                    total += _count_entries(Path(entry.path))
    except OSError:
        pass
    return total


def move_file(src: PathLike, dst: PathLike, *, preserve_times: bool = True) -> None:
    """Move a file, renaming when possible and copying otherwise.

    If the copy succeeds but *src* cannot be removed, the copy is deleted
    again and OSError is raised.
    """
    src = as_path(src, "src")
    dst = as_path(dst, "dst")
    require_file(src, "src")
    require_absent(dst, "dst")
    try:
        os.rename(src, dst)
        return
    except OSError as err:
        logger.debug("Rename failed, copying instead", src=str(src), dst=str(dst), error=str(err))
    copy_file(src, dst, preserve_times=preserve_times)
    try:
        _unlink(src)
    except OSError as err:
        delete_quietly(dst)
        raise OSError(f"Failed to delete original file '{src}' after copy to '{dst}'") from err


def move_directory(src: PathLike, dst: PathLike) -> None:
    """Move a directory tree, renaming when possible and copying otherwise.

    Moving a directory below itself raises ValueError before anything is
    changed. If the copy succeeds but *src* cannot be removed, the copy is
    deleted again provided *src* is still complete; either way OSError is
    raised.
    """
    src = as_path(src, "src")
    dst = as_path(dst, "dst")
    require_directory(src, "src")
    require_absent(dst, "dst")
    if is_within(canonical_path(dst), canonical_path(src)):
        raise ValueError(f"Cannot move directory: {src} to a subdirectory of itself: {dst}")
    try:
        os.rename(src, dst)
        return
    except OSError as err:
        logger.debug("Rename failed, copying instead", src=str(src), dst=str(dst), error=str(err))
    copy_directory(src, dst, preserve_times=True)
    try:
        delete_directory(src)
    except OSError as err:
        # Only roll back while src still holds everything; otherwise dst is the sole full copy.
        if lexists(src) and _count_entries(src) == _count_entries(dst):
            delete_quietly(dst)
        raise OSError(f"Failed to delete original directory '{src}' after copy to '{dst}'") from err


def _prepare_dst_dir(dst_dir: Path, create_dst_dir: bool) -> None:
    if dst_dir.is_dir():
        return
    if lexists(dst_dir):
        raise NotADirectoryError(f"Destination '{dst_dir}' is not a directory")
    if not create_dst_dir:
        raise FileNotFoundError(f"Destination directory '{dst_dir}' does not exist [create_dst_dir=False]")
    force_mkdir(dst_dir)


def move_file_to_directory(src: PathLike, dst_dir: PathLike, *, create_dst_dir: bool = True) -> Path:
    src = as_path(src, "src")
    dst_dir = as_path(dst_dir, "dst_dir")
    require_file(src, "src")
    _prepare_dst_dir(dst_dir, create_dst_dir)
    dst = dst_dir / src.name
    move_file(src, dst)
    return dst


def move_directory_to_directory(src: PathLike, dst_dir: PathLike, *, create_dst_dir: bool = True) -> Path:
    src = as_path(src, "src")
    dst_dir = as_path(dst_dir, "dst_dir")
    require_directory(src, "src")
    _prepare_dst_dir(dst_dir, create_dst_dir)
    dst = dst_dir / src.name
    move_directory(src, dst)
    return dst


def move_to_directory(src: PathLike, dst_dir: PathLike, *, create_dst_dir: bool = True) -> Path:
    """Move a file or directory into *dst_dir*."""
    src = as_path(src, "src")
    require_exists(src, "src")
    if src.is_dir():
        return move_directory_to_directory(src, dst_dir, create_dst_dir=create_dst_dir)
    return move_file_to_directory(src, dst_dir, create_dst_dir=create_dst_dir)


# ---------------------------------------------------------------------------
# Size
# ---------------------------------------------------------------------------


def _size_of_tree(directory: Path) -> int:
    """Sum regular file sizes below *directory*; unreadable entries and symlinks add 0."""
    total = 0
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError:
        return 0
    for entry in entries:
        try:
            if entry.is_symlink():
                continue
            if entry.is_dir(follow_symlinks=False):
                total += _size_of_tree(Path(entry.path))
            elif entry.is_file(follow_symlinks=False):
                total += entry.stat(follow_symlinks=False).st_size
        except OSError:
            continue
    return total


def size_of(path: PathLike) -> int:
    """Length of a file, or the recursive size of a directory."""
    path = as_path(path)
    require_exists(path, "path")
    if path.is_dir():
        return size_of_directory(path)
    return path.stat().st_size


def size_of_directory(directory: PathLike) -> int:
    """Best-effort recursive size of *directory* in bytes.

    Inaccessible entries and symlinks contribute nothing, so the result is a
    lower bound when permissions are restricted.
    """
    directory = as_path(directory, "directory")
    require_directory(directory, "directory")
    return _size_of_tree(directory)


def size_of_directory_big(directory: PathLike) -> int:
    """Exact recursive size of *directory*; Python ints do not overflow."""
    return size_of_directory(directory)
