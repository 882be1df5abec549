"""Single-file operations: copy, read, write, checksum, compare, touch."""

from __future__ import annotations

import hashlib
import os
import time
import zlib
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from fsio.exceptions import SizeMismatchError
from fsio.files.paths import (
    as_path,
    canonical_path,
    lexists,
    require_directory_if_exists,
    require_file,
    require_not_same,
)
from fsio.infrastructure.config import ONE_GB, ONE_KB, ONE_MB
from fsio.infrastructure.logger import logger
from fsio.streams.charsets import to_encoding
from fsio.streams.copy import content_equals, content_equals_ignore_eol, copy_large, to_bytes
from fsio.streams.lines import line_iterator, write_lines

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fsio.types import Sink, Source

PathLike = str | os.PathLike[str]

ONE_TB = ONE_KB * ONE_GB
ONE_PB = ONE_KB * ONE_TB
ONE_EB = ONE_KB * ONE_PB

_DISPLAY_UNITS = (
    (ONE_EB, "EB"),
    (ONE_PB, "PB"),
    (ONE_TB, "TB"),
    (ONE_GB, "GB"),
    (ONE_MB, "MB"),
    (ONE_KB, "KB"),
)

_WAIT_POLL_SECONDS = 0.1


class _UpdateSink:
    """Adapts anything with ``update(data)`` (hashes, checksums) to a Sink."""

    def __init__(self, update) -> None:  # type: ignore[no-untyped-def]
        self._update = update

    def write(self, data: bytes) -> int:
        self._update(data)
        return len(data)


class _Crc32:
    def __init__(self) -> None:
        self.value = 0

    def update(self, data: bytes) -> None:
        self.value = zlib.crc32(data, self.value)


# ---------------------------------------------------------------------------
# Directories for files
# ---------------------------------------------------------------------------


def force_mkdir(directory: PathLike) -> None:
    """Create *directory* and any missing parents; fail if a file is in the way."""
    directory = as_path(directory, "directory")
    require_directory_if_exists(directory, "directory")
    directory.mkdir(parents=True, exist_ok=True)


def force_mkdir_parent(path: PathLike) -> None:
    """Create the parent directory of *path* if needed."""
    force_mkdir(as_path(path).parent)


# ---------------------------------------------------------------------------
# Copy
# ---------------------------------------------------------------------------


def copy_times(src: Path, dst: Path) -> None:
    """Give *dst* the access and modification times of *src*."""
    st = src.stat()
    os.utime(dst, ns=(st.st_atime_ns, st.st_mtime_ns))


def copy_file(
    src: PathLike,
    dst: PathLike,
    *,
    preserve_times: bool = True,
    buffer: bytearray | None = None,
) -> None:
    """Copy the contents of *src* to *dst*, creating parent directories.

    An existing *dst* file is overwritten. After copying, the two files must
    have the same length or SizeMismatchError is raised.
    """
    src = as_path(src, "src")
    dst = as_path(dst, "dst")
    require_file(src, "src")
    require_not_same(src, dst)
    force_mkdir_parent(dst)
    if dst.is_dir():
        raise IsADirectoryError(f"Destination '{dst}' exists but is a directory")

    with src.open("rb") as fin, dst.open("wb") as fout:
        copy_large(fin, fout, buffer)

    src_size = src.stat().st_size
    dst_size = dst.stat().st_size
    if src_size != dst_size:
        raise SizeMismatchError(src, dst, src_size, dst_size)

    if preserve_times:
        copy_times(src, dst)
    logger.debug("Copied file", src=str(src), dst=str(dst), size=dst_size)


def copy_file_to_directory(src: PathLike, dst_dir: PathLike, *, preserve_times: bool = True) -> Path:
    """Copy *src* into *dst_dir*, keeping its name. Returns the new path."""
    src = as_path(src, "src")
    dst_dir = as_path(dst_dir, "dst_dir")
    require_directory_if_exists(dst_dir, "dst_dir")
    dst = dst_dir / src.name
    copy_file(src, dst, preserve_times=preserve_times)
    return dst


def copy_stream_to_file(source: Source, dst: PathLike, buffer: bytearray | None = None) -> int:
    """Write everything from *source* to *dst*. The source is not closed."""
    dst = as_path(dst, "dst")
    force_mkdir_parent(dst)
    if dst.is_dir():
        raise IsADirectoryError(f"Destination '{dst}' exists but is a directory")
    with dst.open("wb") as fout:
        return copy_large(source, fout, buffer)


def copy_file_to_stream(src: PathLike, sink: Sink, buffer: bytearray | None = None) -> int:
    src = as_path(src, "src")
    require_file(src, "src")
    with src.open("rb") as fin:
        return copy_large(fin, sink, buffer)


# ---------------------------------------------------------------------------
# Read / write
# ---------------------------------------------------------------------------


def read_file_to_bytes(path: PathLike) -> bytes:
    path = as_path(path)
    require_file(path, "path")
    with path.open("rb") as fin:
        return to_bytes(fin)


def read_file_to_string(path: PathLike, encoding: str | None = None) -> str:
    path = as_path(path)
    require_file(path, "path")
    with path.open(encoding=to_encoding(encoding), newline="") as fin:
        return fin.read()


def read_file_lines(path: PathLike, encoding: str | None = None) -> list[str]:
    """Return the lines of *path* without line terminators."""
    path = as_path(path)
    require_file(path, "path")
    with line_iterator(path, encoding) as lines:
        return list(lines)


def write_string_to_file(path: PathLike, data: str, encoding: str | None = None, *, append: bool = False) -> None:
    path = as_path(path)
    force_mkdir_parent(path)
    with path.open("a" if append else "w", encoding=to_encoding(encoding), newline="") as fout:
        fout.write(data)


def write_bytes_to_file(path: PathLike, data: bytes, *, append: bool = False) -> None:
    path = as_path(path)
    force_mkdir_parent(path)
    with path.open("ab" if append else "wb") as fout:
        fout.write(data)


def write_lines_to_file(
    path: PathLike,
    lines: Iterable[object | None],
    line_ending: str | None = None,
    encoding: str | None = None,
    *,
    append: bool = False,
) -> None:
    path = as_path(path)
    force_mkdir_parent(path)
    with path.open("ab" if append else "wb") as fout:
        write_lines(lines, fout, line_ending, encoding)


# ---------------------------------------------------------------------------
# Checksums and comparison
# ---------------------------------------------------------------------------


def checksum(path: PathLike, algorithm: str = "sha256") -> str:
    """Return the hex digest of *path* using a hashlib *algorithm*."""
    path = as_path(path)
    require_file(path, "path")
    hasher = hashlib.new(algorithm)
    copy_file_to_stream(path, _UpdateSink(hasher.update))
    return hasher.hexdigest()


def checksum_crc32(path: PathLike) -> int:
    """Return the unsigned CRC-32 of *path*."""
    crc = _Crc32()
    copy_file_to_stream(path, _UpdateSink(crc.update))
    return crc.value


def content_equals_files(file1: PathLike | None, file2: PathLike | None) -> bool:
    """True if both files are missing, or both exist with identical bytes."""
    if file1 is None and file2 is None:
        return True
    if file1 is None or file2 is None:
        return False
    file1 = Path(file1)
    file2 = Path(file2)
    exists1 = file1.exists()
    if exists1 != file2.exists():
        return False
    if not exists1:
        return True
    if file1.is_dir() or file2.is_dir():
        raise IsADirectoryError(f"Can't compare directories, only files: '{file1}', '{file2}'")
    if file1.stat().st_size != file2.stat().st_size:
        return False
    if canonical_path(file1) == canonical_path(file2):
        return True
    with file1.open("rb") as in1, file2.open("rb") as in2:
        return content_equals(in1, in2)


def content_equals_files_ignore_eol(
    file1: PathLike | None,
    file2: PathLike | None,
    encoding: str | None = None,
) -> bool:
    """Like :func:`content_equals_files`, but line terminators may differ."""
    if file1 is None and file2 is None:
        return True
    if file1 is None or file2 is None:
        return False
    file1 = Path(file1)
    file2 = Path(file2)
    exists1 = file1.exists()
    if exists1 != file2.exists():
        return False
    if not exists1:
        return True
    if file1.is_dir() or file2.is_dir():
        raise IsADirectoryError(f"Can't compare directories, only files: '{file1}', '{file2}'")
    if canonical_path(file1) == canonical_path(file2):
        return True
    codec = to_encoding(encoding)
    with file1.open(encoding=codec, newline="") as in1, file2.open(encoding=codec, newline="") as in2:
        return content_equals_ignore_eol(in1, in2)


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def touch(path: PathLike) -> None:
    """Create *path* if missing, then set its modification time to now."""
    path = as_path(path)
    if not lexists(path):
        force_mkdir_parent(path)
        path.open("ab").close()
    os.utime(path, None)


def last_modified(path: PathLike) -> float:
    """Modification time of *path* in seconds since the epoch."""
    return as_path(path).stat().st_mtime


def _reference_time(reference: PathLike | datetime | float) -> float:
    if isinstance(reference, datetime):
        return reference.timestamp()
    if isinstance(reference, (int, float)):
        return float(reference)
    ref = as_path(reference, "reference")
    if not ref.exists():
        raise FileNotFoundError(f"The reference file '{ref}' doesn't exist")
    return ref.stat().st_mtime


def is_file_newer(path: PathLike, reference: PathLike | datetime | float) -> bool:
    """True if *path* exists and was modified after *reference*."""
    threshold = _reference_time(reference)
    path = as_path(path)
    if not path.exists():
        return False
    return path.stat().st_mtime > threshold


def is_file_older(path: PathLike, reference: PathLike | datetime | float) -> bool:
    """True if *path* exists and was modified before *reference*."""
    threshold = _reference_time(reference)
    path = as_path(path)
    if not path.exists():
        return False
    return path.stat().st_mtime < threshold


def byte_count_to_display_size(size: int) -> str:
    """Human-readable size, rounded down to a whole unit (``"1 GB"``)."""
    for unit, name in _DISPLAY_UNITS:
        if size // unit > 0:
            return f"{size // unit} {name}"
    return f"{size} bytes"


def wait_for(path: PathLike, timeout: float) -> bool:
    """Poll until *path* exists or *timeout* seconds have passed.

    Returns True if *path* exists by the deadline.
    """
    path = as_path(path)
    deadline = time.monotonic() + timeout
    while not path.exists():
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return False
        time.sleep(min(_WAIT_POLL_SECONDS, remaining))
    return True
