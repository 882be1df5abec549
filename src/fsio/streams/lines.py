"""Line iteration and line-oriented reading/writing."""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import TYPE_CHECKING

from fsio.streams.charsets import to_encoding

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from fsio.types import Sink, Source


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


class LineIterator:
    """Iterator over the lines of a text reader, without line terminators.

    Lines are pulled from the reader one at a time, so arbitrarily large
    inputs can be processed. Subclasses may override :meth:`is_valid_line`
    to drop lines. :meth:`close` (or leaving a ``with`` block) closes the
    underlying reader; running out of lines does not.
    """

    def __init__(self, reader: Source) -> None:
        if reader is None:
            raise TypeError("reader must not be None")
        self._reader = reader
        self._finished = False

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        while not self._finished:
            raw = self._reader.readline()  # type: ignore[attr-defined]
            if not raw:
                self._finished = True
                break
            line = _strip_terminator(raw)
            if self.is_valid_line(line):
                return line
        raise StopIteration

    def is_valid_line(self, line: str) -> bool:
        """Return False to skip *line*."""
        return True

    def close(self) -> None:
        self._finished = True
        close = getattr(self._reader, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> LineIterator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def line_iterator(path: str | os.PathLike[str], encoding: str | None = None) -> LineIterator:
    """Open *path* and iterate its lines. Close the iterator when done."""
    reader = Path(path).open(encoding=to_encoding(encoding), newline="")
    return LineIterator(reader)


def read_lines(reader: Source) -> list[str]:
    """Return all remaining lines of *reader*, without terminators."""
    return list(LineIterator(reader))


def write_lines(
    lines: Iterable[object | None],
    sink: Sink,
    line_ending: str | None = None,
    encoding: str | None = None,
) -> None:
    """Write each item's ``str()`` followed by *line_ending* (default ``os.linesep``).

    ``None`` items produce a bare line ending. Text sinks receive ``str``;
    any other sink receives bytes encoded with *encoding*.
    """
    if sink is None:
        raise TypeError("sink must not be None")
    if lines is None:
        return
    if line_ending is None:
        line_ending = os.linesep
    is_text = isinstance(sink, io.TextIOBase)
    codec = None if is_text else to_encoding(encoding)
    for item in lines:
        text = line_ending if item is None else f"{item}{line_ending}"
        sink.write(text if codec is None else text.encode(codec))
