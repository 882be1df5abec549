"""Buffered copying, skipping, reading and comparing of streams.

Binary helpers move data through a ``bytearray``. Callers that copy many
streams in a row can pass the same buffer each time to avoid reallocating;
when ``buffer`` is omitted a fresh one of ``DEFAULT_BUFFER_SIZE`` bytes is
used for that call only. An empty buffer, or a ``buffer_size`` below one, is
rejected with ValueError before any I/O. Text helpers take a ``buffer_size``
instead, since ``str`` chunks cannot be read in place.

None of these helpers flush or close the streams they are given.
"""

from __future__ import annotations

import codecs
import io
from typing import TYPE_CHECKING

from fsio.infrastructure.config import DEFAULT_BUFFER_SIZE, MAX_INT32, SKIP_BUFFER_SIZE
from fsio.streams.charsets import to_encoding
from fsio.streams.lines import LineIterator

if TYPE_CHECKING:
    from fsio.types import Sink, Source

EOF = -1


def _require(value: object, name: str) -> None:
    if value is None:
        raise TypeError(f"{name} must not be None")


def _require_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative, actual: {value}")


def _check_buffer(buffer: bytearray | None, default_size: int) -> bytearray:
    """Return *buffer*, or a fresh one of *default_size* bytes when it is None."""
    if buffer is None:
        return bytearray(default_size)
    if len(buffer) == 0:
        raise ValueError("buffer must not be empty")
    return buffer


def _chunk_size(buffer_size: int | None, default_size: int) -> int:
    if buffer_size is None:
        return default_size
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, actual: {buffer_size}")
    return buffer_size


def _read_into(source: Source, view: memoryview) -> int:
    """Read once from *source* into *view*. Returns EOF at end of data."""
    readinto = getattr(source, "readinto", None)
    if readinto is not None:
        count = readinto(view)
    else:
        data = source.read(len(view))
        count = len(data) if data else 0
        if count:
            view[:count] = data
    if not count:
        return EOF
    return count


# ---------------------------------------------------------------------------
# Binary copy
# ---------------------------------------------------------------------------


def copy(source: Source, sink: Sink, buffer: bytearray | None = None) -> int:
    """Copy all bytes from *source* to *sink*.

    Returns the number of bytes copied, or EOF (-1) when more than
    ``2**31 - 1`` bytes were copied. Use :func:`copy_large` for the exact
    count of large transfers.
    """
    count = copy_large(source, sink, buffer)
    if count > MAX_INT32:
        return EOF
    return count


def copy_large(source: Source, sink: Sink, buffer: bytearray | None = None) -> int:
    """Copy all bytes from *source* to *sink* and return the exact count."""
    _require(source, "source")
    _require(sink, "sink")
    buffer = _check_buffer(buffer, DEFAULT_BUFFER_SIZE)
    view = memoryview(buffer)
    total = 0
    while True:
        count = _read_into(source, view)
        if count == EOF:
            break
        sink.write(view[:count])
        total += count
    return total


def copy_range(
    source: Source,
    sink: Sink,
    offset: int,
    length: int,
    buffer: bytearray | None = None,
) -> int:
    """Skip *offset* bytes, then copy at most *length* bytes.

    A negative *length* copies until end of data; a *length* of zero copies
    nothing. Raises EOFError if the source ends before *offset* is reached.
    """
    _require(source, "source")
    _require(sink, "sink")
    _require_non_negative(offset, "offset")
    buffer = _check_buffer(buffer, DEFAULT_BUFFER_SIZE)
    if offset > 0:
        skip_fully(source, offset)
    if length == 0:
        return 0
    view = memoryview(buffer)
    buffer_length = len(buffer)
    to_read = buffer_length if length < 0 else min(length, buffer_length)
    total = 0
    while to_read > 0:
        count = _read_into(source, view[:to_read])
        if count == EOF:
            break
        sink.write(view[:count])
        total += count
        if length > 0:  # unbounded copies keep reading full buffers
            to_read = min(length - total, buffer_length)
    return total


# ---------------------------------------------------------------------------
# Skipping and reading
# ---------------------------------------------------------------------------


def skip(source: Source, count: int, buffer: bytearray | None = None) -> int:
    """Read and discard up to *count* bytes, returning how many were skipped.

    Fewer than *count* bytes are skipped only when the source runs out.
    The source's own ``seek``/``skip`` is never used.
    """
    _require(source, "source")
    _require_non_negative(count, "Skip count")
    buffer = _check_buffer(buffer, SKIP_BUFFER_SIZE)
    view = memoryview(buffer)
    remain = count
    while remain > 0:
        skipped = _read_into(source, view[: min(remain, len(buffer))])
        if skipped == EOF:
            break
        remain -= skipped
    return count - remain


def skip_fully(source: Source, count: int, buffer: bytearray | None = None) -> None:
    """Skip exactly *count* bytes or raise EOFError."""
    skipped = skip(source, count, buffer)
    if skipped != count:
        raise EOFError(f"Bytes to skip: {count} actual: {skipped}")


def consume(source: Source, buffer: bytearray | None = None) -> int:
    """Read *source* to the end, discarding everything. Returns the byte count."""
    _require(source, "source")
    buffer = _check_buffer(buffer, SKIP_BUFFER_SIZE)
    view = memoryview(buffer)
    total = 0
    while True:
        count = _read_into(source, view)
        if count == EOF:
            return total
        total += count


def read(source: Source, buffer: bytearray, offset: int = 0, length: int | None = None) -> int:
    """Fill ``buffer[offset:offset + length]`` from *source*, retrying short reads.

    Returns the number of bytes read, which is less than *length* only if
    the source ended first.
    """
    _require(source, "source")
    _require(buffer, "buffer")
    if length is None:
        length = len(buffer) - offset
    _require_non_negative(offset, "offset")
    _require_non_negative(length, "length")
    if offset + length > len(buffer):
        raise ValueError(f"offset + length ({offset + length}) exceeds buffer length ({len(buffer)})")
    view = memoryview(buffer)
    remaining = length
    while remaining > 0:
        start = offset + length - remaining
        count = _read_into(source, view[start : offset + length])
        if count == EOF:
            break
        remaining -= count
    return length - remaining


def read_fully(source: Source, buffer: bytearray, offset: int = 0, length: int | None = None) -> None:
    """Like :func:`read`, but raise EOFError unless exactly *length* bytes arrive."""
    if length is None:
        length = len(buffer) - offset
    actual = read(source, buffer, offset, length)
    if actual != length:
        raise EOFError(f"Length to read: {length} actual: {actual}")


def read_bytes_fully(source: Source, length: int) -> bytes:
    """Read exactly *length* bytes from *source*."""
    _require_non_negative(length, "length")
    buffer = bytearray(length)
    read_fully(source, buffer)
    return bytes(buffer)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def content_equals(source1: Source | None, source2: Source | None, buffer_size: int | None = None) -> bool:
    """Compare two byte sources chunk by chunk.

    Two ``None`` sources are equal; ``None`` never equals a real source.
    Passing the same object twice returns True without reading it.
    """
    if source1 is source2:
        return True
    if source1 is None or source2 is None:
        return False
    size = _chunk_size(buffer_size, DEFAULT_BUFFER_SIZE)
    buffer1 = bytearray(size)
    buffer2 = bytearray(size)
    view1 = memoryview(buffer1)
    view2 = memoryview(buffer2)
    while True:
        count1 = read(source1, buffer1)
        count2 = read(source2, buffer2)
        if count1 != count2 or view1[:count1] != view2[:count2]:
            return False
        if count1 < size:
            return True


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def _read_text(reader: Source, length: int) -> str:
    """Read up to *length* characters, retrying short reads until EOF."""
    parts: list[str] = []
    remaining = length
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return "".join(parts)


def copy_text(reader: Source, writer: Sink, buffer_size: int | None = None) -> int:
    """Copy all characters from *reader* to *writer*. Returns the character count."""
    return copy_text_range(reader, writer, 0, -1, buffer_size)


def copy_text_range(
    reader: Source,
    writer: Sink,
    offset: int,
    length: int,
    buffer_size: int | None = None,
) -> int:
    """Character counterpart of :func:`copy_range`."""
    _require(reader, "reader")
    _require(writer, "writer")
    _require_non_negative(offset, "offset")
    chunk_size = _chunk_size(buffer_size, DEFAULT_BUFFER_SIZE)
    if offset > 0:
        skip_text_fully(reader, offset, buffer_size)
    if length == 0:
        return 0
    to_read = chunk_size if length < 0 else min(length, chunk_size)
    total = 0
    while to_read > 0:
        chunk = reader.read(to_read)
        if not chunk:
            break
        writer.write(chunk)
        total += len(chunk)
        if length > 0:
            to_read = min(length - total, chunk_size)
    return total


def skip_text(reader: Source, count: int, buffer_size: int | None = None) -> int:
    """Read and discard up to *count* characters."""
    _require(reader, "reader")
    _require_non_negative(count, "Skip count")
    chunk_size = _chunk_size(buffer_size, SKIP_BUFFER_SIZE)
    remain = count
    while remain > 0:
        chunk = reader.read(min(remain, chunk_size))
        if not chunk:
            break
        remain -= len(chunk)
    return count - remain


def skip_text_fully(reader: Source, count: int, buffer_size: int | None = None) -> None:
    skipped = skip_text(reader, count, buffer_size)
    if skipped != count:
        raise EOFError(f"Chars to skip: {count} actual: {skipped}")


def read_text(reader: Source, length: int) -> str:
    """Read up to *length* characters, shorter only at end of data."""
    _require(reader, "reader")
    _require_non_negative(length, "length")
    return _read_text(reader, length)


def read_text_fully(reader: Source, length: int) -> str:
    text = read_text(reader, length)
    if len(text) != length:
        raise EOFError(f"Length to read: {length} actual: {len(text)}")
    return text


def content_equals_text(reader1: Source | None, reader2: Source | None, buffer_size: int | None = None) -> bool:
    """Character counterpart of :func:`content_equals`."""
    if reader1 is reader2:
        return True
    if reader1 is None or reader2 is None:
        return False
    size = _chunk_size(buffer_size, DEFAULT_BUFFER_SIZE)
    while True:
        chunk1 = _read_text(reader1, size)
        chunk2 = _read_text(reader2, size)
        if chunk1 != chunk2:
            return False
        if len(chunk1) < size:
            return True


def content_equals_ignore_eol(reader1: Source | None, reader2: Source | None) -> bool:
    """Compare two readers line by line, ignoring line terminators."""
    if reader1 is reader2:
        return True
    if reader1 is None or reader2 is None:
        return False
    lines1 = LineIterator(reader1)
    lines2 = LineIterator(reader2)
    sentinel = object()
    while True:
        line1 = next(lines1, sentinel)
        line2 = next(lines2, sentinel)
        if line1 != line2:
            return False
        if line1 is sentinel:
            return True


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def to_bytes(source: Source, buffer: bytearray | None = None) -> bytes:
    """Read *source* to the end and return its bytes."""
    out = io.BytesIO()
    copy_large(source, out, buffer)
    return out.getvalue()


def to_text(source: Source, encoding: str | None = None, buffer: bytearray | None = None) -> str:
    """Read a byte *source* to the end and decode it."""
    out = io.StringIO()
    copy_bytes_to_text(source, out, encoding, buffer)
    return out.getvalue()


def copy_bytes_to_text(
    source: Source,
    writer: Sink,
    encoding: str | None = None,
    buffer: bytearray | None = None,
) -> int:
    """Decode bytes from *source* and write the characters to *writer*.

    Multi-byte sequences split across chunk boundaries are decoded
    correctly. Returns the number of characters written.
    """
    _require(source, "source")
    _require(writer, "writer")
    decoder = codecs.getincrementaldecoder(to_encoding(encoding))()
    buffer = _check_buffer(buffer, DEFAULT_BUFFER_SIZE)
    view = memoryview(buffer)
    total = 0
    while True:
        count = _read_into(source, view)
        final = count == EOF
        text = decoder.decode(b"" if final else bytes(view[:count]), final=final)
        if text:
            writer.write(text)
            total += len(text)
        if final:
            return total


def copy_text_to_bytes(
    reader: Source,
    sink: Sink,
    encoding: str | None = None,
    buffer_size: int | None = None,
) -> int:
    """Encode characters from *reader* and write the bytes to *sink*.

    Returns the number of bytes written.
    """
    _require(reader, "reader")
    _require(sink, "sink")
    encoder = codecs.getincrementalencoder(to_encoding(encoding))()
    chunk_size = _chunk_size(buffer_size, DEFAULT_BUFFER_SIZE)
    total = 0
    while True:
        chunk = reader.read(chunk_size)
        final = not chunk
        data = encoder.encode(chunk or "", final=final)
        if data:
            sink.write(data)
            total += len(data)
        if final:
            return total
