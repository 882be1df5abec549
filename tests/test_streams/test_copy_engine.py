"""Tests for the stream copy engine (copy, skip, read, compare, convert)."""

from __future__ import annotations

import io

import pytest

from fsio.exceptions import UnsupportedCharsetError
from fsio.infrastructure.config import MAX_INT32
from fsio.streams import copy as copy_module
from fsio.streams.copy import (
    EOF,
    consume,
    content_equals,
    content_equals_ignore_eol,
    content_equals_text,
    copy,
    copy_bytes_to_text,
    copy_large,
    copy_range,
    copy_text,
    copy_text_range,
    copy_text_to_bytes,
    read,
    read_bytes_fully,
    read_fully,
    read_text,
    read_text_fully,
    skip,
    skip_fully,
    skip_text,
    skip_text_fully,
    to_bytes,
    to_text,
)

DATA = bytes(range(256)) * 40


class TestCopy:
    @pytest.fixture(autouse=True)
    def _setup(self, spy_sink, trickle) -> None:  # type: ignore[no-untyped-def]
        self.sink = spy_sink
        self.trickle = trickle

    def test_copy_transfers_all_bytes_in_order(self) -> None:
        out = io.BytesIO()
        count = copy(io.BytesIO(DATA), out)
        assert count == len(DATA)
        assert out.getvalue() == DATA

    def test_copy_chunks_follow_buffer_length(self) -> None:
        count = copy(io.BytesIO(b"0123456789"), self.sink, bytearray(4))
        assert count == 10
        assert self.sink.sizes == [4, 4, 2]
        assert self.sink.getvalue() == b"0123456789"

    def test_copy_empty_source(self) -> None:
        assert copy(io.BytesIO(b""), self.sink) == 0
        assert self.sink.writes == []

    def test_copy_from_source_without_readinto(self) -> None:
        source = self.trickle(b"abcdefgh", step=3)
        assert copy_large(source, self.sink) == 8
        assert self.sink.getvalue() == b"abcdefgh"
        assert self.sink.sizes == [3, 3, 2]

    def test_copy_is_repeatable(self) -> None:
        first = io.BytesIO()
        second = io.BytesIO()
        copy(io.BytesIO(DATA), first)
        copy(io.BytesIO(DATA), second)
        assert first.getvalue() == second.getvalue() == DATA

    def test_copy_reuses_caller_buffer(self) -> None:
        buffer = bytearray(4)
        copy(io.BytesIO(b"abcdef"), self.sink, buffer)
        copy(io.BytesIO(b"ghij"), self.sink, buffer)
        assert self.sink.getvalue() == b"abcdefghij"
        assert bytes(buffer) == b"ghij"

    def test_copy_rejects_none_before_reading(self, exploding) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(TypeError):
            copy(None, self.sink)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            copy(exploding, None)  # type: ignore[arg-type]

    def test_copy_returns_eof_for_counts_beyond_int32(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(copy_module, "copy_large", lambda source, sink, buffer=None: MAX_INT32 + 1)
        assert copy(io.BytesIO(b""), self.sink) == EOF

    def test_copy_large_returns_exact_count(self) -> None:
        assert copy_large(io.BytesIO(DATA), self.sink, bytearray(7)) == len(DATA)

    def test_io_errors_propagate(self) -> None:
        class BrokenSink:
            def write(self, data: bytes) -> int:
                raise OSError("disk full")

        with pytest.raises(OSError, match="disk full"):
            copy(io.BytesIO(b"abc"), BrokenSink())


class TestCopyRange:
    @pytest.fixture(autouse=True)
    def _setup(self, spy_sink) -> None:  # type: ignore[no-untyped-def]
        self.sink = spy_sink

    def test_offset_and_length(self) -> None:
        count = copy_range(io.BytesIO(b"0123456789"), self.sink, 3, 4)
        assert count == 4
        assert self.sink.getvalue() == b"3456"

    def test_negative_length_copies_to_end(self) -> None:
        assert copy_range(io.BytesIO(b"0123456789"), self.sink, 3, -1) == 7
        assert self.sink.getvalue() == b"3456789"

    def test_zero_length_is_noop(self) -> None:
        assert copy_range(io.BytesIO(b"0123456789"), self.sink, 0, 0) == 0
        assert self.sink.writes == []

    def test_length_larger_than_buffer(self) -> None:
        assert copy_range(io.BytesIO(b"0123456789"), self.sink, 1, 6, bytearray(4)) == 6
        assert self.sink.sizes == [4, 2]
        assert self.sink.getvalue() == b"123456"

    def test_length_past_end_stops_at_eof(self) -> None:
        assert copy_range(io.BytesIO(b"0123"), self.sink, 2, 100) == 2

    def test_offset_past_end_raises_eof_error(self) -> None:
        with pytest.raises(EOFError):
            copy_range(io.BytesIO(b"0123"), self.sink, 10, 1)

    def test_negative_offset_rejected(self) -> None:
        source = io.BytesIO(b"0123")
        with pytest.raises(ValueError):
            copy_range(source, self.sink, -1, 2)
        assert source.tell() == 0


class TestSkip:
    def test_skip_then_read_rest_yields_tail(self) -> None:
        source = io.BytesIO(DATA)
        assert skip(source, 1000) == 1000
        assert source.read() == DATA[1000:]

    def test_skip_past_end_returns_available(self) -> None:
        assert skip(io.BytesIO(b"abc"), 10) == 3

    def test_skip_uses_reads_not_seek(self, trickle) -> None:  # type: ignore[no-untyped-def]
        source = trickle(b"abcdef", step=2)
        assert skip(source, 5) == 5
        assert source.read(10) == b"f"

    def test_negative_skip_rejected_before_io(self, exploding) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(ValueError):
            skip(exploding, -1)

    def test_skip_fully_short_raises(self) -> None:
        with pytest.raises(EOFError):
            skip_fully(io.BytesIO(b"abc"), 4)

    def test_skip_fully_exact(self) -> None:
        source = io.BytesIO(b"abcd")
        skip_fully(source, 4)
        assert source.read() == b""

    def test_skip_with_explicit_buffer(self) -> None:
        source = io.BytesIO(b"abcdefgh")
        assert skip(source, 7, bytearray(2)) == 7
        assert source.read() == b"h"

    def test_consume_counts_everything(self) -> None:
        assert consume(io.BytesIO(DATA)) == len(DATA)


class TestRead:
    def test_read_retries_partial_reads(self, trickle) -> None:  # type: ignore[no-untyped-def]
        buffer = bytearray(5)
        assert read(trickle(b"abcdefg", step=1), buffer) == 5
        assert bytes(buffer) == b"abcde"

    def test_read_short_only_at_eof(self) -> None:
        buffer = bytearray(10)
        assert read(io.BytesIO(b"abc"), buffer) == 3
        assert bytes(buffer[:3]) == b"abc"

    def test_read_into_region(self) -> None:
        buffer = bytearray(b"........")
        assert read(io.BytesIO(b"xyz"), buffer, 2, 3) == 3
        assert bytes(buffer) == b"..xyz..."

    def test_read_region_outside_buffer_rejected(self) -> None:
        with pytest.raises(ValueError):
            read(io.BytesIO(b"abc"), bytearray(4), 2, 3)

    def test_read_negative_length_rejected(self) -> None:
        with pytest.raises(ValueError):
            read(io.BytesIO(b"abc"), bytearray(4), 0, -1)

    def test_read_fully_short_raises(self) -> None:
        with pytest.raises(EOFError):
            read_fully(io.BytesIO(b"abc"), bytearray(4))

    def test_read_bytes_fully(self, trickle) -> None:  # type: ignore[no-untyped-def]
        assert read_bytes_fully(trickle(b"abcdef", step=2), 5) == b"abcde"


class TestContentEquals:
    def test_same_object_is_equal_without_reading(self, exploding) -> None:  # type: ignore[no-untyped-def]
        assert content_equals(exploding, exploding) is True

    def test_none_handling(self) -> None:
        assert content_equals(None, None) is True
        assert content_equals(io.BytesIO(b""), None) is False
        assert content_equals(None, io.BytesIO(b"")) is False

    def test_equal_content(self) -> None:
        assert content_equals(io.BytesIO(DATA), io.BytesIO(DATA)) is True

    def test_empty_sources_are_equal(self) -> None:
        assert content_equals(io.BytesIO(b""), io.BytesIO(b"")) is True

    def test_different_content(self) -> None:
        other = bytearray(DATA)
        other[-1] ^= 0xFF
        assert content_equals(io.BytesIO(DATA), io.BytesIO(bytes(other))) is False

    def test_prefix_is_not_equal_and_symmetric(self) -> None:
        assert content_equals(io.BytesIO(b"abc"), io.BytesIO(b"abcd")) is False
        assert content_equals(io.BytesIO(b"abcd"), io.BytesIO(b"abc")) is False

    def test_uneven_chunking_still_equal(self, trickle) -> None:  # type: ignore[no-untyped-def]
        assert content_equals(trickle(DATA, step=7), io.BytesIO(DATA), buffer_size=64) is True

    def test_exact_multiple_of_buffer(self) -> None:
        assert content_equals(io.BytesIO(b"abcd" * 4), io.BytesIO(b"abcd" * 4), buffer_size=4) is True
        assert content_equals(io.BytesIO(b"abcd" * 4), io.BytesIO(b"abcd" * 5), buffer_size=4) is False


class TestText:
    def test_copy_text(self, spy_sink) -> None:  # type: ignore[no-untyped-def]
        assert copy_text(io.StringIO("héllo wörld"), spy_sink, buffer_size=4) == 11
        assert spy_sink.sizes == [4, 4, 3]
        assert spy_sink.getvalue() == "héllo wörld"

    def test_copy_text_range(self) -> None:
        out = io.StringIO()
        assert copy_text_range(io.StringIO("0123456789"), out, 2, 5) == 5
        assert out.getvalue() == "23456"

    def test_copy_text_range_zero_length(self) -> None:
        out = io.StringIO()
        assert copy_text_range(io.StringIO("0123"), out, 0, 0) == 0
        assert out.getvalue() == ""

    def test_skip_text(self) -> None:
        reader = io.StringIO("abcdef")
        assert skip_text(reader, 4) == 4
        assert reader.read() == "ef"

    def test_skip_text_fully_short_raises(self) -> None:
        with pytest.raises(EOFError):
            skip_text_fully(io.StringIO("ab"), 3)

    def test_skip_text_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            skip_text(io.StringIO("ab"), -2)

    def test_read_text(self, trickle) -> None:  # type: ignore[no-untyped-def]
        assert read_text(trickle("abcdef", step=1), 4) == "abcd"
        assert read_text(io.StringIO("ab"), 4) == "ab"

    def test_read_text_fully_short_raises(self) -> None:
        with pytest.raises(EOFError):
            read_text_fully(io.StringIO("ab"), 3)

    def test_content_equals_text(self) -> None:
        assert content_equals_text(io.StringIO("abc" * 100), io.StringIO("abc" * 100), buffer_size=8) is True
        assert content_equals_text(io.StringIO("abc"), io.StringIO("abd")) is False
        assert content_equals_text(None, None) is True
        assert content_equals_text(io.StringIO(""), None) is False

    def test_content_equals_ignore_eol(self) -> None:
        assert content_equals_ignore_eol(io.StringIO("a\r\nb\n"), io.StringIO("a\nb")) is True
        assert content_equals_ignore_eol(io.StringIO("a\nb\n"), io.StringIO("a\nc\n")) is False
        assert content_equals_ignore_eol(io.StringIO("a\nb\n"), io.StringIO("a\n")) is False


class TestConversion:
    def test_to_bytes(self) -> None:
        assert to_bytes(io.BytesIO(DATA)) == DATA

    def test_to_text_decodes_split_multibyte_sequences(self) -> None:
        text = "héllo €uro"
        assert to_text(io.BytesIO(text.encode("utf-8")), "utf-8", bytearray(1)) == text

    def test_copy_bytes_to_text_counts_characters(self) -> None:
        out = io.StringIO()
        assert copy_bytes_to_text(io.BytesIO("café".encode("latin-1")), out, "latin-1") == 4
        assert out.getvalue() == "café"

    def test_copy_text_to_bytes_counts_bytes(self) -> None:
        out = io.BytesIO()
        assert copy_text_to_bytes(io.StringIO("café"), out, "utf-8") == 5
        assert out.getvalue() == "café".encode("utf-8")

    def test_unknown_encoding_raises(self) -> None:
        with pytest.raises(UnsupportedCharsetError):
            to_text(io.BytesIO(b"x"), "no-such-charset")


class TestBufferValidation:
    @pytest.fixture(autouse=True)
    def _setup(self, spy_sink, exploding) -> None:  # type: ignore[no-untyped-def]
        self.sink = spy_sink
        self.exploding = exploding

    def test_copy_rejects_empty_buffer(self) -> None:
        source = io.BytesIO(b"0123456789")
        with pytest.raises(ValueError):
            copy(source, self.sink, bytearray(0))
        assert source.tell() == 0
        assert self.sink.writes == []

    def test_skip_and_consume_reject_empty_buffer(self) -> None:
        with pytest.raises(ValueError):
            skip(self.exploding, 5, bytearray(0))
        with pytest.raises(ValueError):
            skip_fully(self.exploding, 5, bytearray(0))
        with pytest.raises(ValueError):
            consume(self.exploding, bytearray(0))

    def test_copy_range_rejects_empty_buffer_before_skipping(self) -> None:
        with pytest.raises(ValueError):
            copy_range(self.exploding, self.sink, 3, 2, bytearray(0))

    def test_conversion_rejects_empty_buffer(self) -> None:
        with pytest.raises(ValueError):
            copy_bytes_to_text(self.exploding, io.StringIO(), "utf-8", bytearray(0))

    @pytest.mark.parametrize("buffer_size", [0, -4])
    def test_text_helpers_reject_non_positive_buffer_size(self, buffer_size: int) -> None:
        with pytest.raises(ValueError):
            copy_text(self.exploding, self.sink, buffer_size)
        with pytest.raises(ValueError):
            copy_text_range(self.exploding, self.sink, 2, 3, buffer_size)
        with pytest.raises(ValueError):
            skip_text(self.exploding, 3, buffer_size)
        with pytest.raises(ValueError):
            copy_text_to_bytes(self.exploding, io.BytesIO(), "utf-8", buffer_size)
        with pytest.raises(ValueError):
            content_equals(self.exploding, io.BytesIO(b"x"), buffer_size)
        with pytest.raises(ValueError):
            content_equals_text(self.exploding, io.StringIO("x"), buffer_size)
