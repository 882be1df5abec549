"""Shared fixtures for fsio tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


class SpySink:
    """Sink that records every write as an immutable bytes/str chunk."""

    def __init__(self) -> None:
        self.writes: list[bytes | str] = []

    def write(self, data: bytes | str) -> int:
        chunk = data if isinstance(data, str) else bytes(data)
        self.writes.append(chunk)
        return len(chunk)

    @property
    def sizes(self) -> list[int]:
        return [len(w) for w in self.writes]

    def getvalue(self) -> bytes | str:
        if self.writes and isinstance(self.writes[0], str):
            return "".join(self.writes)  # type: ignore[arg-type]
        return b"".join(self.writes)  # type: ignore[arg-type]


class TrickleSource:
    """Source that hands out at most *step* units per read and has no readinto()."""

    def __init__(self, data: bytes | str, step: int = 1) -> None:
        self._data = data
        self._pos = 0
        self._step = step
        self.reads = 0

    def read(self, size: int = -1) -> bytes | str:
        self.reads += 1
        if size < 0:
            size = len(self._data)
        n = min(size, self._step)
        chunk = self._data[self._pos : self._pos + n]
        self._pos += len(chunk)
        return chunk


class ExplodingSource:
    """Source that fails the test if anything reads from it."""

    def read(self, size: int = -1) -> bytes:
        raise AssertionError("source must not be read")

    def readinto(self, buffer: bytearray) -> int:
        raise AssertionError("source must not be read")


@pytest.fixture()
def spy_sink() -> SpySink:
    return SpySink()


@pytest.fixture()
def trickle() -> type[TrickleSource]:
    return TrickleSource


@pytest.fixture()
def exploding() -> ExplodingSource:
    return ExplodingSource()


def _build(root: Path, layout: dict[str, object]) -> None:
    for name, content in layout.items():
        path = root / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            _build(path, content)
        elif isinstance(content, bytes):
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(str(content), encoding="utf-8")


@pytest.fixture()
def make_tree():  # type: ignore[no-untyped-def]
    """Build a directory tree from a nested dict: ``{"a.txt": "x", "sub": {...}}``."""

    def factory(root: Path, layout: dict[str, object]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        _build(root, layout)
        return root

    return factory
