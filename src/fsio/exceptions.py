"""Exceptions for fsio."""

from __future__ import annotations

from collections.abc import Iterator, Sequence


class IOErrorList(OSError):
    """Raised when a multi-entry operation collected one or more failures.

    Every per-entry error is kept in :attr:`causes`, in the order it occurred.
    """

    def __init__(self, message: str | None, causes: Sequence[BaseException] | None = None) -> None:
        self.causes: list[BaseException] = list(causes or [])
        if message is None:
            message = f"{len(self.causes)} exception(s): {self.causes}"
        super().__init__(message)
        if self.causes:
            self.__cause__ = self.causes[0]

    def cause(self, index: int) -> BaseException:
        return self.causes[index]

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.causes)

    @staticmethod
    def check_empty(causes: Sequence[BaseException], message: str | None = None) -> None:
        """Raise an IOErrorList wrapping *causes* unless it is empty."""
        if causes:
            raise IOErrorList(message, causes)


class SizeMismatchError(OSError):
    """Raised when a copied file's length differs from its source."""

    def __init__(self, src: object, dst: object, src_size: int, dst_size: int) -> None:
        super().__init__(f"Failed to copy full contents from '{src}' to '{dst}' Expected length: {src_size} Actual: {dst_size}")
        self.src = src
        self.dst = dst
        self.src_size = src_size
        self.dst_size = dst_size


class UnsupportedCharsetError(LookupError):
    """Raised when an encoding name cannot be resolved to a codec."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unsupported charset: {name!r}")
        self.name = name
