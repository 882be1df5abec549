"""Charset resolution.

``None`` means "the configured default encoding" here and nowhere else;
every other helper resolves its ``encoding`` argument through
:func:`to_encoding`.
"""

from __future__ import annotations

import codecs

from fsio.exceptions import UnsupportedCharsetError
from fsio.infrastructure.config import SETTINGS


def default_encoding() -> str:
    """Return the canonical name of the configured default encoding."""
    return to_encoding(SETTINGS.default_encoding)


def to_encoding(encoding: str | None) -> str:
    """Resolve *encoding* to a canonical codec name.

    Raises UnsupportedCharsetError for unknown names.
    """
    if encoding is None:
        encoding = SETTINGS.default_encoding
    try:
        return codecs.lookup(encoding).name
    except LookupError as err:
        raise UnsupportedCharsetError(encoding) from err


def is_supported(encoding: str | None) -> bool:
    """True if *encoding* names a codec this interpreter knows."""
    if not encoding:
        return False
    try:
        codecs.lookup(encoding)
    except LookupError:
        return False
    return True
