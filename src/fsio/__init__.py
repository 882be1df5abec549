"""Stream copying and file/directory helpers."""

from __future__ import annotations

from .exceptions import IOErrorList, SizeMismatchError, UnsupportedCharsetError
from .files.file_ops import (
    byte_count_to_display_size,
    checksum,
    checksum_crc32,
    content_equals_files,
    content_equals_files_ignore_eol,
    copy_file,
    copy_file_to_directory,
    copy_file_to_stream,
    copy_stream_to_file,
    force_mkdir,
    force_mkdir_parent,
    is_file_newer,
    is_file_older,
    last_modified,
    read_file_lines,
    read_file_to_bytes,
    read_file_to_string,
    touch,
    wait_for,
    write_bytes_to_file,
    write_lines_to_file,
    write_string_to_file,
)
from .files.tree import (
    clean_directory,
    clean_directory_on_exit,
    copy_directory,
    copy_directory_to_directory,
    copy_to_directory,
    delete_directory,
    delete_pending_on_exit,
    delete_quietly,
    directory_contains,
    ensure_absent,
    force_delete,
    force_delete_on_exit,
    is_empty_directory,
    iterate_files,
    list_entries,
    list_files,
    list_files_and_dirs,
    move_directory,
    move_directory_to_directory,
    move_file,
    move_file_to_directory,
    move_to_directory,
    remove_existing,
    size_of,
    size_of_directory,
    size_of_directory_big,
)
from .files.filters import and_filter, directory_filter, file_filter, name_filter, not_filter, or_filter, suffix_filter
from .infrastructure.config import DEFAULT_BUFFER_SIZE, SETTINGS, IOSettings
from .streams.charsets import default_encoding, is_supported, to_encoding
from .streams.copy import (
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
from .streams.lines import LineIterator, line_iterator, read_lines, write_lines
from .types import DirectoryEntry, PathFilter, Sink, Source

__version__ = "0.1.0"

__all__ = [
    # exceptions
    "IOErrorList",
    "SizeMismatchError",
    "UnsupportedCharsetError",
    # file_ops
    "byte_count_to_display_size",
    "checksum",
    "checksum_crc32",
    "content_equals_files",
    "content_equals_files_ignore_eol",
    "copy_file",
    "copy_file_to_directory",
    "copy_file_to_stream",
    "copy_stream_to_file",
    "force_mkdir",
    "force_mkdir_parent",
    "is_file_newer",
    "is_file_older",
    "last_modified",
    "read_file_lines",
    "read_file_to_bytes",
    "read_file_to_string",
    "touch",
    "wait_for",
    "write_bytes_to_file",
    "write_lines_to_file",
    "write_string_to_file",
    # tree
    "clean_directory",
    "clean_directory_on_exit",
    "copy_directory",
    "copy_directory_to_directory",
    "copy_to_directory",
    "delete_directory",
    "delete_pending_on_exit",
    "delete_quietly",
    "directory_contains",
    "ensure_absent",
    "force_delete",
    "force_delete_on_exit",
    "is_empty_directory",
    "iterate_files",
    "list_entries",
    "list_files",
    "list_files_and_dirs",
    "move_directory",
    "move_directory_to_directory",
    "move_file",
    "move_file_to_directory",
    "move_to_directory",
    "remove_existing",
    "size_of",
    "size_of_directory",
    "size_of_directory_big",
    # filters
    "and_filter",
    "directory_filter",
    "file_filter",
    "name_filter",
    "not_filter",
    "or_filter",
    "suffix_filter",
    # config
    "DEFAULT_BUFFER_SIZE",
    "IOSettings",
    "SETTINGS",
    # charsets
    "default_encoding",
    "is_supported",
    "to_encoding",
    # copy
    "EOF",
    "consume",
    "content_equals",
    "content_equals_ignore_eol",
    "content_equals_text",
    "copy",
    "copy_bytes_to_text",
    "copy_large",
    "copy_range",
    "copy_text",
    "copy_text_range",
    "copy_text_to_bytes",
    "read",
    "read_bytes_fully",
    "read_fully",
    "read_text",
    "read_text_fully",
    "skip",
    "skip_fully",
    "skip_text",
    "skip_text_fully",
    "to_bytes",
    "to_text",
    # lines
    "LineIterator",
    "line_iterator",
    "read_lines",
    "write_lines",
    # types
    "DirectoryEntry",
    "PathFilter",
    "Sink",
    "Source",
]
