"""Coded error taxonomy shared by index and description runs."""

from __future__ import annotations


class RelIndexError(Exception):
    """Base error carrying a stable machine-readable code."""

    code = "RELINDEX_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ControlSystemUnavailableError(RelIndexError):
    """Raised when the tracked-file listing cannot be obtained."""

    code = "CONTROL_SYSTEM_UNAVAILABLE"


class FileUnreadableError(RelIndexError):
    """Raised when a tracked source file cannot be read."""

    code = "FILE_UNREADABLE"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read tracked file '{path}': {reason}")
        self.path = path


class IndexNotBuiltError(RelIndexError):
    """Raised when descriptions are requested before an index snapshot exists."""

    code = "INDEX_NOT_BUILT"


class SourceParseError(RelIndexError):
    """Raised when lexical extraction cannot make sense of a source file."""

    code = "SOURCE_PARSE_FAILED"


class StorageWriteError(RelIndexError):
    """Raised when snapshot outputs cannot be written; prior outputs are kept."""

    code = "STORAGE_WRITE_FAILED"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot write '{path}': {reason}")
        self.path = path
