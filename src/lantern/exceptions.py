"""
Exception hierarchy for Lantern.

Everything raised on purpose by the library derives from LanternError so the
CLI can turn it into a clean error message.
"""
from dataclasses import dataclass
from typing import Any, Optional


class LanternError(Exception):
    """Base class for all Lantern errors."""


class ValidationError(LanternError, ValueError):
    """Input rejected at construction or parse time."""


class MalformedRecord(ValidationError):
    """A log record (or finding) is missing required fields or is inconsistent."""

    def __init__(self, message: str, record_id: Optional[str] = None):
        if record_id is not None:
            message = f"record {record_id!r}: {message}"
        super().__init__(message)
        self.record_id = record_id


class DuplicateRowId(ValidationError):
    """Two rows of one table share the same identifier."""

    def __init__(self, row_id: Any):
        super().__init__(f"Duplicate row id {row_id!r}: row ids must be unique within a table")
        self.row_id = row_id


class RecordNotFound(LanternError, KeyError):
    """Lookup of a record id or stream id that is not in the snapshot."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "record not found"


@dataclass(frozen=True)
class OutOfRangeReference:
    """
    A finding that points past the end of the text it was attached to.

    Never raised: the highlight mapper logs these and skips them, because the
    producer of the finding is outside our control.
    """
    rule_id: str
    line: int
    line_count: int

    def __str__(self) -> str:
        return (f"finding {self.rule_id or '<unnamed>'} references line {self.line} "
                f"but text has {self.line_count} line(s)")
