"""
Read-only snapshots of the backend's log collections.

A snapshot is one complete JSON payload fetched for a view. Loading it is
the only I/O Lantern does; every query afterwards works on memory.
"""
from __future__ import annotations

import json
import logging
import os
from typing import IO, Any, Dict, Iterable, List, Union

from ..analysis import aggregate_methods
from ..exceptions import MalformedRecord, RecordNotFound
from ..models.log_record import LogRecord, ProtocolKind
from ..models.statistics import MethodStatistics

logger = logging.getLogger(__name__)

Source = Union[str, "os.PathLike[str]", IO[str]]


def _read_json(source: Source) -> Any:
    try:
        if hasattr(source, "read"):
            return json.load(source)
        with open(source, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedRecord(f"invalid JSON: {e}") from e


def parse_records(payload: Any) -> List[LogRecord]:
    if not isinstance(payload, list):
        raise MalformedRecord(f"expected a JSON array of log records, got {type(payload).__name__}")
    return [LogRecord.from_dict(item) for item in payload]


def load_records(source: Source) -> List[LogRecord]:
    """Parse a JSON array of log records from a path or text stream."""
    records = parse_records(_read_json(source))
    logger.info("Loaded %d log record(s)", len(records))
    return records


def load_method_statistics(source: Source) -> MethodStatistics:
    """Parse the backend's methods-stats JSON object."""
    return MethodStatistics.from_dict(_read_json(source))


class LogSnapshot:
    """
    Queries over one loaded collection.

    Mirrors the backend's read endpoints: all logs, logs of a protocol kind,
    one log by id and the logs of one stream.
    """

    def __init__(self, records: Iterable[LogRecord]):
        self._records: List[LogRecord] = list(records)
        self._by_id: Dict[str, LogRecord] = {}
        for record in self._records:
            if record.id in self._by_id:
                logger.warning("Snapshot contains record id %s more than once; keeping the first", record.id)
                continue
            self._by_id[record.id] = record

    @classmethod
    def load(cls, source: Source) -> "LogSnapshot":
        return cls(load_records(source))

    def __len__(self) -> int:
        return len(self._records)

    def all(self) -> List[LogRecord]:
        return list(self._records)

    def by_kind(self, kind: Union[ProtocolKind, str]) -> List[LogRecord]:
        kind = ProtocolKind.parse(kind)
        return [r for r in self._records if r.kind is kind]

    def get(self, record_id: str) -> LogRecord:
        try:
            return self._by_id[record_id]
        except KeyError:
            raise RecordNotFound(f"No log record with id {record_id!r}") from None

    def stream(self, stream_id: str) -> List[LogRecord]:
        """Records of one stream ordered by stream index (unindexed last)."""
        members = [r for r in self._records if r.stream_id == stream_id]
        if not members:
            raise RecordNotFound(f"No records for stream {stream_id!r}")
        return sorted(members, key=lambda r: (r.stream_index is None, r.stream_index or 0))

    def stream_ids(self) -> List[str]:
        seen: Dict[str, None] = {}
        for record in self._records:
            if record.stream_id:
                seen.setdefault(record.stream_id, None)
        return list(seen)

    def method_statistics(self) -> MethodStatistics:
        return aggregate_methods(self._records)
