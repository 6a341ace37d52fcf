"""
Column schema for browsing LogRecords.

Mirrors the dashboard's log table: remote IP, method, URL, response code,
timestamp, request/response finding badges and verdict.
"""
from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Callable, Iterable, List, Mapping, NamedTuple, Optional

from ..models.log_record import LogRecord
from ..overlay.badges import DEFAULT_BADGE_LIMIT, ColorToken, badge_label, badges_for, color_for
from .columns import Column, ColumnKind
from .engine import TableEngine

logger = logging.getLogger(__name__)

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Badge(NamedTuple):
    label: str
    color: ColorToken


def _http_field(name: str) -> Callable[[LogRecord], Optional[str]]:
    def get(record: LogRecord) -> Optional[str]:
        http = record.http
        return getattr(http, name) if http is not None else None
    return get


def _direction(record: LogRecord) -> Optional[str]:
    transport = record.transport
    return transport.direction if transport is not None else None


def format_timestamp(timestamp: int, fmt: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
    """UTC rendering of a unix timestamp; unrepresentable values are shown raw."""
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(fmt) + " UTC"
    except (OverflowError, OSError, ValueError) as e:
        logger.warning("Cannot render timestamp %r: %s", timestamp, e)
        return str(timestamp)


def _badge_renderer(attr: str, limit: int) -> Callable[[LogRecord], List[Badge]]:
    def render(record: LogRecord) -> List[Badge]:
        return [Badge(badge_label(f), color_for(f.severity))
                for f in badges_for(getattr(record, attr), limit)]
    return render


def log_columns(badge_limit: int = DEFAULT_BADGE_LIMIT,
                timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT) -> List[Column]:
    return [
        Column("id", "ID", hideable=False),
        Column("remote_ip", "Remote IP"),
        Column("kind", "Type", accessor=lambda r: r.kind.value, kind=ColumnKind.ENUM),
        Column("method", "Method", accessor=_http_field("method"), kind=ColumnKind.ENUM),
        Column("url", "URL", accessor=_http_field("request_url")),
        Column("response_code", "Response", accessor=_http_field("response_code")),
        Column("direction", "Direction", accessor=_direction, kind=ColumnKind.ENUM),
        Column("timestamp", "Timestamp", kind=ColumnKind.NUMBER,
               render=lambda r: format_timestamp(r.timestamp, timestamp_format)),
        Column("request_findings", "Request Findings",
               accessor=lambda r: len(r.request_findings), kind=ColumnKind.NUMBER,
               render=_badge_renderer("request_findings", badge_limit)),
        Column("response_findings", "Response Findings",
               accessor=lambda r: len(r.response_findings), kind=ColumnKind.NUMBER,
               render=_badge_renderer("response_findings", badge_limit)),
        Column("verdict", "Verdict", kind=ColumnKind.ENUM),
    ]


def log_table(records: Iterable[LogRecord],
              default_column: Optional[str] = "method",
              page_size: Optional[int] = None,
              badge_limit: int = DEFAULT_BADGE_LIMIT,
              timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
              actions: Optional[Mapping[str, Callable[[Any], Any]]] = None) -> TableEngine:
    """TableEngine over LogRecords keyed by record id."""
    return TableEngine(
        records,
        log_columns(badge_limit, timestamp_format),
        default_column=default_column,
        row_id=lambda r: r.id,
        page_size=page_size,
        actions=actions,
    )
