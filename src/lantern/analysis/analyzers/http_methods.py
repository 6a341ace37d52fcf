"""HTTP method counts for the methods chart."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable

from ..base import Analyzer, AnalyzerResult
from ..registry import register_analyzer
from ...models.log_record import LogRecord, ProtocolKind
from ...models.statistics import HTTP_METHODS, MethodStatistics

logger = logging.getLogger(__name__)

_KNOWN_METHODS = frozenset(HTTP_METHODS)


@register_analyzer
class HttpMethodsAnalyzer(Analyzer):
    """
    Counts http records per method.

    Matching is exact and case-sensitive ('get' is not GET). Records with an
    unknown or missing method, and non-http records, are left out of every
    bucket.
    """
    name = "http_methods"
    version = "1.0"

    def __init__(self):
        self.counts: Counter = Counter()
        self.skipped = 0

    def on_record(self, record: LogRecord) -> None:
        if record.kind is not ProtocolKind.HTTP:
            return
        method = record.http.method if record.http else None
        if method not in _KNOWN_METHODS:
            self.skipped += 1
            logger.debug("Record %s has unrecognized HTTP method %r", record.id, method)
            return
        self.counts[method] += 1

    def statistics(self) -> MethodStatistics:
        return MethodStatistics.from_counts(self.counts)

    def on_end(self) -> AnalyzerResult:
        return AnalyzerResult(
            analyzer=self.name,
            results={
                "methods": self.statistics().to_dict(),
                "unrecognized": self.skipped,
            },
        )


def aggregate_methods(records: Iterable[LogRecord]) -> MethodStatistics:
    analyzer = HttpMethodsAnalyzer()
    for record in records:
        analyzer.on_record(record)
    return analyzer.statistics()
