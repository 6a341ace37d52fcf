"""Ingress/egress segment counts for tcp and udp streams."""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

from ..base import Analyzer, AnalyzerResult
from ..registry import register_analyzer
from ...models.log_record import Direction, LogRecord

_DIRECTIONS = tuple(d.value for d in Direction)


@register_analyzer
class DirectionsAnalyzer(Analyzer):
    name = "directions"
    version = "1.0"

    def __init__(self):
        self.counts: Counter = Counter()

    def on_record(self, record: LogRecord) -> None:
        transport = record.transport
        if transport is None or transport.direction not in _DIRECTIONS:
            return
        self.counts[(record.kind.value, transport.direction)] += 1

    def totals(self) -> Dict[str, int]:
        totals = {d: 0 for d in _DIRECTIONS}
        for (_kind, direction), count in self.counts.items():
            totals[direction] += count
        return totals

    def on_end(self) -> AnalyzerResult:
        by_kind: Dict[str, Dict[str, int]] = {}
        for (kind, direction), count in sorted(self.counts.items()):
            by_kind.setdefault(kind, {d: 0 for d in _DIRECTIONS})[direction] = count
        return AnalyzerResult(
            analyzer=self.name,
            results={"totals": self.totals(), "by_kind": by_kind},
        )


def aggregate_directions(records: Iterable[LogRecord]) -> Dict[str, int]:
    analyzer = DirectionsAnalyzer()
    for record in records:
        analyzer.on_record(record)
    return analyzer.totals()
