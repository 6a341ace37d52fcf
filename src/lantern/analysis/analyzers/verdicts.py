"""Counts of agent verdicts (allow/drop/...)."""
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

from ..base import Analyzer, AnalyzerResult
from ..registry import register_analyzer
from ...models.log_record import LogRecord


@register_analyzer
class VerdictsAnalyzer(Analyzer):
    name = "verdicts"
    version = "1.0"

    def __init__(self):
        self.counts: Counter = Counter()

    def on_record(self, record: LogRecord) -> None:
        if record.verdict:
            self.counts[record.verdict] += 1

    def on_end(self) -> AnalyzerResult:
        return AnalyzerResult(analyzer=self.name, results={"verdicts": dict(sorted(self.counts.items()))})


def aggregate_verdicts(records: Iterable[LogRecord]) -> Dict[str, int]:
    analyzer = VerdictsAnalyzer()
    for record in records:
        analyzer.on_record(record)
    return dict(sorted(analyzer.counts.items()))
