"""
Runs a set of analyzers over one record collection.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models.log_record import LogRecord
from .base import Analyzer, AnalyzerResult
from .registry import create_analyzer

logger = logging.getLogger(__name__)

DEFAULT_ANALYZERS = ("http_methods", "directions", "verdicts")


@dataclass
class AnalysisReport:
    records_total: int = 0
    results: List[AnalyzerResult] = field(default_factory=list)

    def get(self, analyzer: str) -> Optional[AnalyzerResult]:
        for result in self.results:
            if result.analyzer == analyzer:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "records_total": self.records_total,
            "analyzers": {r.analyzer: r.results for r in self.results},
        }


class AnalysisEngine:
    def __init__(self, analyzers: Sequence[Analyzer]):
        self.analyzers = list(analyzers)
        self._count = 0

    @classmethod
    def with_defaults(cls) -> "AnalysisEngine":
        return cls([create_analyzer(name) for name in DEFAULT_ANALYZERS])

    def process_record(self, record: LogRecord) -> None:
        self._count += 1
        for analyzer in self.analyzers:
            analyzer.on_record(record)

    def run(self, records: Iterable[LogRecord]) -> "AnalysisReport":
        for record in records:
            self.process_record(record)
        return self.finalize()

    def finalize(self) -> AnalysisReport:
        report = AnalysisReport(records_total=self._count)
        for analyzer in self.analyzers:
            report.results.append(analyzer.on_end())
        logger.debug("Analysis finished over %d record(s) with %d analyzer(s)",
                     self._count, len(self.analyzers))
        return report
