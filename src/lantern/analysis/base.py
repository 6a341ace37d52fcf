"""Analyzer interface."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict

from ..models.log_record import LogRecord


@dataclass
class AnalyzerResult:
    analyzer: str
    results: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"analyzer": self.analyzer, "results": dict(self.results)}


class Analyzer(ABC):
    """
    Streaming aggregator over log records.

    on_record() is called once per record in collection order; on_end() is
    called once and returns the result. Results must not depend on record
    order.
    """
    name: str = ""
    version: str = "1.0"

    @abstractmethod
    def on_record(self, record: LogRecord) -> None:
        ...

    @abstractmethod
    def on_end(self) -> AnalyzerResult:
        ...
