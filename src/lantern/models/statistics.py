"""
HTTP method statistics model.

Counts are kept for a fixed set of methods, always in the same order, so
chart data built from two snapshots lines up.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from ..exceptions import MalformedRecord
from .finding import parse_int

# Display order of the methods chart
HTTP_METHODS: Tuple[str, ...] = (
    "GET",
    "HEAD",
    "OPTIONS",
    "TRACE",
    "PUT",
    "DELETE",
    "POST",
    "PATCH",
    "CONNECT",
)


@dataclass(frozen=True)
class MethodStatistics:
    """Request count per recognized HTTP method."""

    counts: Tuple[Tuple[str, int], ...] = field(
        default_factory=lambda: tuple((m, 0) for m in HTTP_METHODS)
    )

    def __post_init__(self):
        given = dict(self.counts)
        unknown = set(given) - set(HTTP_METHODS)
        if unknown:
            raise MalformedRecord(f"unknown HTTP method(s) in statistics: {sorted(unknown)}")
        for method, count in given.items():
            if count < 0:
                raise MalformedRecord(f"count for {method} must be >= 0, got {count}")
        # Normalize to the fixed order with every method present
        object.__setattr__(self, 'counts', tuple((m, given.get(m, 0)) for m in HTTP_METHODS))

    @classmethod
    def from_counts(cls, counts: Mapping[str, int]) -> "MethodStatistics":
        return cls(counts=tuple(counts.items()))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MethodStatistics":
        """Parse the backend's `{"GET": n, ...}` object; missing methods read as 0."""
        if not isinstance(data, Mapping):
            raise MalformedRecord(f"method statistics must be an object, got {type(data).__name__}")
        return cls.from_counts({m: parse_int(data.get(m), m) for m in HTTP_METHODS})

    def __getitem__(self, method: str) -> int:
        for name, count in self.counts:
            if name == method:
                return count
        raise KeyError(method)

    def __iter__(self) -> Iterator[str]:
        return iter(HTTP_METHODS)

    @property
    def total(self) -> int:
        return sum(count for _, count in self.counts)

    def to_dict(self) -> Dict[str, int]:
        return dict(self.counts)

    def chart_entries(self) -> List[Dict[str, Any]]:
        """Rows for the methods radar chart: [{'method': 'GET', 'requests': n}, ...]."""
        return [{"method": method, "requests": count} for method, count in self.counts]
