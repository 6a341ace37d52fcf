"""
Column definitions for the table engine.

A Column knows how to read its value from a row (accessor), how that value
compares when filtering (kind) and how to turn the row into something to
display (render). The engine itself never formats anything.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional


class ColumnKind(str, Enum):
    STRING = "string"
    """Filter by case-sensitive substring"""

    NUMBER = "number"
    """Filter by exact match"""

    ENUM = "enum"
    """Filter by exact match"""


class SortDirection(str, Enum):
    NONE = "none"
    ASC = "asc"
    DESC = "desc"

    def next(self) -> "SortDirection":
        """none -> asc -> desc -> none"""
        return _SORT_CYCLE[self]


_SORT_CYCLE = {
    SortDirection.NONE: SortDirection.ASC,
    SortDirection.ASC: SortDirection.DESC,
    SortDirection.DESC: SortDirection.NONE,
}


def field_getter(name: str) -> Callable[[Any], Any]:
    """Accessor reading `name` from a mapping or an attribute of an object."""
    def get(row: Any) -> Any:
        if isinstance(row, Mapping):
            return row.get(name)
        return getattr(row, name, None)
    get.__name__ = f"get_{name}"
    return get


def _default_render(value: Any) -> Any:
    return "" if value is None else value


@dataclass(frozen=True)
class Column:
    id: str
    title: str = ""
    accessor: Optional[Callable[[Any], Any]] = None
    """Defaults to reading the field named `id`"""

    kind: ColumnKind = ColumnKind.STRING
    sortable: bool = True
    hideable: bool = True
    render: Optional[Callable[[Any], Any]] = field(default=None, compare=False)
    """row -> display value; defaults to the raw value ('' for None)"""

    def __post_init__(self):
        if not self.title:
            object.__setattr__(self, 'title', self.id)
        if self.accessor is None:
            object.__setattr__(self, 'accessor', field_getter(self.id))
        object.__setattr__(self, 'kind', ColumnKind(self.kind))

    def value(self, row: Any) -> Any:
        return self.accessor(row)

    def display(self, row: Any) -> Any:
        if self.render is not None:
            return self.render(row)
        return _default_render(self.value(row))

    def matches(self, row: Any, needle: Any) -> bool:
        """Filter test for one row against `needle`."""
        value = self.value(row)
        if value is None:
            return False
        if self.kind is ColumnKind.STRING:
            return str(needle) in str(value)
        if value == needle:
            return True
        # Filter text typed by a user arrives as a string
        return isinstance(needle, str) and str(value) == needle
