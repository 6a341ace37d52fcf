"""
Table review engine.
"""

from .columns import Column, ColumnKind, SortDirection, field_getter
from .engine import DELETE_ACTION, TableEngine, TableViewState
from .log_schema import Badge, format_timestamp, log_columns, log_table

__all__ = [
    'Column',
    'ColumnKind',
    'SortDirection',
    'field_getter',
    'DELETE_ACTION',
    'TableEngine',
    'TableViewState',
    'Badge',
    'format_timestamp',
    'log_columns',
    'log_table',
]
