"""
Snapshot loading and queries.
"""

from .snapshot import LogSnapshot, load_method_statistics, load_records, parse_records

__all__ = [
    'LogSnapshot',
    'load_method_statistics',
    'load_records',
    'parse_records',
]
