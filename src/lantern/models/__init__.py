"""
Lantern data models.
"""

from .finding import Finding, FindingPosition, Severity
from .log_record import (
    Direction,
    HttpDetails,
    LogRecord,
    ProtocolKind,
    TransportDetails,
)
from .statistics import HTTP_METHODS, MethodStatistics

__all__ = [
    'Finding',
    'FindingPosition',
    'Severity',
    'Direction',
    'HttpDetails',
    'LogRecord',
    'ProtocolKind',
    'TransportDetails',
    'HTTP_METHODS',
    'MethodStatistics',
]
