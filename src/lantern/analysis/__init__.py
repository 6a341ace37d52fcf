"""
Statistics over log record collections.
"""

from .base import Analyzer, AnalyzerResult
from .engine import AnalysisEngine, AnalysisReport
from .registry import create_analyzer, list_analyzers, register_analyzer
from .analyzers import (
    DirectionsAnalyzer,
    HttpMethodsAnalyzer,
    VerdictsAnalyzer,
    aggregate_directions,
    aggregate_methods,
    aggregate_verdicts,
)

__all__ = [
    'Analyzer',
    'AnalyzerResult',
    'AnalysisEngine',
    'AnalysisReport',
    'create_analyzer',
    'list_analyzers',
    'register_analyzer',
    'DirectionsAnalyzer',
    'HttpMethodsAnalyzer',
    'VerdictsAnalyzer',
    'aggregate_directions',
    'aggregate_methods',
    'aggregate_verdicts',
]
