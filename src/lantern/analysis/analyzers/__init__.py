"""Built-in analyzers. Importing this package registers them."""

from .directions import DirectionsAnalyzer, aggregate_directions
from .http_methods import HttpMethodsAnalyzer, aggregate_methods
from .verdicts import VerdictsAnalyzer, aggregate_verdicts

__all__ = [
    'DirectionsAnalyzer',
    'HttpMethodsAnalyzer',
    'VerdictsAnalyzer',
    'aggregate_directions',
    'aggregate_methods',
    'aggregate_verdicts',
]
