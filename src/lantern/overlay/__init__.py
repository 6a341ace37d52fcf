"""
Finding overlay: line highlighting and badges.
"""

from .badges import (
    DEFAULT_BADGE_LIMIT,
    ColorToken,
    badge_label,
    badges_for,
    color_for,
    describe,
    highest_severity,
    unique_findings,
)
from .highlight import (
    HIGHLIGHT_MARKER,
    annotate,
    compute_highlight_lines,
    count_lines,
    find_out_of_range,
    highlight,
    sorted_highlight_lines,
    strip_annotations,
)

__all__ = [
    'DEFAULT_BADGE_LIMIT',
    'ColorToken',
    'badge_label',
    'badges_for',
    'color_for',
    'describe',
    'highest_severity',
    'unique_findings',
    'HIGHLIGHT_MARKER',
    'annotate',
    'compute_highlight_lines',
    'count_lines',
    'find_out_of_range',
    'highlight',
    'sorted_highlight_lines',
    'strip_annotations',
]
