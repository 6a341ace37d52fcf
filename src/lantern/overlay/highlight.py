"""
Line highlighting for findings.

This module is pure and deterministic:
- Text is split on '\\n' only ('\\r' stays part of the line)
- Line indices are 0-based, the same convention the agent uses
- Findings outside the text are skipped and logged, never raised
- Inputs are never mutated
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set

from ..exceptions import OutOfRangeReference
from ..models.finding import Finding

logger = logging.getLogger(__name__)

HIGHLIGHT_MARKER = " // [!code highlight]"


def count_lines(text: str) -> int:
    """Number of '\\n'-separated lines; empty text has none."""
    if not text:
        return 0
    return text.count("\n") + 1


def find_out_of_range(text: str, findings: Optional[Iterable[Finding]]) -> List[OutOfRangeReference]:
    """Located findings whose line does not exist in `text`, in input order."""
    line_count = count_lines(text)
    refs = []
    for finding in findings or ():
        line = finding.line
        if line is not None and line >= line_count:
            refs.append(OutOfRangeReference(rule_id=finding.rule_id, line=line, line_count=line_count))
    return refs


def compute_highlight_lines(text: str, findings: Optional[Iterable[Finding]]) -> Set[int]:
    """
    Return the set of line indices referenced by `findings`.

    Unlocated findings are ignored. Findings pointing past the last line are
    ignored too, with a warning, since they indicate an upstream offset bug.
    """
    line_count = count_lines(text)
    lines: Set[int] = set()

    for finding in findings or ():
        line = finding.line
        if line is None:
            continue
        if line >= line_count:
            logger.warning("%s", OutOfRangeReference(rule_id=finding.rule_id, line=line,
                                                     line_count=line_count))
            continue
        lines.add(line)

    return lines


def sorted_highlight_lines(text: str, findings: Optional[Iterable[Finding]]) -> List[int]:
    return sorted(compute_highlight_lines(text, findings))


def annotate(text: str, highlight_lines: Iterable[int], marker: str = HIGHLIGHT_MARKER) -> str:
    """
    Append `marker` to every highlighted line.

    Output has exactly the same number of lines as the input; lines are
    re-joined with '\\n' so a trailing newline in the input is kept.
    """
    if not text:
        return ""

    wanted = set(highlight_lines)
    if not wanted:
        return text

    out = []
    for index, line in enumerate(text.split("\n")):
        out.append(line + marker if index in wanted else line)
    return "\n".join(out)


def strip_annotations(text: str, highlight_lines: Iterable[int], marker: str = HIGHLIGHT_MARKER) -> str:
    """
    Inverse of annotate(): drop `marker` from the end of the highlighted lines.

    Other lines are left alone even when they end with the marker, since
    captured payloads may contain it verbatim.
    """
    if not text or not marker:
        return text

    wanted = set(highlight_lines)
    out = []
    for index, line in enumerate(text.split("\n")):
        if index in wanted and line.endswith(marker):
            line = line[:-len(marker)]
        out.append(line)
    return "\n".join(out)


def highlight(text: str, findings: Optional[Iterable[Finding]], marker: str = HIGHLIGHT_MARKER) -> str:
    """compute_highlight_lines() and annotate() in one call."""
    return annotate(text, compute_highlight_lines(text, findings), marker)
