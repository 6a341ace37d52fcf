"""
Finding badges: which findings to show and in what color.

The table shows at most a few badges per cell. Badges are the first N
findings in the order the agent reported them; they are not re-ranked by
severity.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..exceptions import ValidationError
from ..models.finding import Finding, Severity

DEFAULT_BADGE_LIMIT = 3


class ColorToken(str, Enum):
    NEUTRAL = "neutral"
    WARNING = "warning"
    ELEVATED = "elevated"
    CRITICAL = "critical"


_SEVERITY_COLORS = {
    Severity.MEDIUM: ColorToken.WARNING,
    Severity.HIGH: ColorToken.ELEVATED,
    Severity.CRITICAL: ColorToken.CRITICAL,
}


def color_for(severity) -> ColorToken:
    """Map a severity to a color token. Anything unrecognized is neutral."""
    if isinstance(severity, bool) or not isinstance(severity, int):
        return ColorToken.NEUTRAL
    return _SEVERITY_COLORS.get(severity, ColorToken.NEUTRAL)


def badges_for(findings: Optional[Sequence[Finding]], limit: int = DEFAULT_BADGE_LIMIT) -> List[Finding]:
    """First `limit` findings, original order, unmodified."""
    if limit < 0:
        raise ValidationError(f"badge limit must be >= 0, got {limit}")
    if not findings:
        return []
    return list(findings[:limit])


def badge_label(finding: Finding) -> str:
    return finding.classification.upper()


def unique_findings(findings: Optional[Iterable[Finding]]) -> List[Finding]:
    """Drop repeated matches of the same rule at the same spot, keeping the first."""
    seen = set()
    out = []
    for finding in findings or ():
        pos = finding.position
        key: Tuple = (finding.rule_id, pos.line if pos else None, pos.column_index if pos else None)
        if key in seen:
            continue
        seen.add(key)
        out.append(finding)
    return out


def highest_severity(findings: Optional[Iterable[Finding]]) -> int:
    """Highest known severity among `findings`; 0 when there are none."""
    best = int(Severity.LOW)
    for finding in findings or ():
        if color_for(finding.severity) is not ColorToken.NEUTRAL and finding.severity > best:
            best = int(finding.severity)
    return best


def describe(finding: Finding) -> str:
    """Detail text shown next to a badge."""
    if finding.position is None:
        where = "(location unknown)"
    else:
        where = f"on line {finding.position.line} at index {finding.position.column_index}"
    return f"Matched string {finding.matched_string} {where}"
