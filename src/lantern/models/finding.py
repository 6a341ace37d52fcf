# Finding data model
"""
Finding data models for Lantern.

A Finding is one rule match reported by the capture agent against a request
or response. Findings are IMMUTABLE once attached to a log record - the
overlay code reads them, it never rewrites them.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import logging
from typing import Any, Dict, Mapping, Optional

from ..exceptions import MalformedRecord, ValidationError

logger = logging.getLogger(__name__)


class Severity(IntEnum):
    """Ordered severity scale. Only used for presentation precedence."""
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRITICAL = 3


def parse_int(value: Any, field_name: str, default: int = 0) -> int:
    """
    Read an integer that may arrive as a JSON number or a decimal string.

    Older agents sent line/lineIndex/length as strings; int is canonical.
    None and "" read as `default`.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise MalformedRecord(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise MalformedRecord(f"{field_name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class FindingPosition:
    """Where a finding sits inside its text block."""

    line: int
    """0-based line index, lines split on '\\n'"""

    column_index: int = 0
    """0-based offset of the match from the start of the line"""

    length: int = 0
    """Length of the matched string"""

    def __post_init__(self):
        if self.line < 0:
            raise ValidationError(f"line must be >= 0, got {self.line}")
        if self.column_index < 0:
            raise ValidationError(f"column_index must be >= 0, got {self.column_index}")
        if self.length < 0:
            raise ValidationError(f"length must be >= 0, got {self.length}")


@dataclass(frozen=True)
class Finding:
    """
    One detected rule match.

    position is None when the agent could not locate the match in the text
    (it reports line -1 in that case).
    """
    rule_id: str
    rule_name: str = ""
    rule_description: str = ""
    position: Optional[FindingPosition] = None
    matched_string: str = ""
    matched_body_hash: str = ""
    matched_body_hash_alg: str = ""
    classification: str = ""
    """Case-preserving; upper-casing is a display concern"""

    severity: int = Severity.LOW
    """0..3, see Severity. Unknown values are kept as-is"""

    def __post_init__(self):
        if self.position is not None and self.matched_string and self.position.length:
            # The agent counts UTF-8 bytes, hand-built findings count characters
            chars = len(self.matched_string)
            octets = len(self.matched_string.encode("utf-8"))
            if self.position.length not in (chars, octets):
                raise ValidationError(
                    f"finding {self.rule_id!r}: matched string has length {chars} "
                    f"({octets} bytes) but position.length is {self.position.length}"
                )

    @property
    def line(self) -> Optional[int]:
        return self.position.line if self.position is not None else None

    @property
    def is_located(self) -> bool:
        return self.position is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Finding":
        """Build a Finding from the backend's camelCase JSON object."""
        if not isinstance(data, Mapping):
            raise MalformedRecord(f"finding must be an object, got {type(data).__name__}")

        rule_id = str(data.get("ruleId") or "")
        line = parse_int(data.get("line"), "line", default=-1)
        column_index = parse_int(data.get("lineIndex"), "lineIndex")
        length = parse_int(data.get("length"), "length")

        position = None
        if line >= 0 and column_index >= 0:
            position = FindingPosition(line=line, column_index=column_index, length=max(length, 0))
        else:
            logger.debug("Finding %s has no location (line=%s, lineIndex=%s)",
                         rule_id, line, column_index)

        try:
            severity = parse_int(data.get("severity"), "severity")
        except MalformedRecord:
            # Severity only drives colors; unknown values render neutral
            severity = -1

        return cls(
            rule_id=rule_id,
            rule_name=str(data.get("ruleName") or ""),
            rule_description=str(data.get("ruleDescription") or ""),
            position=position,
            matched_string=str(data.get("matchedString") or ""),
            matched_body_hash=str(data.get("matchedBodyHash") or ""),
            matched_body_hash_alg=str(data.get("matchedBodyHashAlg") or ""),
            classification=str(data.get("classification") or ""),
            severity=severity,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the wire shape (unlocated findings use -1)."""
        pos = self.position
        return {
            "ruleId": self.rule_id,
            "ruleName": self.rule_name,
            "ruleDescription": self.rule_description,
            "line": pos.line if pos else -1,
            "lineIndex": pos.column_index if pos else -1,
            "length": pos.length if pos else len(self.matched_string),
            "matchedString": self.matched_string,
            "matchedBodyHash": self.matched_body_hash,
            "matchedBodyHashAlg": self.matched_body_hash_alg,
            "classification": self.classification,
            "severity": int(self.severity),
        }
