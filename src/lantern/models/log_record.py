# Log record data model
"""
Log record models for Lantern.

A LogRecord is one captured exchange as stored by the backend. Protocol
specific fields live in a tagged `details` value whose type must agree with
`kind`:

    kind        details
    ----        -------
    http        HttpDetails
    tcp / udp   TransportDetails
    websocket   None

Use `record.http` / `record.transport` to narrow; they return None for any
other kind instead of empty strings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..exceptions import MalformedRecord, ValidationError
from .finding import Finding, parse_int


class ProtocolKind(str, Enum):
    HTTP = "http"
    WEBSOCKET = "websocket"
    TCP = "tcp"
    UDP = "udp"

    @classmethod
    def parse(cls, value: Any) -> "ProtocolKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise MalformedRecord(f"unknown protocol kind {value!r} (expected one of: {allowed})")


class Direction(str, Enum):
    INGRESS = "ingress"
    """Client to backend"""

    EGRESS = "egress"
    """Backend to client"""


@dataclass(frozen=True)
class HttpDetails:
    """Fields extracted from the HTTP request and status lines."""
    method: Optional[str] = None
    request_url: Optional[str] = None
    request_version: Optional[str] = None
    response_version: Optional[str] = None
    response_code: Optional[str] = None
    """Status code plus reason phrase, e.g. '200 OK'"""


@dataclass(frozen=True)
class TransportDetails:
    """Fields of a raw TCP/UDP segment log."""
    direction: Optional[str] = None
    """'ingress' or 'egress'; kept as a string so unknown values survive"""


ProtocolDetails = Union[HttpDetails, TransportDetails, None]

_DETAILS_FOR_KIND = {
    ProtocolKind.HTTP: HttpDetails,
    ProtocolKind.TCP: TransportDetails,
    ProtocolKind.UDP: TransportDetails,
    ProtocolKind.WEBSOCKET: type(None),
}


def _opt_str(value: Any) -> Optional[str]:
    """Empty strings on the wire mean 'not set'."""
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


def _findings(raw: Any, field_name: str, record_id: str) -> Tuple[Finding, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedRecord(f"{field_name} must be a list", record_id)
    try:
        return tuple(Finding.from_dict(item) for item in raw)
    except ValidationError as e:
        raise MalformedRecord(f"{field_name}: {e}", record_id) from e


@dataclass(frozen=True)
class LogRecord:
    """
    One captured request/response (or one stream segment).

    Read-only to Lantern: records come from the capture backend and are only
    ever filtered, sorted and rendered.
    """
    id: str
    kind: ProtocolKind
    timestamp: int = 0
    """Unix seconds"""

    agent_id: str = ""
    remote_ip: str = ""
    request_text: str = ""
    response_text: str = ""
    request_findings: Tuple[Finding, ...] = field(default_factory=tuple)
    response_findings: Tuple[Finding, ...] = field(default_factory=tuple)
    verdict: str = ""
    """Action the agent took, e.g. 'allow' or 'drop'"""

    stream_id: Optional[str] = None
    stream_index: Optional[int] = None
    details: ProtocolDetails = None

    def __post_init__(self):
        kind = ProtocolKind.parse(self.kind)
        object.__setattr__(self, 'kind', kind)

        # Transport records always carry details, even with no direction known
        if self.details is None and kind in (ProtocolKind.TCP, ProtocolKind.UDP):
            object.__setattr__(self, 'details', TransportDetails())

        expected = _DETAILS_FOR_KIND[kind]
        if not isinstance(self.details, expected):
            raise MalformedRecord(
                f"{kind.value} record cannot carry {type(self.details).__name__}",
                self.id,
            )

        for name in ('request_findings', 'response_findings'):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value or ()))

    # NARROWED ACCESSORS
    @property
    def http(self) -> Optional[HttpDetails]:
        return self.details if isinstance(self.details, HttpDetails) else None

    @property
    def transport(self) -> Optional[TransportDetails]:
        return self.details if isinstance(self.details, TransportDetails) else None

    @property
    def findings(self) -> Tuple[Finding, ...]:
        """Request findings followed by response findings."""
        return self.request_findings + self.response_findings

    @property
    def has_stream(self) -> bool:
        return bool(self.stream_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LogRecord":
        """
        Build a record from the backend's JSON object.

        Raises MalformedRecord when `id` or `type` is missing, the type is
        unknown, or an http record lacks the `httpMethod` key.
        """
        if not isinstance(data, Mapping):
            raise MalformedRecord(f"log record must be an object, got {type(data).__name__}")

        record_id = data.get("id")
        if record_id is None or record_id == "":
            raise MalformedRecord("missing required field 'id'")
        record_id = str(record_id)

        if "type" not in data:
            raise MalformedRecord("missing required field 'type'", record_id)
        try:
            kind = ProtocolKind.parse(data["type"])
        except MalformedRecord as e:
            raise MalformedRecord(str(e), record_id) from e

        details: ProtocolDetails = None
        if kind is ProtocolKind.HTTP:
            if "httpMethod" not in data:
                raise MalformedRecord("http record is missing 'httpMethod'", record_id)
            details = HttpDetails(
                method=_opt_str(data.get("httpMethod")),
                request_url=_opt_str(data.get("httpRequestURL")),
                request_version=_opt_str(data.get("httpRequestVersion")),
                response_version=_opt_str(data.get("httpResponseVersion")),
                response_code=_opt_str(data.get("httpResponseCode")),
            )
        elif kind in (ProtocolKind.TCP, ProtocolKind.UDP):
            details = TransportDetails(direction=_opt_str(data.get("direction")))

        stream_index = data.get("streamIndex")
        return cls(
            id=record_id,
            kind=kind,
            timestamp=parse_int(data.get("timestamp"), "timestamp"),
            agent_id=str(data.get("agentId") or ""),
            remote_ip=str(data.get("remoteIp") or ""),
            request_text=str(data.get("request") or ""),
            response_text=str(data.get("response") or ""),
            request_findings=_findings(data.get("requestFindings"), "requestFindings", record_id),
            response_findings=_findings(data.get("responseFindings"), "responseFindings", record_id),
            verdict=str(data.get("verdict") or ""),
            stream_id=_opt_str(data.get("streamUUID")),
            stream_index=parse_int(stream_index, "streamIndex") if stream_index not in (None, "") else None,
            details=details,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape used by the backend."""
        out: Dict[str, Any] = {
            "id": self.id,
            "agentId": self.agent_id,
            "remoteIp": self.remote_ip,
            "timestamp": self.timestamp,
            "type": self.kind.value,
            "request": self.request_text,
            "response": self.response_text,
            "requestFindings": [f.to_dict() for f in self.request_findings],
            "responseFindings": [f.to_dict() for f in self.response_findings],
            "verdict": self.verdict,
            "streamUUID": self.stream_id or "",
            "streamIndex": self.stream_index,
        }
        http = self.http
        if http is not None:
            out.update({
                "httpMethod": http.method or "",
                "httpRequestVersion": http.request_version or "",
                "httpRequestURL": http.request_url or "",
                "httpResponseVersion": http.response_version or "",
                "httpResponseCode": http.response_code or "",
            })
        transport = self.transport
        if transport is not None:
            out["direction"] = transport.direction or ""
        return out
