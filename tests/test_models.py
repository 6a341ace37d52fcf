"""
Tests for the finding / log record / statistics models.
Run with: python -m pytest tests/test_models.py
"""
import os
import sys
import unittest

# Add src to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(project_root, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from lantern.exceptions import MalformedRecord, ValidationError
from lantern.models import (Finding, FindingPosition, HttpDetails, LogRecord, MethodStatistics,
                            ProtocolKind, TransportDetails, HTTP_METHODS)


def _finding_dict(**overrides):
    data = {
        "ruleId": "R-001",
        "ruleName": "SQL injection",
        "ruleDescription": "Classic tautology",
        "line": 0,
        "lineIndex": 14,
        "length": 6,
        "matchedString": "1' OR",
        "matchedBodyHash": "",
        "matchedBodyHashAlg": "",
        "classification": "sqli",
        "severity": 3,
    }
    data["length"] = len(data["matchedString"])
    data.update(overrides)
    return data


def _http_dict(**overrides):
    data = {
        "id": "log-1",
        "agentId": "agent-a",
        "remoteIp": "10.0.0.5",
        "timestamp": 1700000000,
        "type": "http",
        "request": "GET /login HTTP/1.1\r\nHost: example\r\n\r\n",
        "response": "HTTP/1.1 200 OK\r\n\r\n",
        "requestFindings": [_finding_dict()],
        "responseFindings": None,
        "verdict": "allow",
        "httpMethod": "GET",
        "httpRequestVersion": "HTTP/1.1",
        "httpRequestURL": "/login",
        "httpResponseVersion": "HTTP/1.1",
        "httpResponseCode": "200 OK",
    }
    data.update(overrides)
    return data


class FindingTests(unittest.TestCase):
    def test_from_dict(self):
        finding = Finding.from_dict(_finding_dict())
        self.assertEqual(finding.rule_id, "R-001")
        self.assertEqual(finding.position, FindingPosition(line=0, column_index=14, length=5))
        self.assertEqual(finding.classification, "sqli")
        self.assertEqual(finding.severity, 3)

    def test_numeric_strings_are_parsed(self):
        finding = Finding.from_dict(_finding_dict(line="2", lineIndex="4", length="5", severity="1"))
        self.assertEqual(finding.line, 2)
        self.assertEqual(finding.position.column_index, 4)
        self.assertEqual(finding.severity, 1)

    def test_not_located_sentinel(self):
        finding = Finding.from_dict(_finding_dict(line=-1, lineIndex=-1))
        self.assertIsNone(finding.position)
        self.assertIsNone(finding.line)
        self.assertFalse(finding.is_located)
        self.assertEqual(finding.to_dict()["line"], -1)

    def test_garbage_line_rejected(self):
        with self.assertRaises(MalformedRecord):
            Finding.from_dict(_finding_dict(line="two"))

    def test_unknown_severity_kept_neutral(self):
        finding = Finding.from_dict(_finding_dict(severity="high"))
        self.assertEqual(finding.severity, -1)

    def test_negative_position_rejected(self):
        with self.assertRaises(ValidationError):
            FindingPosition(line=-1)
        with self.assertRaises(ValidationError):
            FindingPosition(line=0, length=-2)

    def test_matched_string_length_must_agree(self):
        with self.assertRaises(ValidationError):
            Finding(rule_id="x", position=FindingPosition(0, 0, 3), matched_string="abcd")
        # Unknown length is fine
        Finding(rule_id="x", position=FindingPosition(0, 0, 0), matched_string="abcd")

    def test_length_in_utf8_bytes(self):
        finding = Finding.from_dict(_finding_dict(matchedString="é<script>", length=10))
        self.assertEqual(finding.position.length, 10)
        finding = Finding.from_dict(_finding_dict(matchedString="é<script>", length=9))
        self.assertEqual(finding.position.length, 9)
        with self.assertRaises(ValidationError):
            Finding.from_dict(_finding_dict(matchedString="é<script>", length=11))

    def test_classification_case_preserved(self):
        finding = Finding.from_dict(_finding_dict(classification="XsS"))
        self.assertEqual(finding.classification, "XsS")

    def test_round_trip_dict(self):
        data = _finding_dict()
        self.assertEqual(Finding.from_dict(data).to_dict(), data)


class LogRecordTests(unittest.TestCase):
    def test_http_record(self):
        record = LogRecord.from_dict(_http_dict())
        self.assertIs(record.kind, ProtocolKind.HTTP)
        self.assertEqual(record.http.method, "GET")
        self.assertEqual(record.http.response_code, "200 OK")
        self.assertIsNone(record.transport)
        self.assertEqual(len(record.request_findings), 1)
        self.assertEqual(record.response_findings, ())

    def test_empty_http_fields_read_as_absent(self):
        record = LogRecord.from_dict(_http_dict(httpMethod="", httpRequestURL=""))
        self.assertIsNone(record.http.method)
        self.assertIsNone(record.http.request_url)

    def test_http_record_requires_method_key(self):
        data = _http_dict()
        del data["httpMethod"]
        with self.assertRaises(MalformedRecord) as ctx:
            LogRecord.from_dict(data)
        self.assertEqual(ctx.exception.record_id, "log-1")

    def test_multibyte_match_loads(self):
        finding = _finding_dict(matchedString="é<script>", length=10)
        record = LogRecord.from_dict(_http_dict(requestFindings=[finding]))
        self.assertEqual(record.request_findings[0].matched_string, "é<script>")

    def test_inconsistent_finding_names_record(self):
        finding = _finding_dict(matchedString="abc", length=7)
        with self.assertRaises(MalformedRecord) as ctx:
            LogRecord.from_dict(_http_dict(requestFindings=[finding]))
        self.assertEqual(ctx.exception.record_id, "log-1")
        self.assertIn("requestFindings", str(ctx.exception))

    def test_missing_id_rejected(self):
        data = _http_dict()
        del data["id"]
        with self.assertRaises(MalformedRecord):
            LogRecord.from_dict(data)

    def test_unknown_type_rejected(self):
        with self.assertRaises(MalformedRecord):
            LogRecord.from_dict(_http_dict(type="smtp"))

    def test_tcp_record(self):
        record = LogRecord.from_dict({
            "id": "seg-1",
            "type": "tcp",
            "request": "hello",
            "streamUUID": "s-1",
            "streamIndex": 0,
            "direction": "ingress",
        })
        self.assertIsNone(record.http)
        self.assertEqual(record.transport.direction, "ingress")
        self.assertEqual(record.stream_id, "s-1")
        self.assertEqual(record.stream_index, 0)
        self.assertTrue(record.has_stream)

    def test_websocket_has_no_details(self):
        record = LogRecord.from_dict({"id": "ws-1", "type": "websocket"})
        self.assertIsNone(record.details)
        self.assertIsNone(record.http)
        self.assertIsNone(record.transport)

    def test_details_must_match_kind(self):
        with self.assertRaises(MalformedRecord):
            LogRecord(id="x", kind=ProtocolKind.TCP, details=HttpDetails(method="GET"))
        with self.assertRaises(MalformedRecord):
            LogRecord(id="x", kind="http")

    def test_transport_details_default(self):
        record = LogRecord(id="x", kind="udp")
        self.assertEqual(record.transport, TransportDetails())

    def test_findings_are_tuples(self):
        finding = Finding(rule_id="r")
        record = LogRecord(id="x", kind="websocket", request_findings=[finding])
        self.assertEqual(record.request_findings, (finding,))
        self.assertEqual(record.findings, (finding,))

    def test_round_trip_dict(self):
        record = LogRecord.from_dict(_http_dict())
        self.assertEqual(LogRecord.from_dict(record.to_dict()), record)


class MethodStatisticsTests(unittest.TestCase):
    def test_defaults_are_zero_in_fixed_order(self):
        stats = MethodStatistics()
        self.assertEqual(list(stats.to_dict()), list(HTTP_METHODS))
        self.assertEqual(stats.total, 0)

    def test_from_dict_missing_keys(self):
        stats = MethodStatistics.from_dict({"GET": 4, "POST": "2"})
        self.assertEqual(stats["GET"], 4)
        self.assertEqual(stats["POST"], 2)
        self.assertEqual(stats["PATCH"], 0)

    def test_chart_entries(self):
        stats = MethodStatistics.from_counts({"HEAD": 1})
        entries = stats.chart_entries()
        self.assertEqual(entries[0], {"method": "GET", "requests": 0})
        self.assertEqual(entries[1], {"method": "HEAD", "requests": 1})
        self.assertEqual(len(entries), 9)

    def test_rejects_unknown_method_and_negative(self):
        with self.assertRaises(MalformedRecord):
            MethodStatistics.from_counts({"BREW": 1})
        with self.assertRaises(MalformedRecord):
            MethodStatistics.from_counts({"GET": -1})


if __name__ == "__main__":
    unittest.main()
