"""
Tests for the line highlight mapper.
Run with: python -m pytest tests/test_highlight.py
"""
import os
import sys
import unittest

# Add src to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(project_root, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from lantern.models.finding import Finding, FindingPosition
from lantern.overlay.highlight import (HIGHLIGHT_MARKER, annotate, compute_highlight_lines,
                                       count_lines, find_out_of_range, highlight,
                                       sorted_highlight_lines, strip_annotations)

REQUEST = (
    "POST /search HTTP/1.1\r\n"
    "Host: shop.example\r\n"
    "Content-Type: application/x-www-form-urlencoded\r\n"
    "\r\n"
    "q=<script>alert(1)</script>&page=1' OR '1'='1"
)


def _at(line, rule_id="R", column=0):
    return Finding(rule_id=rule_id, position=FindingPosition(line=line, column_index=column))


class HighlightLinesTests(unittest.TestCase):
    def test_collects_lines(self):
        findings = [_at(4, "xss", 2), _at(0, "verb")]
        self.assertEqual(compute_highlight_lines(REQUEST, findings), {0, 4})

    def test_deduplicates(self):
        findings = [_at(4, "xss"), _at(4, "sqli", 30), _at(4, "xss")]
        self.assertEqual(compute_highlight_lines(REQUEST, findings), {4})

    def test_sorted_helper(self):
        findings = [_at(4), _at(1), _at(2)]
        self.assertEqual(sorted_highlight_lines(REQUEST, findings), [1, 2, 4])

    def test_empty_inputs(self):
        self.assertEqual(compute_highlight_lines("", [_at(0)]), set())
        self.assertEqual(compute_highlight_lines(REQUEST, []), set())
        self.assertEqual(compute_highlight_lines(REQUEST, None), set())

    def test_unlocated_findings_ignored(self):
        self.assertEqual(compute_highlight_lines(REQUEST, [Finding(rule_id="lost")]), set())

    def test_out_of_range_is_ignored_and_logged(self):
        findings = [_at(1, "ok"), _at(5, "past-end"), _at(99, "way-past")]
        with self.assertLogs("lantern.overlay.highlight", level="WARNING") as logs:
            lines = compute_highlight_lines(REQUEST, findings)
        self.assertEqual(lines, {1})
        self.assertEqual(len(logs.records), 2)
        self.assertIn("past-end", logs.output[0])

    def test_every_returned_line_is_in_range_or_reported(self):
        findings = [_at(n, f"r{n}") for n in range(0, 9)]
        lines = compute_highlight_lines(REQUEST, findings)
        line_count = count_lines(REQUEST)
        self.assertTrue(all(line < line_count for line in lines))

        reported = {ref.line for ref in find_out_of_range(REQUEST, findings)}
        referenced = {f.line for f in findings}
        self.assertEqual(lines | reported, referenced)
        self.assertEqual(lines & reported, set())

    def test_crlf_is_not_normalized(self):
        text = "a\r\nb\r\nc"
        self.assertEqual(count_lines(text), 3)
        self.assertEqual(annotate(text, {1}, "!"), "a\r\nb\r!\nc")

    def test_findings_not_mutated(self):
        findings = [_at(2), _at(0)]
        snapshot = list(findings)
        compute_highlight_lines(REQUEST, findings)
        compute_highlight_lines(REQUEST, findings)
        self.assertEqual(findings, snapshot)


class AnnotateTests(unittest.TestCase):
    def test_marks_only_highlighted_lines(self):
        out = annotate("a\nb\nc", {0, 2})
        self.assertEqual(out, f"a{HIGHLIGHT_MARKER}\nb\nc{HIGHLIGHT_MARKER}")

    def test_keeps_trailing_newline(self):
        out = annotate("a\nb\n", {1})
        self.assertEqual(out, f"a\nb{HIGHLIGHT_MARKER}\n")
        self.assertEqual(out.count("\n"), 2)

    def test_empty_text(self):
        self.assertEqual(annotate("", {0, 1}), "")

    def test_indices_outside_text_are_ignored(self):
        self.assertEqual(annotate("one", {3}), "one")

    def test_round_trip(self):
        findings = [_at(0), _at(4, column=2), _at(17)]
        lines = compute_highlight_lines(REQUEST, findings)
        annotated = annotate(REQUEST, lines)
        self.assertEqual(annotated.count("\n"), REQUEST.count("\n"))
        self.assertEqual(strip_annotations(annotated, lines), REQUEST)

        for index, (before, after) in enumerate(zip(REQUEST.split("\n"), annotated.split("\n"))):
            if index in lines:
                self.assertEqual(after, before + HIGHLIGHT_MARKER)
            else:
                self.assertEqual(after, before)

    def test_round_trip_keeps_marker_already_in_text(self):
        text = f"GET / HTTP/1.1\nX-Note: hi{HIGHLIGHT_MARKER}\nHost: a"
        annotated = annotate(text, {0})
        self.assertEqual(strip_annotations(annotated, {0}), text)
        self.assertEqual(strip_annotations(text, set()), text)

    def test_custom_marker(self):
        self.assertEqual(highlight("x\ny", [_at(1)], marker="  <--"), "x\ny  <--")


if __name__ == "__main__":
    unittest.main()
