"""Tests for the per-test line report."""

from __future__ import annotations

from io import StringIO

from minsuite.collection.case import TestCase
from minsuite.coverage.analyzer import ClassCoverage, CoverageCounter, LineStatus
from minsuite.reporting.lines import LineReporter


SIGN = ClassCoverage(
    name='sign',
    instructions=CoverageCounter(covered=2, missed=2),
    branches=CoverageCounter(covered=1, missed=1),
    lines={1: LineStatus.FULLY_COVERED, 2: LineStatus.PARTLY_COVERED, 3: LineStatus.NOT_COVERED},
    branch_lines={2: 2},
)


def render(*classes: ClassCoverage) -> list[str]:
    output = StringIO()
    LineReporter(output=output).write_test_report(TestCase('tests.test_sign', 'test_negative'), classes)
    return output.getvalue().splitlines()


class TestLineReporter:
    def test_names_the_executed_test(self):
        lines = render(SIGN)

        assert lines[1] == 'Executed tests.test_sign::test_negative'

    def test_counters(self):
        lines = render(SIGN)

        assert 'Coverage of sign' in lines
        assert '  instructions: 2 of 4' in lines
        assert '  branches: 1 of 2' in lines

    def test_line_statuses(self):
        lines = render(SIGN)

        assert lines[-3:] == [
            '  Line 1: fully covered',
            '  Line 2: partly covered (2 branches)',
            '  Line 3: not covered',
        ]

    def test_every_target_is_reported(self):
        other = ClassCoverage('sign.Helper', CoverageCounter(), CoverageCounter())

        lines = render(SIGN, other)

        assert lines.count('Coverage of sign') == 1
        assert 'Coverage of sign.Helper' in lines
        assert '  instructions: 0 of 0' in lines
