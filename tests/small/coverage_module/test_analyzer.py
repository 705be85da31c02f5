"""Tests for coverage counters and the CoverageAnalyzer."""

from __future__ import annotations

from coverage import CoverageData
import pytest

from minsuite.coverage.analyzer import (
    ClassCoverage,
    CoverageAnalyzer,
    CoverageCounter,
    CoverageTotals,
    LineStatus,
    _class_coverage,
)
from minsuite.coverage.targets import TargetClass, TargetClassSet
from minsuite.errors import AnalysisError


REPORT = {
    'executed_lines': [2, 3, 6, 7],
    'missing_lines': [1, 4, 8],
    'executed_branches': [[2, 3], [6, 7]],
    'missing_branches': [[2, 4], [6, 8]],
}


class TestCoverageCounter:
    def test_total_is_covered_plus_missed(self):
        assert CoverageCounter(covered=3, missed=2).total == 5

    def test_default_counter_is_empty(self):
        assert CoverageCounter().total == 0

    def test_str_shows_covered_of_total(self):
        assert str(CoverageCounter(covered=3, missed=2)) == '3 of 5'


class TestCoverageTotals:
    def test_from_classes_sums_all_counters(self):
        classes = [
            ClassCoverage('a', CoverageCounter(4, 1), CoverageCounter(1, 1)),
            ClassCoverage('b', CoverageCounter(2, 3), CoverageCounter(0, 2)),
        ]

        totals = CoverageTotals.from_classes(classes)

        assert totals == CoverageTotals(
            covered_branches=1,
            covered_instructions=6,
            total_branches=4,
            total_instructions=10,
        )

    def test_from_no_classes_is_zero(self):
        assert CoverageTotals.from_classes([]) == CoverageTotals()


class TestClassCoverageFromReport:
    """Test turning a coverage.py JSON file entry into per-target counters."""

    def test_whole_module_target_counts_every_line(self):
        target = TargetClass('sign', '/src/sign.py', b'')

        coverage = _class_coverage(target, REPORT)

        assert coverage.instructions == CoverageCounter(covered=4, missed=3)
        assert coverage.branches == CoverageCounter(covered=2, missed=2)

    def test_class_target_counts_only_its_lines(self):
        target = TargetClass('sign.Sign', '/src/sign.py', b'', lines=frozenset({5, 6, 7, 8}))

        coverage = _class_coverage(target, REPORT)

        assert coverage.instructions == CoverageCounter(covered=2, missed=1)
        assert coverage.branches == CoverageCounter(covered=1, missed=1)
        assert set(coverage.lines) == {6, 7, 8}

    def test_line_statuses(self):
        target = TargetClass('sign', '/src/sign.py', b'')

        lines = _class_coverage(target, REPORT).lines

        assert lines[1] is LineStatus.NOT_COVERED
        assert lines[2] is LineStatus.PARTLY_COVERED
        assert lines[3] is LineStatus.FULLY_COVERED
        assert lines[4] is LineStatus.NOT_COVERED

    def test_branch_lines_count_exits(self):
        target = TargetClass('sign', '/src/sign.py', b'')

        coverage = _class_coverage(target, REPORT)

        assert coverage.branch_lines == {2: 2, 6: 2}

    def test_report_without_branch_data(self):
        target = TargetClass('sign', '/src/sign.py', b'')

        coverage = _class_coverage(target, {'executed_lines': [1], 'missing_lines': [2]})

        assert coverage.branches.total == 0
        assert coverage.lines == {1: LineStatus.FULLY_COVERED, 2: LineStatus.NOT_COVERED}


class TestCoverageAnalyzerFailures:
    """Analysis failures surface as AnalysisError."""

    def test_changed_source_is_an_analysis_error(self, tmp_path):
        source = tmp_path / 'sign.py'
        source.write_text('def sign(n):\n    return n\n')
        target = TargetClass('sign', str(source), b'def sign(n):\n    return -n\n')

        with pytest.raises(AnalysisError, match='changed since it was loaded'):
            CoverageAnalyzer().analyze(CoverageData(no_disk=True), TargetClassSet({'sign': target}))

    def test_missing_source_is_an_analysis_error(self, tmp_path):
        target = TargetClass('gone', str(tmp_path / 'gone.py'), b'')

        with pytest.raises(AnalysisError, match='Cannot read source'):
            CoverageAnalyzer().analyze(CoverageData(no_disk=True), TargetClassSet({'gone': target}))

    def test_no_targets_gives_no_results(self):
        assert CoverageAnalyzer().analyze(CoverageData(no_disk=True), TargetClassSet()) == []
