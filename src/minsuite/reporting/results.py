"""Outcome of a minimization run.

The minimized suite is the engine's only externally visible output; the
remaining fields summarize how the run went.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from minsuite.coverage.analyzer import CoverageTotals


if TYPE_CHECKING:
    from minsuite.collection.case import TestCase


@dataclass(frozen=True)
class RetentionStep:
    """Best-so-far counters recorded when a test case was retained.

    Attributes:
        test_case: The retained test case.
        covered_branches: Covered branches after merging its trace.
        covered_instructions: Covered instructions after merging its trace.
    """

    test_case: TestCase
    covered_branches: int
    covered_instructions: int


@dataclass(frozen=True)
class MinimizationResult:
    """Result of minimizing a test suite.

    Attributes:
        minimized: Retained test cases, in evaluation order.
        tests_processed: Number of test cases executed.
        tests_errored: Number of test cases whose analysis pass failed.
        totals: Counters recorded at the last retention.
        retention_steps: Best-so-far counters, one entry per retained test.
        store_regressions: Times the cumulative store lost files after a merge.
    """

    minimized: list[TestCase] = field(default_factory=list)
    tests_processed: int = 0
    tests_errored: int = 0
    totals: CoverageTotals = field(default_factory=CoverageTotals)
    retention_steps: list[RetentionStep] = field(default_factory=list)
    store_regressions: int = 0

    @property
    def retained(self) -> int:
        """Return the number of retained test cases."""
        return len(self.minimized)

    @property
    def reduction_percentage(self) -> float:
        """Return the share of processed tests that were discarded, 0.0 to 100.0."""
        if self.tests_processed == 0:
            return 0.0
        return (self.tests_processed - self.retained) / self.tests_processed * 100
