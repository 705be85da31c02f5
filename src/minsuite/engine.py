"""Minimization engine: greedy, coverage-guided test-suite reduction.

Each test case runs exactly once, in enumeration order:

    trace = harness.run(test)
    store = aggregator.merge(trace)             # always, retained or not
    counters = analyzer.analyze(store, targets) # failure -> errored, skip
    if counters.branches > best.branches or counters.instructions > best.instructions:
        retain test; best = counters

A test is retained if and only if its trace strictly increases the covered
branches or the covered instructions of the cumulative store beyond the best
values recorded at the last retention. Traces of discarded tests stay in the
store and count toward later comparisons.

The result is a single-pass approximation to a minimum test-set cover. It is
not guaranteed to be minimal and depends on the enumeration order, which is
why enumeration order is deterministic and under the caller's control.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from minsuite.collection.enumerator import enumerate_tests, expand_wildcards
from minsuite.coverage.aggregator import CoverageAggregator
from minsuite.coverage.analyzer import CoverageAnalyzer, CoverageTotals
from minsuite.coverage.harness import ExecutionHarness
from minsuite.coverage.session import DEFAULT_INFRASTRUCTURE, CoverageSession, restrict_trace
from minsuite.coverage.targets import resolve_targets
from minsuite.errors import AnalysisError, ConfigurationError
from minsuite.reporting.lines import LineReporter
from minsuite.reporting.results import MinimizationResult, RetentionStep


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from coverage import CoverageData

    from minsuite.collection.case import TestCase
    from minsuite.coverage.analyzer import AnalyzerProtocol
    from minsuite.coverage.targets import TargetClassSet


logger = logging.getLogger(__name__)


class HarnessProtocol(Protocol):
    """Interface the engine expects from an execution harness."""

    def run(self, test_case: TestCase) -> CoverageData:
        """Execute a test case and return its execution trace."""
        ...


class MinimizationEngine:
    """Drives the harness, aggregator and analyzer over a list of test cases.

    The engine exclusively owns the cumulative store and the best-so-far
    counters for the duration of a run.

    Attributes:
        harness: Runs test cases and returns their traces.
        analyzer: Computes per-target coverage counters.
        aggregator: Cumulative store of all traces merged so far.
        line_reporter: Receives per-test line reports in verbose mode.
    """

    def __init__(
        self,
        harness: HarnessProtocol,
        analyzer: AnalyzerProtocol | None = None,
        aggregator: CoverageAggregator | None = None,
        line_reporter: LineReporter | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            harness: Runs test cases and returns their traces.
            analyzer: Defaults to a CoverageAnalyzer.
            aggregator: Defaults to a fresh CoverageAggregator.
            line_reporter: Required for verbose runs to produce output.
        """
        self.harness = harness
        self.analyzer = analyzer or CoverageAnalyzer()
        self.aggregator = aggregator or CoverageAggregator()
        self.line_reporter = line_reporter

    def run(
        self,
        test_cases: Iterable[TestCase],
        targets: TargetClassSet,
        *,
        verbose: bool = False,
        baseline: CoverageData | None = None,
    ) -> MinimizationResult:
        """Minimize the given test cases against the targets.

        Args:
            test_cases: Candidate test cases in evaluation order.
            targets: The coverage targets.
            verbose: Report per-line coverage of every executed test.
            baseline: Coverage recorded while the targets were imported. It is
                merged before the first test and no test is credited for it.

        Returns:
            The minimized suite and run summary.

        Raises:
            ConfigurationError: If no targets are given.
            InvocationError: If a test cannot be invoked.
        """
        if not targets:
            msg = 'Not implemented: minimizing without coverage targets would consider every executed class a target'
            raise ConfigurationError(msg)

        minimized: list[TestCase] = []
        steps: list[RetentionStep] = []
        best = CoverageTotals() if baseline is None else self._merge_baseline(baseline, targets)
        processed = 0
        errored = 0

        for test_case in test_cases:
            if not test_case.is_entry_point:
                logger.debug('Skipping %s: not a test entry point', test_case.node_id)
                continue

            processed += 1
            trace = self.harness.run(test_case)
            if verbose:
                self._report_lines(test_case, trace, targets)

            store = self.aggregator.merge(trace)
            try:
                classes = self.analyzer.analyze(store, targets)
            except AnalysisError as exc:
                errored += 1
                logger.warning('Analysis failed after %s: %s', test_case.node_id, exc)
                continue

            current = CoverageTotals.from_classes(classes)
            if current.covered_branches > best.covered_branches or (
                current.covered_instructions > best.covered_instructions
            ):
                logger.debug(
                    'Coverage increases: %d (out of %d) branches and %d (out of %d) instructions'
                    ' --> %d (out of %d) branches and %d (out of %d) instructions; retaining %s',
                    best.covered_branches,
                    best.total_branches,
                    best.covered_instructions,
                    best.total_instructions,
                    current.covered_branches,
                    current.total_branches,
                    current.covered_instructions,
                    current.total_instructions,
                    test_case.node_id,
                )
                minimized.append(test_case)
                steps.append(RetentionStep(test_case, current.covered_branches, current.covered_instructions))
                best = current

        logger.info('Analyzed data for %d test cases (%d with errors)', processed, errored)
        logger.info(
            'In total covered %d (out of %d) branches and %d (out of %d) instructions',
            best.covered_branches,
            best.total_branches,
            best.covered_instructions,
            best.total_instructions,
        )
        return MinimizationResult(
            minimized=minimized,
            tests_processed=processed,
            tests_errored=errored,
            totals=best,
            retention_steps=steps,
            store_regressions=self.aggregator.regressions,
        )

    def _merge_baseline(self, baseline: CoverageData, targets: TargetClassSet) -> CoverageTotals:
        store = self.aggregator.merge(baseline)
        try:
            totals = CoverageTotals.from_classes(self.analyzer.analyze(store, targets))
        except AnalysisError as exc:
            logger.warning('Analysis of import-time coverage failed: %s', exc)
            return CoverageTotals()
        logger.debug(
            'Importing the targets covered %d branches and %d instructions',
            totals.covered_branches,
            totals.covered_instructions,
        )
        return totals

    def _report_lines(self, test_case: TestCase, trace: CoverageData, targets: TargetClassSet) -> None:
        if self.line_reporter is None:
            return
        try:
            classes = self.analyzer.analyze(trace, targets)
        except AnalysisError as exc:
            logger.warning('Cannot report line coverage of %s: %s', test_case.node_id, exc)
            return
        self.line_reporter.write_test_report(test_case, classes)


def minimize_suite(
    test_suite_ids: Sequence[str],
    target_names: Sequence[str],
    *,
    verbose: bool = False,
    base_folder: Path | None = None,
    omit: Iterable[str] = DEFAULT_INFRASTRUCTURE,
    line_reporter: LineReporter | None = None,
) -> MinimizationResult:
    """Minimize the test suites against the targets and return the full result.

    Targets and test modules are imported under measurement, so statements
    that only run at import time count as covered from the start.

    Args:
        test_suite_ids: Test classes or modules, in evaluation order. Entries
            ending in ``.*`` are expanded from ``base_folder``.
        target_names: Modules or classes whose coverage is measured.
        verbose: Report per-line coverage of every executed test.
        base_folder: Folder used to expand wildcard suite identifiers.
        omit: Package-name substrings never measured.
        line_reporter: Receives per-test reports in verbose mode.

    Returns:
        The minimized suite and run summary.

    Raises:
        ConfigurationError: If no targets are given, or tests or targets
            cannot be resolved.
        InvocationError: If a test cannot be invoked.
    """
    if not target_names:
        msg = 'Not implemented: minimizing without coverage targets would consider every executed class a target'
        raise ConfigurationError(msg)

    if verbose and line_reporter is None:
        line_reporter = LineReporter()

    # Import-time statements run here, outside any test.
    with CoverageSession(include=()) as loader:
        with loader.measure():
            targets = resolve_targets(target_names)
            test_cases = enumerate_tests(expand_wildcards(test_suite_ids, base_folder))
        baseline = restrict_trace(loader.drain(), targets.filenames)
    logger.debug('Minimizing %d test cases against %d targets', len(test_cases), len(targets))

    with CoverageSession(include=targets.filenames, omit=omit) as session:
        engine = MinimizationEngine(ExecutionHarness(session), line_reporter=line_reporter)
        return engine.run(test_cases, targets, verbose=verbose, baseline=baseline)


def minimize(
    test_suite_ids: Sequence[str],
    target_names: Sequence[str],
    *,
    verbose: bool = False,
    base_folder: Path | None = None,
) -> list[TestCase]:
    """Return the minimized list of test cases.

    See minimize_suite for the arguments and errors.
    """
    result = minimize_suite(test_suite_ids, target_names, verbose=verbose, base_folder=base_folder)
    return result.minimized
