"""Coverage measurement and analysis for test-suite minimization.

This package wraps coverage.py so that each test case yields its own
execution trace, traces accumulate in a cumulative store, and the store is
analyzed against the declared target classes.

Exports:
    CoverageSession: Owner of the coverage.py runtime for one run
    ExecutionHarness: Runs one test case and returns its execution trace
    CoverageAggregator: Cumulative store of merged execution traces
    CoverageAnalyzer: Per-target instruction and branch counters
    resolve_targets: Resolves target names, nested classes and submodules
"""

from __future__ import annotations

from minsuite.coverage.aggregator import CoverageAggregator
from minsuite.coverage.analyzer import ClassCoverage, CoverageAnalyzer, CoverageCounter, CoverageTotals, LineStatus
from minsuite.coverage.harness import ExecutionHarness
from minsuite.coverage.session import CoverageSession
from minsuite.coverage.targets import TargetClass, TargetClassSet, resolve_targets


__all__ = [
    'ClassCoverage',
    'CoverageAggregator',
    'CoverageAnalyzer',
    'CoverageCounter',
    'CoverageSession',
    'CoverageTotals',
    'ExecutionHarness',
    'LineStatus',
    'TargetClass',
    'TargetClassSet',
    'resolve_targets',
]
