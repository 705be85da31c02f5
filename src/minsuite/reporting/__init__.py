"""Reporting for minimization results.

Exports:
    MinimizationResult: Outcome of a minimization run
    RetentionStep: Best-so-far counters at a retention
    ConsoleReporter: Human-readable summary
    JsonReporter: Machine-readable report
    LineReporter: Per-test line coverage for verbose runs
    write_minimized_suite: Write retained test ids to a file
"""

from __future__ import annotations

from minsuite.reporting.console import ConsoleReporter
from minsuite.reporting.json_reporter import JsonReporter, write_minimized_suite
from minsuite.reporting.lines import LineReporter
from minsuite.reporting.results import MinimizationResult, RetentionStep


__all__ = [
    'ConsoleReporter',
    'JsonReporter',
    'LineReporter',
    'MinimizationResult',
    'RetentionStep',
    'write_minimized_suite',
]
