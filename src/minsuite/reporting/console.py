"""Console reporter for minimization results.

Produces human-readable output for terminal display with summary
statistics and the minimized suite.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO


if TYPE_CHECKING:
    from minsuite.reporting.results import MinimizationResult


class ConsoleReporter:
    """Reporter that writes minimization results to the console.

    Produces output in the following format:

        ===================== minsuite minimization report =====================

        Processed: 120 tests (2 with analysis errors)
        Retained: 14 tests (88% reduction)
        Branches: 96 of 110 covered
        Instructions: 402 of 431 covered

        Minimized suite:
          tests.test_tree.TestTree::test_insert
          tests.test_tree.TestTree::test_rotate_left
        =========================================================================

    Attributes:
        output: The file-like object to write to.
    """

    BORDER_CHAR = '='
    BORDER_WIDTH = 70

    def __init__(self, output: TextIO | None = None) -> None:
        """Initialize the console reporter.

        Args:
            output: File-like object to write to. Defaults to sys.stdout.
        """
        self.output = output or sys.stdout

    def write_report(self, result: MinimizationResult) -> None:
        """Write the minimization report to the output.

        Args:
            result: The outcome of a minimization run.
        """
        self._write_header()
        self._write_blank_line()

        if result.tests_processed == 0:
            self._write_line('No tests processed.')
        else:
            self._write_summary(result)
            self._write_blank_line()
            self._write_suite(result)

        self._write_footer()

    def _write_header(self) -> None:
        """Write the report header."""
        title = ' minsuite minimization report '
        border_len = (self.BORDER_WIDTH - len(title)) // 2
        header = f'{self.BORDER_CHAR * border_len}{title}{self.BORDER_CHAR * border_len}'
        self._write_line(header)

    def _write_footer(self) -> None:
        """Write the report footer."""
        self._write_line(self.BORDER_CHAR * self.BORDER_WIDTH)

    def _write_summary(self, result: MinimizationResult) -> None:
        """Write the summary statistics."""
        totals = result.totals
        reduction = round(result.reduction_percentage)

        self._write_line(f'Processed: {result.tests_processed} tests ({result.tests_errored} with analysis errors)')
        self._write_line(f'Retained: {result.retained} tests ({reduction}% reduction)')
        self._write_line(f'Branches: {totals.covered_branches} of {totals.total_branches} covered')
        self._write_line(f'Instructions: {totals.covered_instructions} of {totals.total_instructions} covered')

    def _write_suite(self, result: MinimizationResult) -> None:
        """Write the retained tests."""
        if not result.minimized:
            self._write_line('Minimized suite is empty.')
            return

        self._write_line('Minimized suite:')
        for test_case in result.minimized:
            self._write_line(f'  {test_case.node_id}')

    def _write_blank_line(self) -> None:
        """Write a blank line."""
        self.output.write('\n')

    def _write_line(self, text: str) -> None:
        """Write a line of text followed by newline."""
        self.output.write(text + '\n')
