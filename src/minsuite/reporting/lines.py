"""Per-test line coverage report for verbose runs.

Produces output in the following format for every executed test:

    ======================================================================
    Executed tests.test_tree.TestTree::test_insert
    ======================================================================
    Coverage of avl_tree.AvlTree
      instructions: 12 of 40
      branches: 3 of 18
      Line 12: fully covered
      Line 13: partly covered (2 branches)
      Line 15: not covered
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO


if TYPE_CHECKING:
    from collections.abc import Iterable

    from minsuite.collection.case import TestCase
    from minsuite.coverage.analyzer import ClassCoverage


class LineReporter:
    """Writes the per-line coverage status of a single test's trace.

    Attributes:
        output: The file-like object to write to.
    """

    BORDER_CHAR = '='
    BORDER_WIDTH = 70

    def __init__(self, output: TextIO | None = None) -> None:
        """Initialize the line reporter.

        Args:
            output: File-like object to write to. Defaults to sys.stdout.
        """
        self.output = output or sys.stdout

    def write_test_report(self, test_case: TestCase, classes: Iterable[ClassCoverage]) -> None:
        """Write the line report of one executed test.

        Args:
            test_case: The test that produced the trace.
            classes: Coverage of each target computed from that test's trace only.
        """
        self._write_line(self.BORDER_CHAR * self.BORDER_WIDTH)
        self._write_line(f'Executed {test_case.node_id}')
        self._write_line(self.BORDER_CHAR * self.BORDER_WIDTH)
        for class_coverage in classes:
            self._write_class(class_coverage)

    def _write_class(self, class_coverage: ClassCoverage) -> None:
        self._write_line(f'Coverage of {class_coverage.name}')
        self._write_line(f'  instructions: {class_coverage.instructions}')
        self._write_line(f'  branches: {class_coverage.branches}')
        for line_number, status in class_coverage.lines.items():
            branches = class_coverage.branch_lines.get(line_number, 0)
            suffix = f' ({branches} branches)' if branches else ''
            self._write_line(f'  Line {line_number}: {status.value}{suffix}')

    def _write_line(self, text: str) -> None:
        self.output.write(text + '\n')
