"""CoverageAnalyzer: coverage counters for the target classes.

The analyzer loads a store of execution traces into a fresh, in-memory
coverage.py instance and renders coverage.py's JSON report for the target
source files. Counts are then restricted to the lines each target owns:

- instructions are executable statements (covered = executed statements);
- branches are branch arcs (covered = executed branch arcs).

Counters are always recomputed from the store; nothing is carried over from
one analysis pass to the next.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import TYPE_CHECKING, Any, Protocol

import coverage
from coverage.exceptions import CoverageException

from minsuite.errors import AnalysisError


if TYPE_CHECKING:
    from collections.abc import Iterable

    from coverage import CoverageData

    from minsuite.coverage.targets import TargetClass, TargetClassSet


logger = logging.getLogger(__name__)


class LineStatus(Enum):
    """Coverage status of a single source line."""

    NOT_COVERED = 'not covered'
    PARTLY_COVERED = 'partly covered'
    FULLY_COVERED = 'fully covered'


@dataclass(frozen=True)
class CoverageCounter:
    """Covered and missed items of one coverage dimension.

    Attributes:
        covered: Number of items executed.
        missed: Number of items not executed.
    """

    covered: int = 0
    missed: int = 0

    @property
    def total(self) -> int:
        """Return the number of items that could be executed."""
        return self.covered + self.missed

    def __str__(self) -> str:
        return f'{self.covered} of {self.total}'


@dataclass(frozen=True)
class ClassCoverage:
    """Coverage of one target.

    Attributes:
        name: Name of the target.
        instructions: Statement counter.
        branches: Branch counter.
        lines: Status of every statement line owned by the target.
        branch_lines: Number of branches leaving each branch line.
    """

    name: str
    instructions: CoverageCounter
    branches: CoverageCounter
    lines: dict[int, LineStatus] = field(default_factory=dict)
    branch_lines: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CoverageTotals:
    """Counters summed over all analyzed targets."""

    covered_branches: int = 0
    covered_instructions: int = 0
    total_branches: int = 0
    total_instructions: int = 0

    @classmethod
    def from_classes(cls, classes: Iterable[ClassCoverage]) -> CoverageTotals:
        """Sum the counters of the given targets."""
        covered_branches = covered_instructions = total_branches = total_instructions = 0
        for class_coverage in classes:
            covered_branches += class_coverage.branches.covered
            covered_instructions += class_coverage.instructions.covered
            total_branches += class_coverage.branches.total
            total_instructions += class_coverage.instructions.total
        return cls(covered_branches, covered_instructions, total_branches, total_instructions)


class AnalyzerProtocol(Protocol):
    """Interface the minimization engine expects from an analyzer."""

    def analyze(self, store: CoverageData, targets: TargetClassSet) -> list[ClassCoverage]:
        """Compute per-target coverage of the store."""
        ...


class CoverageAnalyzer:
    """Computes per-target coverage from a store using coverage.py reports."""

    def analyze(self, store: CoverageData, targets: TargetClassSet) -> list[ClassCoverage]:
        """Compute coverage counters for every target.

        Args:
            store: The execution traces to analyze.
            targets: The targets to report on.

        Returns:
            One ClassCoverage per target, in target order.

        Raises:
            AnalysisError: If a target's source changed since it was loaded,
                or coverage.py cannot analyze the data.
        """
        for target in targets.values():
            _check_source(target)

        files = self._report_files(store, targets.filenames)
        results: list[ClassCoverage] = []
        for target in targets.values():
            report = files.get(target.filename)
            if report is None:
                msg = f'No coverage report for target {target.name} ({target.filename})'
                raise AnalysisError(msg)
            results.append(_class_coverage(target, report))
        return results

    def _report_files(self, store: CoverageData, filenames: list[str]) -> dict[str, dict[str, Any]]:
        if not filenames:
            return {}
        cov = coverage.Coverage(data_file=None, branch=True, config_file=False)
        try:
            data = cov.get_data()
            # Branch data even for an empty store, so unexecuted files still report their branches.
            data.add_arcs({})
            data.update(store)
            with tempfile.TemporaryDirectory(prefix='minsuite-') as tmpdir:
                report_path = Path(tmpdir) / 'coverage.json'
                cov.json_report(morfs=filenames, outfile=str(report_path))
                report = json.loads(report_path.read_text())
        except (CoverageException, OSError, ValueError) as exc:
            msg = f'Coverage analysis failed: {exc}'
            raise AnalysisError(msg) from exc
        return {os.path.realpath(name): data for name, data in report.get('files', {}).items()}


def _check_source(target: TargetClass) -> None:
    try:
        current = Path(target.filename).read_bytes()
    except OSError as exc:
        msg = f'Cannot read source of target {target.name}: {exc}'
        raise AnalysisError(msg) from exc
    if current != target.source:
        msg = f'Source of target {target.name} changed since it was loaded'
        raise AnalysisError(msg)


def _class_coverage(target: TargetClass, report: dict[str, Any]) -> ClassCoverage:
    executed = {line for line in report.get('executed_lines', []) if target.owns_line(line)}
    missing = {line for line in report.get('missing_lines', []) if target.owns_line(line)}
    executed_branches = [arc for arc in report.get('executed_branches', []) if target.owns_line(arc[0])]
    missing_branches = [arc for arc in report.get('missing_branches', []) if target.owns_line(arc[0])]

    branch_lines: dict[int, int] = {}
    for source_line, _ in executed_branches + missing_branches:
        branch_lines[source_line] = branch_lines.get(source_line, 0) + 1
    partial = {source_line for source_line, _ in missing_branches}

    lines: dict[int, LineStatus] = {}
    for line in sorted(executed | missing):
        if line in missing:
            lines[line] = LineStatus.NOT_COVERED
        elif line in partial:
            lines[line] = LineStatus.PARTLY_COVERED
        else:
            lines[line] = LineStatus.FULLY_COVERED

    return ClassCoverage(
        name=target.name,
        instructions=CoverageCounter(covered=len(executed), missed=len(missing)),
        branches=CoverageCounter(covered=len(executed_branches), missed=len(missing_branches)),
        lines=lines,
        branch_lines=branch_lines,
    )
