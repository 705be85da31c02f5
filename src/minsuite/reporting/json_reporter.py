"""JSON reporter for minimization results.

Produces machine-readable JSON output for CI integration and for
comparing minimized suites across runs.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from pathlib import Path

    from minsuite.reporting.results import MinimizationResult, RetentionStep


class JsonReporter:
    """Reporter that produces JSON output for CI integration.

    JSON structure:
        {
            "summary": {
                "processed": 3,
                "errored": 0,
                "retained": 2,
                "covered_branches": 4,
                "total_branches": 4,
                "covered_instructions": 6,
                "total_instructions": 7,
                "store_regressions": 0
            },
            "minimized": ["tests.test_sign::test_negative", "tests.test_sign::test_positive"],
            "retention_steps": [
                {"test": "tests.test_sign::test_negative", "covered_branches": 1, "covered_instructions": 3},
                ...
            ]
        }
    """

    def to_json(self, result: MinimizationResult) -> str:
        """Convert a minimization result to a JSON string.

        Args:
            result: The MinimizationResult to convert.

        Returns:
            Pretty-printed JSON string.
        """
        return json.dumps(self._build_report_data(result), indent=2)

    def write_report(self, result: MinimizationResult, output_path: Path) -> None:
        """Write the report to a JSON file.

        Args:
            result: The MinimizationResult to write.
            output_path: Path to the output JSON file.
        """
        output_path.write_text(self.to_json(result))

    def _build_report_data(self, result: MinimizationResult) -> dict[str, Any]:
        return {
            'summary': self._build_summary(result),
            'minimized': [test_case.node_id for test_case in result.minimized],
            'retention_steps': [self._build_step(step) for step in result.retention_steps],
        }

    def _build_summary(self, result: MinimizationResult) -> dict[str, Any]:
        totals = result.totals
        return {
            'processed': result.tests_processed,
            'errored': result.tests_errored,
            'retained': result.retained,
            'covered_branches': totals.covered_branches,
            'total_branches': totals.total_branches,
            'covered_instructions': totals.covered_instructions,
            'total_instructions': totals.total_instructions,
            'store_regressions': result.store_regressions,
        }

    def _build_step(self, step: RetentionStep) -> dict[str, Any]:
        return {
            'test': step.test_case.node_id,
            'covered_branches': step.covered_branches,
            'covered_instructions': step.covered_instructions,
        }


def write_minimized_suite(result: MinimizationResult, output_path: Path) -> None:
    """Write the minimized suite to a file, one test node id per line.

    Args:
        result: The MinimizationResult to write.
        output_path: Path to the output file.
    """
    output_path.write_text(''.join(f'{test_case.node_id}\n' for test_case in result.minimized))
