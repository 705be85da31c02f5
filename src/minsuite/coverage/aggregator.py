"""CoverageAggregator: the cumulative execution-trace store.

Every execution trace is merged into the store, whether or not the engine
later retains the test that produced it. Retention only decides what the
engine reports; it never decides what the store contains. Making the merge
conditional would change which tests are retained.

Merging is a union of the recorded arcs (or lines), so it is commutative,
associative and idempotent: merging the same trace twice leaves the store
as it was after the first merge.

Example:
    >>> aggregator = CoverageAggregator()
    >>> aggregator.class_count
    0
"""

from __future__ import annotations

import logging

from coverage import CoverageData


logger = logging.getLogger(__name__)


class CoverageAggregator:
    """Owns the cumulative store for one minimization run.

    Attributes:
        regressions: Number of merges after which the store held fewer
            distinct files than before. Always 0 unless something is badly
            wrong; each occurrence is logged as an error.
    """

    def __init__(self) -> None:
        """Create an aggregator with an empty store."""
        self._store = CoverageData(no_disk=True)
        self._class_count = 0
        self.regressions = 0

    @property
    def store(self) -> CoverageData:
        """Return the cumulative store."""
        return self._store

    @property
    def class_count(self) -> int:
        """Return the number of distinct files recorded after the last merge."""
        return self._class_count

    def merge(self, trace: CoverageData) -> CoverageData:
        """Fold an execution trace into the cumulative store.

        Files not yet in the store are added as they are; files already
        present get the union of their recorded arcs.

        Args:
            trace: The execution trace of one test.

        Returns:
            The updated cumulative store.
        """
        self._store.update(trace)
        self._check_growth()
        return self._store

    def reset(self) -> None:
        """Discard the store and start over."""
        self._store = CoverageData(no_disk=True)
        self._class_count = 0
        self.regressions = 0

    def _check_growth(self) -> None:
        current = len(self._store.measured_files())
        if current < self._class_count:
            self.regressions += 1
            logger.error(
                'The number of executed files cannot decrease (%d --> %d) while accumulating test coverage',
                self._class_count,
                current,
            )
        elif current > self._class_count:
            self._class_count = current
