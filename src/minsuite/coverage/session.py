"""CoverageSession: the instrumentation runtime for one minimization run.

coverage.py measures a whole process, so its collector is shared mutable
state. The session makes that explicit: it is the single owner of the
coverage.py runtime, it refuses to start while another session is active,
and it must be reset between two test executions.

Lifecycle:
    start() once, then for every test measure() followed by drain(), then
    shutdown() once. drain() resets the runtime, so the next test starts
    from a clean slate.

Example:
    >>> with CoverageSession(include=['/src/avl_tree.py']) as session:  # doctest: +SKIP
    ...     with session.measure():
    ...         run_one_test()
    ...     trace = session.drain()
"""

from __future__ import annotations

from contextlib import contextmanager
import fnmatch
import logging
import os
from typing import TYPE_CHECKING, ClassVar

import coverage
from coverage import CoverageData

from minsuite.errors import SessionError


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from types import TracebackType


logger = logging.getLogger(__name__)

DEFAULT_INFRASTRUCTURE: tuple[str, ...] = ('minsuite', '_pytest', 'pluggy', 'coverage')


def omit_patterns(substrings: Iterable[str], include: Iterable[str] = ()) -> list[str]:
    """Turn package-name substrings into coverage.py omit patterns.

    Dotted names are matched as paths, so ``pkg.sub`` omits every file under
    ``pkg/sub``. A pattern that would match one of the explicitly included
    files is dropped: infrastructure exclusion never hides a target.

    Args:
        substrings: Package-name substrings treated as infrastructure.
        include: Source files that must stay measured.

    Returns:
        The omit patterns, in input order.
    """
    included = list(include)
    patterns: list[str] = []
    for substring in substrings:
        pattern = f'*{substring.replace(".", os.sep)}*'
        shadowed = [filename for filename in included if fnmatch.fnmatch(filename, pattern)]
        if shadowed:
            logger.debug('Not omitting %s: it matches target file %s', pattern, shadowed[0])
            continue
        patterns.append(pattern)
    return patterns


def restrict_trace(trace: CoverageData, filenames: Iterable[str]) -> CoverageData:
    """Return a copy of a trace that only keeps the given source files.

    Args:
        trace: An execution trace recorded with branch measurement.
        filenames: Canonical paths of the files to keep.

    Returns:
        A standalone CoverageData holding the arcs of the kept files.
    """
    wanted = {os.path.realpath(filename) for filename in filenames}
    restricted = CoverageData(no_disk=True)
    arcs = {
        measured: trace.arcs(measured) or ()
        for measured in trace.measured_files()
        if os.path.realpath(measured) in wanted
    }
    if arcs:
        restricted.add_arcs(arcs)
    return restricted


class CoverageSession:
    """Owner of the coverage.py runtime used to record execution traces.

    Attributes:
        include: Source file patterns to measure.
        omit: Source file patterns never measured (infrastructure code).
        branch: Whether branch arcs are recorded.
    """

    _active: ClassVar[CoverageSession | None] = None

    def __init__(
        self,
        include: Iterable[str],
        omit: Iterable[str] = (),
        *,
        branch: bool = True,
    ) -> None:
        """Create a session. Nothing is measured until start() is called.

        Args:
            include: Source file patterns to measure. Empty measures every
                file coverage.py measures by default.
            omit: Package-name substrings treated as infrastructure. They are
                never measured unless they match an included file.
            branch: Record branch arcs as well as lines.
        """
        self.include = list(include)
        self.omit = omit_patterns(omit, self.include)
        self.branch = branch
        self._coverage: coverage.Coverage | None = None
        self._measuring = False

    @property
    def is_started(self) -> bool:
        """Return True between start() and shutdown()."""
        return self._coverage is not None

    def start(self) -> None:
        """Initialize the runtime. Only one session may be active per process.

        Raises:
            SessionError: If this or another session is already started.
        """
        if CoverageSession._active is not None:
            msg = 'A coverage session is already active in this process'
            raise SessionError(msg)
        self._coverage = coverage.Coverage(
            data_file=None,
            branch=self.branch,
            include=self.include or None,
            omit=self.omit or None,
            config_file=False,
        )
        self._coverage.set_option('run:disable_warnings', ['no-data-collected', 'module-not-measured'])
        CoverageSession._active = self
        logger.debug('Coverage session started for %d include patterns', len(self.include))

    @contextmanager
    def measure(self) -> Iterator[None]:
        """Record coverage for the duration of the block."""
        cov = self._require_started()
        if self._measuring:
            msg = 'Coverage session is already measuring'
            raise SessionError(msg)
        self._measuring = True
        cov.start()
        try:
            yield
        finally:
            cov.stop()
            self._measuring = False

    def drain(self) -> CoverageData:
        """Collect the data recorded since the last reset, then reset.

        The data is serialized and parsed back into a standalone CoverageData,
        so the returned trace is an independent snapshot unaffected by later
        resets of the runtime.

        Returns:
            The execution trace of everything measured since the last reset.
        """
        cov = self._require_started()
        blob = cov.get_data().dumps()
        trace = CoverageData(no_disk=True)
        trace.loads(blob)
        self.reset()
        return trace

    def reset(self) -> None:
        """Discard all data recorded so far."""
        self._require_started().erase()

    def shutdown(self) -> None:
        """Stop the runtime and release the process-wide session slot."""
        if self._coverage is None:
            return
        if self._measuring:
            self._coverage.stop()
            self._measuring = False
        self._coverage.erase()
        self._coverage = None
        if CoverageSession._active is self:
            CoverageSession._active = None
        logger.debug('Coverage session shut down')

    def __enter__(self) -> CoverageSession:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    def _require_started(self) -> coverage.Coverage:
        if self._coverage is None:
            msg = 'Coverage session has not been started'
            raise SessionError(msg)
        return self._coverage
