"""ExecutionHarness: run one test case and return its execution trace.

The harness instantiates the test's declaring class through its default
constructor and calls the test with placeholder arguments: parameters with a
default keep it, all others receive None. Tests that need real arguments
(pytest fixtures, for example) are not supported.

A failure raised by the test body is normal data, not an error: the test
still contributes whatever it covered before failing. Failures of the
invocation itself (the class cannot be constructed, the callable is missing,
the arguments cannot be bound) are fatal and raise InvocationError.

There is no timeout. A test that never returns stalls the run.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any
import unittest

import pytest

from minsuite.errors import InvocationError


if TYPE_CHECKING:
    from collections.abc import Callable

    from coverage import CoverageData

    from minsuite.collection.case import TestCase
    from minsuite.coverage.session import CoverageSession


logger = logging.getLogger(__name__)

# Raised by a test body; swallowed so partial coverage still counts.
TEST_BODY_FAILURES: tuple[type[BaseException], ...] = (
    Exception,
    pytest.fail.Exception,
    pytest.skip.Exception,
    pytest.xfail.Exception,
)


class ExecutionHarness:
    """Runs test cases one at a time inside a coverage session.

    Attributes:
        session: The coverage session that records each test's trace.
    """

    def __init__(self, session: CoverageSession) -> None:
        """Initialize the harness.

        Args:
            session: A started coverage session, owned by the caller.
        """
        self.session = session

    def run(self, test_case: TestCase) -> CoverageData:
        """Execute a test case and return its execution trace.

        Args:
            test_case: The test to execute.

        Returns:
            An independent CoverageData snapshot of the test's execution.

        Raises:
            InvocationError: If the test cannot be invoked.
        """
        logger.info('Executing test case %s', test_case.node_id)
        with self.session.measure():
            # Instantiation runs target code too.
            call, args, kwargs = self._prepare(test_case)
            try:
                result = call(*args, **kwargs)
                if inspect.iscoroutine(result):
                    result.close()
            except TEST_BODY_FAILURES as exc:
                logger.debug('Test case %s failed: %r', test_case.node_id, exc)
        return self.session.drain()

    def _prepare(self, test_case: TestCase) -> tuple[Callable[..., Any], list[Any], dict[str, Any]]:
        holder = test_case.holder
        if holder is None:
            msg = f'Test case {test_case.node_id} has no resolved holder'
            raise InvocationError(msg)

        if inspect.isclass(holder) and issubclass(holder, unittest.TestCase):
            try:
                instance = holder(test_case.name)
            except (TypeError, ValueError) as exc:
                msg = f'Cannot instantiate {test_case.holder_name} for {test_case.name}: {exc}'
                raise InvocationError(msg) from exc
            return instance.debug, [], {}

        if inspect.isclass(holder):
            try:
                owner = holder()
            except Exception as exc:
                msg = f'Cannot instantiate {test_case.holder_name} with its default constructor: {exc}'
                raise InvocationError(msg) from exc
        else:
            owner = holder

        try:
            call = getattr(owner, test_case.name)
        except AttributeError as exc:
            msg = f'Test case {test_case.node_id} does not exist'
            raise InvocationError(msg) from exc

        args, kwargs = placeholder_arguments(call)
        return call, args, kwargs


def placeholder_arguments(call: Callable[..., Any]) -> tuple[list[Any], dict[str, Any]]:
    """Build placeholder arguments for a callable.

    Args:
        call: The (bound) callable to invoke.

    Returns:
        Positional and keyword arguments: None for every parameter without a
        default, nothing for parameters that have one.

    Raises:
        InvocationError: If the signature cannot be inspected or the
            placeholders cannot be bound to it.
    """
    try:
        signature = inspect.signature(call)
    except (TypeError, ValueError) as exc:
        msg = f'Cannot inspect signature of {call!r}: {exc}'
        raise InvocationError(msg) from exc

    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for parameter in signature.parameters.values():
        if parameter.default is not inspect.Parameter.empty:
            continue
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            args.append(None)
        elif parameter.kind is inspect.Parameter.KEYWORD_ONLY:
            kwargs[parameter.name] = None

    try:
        signature.bind(*args, **kwargs)
    except TypeError as exc:
        msg = f'Cannot bind placeholder arguments to {call!r}: {exc}'
        raise InvocationError(msg) from exc
    return args, kwargs
