"""Exceptions raised by minsuite.

Configuration and invocation errors are fatal and abort a minimization run.
Analysis errors are recoverable: the engine counts them per test and moves on.
"""

from __future__ import annotations


class MinsuiteError(Exception):
    """Base class for all minsuite errors."""


class ConfigurationError(MinsuiteError, ValueError):
    """The run was configured in a way that cannot be executed."""


class TestDiscoveryError(ConfigurationError):
    """A test holder identifier could not be resolved."""

    __test__ = False


class TargetResolutionError(ConfigurationError):
    """A coverage target could not be resolved to Python source."""


class InvocationError(MinsuiteError, RuntimeError):
    """A test could not be invoked (as opposed to the test itself failing)."""


class SessionError(MinsuiteError, RuntimeError):
    """The coverage session was used outside its lifecycle."""


class AnalysisError(MinsuiteError, RuntimeError):
    """Coverage analysis of the cumulative store failed."""
