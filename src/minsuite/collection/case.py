"""TestCase: a single runnable unit of a test suite.

A test case is identified by its holder (the test class or module that
declares it), its name, and its parameter signature. The enumerator attaches
capability tags when it discovers a test case, so the engine never has to
guess which callables are test entry points.

Example:
    >>> tags = frozenset({Capability.ENTRY_POINT})
    >>> case = TestCase('tests.test_tree.TestTree', 'test_insert', capabilities=tags)
    >>> case.node_id
    'tests.test_tree.TestTree::test_insert'
    >>> case.is_entry_point
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Capability(Enum):
    """Capability tags attached to a test case during enumeration.

    Attributes:
        ENTRY_POINT: The callable is a test entry point and should be executed.
    """

    ENTRY_POINT = 'entry-point'


@dataclass(frozen=True)
class TestCase:
    """A discovered test case.

    Attributes:
        holder_name: Dotted name of the declaring class or module.
        name: Name of the test callable inside the holder.
        parameters: Names of the callable's parameters, excluding ``self``.
        capabilities: Tags attached by the enumerator.
        holder: The live class or module object. Not part of equality.
    """

    __test__ = False

    holder_name: str
    name: str
    parameters: tuple[str, ...] = ()
    capabilities: frozenset[Capability] = frozenset()
    holder: Any = field(default=None, compare=False, repr=False)

    @property
    def node_id(self) -> str:
        """Return a pytest-style identifier for this test case."""
        return f'{self.holder_name}::{self.name}'

    @property
    def is_entry_point(self) -> bool:
        """Return True if the enumerator tagged this case as a test entry point."""
        return Capability.ENTRY_POINT in self.capabilities

    def __str__(self) -> str:
        return f'{self.node_id}({", ".join(self.parameters)})'
