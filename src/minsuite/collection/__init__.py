"""Test suite enumeration.

Exports:
    Capability: Capability tags attached to discovered test cases
    TestCase: A runnable unit of a test suite
    enumerate_tests: Enumerate test cases declared by classes and modules
    expand_wildcards: Expand ``package.*`` identifiers into test modules
"""

from __future__ import annotations

from minsuite.collection.case import Capability, TestCase
from minsuite.collection.enumerator import enumerate_tests, expand_wildcards


__all__ = ['Capability', 'TestCase', 'enumerate_tests', 'expand_wildcards']
