"""Tests for the TestCase value object."""

from __future__ import annotations

import dataclasses

import pytest

from minsuite.collection.case import Capability, TestCase


class TestTestCase:
    def test_node_id_joins_holder_and_name(self):
        case = TestCase('tests.test_tree.TestTree', 'test_insert')
        assert case.node_id == 'tests.test_tree.TestTree::test_insert'

    def test_entry_point_requires_the_tag(self):
        assert not TestCase('m', 'test_a').is_entry_point
        assert TestCase('m', 'test_a', capabilities=frozenset({Capability.ENTRY_POINT})).is_entry_point

    def test_equality_ignores_the_live_holder(self):
        assert TestCase('m', 'test_a', holder=object()) == TestCase('m', 'test_a', holder=object())

    def test_parameters_are_part_of_identity(self):
        assert TestCase('m', 'test_a', ('x',)) != TestCase('m', 'test_a', ())

    def test_is_immutable(self):
        case = TestCase('m', 'test_a')
        with pytest.raises(dataclasses.FrozenInstanceError):
            case.name = 'test_b'  # type: ignore[misc]

    def test_str_shows_parameters(self):
        assert str(TestCase('m', 'test_a', ('x', 'y'))) == 'm::test_a(x, y)'
