"""Tests for the CoverageSession lifecycle."""

from __future__ import annotations

import os

import pytest

from minsuite.coverage.session import CoverageSession, omit_patterns, restrict_trace
from minsuite.errors import SessionError


@pytest.fixture
def session():
    session = CoverageSession(include=['/nonexistent/target.py'])
    yield session
    session.shutdown()


class TestCoverageSessionLifecycle:
    def test_not_started_until_start(self, session):
        assert not session.is_started

    def test_start_and_shutdown(self, session):
        session.start()
        assert session.is_started

        session.shutdown()
        assert not session.is_started

    def test_shutdown_without_start_is_a_no_op(self, session):
        session.shutdown()
        assert not session.is_started

    def test_drain_before_start_fails(self, session):
        with pytest.raises(SessionError, match='not been started'):
            session.drain()

    def test_measure_before_start_fails(self, session):
        with pytest.raises(SessionError, match='not been started'):
            with session.measure():
                pass

    def test_context_manager_starts_and_shuts_down(self, session):
        with session as active:
            assert active is session
            assert session.is_started
        assert not session.is_started


class TestSingleActiveSession:
    """Only one session may own the coverage runtime at a time."""

    def test_second_session_cannot_start(self, session):
        other = CoverageSession(include=['/nonexistent/other.py'])
        session.start()

        with pytest.raises(SessionError, match='already active'):
            other.start()

    def test_same_session_cannot_start_twice(self, session):
        session.start()

        with pytest.raises(SessionError, match='already active'):
            session.start()

    def test_slot_is_released_on_shutdown(self, session):
        other = CoverageSession(include=['/nonexistent/other.py'])
        session.start()
        session.shutdown()

        other.start()
        other.shutdown()


class TestCoverageSessionConfiguration:
    def test_infrastructure_packages_become_omit_patterns(self):
        session = CoverageSession(include=[], omit=['_pytest', 'pluggy'])
        assert session.omit == ['*_pytest*', '*pluggy*']

    def test_targets_are_never_omitted(self):
        session = CoverageSession(include=['/src/mapper/coverage/calc.py'], omit=['coverage', 'pluggy'])
        assert session.omit == ['*pluggy*']

    def test_branch_measurement_by_default(self):
        assert CoverageSession(include=[]).branch is True


class TestOmitPatterns:
    def test_dotted_names_match_as_paths(self):
        assert omit_patterns(['vendor.tools']) == [f'*vendor{os.sep}tools*']

    def test_pattern_matching_any_target_is_dropped(self):
        patterns = omit_patterns(['vendor'], ['/src/app.py', '/src/vendor/lib.py'])

        assert patterns == []


class TestRestrictTrace:
    def test_keeps_only_the_given_files(self, make_trace):
        trace = make_trace({'/src/sign.py': {(-1, 2), (2, 3)}, '/src/other.py': {(-1, 1)}})

        restricted = restrict_trace(trace, ['/src/sign.py'])

        assert restricted.measured_files() == {'/src/sign.py'}
        assert set(restricted.arcs('/src/sign.py')) == {(-1, 2), (2, 3)}

    def test_no_matching_file_gives_an_empty_trace(self, make_trace):
        trace = make_trace({'/src/other.py': {(-1, 1)}})

        assert restrict_trace(trace, ['/src/sign.py']).measured_files() == set()
