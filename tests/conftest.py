"""Shared pytest configuration and fixtures for minsuite tests."""

from __future__ import annotations

import sys
import textwrap
from typing import TYPE_CHECKING

from coverage import CoverageData
import pytest


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line('markers', 'small: Fast, isolated unit tests (< 100ms)')
    config.addinivalue_line('markers', 'medium: Integration tests with real resources (< 10s)')
    config.addinivalue_line('markers', 'large: End-to-end system tests (< 60s)')


@pytest.fixture
def write_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[str, str], Path]]:
    """Write importable Python modules into a temporary folder on sys.path.

    Dotted names create packages. Every module imported from the folder is
    removed from sys.modules after the test.
    """
    monkeypatch.syspath_prepend(str(tmp_path))
    written: list[str] = []

    def _write(name: str, source: str) -> Path:
        parts = name.split('.')
        folder = tmp_path.joinpath(*parts[:-1])
        folder.mkdir(parents=True, exist_ok=True)
        for depth in range(1, len(parts)):
            init = tmp_path.joinpath(*parts[:depth], '__init__.py')
            if not init.exists():
                init.write_text('')
        path = folder / f'{parts[-1]}.py'
        path.write_text(textwrap.dedent(source))
        written.append(parts[0])
        return path

    yield _write

    for module_name in list(sys.modules):
        if module_name.split('.')[0] in written:
            del sys.modules[module_name]


@pytest.fixture
def make_trace() -> Callable[[dict[str, set[tuple[int, int]]]], CoverageData]:
    """Build in-memory execution traces from arcs, keyed by file name."""

    def _make(arcs_by_file: dict[str, set[tuple[int, int]]]) -> CoverageData:
        trace = CoverageData(no_disk=True)
        trace.add_arcs(arcs_by_file)
        return trace

    return _make
