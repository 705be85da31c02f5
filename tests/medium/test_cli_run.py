"""The minsuite command against modules in the working directory."""

from __future__ import annotations

import sys
import textwrap
from typing import TYPE_CHECKING

import pytest

from minsuite import cli


if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """A project folder as the working directory, absent from sys.path."""
    (tmp_path / 'cli_sign.py').write_text(
        textwrap.dedent(
            '''\
            def sign(n):
                if n < 0:
                    return -1
                return 1
            '''
        )
    )
    (tmp_path / 'cli_sign_suite.py').write_text(
        textwrap.dedent(
            '''\
            from cli_sign import sign


            def test_negative():
                assert sign(-3) == -1


            def test_negative_again():
                assert sign(-4) == -1
            '''
        )
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, 'path', [entry for entry in sys.path if entry not in ('', str(tmp_path))])
    yield tmp_path
    for name in ('cli_sign', 'cli_sign_suite'):
        sys.modules.pop(name, None)


def test_minimizes_modules_from_the_working_directory(project: Path):
    output = project / 'minimized.txt'

    exit_code = cli.main(['--testsuite', 'cli_sign_suite', '--targets', 'cli_sign', '-o', str(output)])

    assert exit_code == 0
    assert output.read_text() == 'cli_sign_suite::test_negative\n'
