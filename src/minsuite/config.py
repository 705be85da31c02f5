"""Configuration loading for minsuite.

This module reads configuration from pyproject.toml [tool.minsuite]
section and provides sensible defaults when configuration is absent.
"""

from __future__ import annotations

from dataclasses import dataclass
import tomllib
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class MinsuiteConfig:
    """Configuration for minsuite.

    All fields are optional and default to None, meaning the command line
    or built-in defaults are used.

    Attributes:
        test_suites: Test classes or modules to minimize, in evaluation order.
        targets: Modules or classes whose coverage is measured.
        test_folder: Base folder for expanding ``package.*`` test suites.
        omit: Package-name substrings never measured.
        output: File that receives the minimized suite.
        report: Report format, ``console`` or ``json``.
    """

    test_suites: list[str] | None = None
    targets: list[str] | None = None
    test_folder: str | None = None
    omit: list[str] | None = None
    output: str | None = None
    report: str | None = None


def load_config(rootdir: Path) -> MinsuiteConfig:
    """Load configuration from pyproject.toml.

    Reads the [tool.minsuite] section from pyproject.toml in the given
    directory. Returns default configuration if the file or section does
    not exist.

    Args:
        rootdir: Directory containing pyproject.toml.

    Returns:
        MinsuiteConfig with values from pyproject.toml or defaults.
    """
    pyproject_path = rootdir / 'pyproject.toml'

    if not pyproject_path.exists():
        return MinsuiteConfig()

    with pyproject_path.open('rb') as f:
        data = tomllib.load(f)

    tool_config = data.get('tool', {}).get('minsuite', {})

    return MinsuiteConfig(
        test_suites=tool_config.get('test-suites'),
        targets=tool_config.get('targets'),
        test_folder=tool_config.get('test-folder'),
        omit=tool_config.get('omit'),
        output=tool_config.get('output'),
        report=tool_config.get('report'),
    )


def _split(value: str | None) -> list[str] | None:
    if value and value.strip():
        return [item.strip() for item in value.split(',') if item.strip()]
    return None


def merge_configs(
    file_config: MinsuiteConfig,
    cli_test_suites: list[str] | None = None,
    cli_targets: str | None = None,
    cli_test_folder: str | None = None,
    cli_omit: str | None = None,
    cli_output: str | None = None,
    cli_report: str | None = None,
) -> MinsuiteConfig:
    """Merge CLI arguments with file configuration.

    CLI arguments take precedence over pyproject.toml configuration.
    Empty strings and empty lists are treated as not provided.

    Args:
        file_config: Configuration loaded from pyproject.toml.
        cli_test_suites: Test suite identifiers from CLI (--testsuite).
        cli_targets: Comma-separated targets from CLI (--targets).
        cli_test_folder: Base test folder from CLI (--folder).
        cli_omit: Comma-separated infrastructure substrings from CLI (--omit).
        cli_output: Output file from CLI (--output).
        cli_report: Report format from CLI (--report).

    Returns:
        MinsuiteConfig with CLI values overriding file config where provided.
    """
    return MinsuiteConfig(
        test_suites=cli_test_suites or file_config.test_suites,
        targets=_split(cli_targets) or file_config.targets,
        test_folder=cli_test_folder or file_config.test_folder,
        omit=_split(cli_omit) or file_config.omit,
        output=cli_output or file_config.output,
        report=cli_report or file_config.report,
    )
