"""Command-line entry point for minsuite.

Usage:
    minsuite [-o FILE] [--folder DIR] --testsuite ID [ID ...] --targets T[,T...]

Options missing from the command line are read from the [tool.minsuite]
section of pyproject.toml in the current directory.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from minsuite.config import load_config, merge_configs
from minsuite.coverage.session import DEFAULT_INFRASTRUCTURE
from minsuite.engine import minimize_suite
from minsuite.errors import MinsuiteError
from minsuite.reporting.console import ConsoleReporter
from minsuite.reporting.json_reporter import JsonReporter, write_minimized_suite


if TYPE_CHECKING:
    from collections.abc import Sequence


logger = logging.getLogger(__name__)

REPORT_FORMATS = ('console', 'json')


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the minsuite command."""
    parser = argparse.ArgumentParser(
        prog='minsuite',
        description='Reduce a test suite to the tests that reach new branch or statement coverage.',
    )
    parser.add_argument(
        '--testsuite',
        nargs='+',
        default=None,
        metavar='ID',
        help='Test classes or modules, in evaluation order; package.* expands from --folder',
    )
    parser.add_argument(
        '--targets',
        default=None,
        help='Comma-separated modules or classes whose coverage is measured',
    )
    parser.add_argument(
        '--folder',
        default=None,
        help='Base test folder used to expand package.* test suites',
    )
    parser.add_argument(
        '--omit',
        default=None,
        help=f'Comma-separated package names never measured (default: {",".join(DEFAULT_INFRASTRUCTURE)})',
    )
    parser.add_argument(
        '-o',
        '--output',
        default=None,
        help='Write the minimized suite to this file, one test per line',
    )
    parser.add_argument(
        '--report',
        choices=REPORT_FORMATS,
        default=None,
        help='Report format: console, json (default: console)',
    )
    parser.add_argument(
        '--report-file',
        type=Path,
        default=None,
        help='Write the JSON report to this file instead of stdout',
    )
    parser.add_argument(
        '--verbose-execution',
        action='store_true',
        default=False,
        help='Print per-line coverage of every executed test',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        help='Increase logging verbosity (-v for info, -vv for debug)',
    )
    return parser


def configure_logging(verbosity: int) -> None:
    """Configure root logging for the command line."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')


def main(argv: Sequence[str] | None = None) -> int:
    """Run minimization from the command line.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    config = merge_configs(
        load_config(Path.cwd()),
        cli_test_suites=args.testsuite,
        cli_targets=args.targets,
        cli_test_folder=args.folder,
        cli_omit=args.omit,
        cli_output=args.output,
        cli_report=args.report,
    )
    if not config.test_suites:
        parser.error('no test suite given (use --testsuite or [tool.minsuite] test-suites)')

    base_folder = Path(config.test_folder) if config.test_folder else None
    # Console scripts do not put the working directory on sys.path.
    for folder in (Path.cwd(), base_folder):
        if folder is not None and str(folder) not in sys.path:
            sys.path.insert(0, str(folder))

    try:
        result = minimize_suite(
            config.test_suites,
            config.targets or [],
            verbose=args.verbose_execution,
            base_folder=base_folder,
            omit=config.omit if config.omit is not None else DEFAULT_INFRASTRUCTURE,
        )
    except MinsuiteError as exc:
        logger.debug('Minimization failed', exc_info=True)
        print(f'Error while minimizing: {exc}', file=sys.stderr)
        return 1

    logger.debug('Minimized test suite includes %d test cases', result.retained)

    if config.output is not None:
        try:
            write_minimized_suite(result, Path(config.output))
        except OSError as exc:
            print(f'Error while writing the output file: {exc}', file=sys.stderr)
            return 1

    if config.report == 'json':
        reporter = JsonReporter()
        if args.report_file is not None:
            reporter.write_report(result, args.report_file)
        else:
            print(reporter.to_json(result))
    else:
        ConsoleReporter().write_report(result)

    return 0


if __name__ == '__main__':
    sys.exit(main())
