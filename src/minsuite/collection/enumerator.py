"""Test suite enumeration.

The enumerator turns test holder identifiers into an ordered list of
TestCase objects. Order is deterministic: identifiers are processed in the
order given and test cases follow declaration order inside each holder.
Because the minimization is greedy and order dependent, this order is part of
the input contract.

Detection of test entry points is a policy of the enumerator, not of the
engine. Each discovered callable is tagged with Capability.ENTRY_POINT when
the policy accepts it; the engine only looks at the tag.

Example:
    >>> cases = enumerate_tests(['tests.test_tree.TestTree'])  # doctest: +SKIP
    >>> [case.name for case in cases if case.is_entry_point]  # doctest: +SKIP
    ['test_insert', 'test_delete']
"""

from __future__ import annotations

import inspect
import logging
import types
from typing import TYPE_CHECKING, Any
import unittest

from minsuite.collection.case import Capability, TestCase
from minsuite.errors import ConfigurationError, TestDiscoveryError
from minsuite.importing import resolve_object


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from pathlib import Path

    DetectionPolicy = Callable[[str, object], bool]


logger = logging.getLogger(__name__)

WILDCARD_SUFFIX = '.*'


def default_detection_policy(name: str, obj: object) -> bool:
    """Decide whether a callable or class is a test entry point.

    An explicit ``__test__`` attribute always wins. Otherwise functions named
    ``test*`` and classes named ``Test*`` are entry points, as are all
    ``unittest.TestCase`` subclasses.

    Args:
        name: Name the object is declared under.
        obj: The function or class.

    Returns:
        True if the object should be treated as a test entry point.
    """
    explicit = getattr(obj, '__test__', None)
    if isinstance(explicit, bool):
        return explicit
    if inspect.isclass(obj):
        return name.startswith('Test') or issubclass(obj, unittest.TestCase)
    return name.startswith('test')


def expand_wildcards(identifiers: Iterable[str], base_folder: Path | None) -> list[str]:
    """Expand ``package.*`` identifiers into the test modules of that package.

    Every ``*.py`` file in the package folder whose name contains ``test`` is
    added, sorted by file name. Identifiers without a wildcard are passed
    through unchanged.

    Args:
        identifiers: Test holder identifiers, possibly ending in ``.*``.
        base_folder: Folder that package paths are resolved against.

    Returns:
        The expanded list of identifiers.

    Raises:
        ConfigurationError: If a wildcard is used without a base folder.
        TestDiscoveryError: If the package folder does not exist.
    """
    expanded: list[str] = []
    for identifier in identifiers:
        if not identifier.endswith(WILDCARD_SUFFIX):
            expanded.append(identifier)
            continue

        if base_folder is None:
            msg = f'Wildcard test suite {identifier!r} requires a base test folder'
            raise ConfigurationError(msg)

        package_name = identifier[: -len(WILDCARD_SUFFIX)]
        source_folder = base_folder.joinpath(*package_name.split('.'))
        if not source_folder.is_dir():
            msg = f'Folder {source_folder} does not exist'
            raise TestDiscoveryError(msg)

        modules = sorted(
            path.stem
            for path in source_folder.glob('*.py')
            if 'test' in path.stem.lower() and path.stem != '__init__'
        )
        logger.debug('Expanded %s into %d test modules', identifier, len(modules))
        expanded.extend(f'{package_name}.{module}' for module in modules)
    return expanded


def enumerate_tests(
    identifiers: Iterable[str],
    policy: DetectionPolicy | None = None,
) -> list[TestCase]:
    """Enumerate the test cases declared by the given holders.

    Args:
        identifiers: Dotted names of test classes or test modules.
        policy: Entry-point detection policy. Defaults to
            default_detection_policy.

    Returns:
        Test cases in identifier order, then declaration order. Callables the
        policy rejects are included without the ENTRY_POINT tag.

    Raises:
        TestDiscoveryError: If an identifier does not name a class or module.
    """
    detect = policy or default_detection_policy
    cases: list[TestCase] = []
    for identifier in identifiers:
        holder = _resolve_holder(identifier)
        if inspect.ismodule(holder):
            cases.extend(_module_cases(holder, detect))
        else:
            cases.extend(_class_cases(holder, identifier, detect))
    logger.debug('Enumerated %d test cases', len(cases))
    return cases


def _resolve_holder(identifier: str) -> Any:
    try:
        holder = resolve_object(identifier)
    except (ImportError, AttributeError) as exc:
        msg = f'Cannot resolve test holder {identifier!r}: {exc}'
        raise TestDiscoveryError(msg) from exc
    if not (inspect.ismodule(holder) or inspect.isclass(holder)):
        msg = f'Test holder {identifier!r} is neither a class nor a module'
        raise TestDiscoveryError(msg)
    return holder


def _module_cases(module: types.ModuleType, detect: DetectionPolicy) -> Iterator[TestCase]:
    for name, obj in vars(module).items():
        if name.startswith('_') or getattr(obj, '__module__', None) != module.__name__:
            continue
        if inspect.isclass(obj):
            if detect(name, obj):
                yield from _class_cases(obj, f'{module.__name__}.{obj.__qualname__}', detect)
        elif inspect.isfunction(obj):
            yield _make_case(module.__name__, name, obj, module, detect, bound=False)


def _class_cases(cls: type, holder_name: str, detect: DetectionPolicy) -> Iterator[TestCase]:
    for name, member in vars(cls).items():
        if name.startswith('_'):
            continue
        if isinstance(member, staticmethod):
            yield _make_case(holder_name, name, member.__func__, cls, detect, bound=False)
        elif isinstance(member, classmethod):
            yield _make_case(holder_name, name, member.__func__, cls, detect, bound=True)
        elif inspect.isfunction(member):
            yield _make_case(holder_name, name, member, cls, detect, bound=True)


def _make_case(
    holder_name: str,
    name: str,
    func: types.FunctionType,
    holder: Any,
    detect: DetectionPolicy,
    *,
    bound: bool,
) -> TestCase:
    parameters = list(inspect.signature(func).parameters)
    if bound:
        parameters = parameters[1:]
    capabilities = frozenset({Capability.ENTRY_POINT}) if detect(name, func) else frozenset()
    if not capabilities:
        logger.debug('%s.%s is not a test entry point', holder_name, name)
    return TestCase(
        holder_name=holder_name,
        name=name,
        parameters=tuple(parameters),
        capabilities=capabilities,
        holder=holder,
    )
