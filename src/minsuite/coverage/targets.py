"""Resolution of coverage targets to Python source.

A coverage target is either a module or a class, named by its fully
qualified dotted name. Targets are expanded once, at the start of a run:

- a package target also covers every submodule inside it;
- a class target also covers each class nested inside it, recursively. The
  outer class keeps only its own lines, so nested lines are never counted
  twice. Likewise a module listed together with one of its classes gives
  up the lines of that class.

The source bytes of every target file are captured at load time. The
analyzer compares them with the file on disk before each analysis pass.

Example:
    >>> targets = resolve_targets(['avl_tree.AvlTree'])  # doctest: +SKIP
    >>> list(targets)  # doctest: +SKIP
    ['avl_tree.AvlTree', 'avl_tree.AvlTree.Node']
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import inspect
import logging
import os
from pathlib import Path
import pkgutil
import types
from typing import TYPE_CHECKING

from minsuite.errors import TargetResolutionError
from minsuite.importing import resolve_object


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetClass:
    """A single coverage target.

    Attributes:
        name: Fully qualified name of the module or class.
        filename: Canonical path of the source file declaring the target.
        source: Raw bytes of the source file when the target was loaded.
        lines: Line numbers belonging to the target, or None for a whole module.
    """

    name: str
    filename: str
    source: bytes
    lines: frozenset[int] | None = None

    def owns_line(self, line_number: int) -> bool:
        """Return True if the given line of the source file belongs to this target."""
        return self.lines is None or line_number in self.lines


class TargetClassSet(dict[str, TargetClass]):
    """Ordered mapping of target names to targets, read-only by convention."""

    @property
    def filenames(self) -> list[str]:
        """Return the distinct source files of all targets, in target order."""
        return list(dict.fromkeys(target.filename for target in self.values()))


def resolve_targets(names: Iterable[str]) -> TargetClassSet:
    """Resolve target names, including nested classes and submodules.

    Args:
        names: Fully qualified module or class names.

    Returns:
        A TargetClassSet keyed by target name, in resolution order.

    Raises:
        TargetResolutionError: If a name cannot be imported or has no
            Python source file.
    """
    targets = TargetClassSet()
    for name in names:
        try:
            obj = resolve_object(name)
        except (ImportError, AttributeError) as exc:
            msg = f'Cannot resolve coverage target {name!r}: {exc}'
            raise TargetResolutionError(msg) from exc

        if inspect.ismodule(obj):
            expanded = _module_targets(name, obj)
        elif inspect.isclass(obj):
            expanded = _class_targets(name, obj)
        else:
            msg = f'Coverage target {name!r} is neither a class nor a module'
            raise TargetResolutionError(msg)

        for target in expanded:
            targets[target.name] = target
    _exclude_class_lines(targets)
    logger.debug('Resolved %d coverage targets', len(targets))
    return targets


def _module_targets(name: str, module: types.ModuleType) -> Iterator[TargetClass]:
    filename = _source_file(name, module)
    yield TargetClass(name=name, filename=filename, source=_read_source(name, filename))

    package_path = getattr(module, '__path__', None)
    if package_path is None:
        return
    for info in sorted(pkgutil.walk_packages(package_path, prefix=f'{name}.'), key=lambda i: i.name):
        try:
            submodule = resolve_object(info.name)
        except ImportError as exc:
            msg = f'Cannot import submodule {info.name!r} of coverage target {name!r}: {exc}'
            raise TargetResolutionError(msg) from exc
        sub_filename = _source_file(info.name, submodule)
        yield TargetClass(name=info.name, filename=sub_filename, source=_read_source(info.name, sub_filename))


def _class_targets(name: str, cls: type) -> Iterator[TargetClass]:
    filename = _source_file(name, cls)
    source = _read_source(name, filename)
    span = _line_span(name, cls)

    nested = [
        member
        for member in vars(cls).values()
        if inspect.isclass(member) and member.__qualname__ == f'{cls.__qualname__}.{member.__name__}'
    ]
    own_lines = set(span)
    for inner in nested:
        own_lines -= set(_line_span(f'{name}.{inner.__name__}', inner))

    yield TargetClass(name=name, filename=filename, source=source, lines=frozenset(own_lines))
    for inner in nested:
        yield from _class_targets(f'{name}.{inner.__name__}', inner)


def _source_file(name: str, obj: object) -> str:
    try:
        filename = inspect.getsourcefile(obj)  # type: ignore[arg-type]
    except TypeError as exc:
        msg = f'Coverage target {name!r} is built in and has no source'
        raise TargetResolutionError(msg) from exc
    if filename is None:
        msg = f'Coverage target {name!r} has no Python source file'
        raise TargetResolutionError(msg)
    return os.path.realpath(filename)


def _read_source(name: str, filename: str) -> bytes:
    try:
        return Path(filename).read_bytes()
    except OSError as exc:
        msg = f'Cannot read source of coverage target {name!r}: {exc}'
        raise TargetResolutionError(msg) from exc


def _line_span(name: str, cls: type) -> range:
    try:
        lines, start = inspect.getsourcelines(cls)
    except (OSError, TypeError) as exc:
        msg = f'Cannot locate source lines of coverage target {name!r}: {exc}'
        raise TargetResolutionError(msg) from exc
    return range(start, start + len(lines))


def _exclude_class_lines(targets: TargetClassSet) -> None:
    # A module listed next to a class it declares keeps only the lines outside that class.
    for target in list(targets.values()):
        if target.lines is not None:
            continue
        claimed: set[int] = set()
        for other in targets.values():
            if other.filename == target.filename and other.lines is not None:
                claimed |= other.lines
        if claimed:
            all_lines = range(1, target.source.count(b'\n') + 2)
            targets[target.name] = replace(target, lines=frozenset(set(all_lines) - claimed))
