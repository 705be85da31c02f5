"""Resolution of dotted names to live modules, classes and functions."""

from __future__ import annotations

import importlib
from typing import Any


def resolve_object(dotted_name: str) -> Any:
    """Import the object named by a dotted path.

    The longest importable module prefix is imported and the remaining parts
    are looked up as attributes, so both ``pkg.mod`` and ``pkg.mod.Outer.Inner``
    resolve.

    Args:
        dotted_name: Fully qualified name of a module or an object inside one.

    Returns:
        The resolved module, class or function.

    Raises:
        ImportError: If no prefix of the name can be imported, or if the
            module raised ImportError while being imported.
        AttributeError: If the remaining parts cannot be looked up.
    """
    parts = dotted_name.split('.')
    if not all(parts):
        msg = f'Invalid dotted name: {dotted_name!r}'
        raise ImportError(msg)

    for split_at in range(len(parts), 0, -1):
        module_name = '.'.join(parts[:split_at])
        try:
            obj = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only swallow the failure for the name we are probing; a missing
            # dependency inside the module is a real error.
            if exc.name is not None and not _is_prefix(exc.name, module_name):
                raise
            continue
        for attribute in parts[split_at:]:
            obj = getattr(obj, attribute)
        return obj

    msg = f'No module named {parts[0]!r}'
    raise ModuleNotFoundError(msg, name=parts[0])


def _is_prefix(package: str, module_name: str) -> bool:
    return module_name == package or module_name.startswith(package + '.')
