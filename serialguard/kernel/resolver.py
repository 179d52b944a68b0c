"""Module path resolver for callables named in configuration files.

Configuration files cannot hold functions, so a custom classifier or
enumerator is referenced by its import path instead.

Examples
--------
>>> from serialguard.kernel.resolver import resolve_callable
>>> resolve_callable("serialguard.kernel.scanning.classifier.is_plain")  # doctest: +ELLIPSIS
<function is_plain at ...>
>>> resolve_callable("serialguard.kernel.scanning.classifier:get_entries")  # doctest: +ELLIPSIS
<function get_entries at ...>
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import Any

from serialguard.kernel.exceptions import ResolveError


def resolve_callable(path: str) -> Callable[..., Any]:
    """Resolve ``"package.module.name"`` or ``"package.module:name"`` to a callable.

    Raises
    ------
    ResolveError
        If the module or attribute cannot be found, or is not callable
    """
    if ":" in path:
        module_path, _, attr_name = path.partition(":")
    elif "." in path:
        module_path, attr_name = path.rsplit(".", 1)
    else:
        raise ResolveError(
            path, "Must be a full module path (e.g., 'myapp.serial.is_serializable')"
        )

    if not module_path or not attr_name:
        raise ResolveError(
            path, "Invalid format - expected 'module.path.name' or 'module.path:name'"
        )

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as e:
        raise ResolveError(path, f"Module '{module_path}' not found: {e}") from e
    except ImportError as e:
        raise ResolveError(path, f"Failed to import '{module_path}': {e}") from e

    try:
        target = getattr(module, attr_name)
    except AttributeError as e:
        available = [name for name in dir(module) if not name.startswith("_")]
        raise ResolveError(
            path,
            f"'{attr_name}' not found in '{module_path}'. Available: {', '.join(available[:10])}",
        ) from e

    if not callable(target):
        raise ResolveError(path, f"'{attr_name}' is not callable (got {type(target).__name__})")

    return target
