"""Deferred imports for turn_router.

Database drivers are imported on first use, so the package and its
in-memory test doubles load without a driver connection stack.
"""

from collections.abc import Callable
from functools import cache
from importlib import import_module
from typing import Any

__all__ = [
    "lazy_import",
]


def lazy_import(
    module_name: str,
    name: str | None = None,
    *,
    purpose: str | None = None,
) -> Callable[[], Any]:
    """Return a loader for a module, or one attribute of it.

    The import happens on the first call and is cached afterwards.

    Args:
        module_name: Dotted module path
        name: Attribute to fetch from the module (default: the module itself)
        purpose: What the import is needed for, used in the error message

    Raises:
        ImportError: From the loader, if the module is not installed
    """

    @cache
    def _load() -> Any:
        try:
            module = import_module(module_name)
        except ImportError as e:
            needed_for = f" (required for {purpose})" if purpose else ""
            raise ImportError(f"Cannot import {module_name}{needed_for}") from e
        return getattr(module, name) if name else module

    return _load
