"""Utility functions for turn_router.

This module contains internal utility functions.
"""

from turn_router.utils.lazy_import import lazy_import

__all__ = [
    "lazy_import",
]
