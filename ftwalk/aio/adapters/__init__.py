"""Async adapters for directory sources.

This module contains adapters that bridge a concrete source
(currently the local filesystem) to the walker's I/O primitives.
"""

from .filesystem import AsyncFileSystemAdapter

__all__ = [
    'AsyncFileSystemAdapter',
]
