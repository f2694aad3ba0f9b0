"""Async directory adapter abstraction.

Defines the two I/O primitives the walker consumes: listing a
directory's entries and stat-ing a path. Adapters bridge those
primitives to a concrete source (the local filesystem, or an in-memory
tree in tests).
"""

import asyncio
import os
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Set


class _Unbounded:
    """Stand-in for a semaphore when concurrency is not capped."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


_UNBOUNDED = _Unbounded()


class AsyncDirectoryAdapter(ABC):
    """Abstract base class for async directory adapters.

    Adapters own the concurrency cap: every listing and every stat goes
    through ``self.slot()``, which holds one permit of the adapter's
    semaphore for the duration of the call.
    """

    def __init__(self, max_concurrent: Optional[int] = 100):
        """Initialize adapter with concurrency control.

        Args:
            max_concurrent: Maximum concurrent I/O operations (None for no cap)
        """
        self.max_concurrent = max_concurrent
        self._semaphore = None
        self._semaphore_loop = None
        self._capabilities = self._define_capabilities()
        self._active = 0
        self._peak_active = 0

    @property
    def semaphore(self):
        """Concurrency permits for the running event loop.

        asyncio primitives bind to the loop that first waits on them, so a
        fresh semaphore is created whenever the adapter is used from a
        different loop (e.g. successive ``asyncio.run`` calls).
        """
        if self.max_concurrent is None:
            return _UNBOUNDED

        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
            self._semaphore_loop = loop
        return self._semaphore

    @abstractmethod
    async def list_directory(self, path: str) -> List[str]:
        """List the names of a directory's immediate entries.

        Args:
            path: Directory to list

        Returns:
            Entry names, in whatever order the source returns them

        Raises:
            OSError: If the directory is missing, not a directory,
                or unreadable
        """
        pass

    @abstractmethod
    async def inspect(self, path: str) -> os.stat_result:
        """Get metadata for a path.

        Args:
            path: Path to stat

        Returns:
            Stat result describing the entry's type

        Raises:
            OSError: If the path cannot be stat'd
        """
        pass

    def join(self, directory: str, name: str) -> str:
        """Build the path of an entry inside a directory."""
        return os.path.join(directory, name)

    def key(self, path: str) -> str:
        """Normalized identity of a path, used for duplicate detection."""
        return os.path.normcase(os.path.abspath(path))

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one I/O permit while the body runs."""
        async with self.semaphore:
            self._active += 1
            self._peak_active = max(self._peak_active, self._active)
            try:
                yield
            finally:
                self._active -= 1

    def supports_capability(self, capability: str) -> bool:
        """Check if adapter supports a specific capability.

        Args:
            capability: Capability name

        Returns:
            True if capability is supported
        """
        return capability in self._capabilities

    def _define_capabilities(self) -> Set[str]:
        """Define adapter capabilities.

        Override in subclasses to declare supported features.
        """
        return {
            'list_directory',
            'inspect',
        }

    async def get_stats(self) -> dict:
        """Get adapter statistics.

        Returns:
            Dictionary with the concurrency cap and observed peak
        """
        return {
            'max_concurrent': self.max_concurrent,
            'active': self._active,
            'peak_active': self._peak_active,
        }

    async def close(self):
        """Clean up adapter resources.

        Override if adapter needs cleanup (close connections, etc.)
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
