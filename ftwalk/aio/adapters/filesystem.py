"""Async filesystem adapter for tree walking.

Runs the blocking ``os.listdir`` and ``os.stat`` calls in worker
threads so that many reads and stats can be outstanding at once while
the walker itself stays on a single event loop.
"""

import asyncio
import os
from typing import List, Optional, Set

from ..core.adapter import AsyncDirectoryAdapter


class AsyncFileSystemAdapter(AsyncDirectoryAdapter):
    """Local filesystem adapter.

    ``inspect`` uses ``os.stat``, which follows symbolic links: a link
    to a directory is walked like a directory and a dangling link fails
    with FileNotFoundError.
    """

    def __init__(self, max_concurrent: Optional[int] = 100):
        """Initialize filesystem adapter.

        Args:
            max_concurrent: Maximum concurrent I/O operations (None for no cap)
        """
        super().__init__(max_concurrent)
        self.reads = 0
        self.stats = 0

    async def list_directory(self, path: str) -> List[str]:
        """List a directory in a worker thread."""
        async with self.slot():
            self.reads += 1
            return await asyncio.to_thread(os.listdir, path)

    async def inspect(self, path: str) -> os.stat_result:
        """Stat a path in a worker thread."""
        async with self.slot():
            self.stats += 1
            return await asyncio.to_thread(os.stat, path)

    def _define_capabilities(self) -> Set[str]:
        capabilities = super()._define_capabilities()
        capabilities.add('follows_symlinks')
        return capabilities

    async def get_stats(self) -> dict:
        """Get adapter statistics including syscall counts."""
        stats = await super().get_stats()
        stats.update({
            'reads': self.reads,
            'stats': self.stats,
        })
        return stats

    def __repr__(self) -> str:
        return f"AsyncFileSystemAdapter(max_concurrent={self.max_concurrent})"
