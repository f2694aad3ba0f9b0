"""Level-by-level frontier processing.

The frontier is the list of directories scheduled for one depth. The
FrontierManager reads every directory of a level concurrently, stats
every entry of every listing concurrently, and only when all of those
operations have settled does it move on to the directories discovered
at that level.

All bookkeeping (visited set, tracker counters, next frontier) is
mutated from the event loop thread only; the thread pool only ever runs
the listdir/stat calls themselves.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import (
    Any, AsyncIterator, Awaitable, Callable, Iterable, List, Optional, Set,
)

from ...events import WalkError, WalkEvent
from .adapter import AsyncDirectoryAdapter
from .classifier import classify, is_directory

logger = logging.getLogger(__name__)


class VisitedSet:
    """Directories already scheduled for reading in one session.

    Paths are claimed before their read is issued, so two concurrent
    schedules of the same directory cannot both win. The set only grows.
    """

    def __init__(self, key: Callable[[str], str]):
        """Initialize an empty set.

        Args:
            key: Function mapping a path to its identity (e.g. absolute,
                normalized form) so 'a/b' and 'a/./b' collide
        """
        self._key = key
        self._keys: Set[str] = set()
        self.paths: List[str] = []

    def claim(self, path: str) -> bool:
        """Mark a directory as scheduled.

        Returns:
            True if the caller should read it, False if it was already
            claimed earlier in the session
        """
        key = self._key(path)
        if key in self._keys:
            return False
        self._keys.add(key)
        self.paths.append(path)
        return True

    def __contains__(self, path: str) -> bool:
        return self._key(path) in self._keys

    def __len__(self) -> int:
        return len(self._keys)


class CompletionTracker:
    """Counts in-flight reads and stats across every level of a session.

    The session may only report completion once ``idle`` is True.
    """

    def __init__(self):
        self.pending = 0
        self.peak_pending = 0
        self.reads = 0
        self.inspections = 0
        self.failures = 0

    @asynccontextmanager
    async def track(self, operation: str) -> AsyncIterator[None]:
        """Count one operation as in flight while the body runs.

        Args:
            operation: 'list_directory' or 'inspect'
        """
        if operation == 'list_directory':
            self.reads += 1
        else:
            self.inspections += 1
        self.pending += 1
        self.peak_pending = max(self.peak_pending, self.pending)
        try:
            yield
        finally:
            self.pending -= 1

    def record_failure(self) -> None:
        self.failures += 1

    @property
    def idle(self) -> bool:
        return self.pending == 0

    def snapshot(self) -> dict:
        return {
            'pending': self.pending,
            'peak_pending': self.peak_pending,
            'reads': self.reads,
            'inspections': self.inspections,
            'failures': self.failures,
        }


async def gather_all(coros: Iterable[Awaitable[Any]]) -> List[Any]:
    """Run awaitables concurrently and wait for every one of them.

    If one raises, the rest are cancelled and allowed to unwind before
    the exception propagates, so nothing from the batch is left running.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    if not tasks:
        return []
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class FrontierManager:
    """Breadth-first fan-out/fan-in over directory frontiers."""

    def __init__(
        self,
        adapter: AsyncDirectoryAdapter,
        visited: VisitedSet,
        tracker: CompletionTracker,
        emit: Callable[[WalkEvent], None],
        report: Callable[[WalkError], Awaitable[None]],
    ):
        """Initialize the manager for one session.

        Args:
            adapter: Source of listings and stat results
            visited: The session's visited set
            tracker: The session's in-flight operation tracker
            emit: Delivers a non-error event to the session's consumers
            report: Delivers a filesystem failure to the session
        """
        self.adapter = adapter
        self.visited = visited
        self.tracker = tracker
        self.emit = emit
        self.report = report
        self.levels = 0

    async def walk_level(self, frontier: List[str], remaining_depth: int, depth: int = 0) -> None:
        """Process one frontier and recurse into the next.

        Args:
            frontier: Directories discovered for this level
            remaining_depth: How many more levels may be read below this one
            depth: Depth of this level (roots are 0), for logging only
        """
        scheduled = []
        for path in frontier:
            if self.visited.claim(path):
                scheduled.append(path)
            else:
                logger.debug("Skipping already visited directory %s", path)

        if not scheduled:
            return

        self.levels += 1
        logger.debug("Depth %d: reading %d directories", depth, len(scheduled))

        discovered = await gather_all(self._read_directory(path) for path in scheduled)
        next_frontier = [subdir for subdirs in discovered for subdir in subdirs]

        logger.debug(
            "Depth %d settled: %d subdirectories found, %d levels remaining",
            depth, len(next_frontier), remaining_depth,
        )

        if remaining_depth > 0 and next_frontier:
            await self.walk_level(next_frontier, remaining_depth - 1, depth + 1)

    async def _read_directory(self, path: str) -> List[str]:
        """List one directory and classify its entries.

        Returns:
            Subdirectories found in this directory
        """
        try:
            async with self.tracker.track('list_directory'):
                names = await self.adapter.list_directory(path)
        except (OSError, ValueError) as e:
            await self.report(WalkError(path, 'list_directory', e))
            return []

        self.emit(WalkEvent.directory(path))

        entries = [self.adapter.join(path, name) for name in names]
        results = await gather_all(self._inspect_entry(entry) for entry in entries)
        return [subdir for subdir in results if subdir is not None]

    async def _inspect_entry(self, path: str) -> Optional[str]:
        """Stat one entry and emit its classification.

        Returns:
            The path if it is a directory, None otherwise
        """
        try:
            async with self.tracker.track('inspect'):
                stat = await self.adapter.inspect(path)
        except (OSError, ValueError) as e:
            await self.report(WalkError(path, 'inspect', e))
            return None

        if is_directory(stat):
            return path

        for kind in classify(stat):
            self.emit(WalkEvent.entry(kind, path))
        return None
