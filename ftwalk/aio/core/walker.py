"""The tree walker.

AsyncTreeWalker is the public engine. Each call to ``walk`` or ``run``
creates a fresh WalkSession with its own visited set, depth budget and
completion tracker, so a walker can be reused for any number of walks
without state leaking from one to the next.

Events reach consumers two ways:

- listeners registered per kind with ``on``, called synchronously as
  each event is produced;
- the async iterator returned by ``walk``, which yields every event and
  ends after ``done``.
"""

import asyncio
import logging
import os
import time
from collections import Counter, defaultdict
from contextlib import suppress
from dataclasses import dataclass, field
from typing import (
    AsyncIterator, Callable, Dict, Iterable, List, Optional, Union,
)

from ...config import WalkConfig
from ...events import WalkError, WalkEvent, WalkEventKind
from ..adapters.filesystem import AsyncFileSystemAdapter
from ..error_policies import ContinueOnErrorsPolicy, ErrorPolicy
from .adapter import AsyncDirectoryAdapter
from .frontier import CompletionTracker, FrontierManager, VisitedSet

logger = logging.getLogger(__name__)

PathArg = Union[str, os.PathLike]
Listener = Callable[[WalkEvent], None]

# Marks the end of a session's event queue, whether it finished or failed.
_CLOSED = object()


def normalize_paths(paths: Union[PathArg, Iterable[PathArg]]) -> List[str]:
    """Turn one path or an iterable of paths into a list of str paths.

    Order is preserved and duplicates are kept; the visited set takes
    care of duplicates during the walk.
    """
    if isinstance(paths, (str, bytes, os.PathLike)):
        paths = [paths]
    return [os.fsdecode(path) for path in paths]


@dataclass
class WalkSummary:
    """What a finished session observed."""
    roots: List[str]
    max_depth: int
    counts: Dict[str, int] = field(default_factory=dict)
    directories_read: int = 0
    levels: int = 0
    reads: int = 0
    inspections: int = 0
    errors: int = 0
    peak_in_flight: int = 0
    elapsed: float = 0.0

    def count(self, kind: Union[WalkEventKind, str]) -> int:
        """Number of events of one kind."""
        return self.counts.get(WalkEventKind(kind).value, 0)


class WalkSession:
    """One traversal. Single-use: ``run`` may only be called once."""

    def __init__(
        self,
        roots: List[str],
        config: WalkConfig,
        adapter: AsyncDirectoryAdapter,
        error_policy: ErrorPolicy,
        listeners: Dict[WalkEventKind, List[Listener]],
        stream: bool = False,
    ):
        """Initialize a session.

        Args:
            roots: Root directories, depth 0
            config: Walk configuration
            adapter: Source of listings and stat results
            error_policy: Policy receiving every failure
            listeners: Per-kind callbacks (copied; later registrations
                on the walker do not affect a running session)
            stream: If True, events are also queued for ``events()``
        """
        self.roots = list(roots)
        self.max_depth = config.effective_max_depth
        self.adapter = adapter
        self.error_policy = error_policy
        self._listeners = {kind: list(callbacks) for kind, callbacks in listeners.items()}
        self.queue: Optional[asyncio.Queue] = asyncio.Queue() if stream else None

        self.visited = VisitedSet(adapter.key)
        self.tracker = CompletionTracker()
        self.counts: Counter = Counter()
        self.manager = FrontierManager(
            adapter, self.visited, self.tracker,
            emit=self.emit, report=self.report,
        )
        self._started = False
        self._finished = False
        self._elapsed = 0.0

    def emit(self, event: WalkEvent) -> None:
        """Deliver an event to listeners, then to the stream."""
        if self._finished:
            raise RuntimeError(f"Event {event!r} emitted after done")

        self.counts[event.kind.value] += 1
        for callback in self._listeners.get(event.kind, ()):
            callback(event)
        if self.queue is not None:
            self.queue.put_nowait(event)

    async def report(self, error: WalkError) -> None:
        """Deliver a filesystem failure as an error event and to the policy."""
        self.tracker.record_failure()
        self.emit(WalkEvent.failure(error))
        await self.error_policy.handle(error)

    async def run(self) -> WalkSummary:
        """Walk every root to completion and emit ``done``.

        Returns:
            Summary of the session
        """
        if self._started:
            raise RuntimeError("A WalkSession can only be run once")
        self._started = True

        start = time.perf_counter()
        try:
            logger.debug("Walking %d roots (max depth %d)", len(self.roots), self.max_depth)
            await self.manager.walk_level(self.roots, self.max_depth)

            if not self.tracker.idle:
                raise RuntimeError(
                    f"Walk settled with {self.tracker.pending} operations still in flight"
                )

            self._elapsed = time.perf_counter() - start
            self.emit(WalkEvent.done())
            self._finished = True
            logger.debug(
                "Walk done: %d directories, %d errors in %.3fs",
                len(self.visited), self.tracker.failures, self._elapsed,
            )
        finally:
            if self.queue is not None:
                self.queue.put_nowait(_CLOSED)

        return self.summary()

    async def events(self) -> AsyncIterator[WalkEvent]:
        """Yield queued events until the session closes.

        Requires the session to have been created with ``stream=True``
        and ``run`` to be scheduled concurrently.
        """
        if self.queue is None:
            raise RuntimeError("Session was created without an event stream")

        while True:
            item = await self.queue.get()
            if item is _CLOSED:
                return
            yield item

    def summary(self) -> WalkSummary:
        snapshot = self.tracker.snapshot()
        return WalkSummary(
            roots=list(self.roots),
            max_depth=self.max_depth,
            counts=dict(self.counts),
            directories_read=self.counts.get(WalkEventKind.DIRECTORY.value, 0),
            levels=self.manager.levels,
            reads=snapshot['reads'],
            inspections=snapshot['inspections'],
            errors=snapshot['failures'],
            peak_in_flight=snapshot['peak_pending'],
            elapsed=self._elapsed,
        )


class AsyncTreeWalker:
    """Concurrent breadth-first directory tree walker.

    Example:
        >>> walker = AsyncTreeWalker(WalkConfig(max_depth=2))
        >>> walker.on('file', lambda event: print(event.path))
        >>> summary = await walker.run('Felidae')
    """

    def __init__(
        self,
        config: Optional[WalkConfig] = None,
        adapter: Optional[AsyncDirectoryAdapter] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ):
        """Initialize the walker.

        Args:
            config: Walk configuration (defaults to WalkConfig())
            adapter: Directory source (defaults to the local filesystem,
                capped at config.max_concurrent operations)
            error_policy: Receives every failure (defaults to a
                ContinueOnErrorsPolicy that is reset before each walk)

        Raises:
            ValueError: If the configuration is invalid
        """
        self.config = config or WalkConfig()
        problems = self.config.validate()
        if problems:
            raise ValueError(f"Invalid walk configuration: {'; '.join(problems)}")

        self.adapter = adapter or AsyncFileSystemAdapter(max_concurrent=self.config.max_concurrent)
        # A policy the walker created itself is reset for every walk; one
        # passed in by the caller accumulates until the caller resets it.
        self._owns_policy = error_policy is None
        self.error_policy = error_policy or ContinueOnErrorsPolicy()
        self._listeners: Dict[WalkEventKind, List[Listener]] = defaultdict(list)

    def on(self, kind: Union[WalkEventKind, str], callback: Listener) -> Listener:
        """Register a callback for one event kind.

        Callbacks run synchronously on the event loop as events are
        produced. An exception raised by a callback aborts the walk and
        propagates to the caller of ``walk``/``run``.

        Args:
            kind: Event kind or its name ('file', 'directory', 'done', ...)
            callback: Called with the WalkEvent

        Returns:
            The callback, so ``on`` can be used as a plain registration
        """
        self._listeners[WalkEventKind(kind)].append(callback)
        return callback

    def off(self, kind: Union[WalkEventKind, str], callback: Listener) -> None:
        """Remove a previously registered callback."""
        callbacks = self._listeners.get(WalkEventKind(kind), [])
        if callback in callbacks:
            callbacks.remove(callback)

    def session(self, paths: Union[PathArg, Iterable[PathArg]], stream: bool = False) -> WalkSession:
        """Create a fresh session over the given roots."""
        if self._owns_policy:
            self.error_policy.reset()
        return WalkSession(
            normalize_paths(paths),
            self.config,
            self.adapter,
            self.error_policy,
            self._listeners,
            stream=stream,
        )

    async def run(self, paths: Union[PathArg, Iterable[PathArg]]) -> WalkSummary:
        """Walk to completion, delivering events to listeners only.

        Args:
            paths: One root path or an ordered iterable of roots

        Returns:
            Summary of the finished walk
        """
        return await self.session(paths).run()

    async def walk(self, paths: Union[PathArg, Iterable[PathArg]]) -> AsyncIterator[WalkEvent]:
        """Walk and stream every event, ending with ``done``.

        Listeners registered with ``on`` still fire. Breaking out of
        the loop early cancels the rest of the walk.

        Args:
            paths: One root path or an ordered iterable of roots

        Yields:
            WalkEvent objects as they are produced
        """
        session = self.session(paths, stream=True)
        task = asyncio.ensure_future(session.run())
        events = session.events()
        try:
            async for event in events:
                yield event
            # Re-raises a listener failure after the stream drains
            await task
        finally:
            await events.aclose()
            if not task.done():
                task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    def __repr__(self) -> str:
        return f"AsyncTreeWalker(max_depth={self.config.effective_max_depth}, adapter={self.adapter!r})"
