"""Async event collectors for tree walks.

Collectors sit on the consumer side of the walker: they subscribe to
the event stream and aggregate it (sorted path lists, counts). The
walker itself never aggregates anything.
"""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Union

from ...events import WalkError, WalkEvent, WalkEventKind


class AsyncEventCollector(ABC):
    """Abstract base class for async event collectors.

    Collectors process events during a walk to extract specific
    information. They can maintain state and aggregate data.
    """

    def __init__(self):
        """Initialize collector with empty state."""
        self.reset()

    @abstractmethod
    async def collect(self, event: WalkEvent) -> Any:
        """Collect data from a single event.

        Args:
            event: Event to collect from

        Returns:
            Collected data (type depends on collector)
        """
        pass

    @abstractmethod
    def reset(self):
        """Reset collector state.

        Called before starting a new walk.
        """
        pass

    @abstractmethod
    def get_result(self) -> Any:
        """Get final collected result.

        Returns:
            Aggregated collection result
        """
        pass

    async def process_stream(self, events: AsyncIterator[WalkEvent]) -> Any:
        """Process an entire stream of events.

        Args:
            events: Async iterator of events, e.g. ``walker.walk(...)``

        Returns:
            Final collected result
        """
        self.reset()

        async for event in events:
            await self.collect(event)

        return self.get_result()


class PathCollector(AsyncEventCollector):
    """Collects paths grouped by event kind.

    Results are sorted so walks can be compared regardless of the order
    in which concurrent operations finished.
    """

    def __init__(self, kinds: Optional[Iterable[Union[WalkEventKind, str]]] = None):
        """Initialize path collector.

        Args:
            kinds: Kinds to keep (default: every kind that carries a path
                except errors)
        """
        if kinds is None:
            self.kinds = {kind for kind in WalkEventKind
                          if kind not in (WalkEventKind.ERROR, WalkEventKind.DONE)}
        else:
            self.kinds = {WalkEventKind(kind) for kind in kinds}
        super().__init__()

    def reset(self):
        """Reset collected paths."""
        self.paths: Dict[WalkEventKind, List[str]] = {kind: [] for kind in self.kinds}
        self.errors: List[WalkError] = []
        self.done = False

    async def collect(self, event: WalkEvent) -> Optional[str]:
        """Record the event's path if its kind is selected.

        Errors are always kept in ``self.errors``.
        """
        if event.kind is WalkEventKind.DONE:
            self.done = True
            return None
        if event.kind is WalkEventKind.ERROR:
            self.errors.append(event.error)
            return None
        if event.kind in self.kinds:
            self.paths[event.kind].append(event.path)
            return event.path
        return None

    def get_result(self) -> Dict[WalkEventKind, List[str]]:
        """Get sorted paths per kind."""
        return {kind: sorted(paths) for kind, paths in self.paths.items()}

    def get_paths(self, kind: Union[WalkEventKind, str]) -> List[str]:
        """Get sorted paths of one kind."""
        return sorted(self.paths.get(WalkEventKind(kind), []))


class EventCountCollector(AsyncEventCollector):
    """Counts events per kind."""

    def reset(self):
        """Reset counters."""
        self.counts: Counter = Counter()

    async def collect(self, event: WalkEvent) -> int:
        self.counts[event.kind.value] += 1
        return self.counts[event.kind.value]

    def get_result(self) -> Dict[str, int]:
        """Get counts keyed by kind name."""
        return dict(self.counts)
