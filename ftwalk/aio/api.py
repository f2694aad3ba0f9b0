"""High-level async API for ftwalk.

This module provides simple functions for common walks. They are thin
consumers of AsyncTreeWalker: each builds a walker, subscribes to its
event stream and aggregates the result.
"""

import os
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, Iterable, List, Optional, Union

from ..config import DEFAULT_MAX_CONCURRENT, DEFAULT_MAX_DEPTH, WalkConfig
from ..events import WalkError, WalkEvent, WalkEventKind
from .core import AsyncTreeWalker, EventCountCollector, PathCollector
from .error_policies import CollectErrorsPolicy, ErrorPolicy

PathArg = Union[str, os.PathLike]
Roots = Union[PathArg, Iterable[PathArg]]


@dataclass
class WalkResult:
    """Sorted outcome of a complete walk."""
    files: List[str] = field(default_factory=list)
    directories: List[str] = field(default_factory=list)
    others: Dict[str, List[str]] = field(default_factory=dict)  # block, fifo, ...
    errors: List[WalkError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _make_walker(
    max_depth: Optional[int],
    max_concurrent: Optional[int],
    error_policy: Optional[ErrorPolicy],
) -> AsyncTreeWalker:
    config = WalkConfig(max_depth=max_depth, max_concurrent=max_concurrent)
    return AsyncTreeWalker(config, error_policy=error_policy or CollectErrorsPolicy())


async def walk_tree(
    paths: Roots,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_concurrent: Optional[int] = DEFAULT_MAX_CONCURRENT,
    error_policy: Optional[ErrorPolicy] = None,
) -> AsyncIterator[WalkEvent]:
    """Walk one or more trees and stream every event.

    Args:
        paths: Root directory or ordered list of roots
        max_depth: Levels to read below the roots (None/negative -> 10)
        max_concurrent: Maximum concurrent I/O operations (None for no cap)
        error_policy: Receives every failure (default collects silently)

    Yields:
        WalkEvent objects, ending with ``done``

    Example:
        >>> async for event in walk_tree('Felidae', max_depth=1):
        ...     print(event.kind.value, event.path)
    """
    walker = _make_walker(max_depth, max_concurrent, error_policy)
    async for event in walker.walk(paths):
        yield event


async def collect_walk(
    paths: Roots,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_concurrent: Optional[int] = DEFAULT_MAX_CONCURRENT,
    error_policy: Optional[ErrorPolicy] = None,
) -> WalkResult:
    """Walk to completion and return everything found, sorted.

    Args:
        paths: Root directory or ordered list of roots
        max_depth: Levels to read below the roots
        max_concurrent: Maximum concurrent I/O operations
        error_policy: Receives every failure

    Returns:
        WalkResult with sorted paths per kind and the errors seen
    """
    collector = PathCollector()
    found = await collector.process_stream(
        walk_tree(paths, max_depth, max_concurrent, error_policy)
    )

    others = {
        kind.value: found[kind]
        for kind in (WalkEventKind.BLOCK, WalkEventKind.CHARACTER,
                     WalkEventKind.FIFO, WalkEventKind.SOCKET)
        if found[kind]
    }
    return WalkResult(
        files=found[WalkEventKind.FILE],
        directories=found[WalkEventKind.DIRECTORY],
        others=others,
        errors=collector.errors,
    )


async def find_files(
    paths: Roots,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_concurrent: Optional[int] = DEFAULT_MAX_CONCURRENT,
) -> List[str]:
    """Get the sorted paths of every regular file within the depth budget."""
    collector = PathCollector(kinds=[WalkEventKind.FILE])
    await collector.process_stream(walk_tree(paths, max_depth, max_concurrent))
    return collector.get_paths(WalkEventKind.FILE)


async def find_directories(
    paths: Roots,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_concurrent: Optional[int] = DEFAULT_MAX_CONCURRENT,
) -> List[str]:
    """Get the sorted paths of every directory that was listed."""
    collector = PathCollector(kinds=[WalkEventKind.DIRECTORY])
    await collector.process_stream(walk_tree(paths, max_depth, max_concurrent))
    return collector.get_paths(WalkEventKind.DIRECTORY)


async def count_entries(
    paths: Roots,
    max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    max_concurrent: Optional[int] = DEFAULT_MAX_CONCURRENT,
) -> Dict[str, int]:
    """Count events per kind ('file', 'directory', 'error', 'done', ...)."""
    collector = EventCountCollector()
    return await collector.process_stream(walk_tree(paths, max_depth, max_concurrent))
