"""Asynchronous implementation of ftwalk.

This package contains the asyncio walker. Directory reads and stat
calls run concurrently in worker threads while all traversal state
lives on the event loop.
"""

# Core abstractions (must load before adapters)
from .core import (
    AsyncDirectoryAdapter,
    AsyncTreeWalker,
    WalkSession,
    WalkSummary,
    FrontierManager,
    VisitedSet,
    CompletionTracker,
    classify,
    is_directory,
    AsyncEventCollector,
    PathCollector,
    EventCountCollector,
)

# Adapters
from .adapters import AsyncFileSystemAdapter

# Error policies
from .error_policies import (
    ErrorPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
)

# High-level API
from .api import (
    WalkResult,
    walk_tree,
    collect_walk,
    find_files,
    find_directories,
    count_entries,
)

__all__ = [
    # Core abstractions
    'AsyncDirectoryAdapter',
    'AsyncTreeWalker',
    'WalkSession',
    'WalkSummary',
    'FrontierManager',
    'VisitedSet',
    'CompletionTracker',
    'classify',
    'is_directory',
    # Collectors
    'AsyncEventCollector',
    'PathCollector',
    'EventCountCollector',
    # Adapters
    'AsyncFileSystemAdapter',
    # Error policies
    'ErrorPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    # High-level API
    'WalkResult',
    'walk_tree',
    'collect_walk',
    'find_files',
    'find_directories',
    'count_entries',
]
