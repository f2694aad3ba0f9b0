"""Core abstractions for async tree walking.

This module defines the walker, its frontier processing, entry
classification, the adapter interface and consumer-side collectors.
"""

from .adapter import AsyncDirectoryAdapter
from .classifier import TYPE_PREDICATES, classify, is_directory
from .frontier import CompletionTracker, FrontierManager, VisitedSet, gather_all
from .walker import AsyncTreeWalker, WalkSession, WalkSummary, normalize_paths
from .collector import (
    AsyncEventCollector,
    PathCollector,
    EventCountCollector,
)

__all__ = [
    # Adapter
    'AsyncDirectoryAdapter',
    # Classification
    'TYPE_PREDICATES',
    'classify',
    'is_directory',
    # Frontier
    'CompletionTracker',
    'FrontierManager',
    'VisitedSet',
    'gather_all',
    # Walker
    'AsyncTreeWalker',
    'WalkSession',
    'WalkSummary',
    'normalize_paths',
    # Collectors
    'AsyncEventCollector',
    'PathCollector',
    'EventCountCollector',
]
