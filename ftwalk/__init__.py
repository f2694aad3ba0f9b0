"""ftwalk - Concurrent File Tree Walker.

ftwalk walks one or more directory trees breadth-first, classifies every
entry it finds and reports entries and errors as a stream of events while
directory reads and stat calls run concurrently.

Usage:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from ftwalk.aio import AsyncTreeWalker

    walker = AsyncTreeWalker()
    async for event in walker.walk(["Felidae", "Felidae/Lynx"]):
        print(event.kind.value, event.path)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

import logging

from .config import WalkConfig, DEFAULT_MAX_DEPTH, DEFAULT_MAX_CONCURRENT
from .events import WalkEvent, WalkEventKind, WalkError
from . import aio

__version__ = "0.1.0"

# Library code never configures handlers; applications do.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "aio",
    "WalkConfig",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_CONCURRENT",
    "WalkEvent",
    "WalkEventKind",
    "WalkError",
]
