"""Entry classification from stat results.

Maps each event kind to the ``stat`` module predicate that decides it.
Classification is not mutually exclusive: an entry is reported under
every kind whose predicate holds.
"""

import os
import stat as stat_module  # To avoid name collision with stat results
from typing import Callable, Dict, List

from ...events import WalkEventKind


# Ordered; events for one entry are emitted in this order.
TYPE_PREDICATES: Dict[WalkEventKind, Callable[[int], bool]] = {
    WalkEventKind.BLOCK: stat_module.S_ISBLK,
    WalkEventKind.CHARACTER: stat_module.S_ISCHR,
    WalkEventKind.DIR: stat_module.S_ISDIR,
    WalkEventKind.FIFO: stat_module.S_ISFIFO,
    WalkEventKind.FILE: stat_module.S_ISREG,
    WalkEventKind.SOCKET: stat_module.S_ISSOCK,
}


def classify(stat: os.stat_result) -> List[WalkEventKind]:
    """Get every kind the stat result satisfies.

    Args:
        stat: Result of a successful stat call

    Returns:
        Matching kinds in TYPE_PREDICATES order (possibly empty for
        types the platform reports that none of the predicates cover)
    """
    mode = stat.st_mode
    return [kind for kind, predicate in TYPE_PREDICATES.items() if predicate(mode)]


def is_directory(stat: os.stat_result) -> bool:
    """Check whether an entry extends the frontier."""
    return stat_module.S_ISDIR(stat.st_mode)
