"""Event types emitted by the tree walker.

Every notification the walker produces is a WalkEvent tagged with a
WalkEventKind, so consumers can discriminate on an enum instead of
string event names.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class WalkEventKind(Enum):
    """Kinds of events produced during a walk."""
    DIRECTORY = "directory"    # A directory was listed successfully
    BLOCK = "block"            # Block device
    CHARACTER = "character"    # Character device
    DIR = "dir"                # Directory classification of an entry
    FIFO = "fifo"              # Named pipe
    FILE = "file"              # Regular file
    SOCKET = "socket"          # Unix domain socket
    ERROR = "error"            # Failed read or stat
    DONE = "done"              # Walk finished; always last

    @property
    def is_terminal_type(self) -> bool:
        """True for kinds produced by classifying an entry."""
        return self in TERMINAL_KINDS


TERMINAL_KINDS = frozenset({
    WalkEventKind.BLOCK,
    WalkEventKind.CHARACTER,
    WalkEventKind.DIR,
    WalkEventKind.FIFO,
    WalkEventKind.FILE,
    WalkEventKind.SOCKET,
})


@dataclass(frozen=True)
class WalkError:
    """A filesystem failure observed during a walk.

    Attributes:
        path: The path whose read or stat failed
        operation: 'list_directory' or 'inspect'
        error: The original exception
    """
    path: str
    operation: str
    error: BaseException = field(compare=False)

    @property
    def error_type(self) -> str:
        return type(self.error).__name__

    @property
    def error_message(self) -> str:
        return str(self.error)

    def as_dict(self) -> dict:
        """Flatten into the record format used by error policies."""
        return {
            'path': self.path,
            'method': self.operation,
            'error': self.error,
            'error_type': self.error_type,
            'error_message': self.error_message,
        }

    def __str__(self) -> str:
        return f"{self.operation} failed for '{self.path}': {self.error}"


@dataclass(frozen=True)
class WalkEvent:
    """A single notification from the walker.

    ``path`` is set for every kind except DONE; ``error`` only for ERROR.
    """
    kind: WalkEventKind
    path: Optional[str] = None
    error: Optional[WalkError] = None

    @classmethod
    def directory(cls, path: str) -> 'WalkEvent':
        return cls(WalkEventKind.DIRECTORY, path)

    @classmethod
    def entry(cls, kind: WalkEventKind, path: str) -> 'WalkEvent':
        return cls(kind, path)

    @classmethod
    def failure(cls, error: WalkError) -> 'WalkEvent':
        return cls(WalkEventKind.ERROR, error.path, error)

    @classmethod
    def done(cls) -> 'WalkEvent':
        return cls(WalkEventKind.DONE)

    def __repr__(self) -> str:
        if self.kind is WalkEventKind.DONE:
            return "WalkEvent(done)"
        return f"WalkEvent({self.kind.value}, {self.path!r})"
