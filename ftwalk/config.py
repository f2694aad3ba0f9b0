"""Configuration system for ftwalk.

This module defines how callers specify a walk: how deep to descend
and how many filesystem operations may be outstanding at once.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional


DEFAULT_MAX_DEPTH = 10
DEFAULT_MAX_CONCURRENT = 100


@dataclass
class WalkConfig:
    """Complete configuration for a tree walk.

    Root paths are depth 0. A directory discovered while processing
    depth d is only read when d < max_depth, so a walk performs at most
    ``max_depth + 1`` levels of directory reads.
    """

    max_depth: Optional[int] = DEFAULT_MAX_DEPTH   # None/negative -> default
    max_concurrent: Optional[int] = DEFAULT_MAX_CONCURRENT  # None -> unbounded

    @property
    def effective_max_depth(self) -> int:
        """Depth budget actually used by the walker.

        Returns:
            max_depth, or DEFAULT_MAX_DEPTH when unset or negative
        """
        if self.max_depth is None or self.max_depth < 0:
            return DEFAULT_MAX_DEPTH
        return self.max_depth

    # Convenience constructors for common configurations

    @classmethod
    def shallow(cls, max_depth: int = 0) -> 'WalkConfig':
        """Create config that only lists the roots (or a few levels).

        Args:
            max_depth: How many levels below the roots to read

        Returns:
            WalkConfig for shallow walks
        """
        return cls(max_depth=max_depth)

    @classmethod
    def unbounded_concurrency(cls, max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> 'WalkConfig':
        """Create config without a cap on outstanding I/O.

        Wide trees can exhaust file descriptors with this setting.
        """
        return cls(max_depth=max_depth, max_concurrent=None)

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> 'WalkConfig':
        """Build a config from a plain options mapping.

        Recognizes ``max_depth`` (or the older ``depth`` key) and
        ``max_concurrent``. Unknown keys are ignored.

        Args:
            options: Mapping of option names to values, or None

        Returns:
            WalkConfig populated from the mapping
        """
        if not options:
            return cls()

        max_depth = options.get('max_depth', options.get('depth', DEFAULT_MAX_DEPTH))
        max_concurrent = options.get('max_concurrent', DEFAULT_MAX_CONCURRENT)
        return cls(max_depth=max_depth, max_concurrent=max_concurrent)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        A negative max_depth is not an error; it falls back to the default.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.max_depth is not None and not isinstance(self.max_depth, int):
            errors.append("max_depth must be an integer")

        if self.max_concurrent is not None:
            if not isinstance(self.max_concurrent, int):
                errors.append("max_concurrent must be an integer")
            elif self.max_concurrent <= 0:
                errors.append("max_concurrent must be positive")

        return errors
