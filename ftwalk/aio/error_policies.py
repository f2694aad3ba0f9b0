"""
Error handling policies for ftwalk.

Every failed directory read or stat is always delivered to consumers as
an ``error`` event. In addition the walker hands each failure to an
ErrorPolicy, which decides what else happens: logging, collection for a
later report, or both. Policies observe failures; they never stop a walk.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..events import WalkError

logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for handling failures
    that occur during filesystem operations.
    """

    @abstractmethod
    async def handle(self, error: WalkError) -> None:
        """
        Handle a failure that occurred during a walk.

        Args:
            error: The failed path, the operation and the original exception
        """
        pass

    def reset(self) -> None:
        """Forget failures recorded by a previous walk."""
        pass


class _RecordingPolicy(ErrorPolicy):
    """Shared bookkeeping for policies that keep failure records."""

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[str] = []

    def reset(self) -> None:
        self.errors = []
        self.skipped_paths = []

    def _record(self, error: WalkError) -> None:
        self.errors.append(error.as_dict())

        # Directories we could not list are skipped subtrees
        if error.operation == 'list_directory' or isinstance(error.error, PermissionError):
            self.skipped_paths.append(error.path)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'permission_errors': sum(1 for e in self.errors if e['error_type'] == 'PermissionError'),
            'not_found_errors': sum(1 for e in self.errors if e['error_type'] == 'FileNotFoundError'),
            'os_errors': sum(1 for e in self.errors if isinstance(e['error'], OSError)),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors  # Full error details
        }


class ContinueOnErrorsPolicy(_RecordingPolicy):
    """
    Policy that logs errors and keeps going.

    This is the default. Errors are collected for later inspection and,
    when verbose, logged as warnings.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every error
        """
        super().__init__()
        self.verbose = verbose

    async def handle(self, error: WalkError) -> None:
        self._record(error)

        if not self.verbose:
            return

        if isinstance(error.error, PermissionError):
            logger.warning("Skipping inaccessible path '%s': %s", error.path, error.error)
        else:
            logger.warning("Error in %s for '%s': %s", error.operation, error.path, error.error)


class CollectErrorsPolicy(_RecordingPolicy):
    """
    Policy that collects all errors without logging, for batch processing.

    Useful for collecting all errors and presenting them at the end.
    """

    async def handle(self, error: WalkError) -> None:
        """Silently collect the error."""
        self._record(error)
