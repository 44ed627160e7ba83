"""Custom exceptions for the Folder Organizer."""

from pathlib import Path
from typing import Optional


class OrganizerError(Exception):
    """Base exception for folder organizer errors."""
    pass


class InvalidTargetRoot(OrganizerError):
    """Raised when the directory to organize is missing or not a directory."""

    def __init__(self, path: Path):
        super().__init__(f"Not a directory: {path}")
        self.path = path


class WatchSetupError(OrganizerError):
    """Raised when the filesystem watch cannot be registered."""
    pass


class RelocationError(OrganizerError):
    """
    Raised when a child could not be moved into its category folder.

    The underlying ``OSError`` is available as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        source: Path,
        destination: Path,
        attempts: int = 1,
        cause: Optional[OSError] = None,
    ):
        super().__init__(message)
        self.source = source
        self.destination = destination
        self.attempts = attempts
        self.cause = cause


class TransientRelocationError(RelocationError):
    """Raised when a move kept failing with a lock or sharing violation."""
    pass


class PermanentRelocationError(RelocationError):
    """Raised when a move can never succeed as requested."""
    pass


class MoveInterrupted(OrganizerError):
    """Raised when cancellation is observed while a move is waiting."""
    pass
