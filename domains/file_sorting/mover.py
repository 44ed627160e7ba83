"""
Move executor for the File Sorting domain.

Relocates a single child with rename semantics under one of two policies:
retry on transient failures, or wait briefly and move once. All waits are
made on a cancellation event so a shutdown interrupts them.
"""

import errno
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from organizer.exceptions import (
    MoveInterrupted,
    PermanentRelocationError,
    TransientRelocationError,
)
from organizer.utils.config import Settings

from .classifier import MovePolicy

# Source gone, cross-device, or a destination that rename will never replace
_PERMANENT_ERRNOS = {
    errno.ENOENT,
    errno.EXDEV,
    errno.ENOTEMPTY,
    errno.EEXIST,
    errno.EISDIR,
    errno.ENOTDIR,
}

# ERROR_ACCESS_DENIED, ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
_TRANSIENT_WINERRORS = {5, 32, 33}


@dataclass(frozen=True, slots=True)
class MoveTask:
    """A single relocation request."""

    source: Path
    destination: Path
    policy: MovePolicy


def is_transient(error: OSError) -> bool:
    """
    Check whether a failed rename is worth retrying.

    Windows reports a file still held open by its writer as a sharing or
    access violation; those are transient. Permission denial elsewhere and
    the errnos in ``_PERMANENT_ERRNOS`` are permanent. Anything else is
    treated as transient.
    """
    if getattr(error, "winerror", None) in _TRANSIENT_WINERRORS:
        return True
    if isinstance(error, PermissionError):
        return False
    return error.errno not in _PERMANENT_ERRNOS


class MoveExecutor:
    """Performs rename-style relocations with a retry or delay policy."""

    def __init__(
        self,
        max_attempts: int = 3,
        retry_delay: float = 1.0,
        move_delay: float = 0.5,
        cancel: Optional[threading.Event] = None,
        rename: Callable[[Path, Path], None] = os.replace,
    ):
        """
        Initialize move executor.

        Args:
            max_attempts: Rename attempts allowed under the retry policy
            retry_delay: Seconds to wait between retry attempts
            move_delay: Seconds to wait before a delayed move
            cancel: Event that interrupts any wait when set
            rename: Rename primitive, replacing an existing destination file
        """
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.move_delay = move_delay
        self.cancel = cancel or threading.Event()
        self.rename = rename

    @classmethod
    def from_settings(cls, settings: Settings, cancel: threading.Event) -> "MoveExecutor":
        """Build an executor from application settings."""
        return cls(
            max_attempts=settings.max_retries,
            retry_delay=settings.retry_delay,
            move_delay=settings.move_delay,
            cancel=cancel,
        )

    def execute(self, task: MoveTask) -> None:
        """
        Relocate ``task.source`` to ``task.destination``.

        Raises:
            TransientRelocationError: Lock or sharing violations persisted
            PermanentRelocationError: The move cannot succeed
            MoveInterrupted: Cancellation was observed during a wait
        """
        if task.policy is MovePolicy.RETRY_ONLY:
            self._move_with_retry(task)
        else:
            self._move_with_delay(task)

    def _wait(self, seconds: float, reason: str):
        if self.cancel.wait(seconds):
            raise MoveInterrupted(reason)

    def _move_with_retry(self, task: MoveTask):
        for attempt in range(1, self.max_attempts + 1):
            try:
                self.rename(task.source, task.destination)
                return
            except OSError as e:
                if not is_transient(e):
                    raise PermanentRelocationError(
                        f"Cannot move {task.source} to {task.destination}: {e}",
                        task.source,
                        task.destination,
                        attempts=attempt,
                        cause=e,
                    ) from e

                if attempt >= self.max_attempts:
                    raise TransientRelocationError(
                        f"Failed to move file after {self.max_attempts} attempts",
                        task.source,
                        task.destination,
                        attempts=attempt,
                        cause=e,
                    ) from e

                logger.debug(f"Move attempt {attempt} failed for {task.source.name}: {e}")
                self._wait(self.retry_delay, "Interrupted while waiting to retry file move")

    def _move_with_delay(self, task: MoveTask):
        self._wait(self.move_delay, "Interrupted while waiting to move file")

        try:
            self.rename(task.source, task.destination)
        except OSError as e:
            error_class = TransientRelocationError if is_transient(e) else PermanentRelocationError
            raise error_class(
                f"Cannot move {task.source} to {task.destination}: {e}",
                task.source,
                task.destination,
                cause=e,
            ) from e
