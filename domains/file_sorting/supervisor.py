"""
Supervisor for the File Sorting domain.

Owns the two long-lived workers: the organizer worker, the only thread that
ever moves anything, and the watcher worker, which only queues passes.
Passes run one at a time in submission order.
"""

import queue
import threading
from pathlib import Path
from typing import Optional

from loguru import logger

from organizer.exceptions import MoveInterrupted
from organizer.utils.config import Settings, get_settings

from .extensions import build_skip_set
from .mover import MoveExecutor
from .organizer import FolderOrganizer, PassReport
from .watchers.filesystem import FolderWatcher

_PASS = "pass"
_STOP = None


class Supervisor:
    """Serializes organizer passes for one folder and keeps it watched."""

    def __init__(
        self,
        root: Path,
        settings: Optional[Settings] = None,
        executor: Optional[MoveExecutor] = None,
    ):
        """
        Initialize supervisor.

        Args:
            root: Validated folder to organize
            settings: Application settings (defaults to cached settings)
            executor: Move executor; its cancel event becomes the shutdown signal
        """
        self.root = root
        self.settings = settings or get_settings()

        self.cancel = executor.cancel if executor else threading.Event()
        self.executor = executor or MoveExecutor.from_settings(self.settings, self.cancel)

        self.organizer = FolderOrganizer(
            root,
            self.executor,
            move_folders=self.settings.move_folders,
            skip_set=build_skip_set(),
        )
        self.watcher = FolderWatcher(
            root,
            self.submit_pass,
            buffer_size=self.settings.event_buffer_size,
        )

        self.passes: queue.Queue[Optional[str]] = queue.Queue(maxsize=self.settings.pass_queue_size)
        self.passes_run = 0
        self.last_report: Optional[PassReport] = None
        self._worker = threading.Thread(
            target=self._run_worker, name="organizer-worker", daemon=True
        )

    def start(self):
        """Start both workers, then queue the initial pass."""
        self._worker.start()
        self.watcher.start()
        self.submit_pass()

    def submit_pass(self):
        """Queue one organizer pass."""
        if self.cancel.is_set():
            return

        try:
            self.passes.put_nowait(_PASS)
        except queue.Full:
            # A queued pass that has not started yet will see the new child
            logger.debug("Pass queue full, relying on pending pass")

    def watching(self) -> bool:
        """Check whether the watch loop is still running."""
        return self.watcher.is_alive()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the organizer worker to exit.

        Returns:
            True if the worker has exited
        """
        if self._worker.ident is not None:
            self._worker.join(timeout)
        return not self._worker.is_alive()

    def stop(self, drain: bool = False, timeout: Optional[float] = None):
        """
        Shut down both workers.

        Args:
            drain: Run passes already queued before exiting instead of
                abandoning them and interrupting any waiting move
            timeout: Maximum seconds to wait for each worker
        """
        self.watcher.stop(timeout)

        if drain:
            try:
                self.passes.put(_STOP, timeout=timeout)
            except queue.Full:
                logger.warning("Pass queue still full, abandoning queued passes")
            else:
                self.wait(timeout)
                self.cancel.set()
                return

        self.cancel.set()
        self._discard_pending()
        try:
            self.passes.put_nowait(_STOP)
        except queue.Full:
            # Worker checks the cancel event after every token
            pass
        self.wait(timeout)
        logger.info("Organizer stopped")

    def run_pass(self) -> PassReport:
        """Run one pass on the calling thread; used by the organizer worker."""
        report = self.organizer.organize()
        self.last_report = report
        self.passes_run += 1
        return report

    def _run_worker(self):
        while True:
            token = self.passes.get()
            try:
                if token is _STOP or self.cancel.is_set():
                    break
                self.run_pass()
            except MoveInterrupted as e:
                logger.info(f"Organizer pass interrupted: {e}")
                break
            except Exception:
                logger.exception("Organizer pass failed")
            finally:
                self.passes.task_done()

    def _discard_pending(self):
        while True:
            try:
                self.passes.get_nowait()
            except queue.Empty:
                return
            self.passes.task_done()
