"""
File system watcher for the File Sorting domain.

Watches the organized folder (non-recursively) for new children and asks
for an organizer pass each time one appears. Uses watchdog library for
cross-platform file system event monitoring.
"""

import queue
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from organizer.exceptions import WatchSetupError
from organizer.utils.helpers import child_name, is_direct_child, normalise_path


class WatchEventKind(str, Enum):
    """Kinds of events delivered to the watch loop."""

    CREATED = "created"
    OVERFLOW = "overflow"
    INVALIDATED = "invalidated"


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """A child creation, a buffer overflow, or loss of the watched folder."""

    kind: WatchEventKind
    name: str = ""


class OrganizerEventHandler(FileSystemEventHandler):
    """Translates watchdog events into watch loop events."""

    def __init__(self, root: Path, publish: Callable[[WatchEvent], None]):
        """
        Initialize event handler.

        Args:
            root: Watched folder
            publish: Callback receiving translated events
        """
        super().__init__()
        self.root = root
        self.publish = publish

    def _is_root(self, path: str) -> bool:
        return normalise_path(Path(path)) == self.root

    def on_created(self, event: FileSystemEvent):
        """Handle file/directory creation."""
        if is_direct_child(event.src_path, self.root):
            self.publish(WatchEvent(WatchEventKind.CREATED, child_name(event.src_path)))

    def on_moved(self, event: FileSystemEvent):
        """Handle entries renamed into the folder, or the folder itself moving."""
        if self._is_root(event.src_path):
            self.publish(WatchEvent(WatchEventKind.INVALIDATED))
            return

        # A child renamed into place appears to us like a newly created one
        if is_direct_child(event.dest_path, self.root):
            self.publish(WatchEvent(WatchEventKind.CREATED, child_name(event.dest_path)))

    def on_deleted(self, event: FileSystemEvent):
        """Handle deletion of the watched folder itself."""
        if self._is_root(event.src_path):
            self.publish(WatchEvent(WatchEventKind.INVALIDATED))


class FolderWatcher:
    """Runs the watch loop for one folder on a dedicated thread."""

    def __init__(
        self,
        root: Path,
        request_pass: Callable[[], None],
        buffer_size: int = 256,
    ):
        """
        Initialize folder watcher.

        Args:
            root: Folder to watch
            request_pass: Called once per detected child, and after an overflow
            buffer_size: Maximum number of undelivered events
        """
        self.root = root
        self.request_pass = request_pass

        self.events: queue.Queue[Optional[WatchEvent]] = queue.Queue(maxsize=buffer_size)
        self.event_handler = OrganizerEventHandler(root, self.publish)
        self.observer: Optional[Observer] = None

        self.armed = threading.Event()
        self._overflowed = threading.Event()
        self._invalidated = threading.Event()
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self.run, name="watcher-worker", daemon=True)

    def publish(self, event: WatchEvent):
        """Buffer an event for the loop, flagging an overflow when full.

        Loss of the watched folder is recorded outside the buffer so a full
        buffer cannot hide it; only a wake-up is queued for it.
        """
        if event.kind is WatchEventKind.INVALIDATED:
            self._invalidated.set()
            try:
                self.events.put_nowait(None)
            except queue.Full:
                # The loop is not blocked while events are pending
                pass
            return

        try:
            self.events.put_nowait(event)
        except queue.Full:
            self._overflowed.set()

    def arm(self):
        """
        Register the watch and start the observer.

        Raises:
            WatchSetupError: If the platform refuses the watch
        """
        observer = Observer()
        try:
            observer.schedule(self.event_handler, str(self.root), recursive=False)
            observer.daemon = True
            observer.start()
        except OSError as e:
            raise WatchSetupError(f"Error setting up watch on {self.root}: {e}") from e

        self.observer = observer
        self.armed.set()
        logger.debug(f"Started watching: {self.root}")

    def start(self):
        """Start the watch loop thread."""
        self._thread.start()

    def run(self):
        """Arm the watch and deliver events until stopped or invalidated."""
        try:
            self.arm()
        except WatchSetupError:
            logger.exception("Error setting up watch service.")
            return

        try:
            self._loop()
        finally:
            self._stop_observer()

    def _loop(self):
        while not self._stopped.is_set():
            if self._invalidated.is_set():
                logger.warning(f"Watched folder is no longer available: {self.root}")
                break

            event = self.events.get()
            if event is None:
                continue

            if self._overflowed.is_set():
                self._overflowed.clear()
                self._handle(WatchEvent(WatchEventKind.OVERFLOW))

            self._handle(event)

    def _handle(self, event: WatchEvent):
        if event.kind is WatchEventKind.OVERFLOW:
            logger.warning("Watch event buffer overflowed, scheduling a full pass")
        else:
            logger.info(f"Detected new file or folder: {event.name}")

        self.request_pass()

    def stop(self, timeout: Optional[float] = None):
        """Stop the loop and the observer."""
        self._stopped.set()
        try:
            self.events.put_nowait(None)
        except queue.Full:
            # The loop is not blocked while events are pending
            pass

        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        """Check whether the watch loop thread is running."""
        return self._thread.is_alive()

    def _stop_observer(self):
        if self.observer is None:
            return
        self.observer.stop()
        self.observer.join()
        logger.debug("File system observer stopped")
