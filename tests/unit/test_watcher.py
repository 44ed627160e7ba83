import errno
import threading

import pytest

pytest.importorskip("watchdog", reason="watchdog dependency is required for watcher tests")

from watchdog.events import DirCreatedEvent, DirDeletedEvent, FileCreatedEvent, FileMovedEvent

from domains.file_sorting.watchers import filesystem
from domains.file_sorting.watchers.filesystem import (
    FolderWatcher,
    OrganizerEventHandler,
    WatchEvent,
    WatchEventKind,
)


class PassCounter:
    def __init__(self):
        self.count = 0
        self.lock = threading.Lock()

    def __call__(self):
        with self.lock:
            self.count += 1


@pytest.fixture
def handler(root):
    events: list[WatchEvent] = []
    return OrganizerEventHandler(root, events.append), events


def test_handler_reports_direct_children(handler, root):
    event_handler, events = handler

    event_handler.on_created(FileCreatedEvent(str(root / "song.flac")))
    event_handler.on_created(DirCreatedEvent(str(root / "photos")))

    assert events == [
        WatchEvent(WatchEventKind.CREATED, "song.flac"),
        WatchEvent(WatchEventKind.CREATED, "photos"),
    ]


def test_handler_ignores_nested_entries(handler, root):
    event_handler, events = handler

    event_handler.on_created(FileCreatedEvent(str(root / "Images" / "a.jpg")))
    event_handler.on_moved(FileMovedEvent(str(root / "a.jpg"), str(root / "Images" / "a.jpg")))

    assert events == []


def test_handler_treats_rename_into_folder_as_creation(handler, root, tmp_path):
    event_handler, events = handler

    event_handler.on_moved(FileMovedEvent(str(tmp_path / "outside.pdf"), str(root / "report.pdf")))

    assert events == [WatchEvent(WatchEventKind.CREATED, "report.pdf")]


def test_handler_reports_loss_of_watched_folder(handler, root, tmp_path):
    event_handler, events = handler

    event_handler.on_deleted(DirDeletedEvent(str(root)))
    event_handler.on_moved(FileMovedEvent(str(root), str(tmp_path / "elsewhere")))

    assert [e.kind for e in events] == [WatchEventKind.INVALIDATED, WatchEventKind.INVALIDATED]


def start_without_observer(watcher, monkeypatch):
    monkeypatch.setattr(watcher, "arm", watcher.armed.set)
    watcher.start()


def test_loop_requests_one_pass_per_creation(root, monkeypatch, wait_for, log_messages):
    counter = PassCounter()
    watcher = FolderWatcher(root, counter)
    start_without_observer(watcher, monkeypatch)

    watcher.publish(WatchEvent(WatchEventKind.CREATED, "a.jpg"))
    watcher.publish(WatchEvent(WatchEventKind.CREATED, "b.jpg"))

    assert wait_for(lambda: counter.count == 2)
    assert "Detected new file or folder: a.jpg" in log_messages
    assert "Detected new file or folder: b.jpg" in log_messages

    watcher.stop(timeout=5)
    assert not watcher.is_alive()


def test_full_buffer_schedules_a_resync(root, monkeypatch, wait_for, log_messages):
    counter = PassCounter()
    watcher = FolderWatcher(root, counter, buffer_size=2)

    for name in ("a.jpg", "b.jpg", "c.jpg"):
        watcher.publish(WatchEvent(WatchEventKind.CREATED, name))
    start_without_observer(watcher, monkeypatch)

    # Two buffered creations plus one resync for the dropped event
    assert wait_for(lambda: counter.count == 3)
    assert "Detected new file or folder: c.jpg" not in log_messages
    assert any("overflowed" in message for message in log_messages)

    watcher.stop(timeout=5)


def test_loop_ends_when_folder_is_invalidated(root, monkeypatch, wait_for):
    counter = PassCounter()
    watcher = FolderWatcher(root, counter)
    start_without_observer(watcher, monkeypatch)

    watcher.publish(WatchEvent(WatchEventKind.INVALIDATED))

    assert wait_for(lambda: not watcher.is_alive())
    assert counter.count == 0


def test_setup_failure_is_logged_and_worker_exits(root, monkeypatch, wait_for, log_messages):
    class BrokenObserver:
        def schedule(self, *args, **kwargs):
            raise OSError(errno.ENOSPC, "inotify watch limit reached")

    monkeypatch.setattr(filesystem, "Observer", BrokenObserver)
    watcher = FolderWatcher(root, PassCounter())
    watcher.start()

    assert wait_for(lambda: not watcher.is_alive())
    assert not watcher.armed.is_set()
    assert "Error setting up watch service." in log_messages


def test_invalidation_ends_loop_even_when_buffer_is_full(root, monkeypatch, wait_for, log_messages):
    counter = PassCounter()
    watcher = FolderWatcher(root, counter, buffer_size=1)

    watcher.publish(WatchEvent(WatchEventKind.CREATED, "a.jpg"))
    watcher.publish(WatchEvent(WatchEventKind.INVALIDATED))
    start_without_observer(watcher, monkeypatch)

    assert wait_for(lambda: not watcher.is_alive())
    assert any("no longer available" in message for message in log_messages)
