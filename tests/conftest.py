"""Shared fixtures for the Folder Organizer test suite."""

import sys
import time
from pathlib import Path
from typing import Callable

import pytest
from loguru import logger

# Add project root to path to allow absolute imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from organizer.utils.config import Settings
from organizer.utils.helpers import normalise_path


@pytest.fixture
def log_messages():
    """Collect every loguru message emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
        format="{message}",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def root(tmp_path) -> Path:
    """A resolved, empty folder to organize."""
    target = tmp_path / "target"
    target.mkdir()
    return normalise_path(target)


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with the move delays cut down for tests."""
    return Settings(retry_delay_ms=10, move_delay_ms=10)


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Poll a predicate until it holds or the timeout expires."""

    def _wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.05) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait_for
