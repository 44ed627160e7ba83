#!/usr/bin/env python3
"""
Folder Organizer - command line entry point.

Sorts the immediate children of one folder into category folders, then
keeps watching it and sorts every new child as it appears.
"""

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from domains.file_sorting.supervisor import Supervisor
from organizer.exceptions import InvalidTargetRoot
from organizer.utils.config import Settings, get_settings
from organizer.utils.helpers import validate_target_root

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(settings: Settings):
    """Replace loguru's default sink with the organizer's console format."""
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=settings.log_level)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(
        description="Sort a folder's files into category folders and keep it sorted.",
    )
    parser.add_argument(
        "folder",
        type=Path,
        help="Folder to organize and monitor.",
    )

    return parser.parse_args(argv)


def run(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI."""

    args = parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    configure_logging(settings)

    logger.info(f"Monitoring folder: {args.folder}")
    try:
        root = validate_target_root(args.folder)
    except InvalidTargetRoot:
        logger.error("Invalid folder path.")
        return 1

    supervisor = Supervisor(root, settings)
    stop_event = threading.Event()

    def _signal_handler(signum, frame):  # noqa: D401
        logger.info(f"Received signal {signum}, shutting down.")
        stop_event.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    supervisor.start()

    try:
        while not stop_event.wait(1.0):
            if not supervisor.watching():
                break
    finally:
        if stop_event.is_set():
            supervisor.stop()
        else:
            # Watcher ended on its own; finish the passes it already queued
            supervisor.stop(drain=True)

    if not stop_event.is_set():
        logger.error(f"Stopped watching {root}")
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(run())
