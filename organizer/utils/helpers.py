"""
Helper utilities for the Folder Organizer.

Common path functions used across domains.
"""

import os
from pathlib import Path

from organizer.exceptions import InvalidTargetRoot


def normalise_path(path: Path) -> Path:
    """Return a resolved version of ``path`` without forcing existence."""

    try:
        return path.expanduser().resolve()
    except (FileNotFoundError, RuntimeError):
        return path.expanduser().absolute()


def validate_target_root(path: Path) -> Path:
    """
    Resolve and validate the directory to organize.

    Args:
        path: User supplied directory path

    Returns:
        Absolute, resolved directory path

    Raises:
        InvalidTargetRoot: If the path is missing or not a directory
    """
    root = normalise_path(path)
    if not root.exists() or not root.is_dir():
        raise InvalidTargetRoot(root)
    return root


def file_extension(name: str) -> str:
    """
    Get the extension of a file name, without the dot.

    The extension is the text after the final dot. A dot at position 0
    marks a hidden file rather than an extension, so ``.gitignore`` has
    none.
    """
    index = name.rfind('.')
    if index <= 0:
        return ""
    return name[index + 1:]


def child_name(path: str) -> str:
    """Return the final component of a watched path as text."""
    return os.path.basename(os.fsdecode(path).rstrip(os.sep))


def is_direct_child(path: str, root: Path) -> bool:
    """Check whether ``path`` sits immediately inside ``root``."""
    parent = os.path.dirname(os.fsdecode(path).rstrip(os.sep))
    return normalise_path(Path(parent)) == root
