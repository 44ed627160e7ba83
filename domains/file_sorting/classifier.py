"""
Child classifier for the File Sorting domain.

Decides, for one immediate child of the organized folder, which category
folder it belongs in and which move policy applies. Pure apart from the
single stat performed when a child is read from disk.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from organizer.utils.helpers import file_extension

from .extensions import (
    EXTENSION_MAP,
    FOLDERS_CATEGORY,
    SKIP_SET,
    ZIP_EXTENSION,
    category_for_extension,
)


class ChildKind(str, Enum):
    """Kind of a directory entry."""

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


class MovePolicy(str, Enum):
    """How a relocation is carried out."""

    RETRY_ONLY = "retry-only"
    DELAY_THEN_MOVE = "delay-then-move"


@dataclass(frozen=True, slots=True)
class Child:
    """An immediate entry of the organized folder."""

    path: Path
    name: str
    kind: ChildKind

    @property
    def extension(self) -> str:
        """Lowercased extension for regular files, empty otherwise."""
        if self.kind is not ChildKind.FILE:
            return ""
        return file_extension(self.name).lower()

    @classmethod
    def from_path(cls, path: Path) -> "Child":
        """Build a child from a path, following symlinks like ``stat``."""
        if path.is_dir():
            kind = ChildKind.DIRECTORY
        elif path.is_file():
            kind = ChildKind.FILE
        else:
            kind = ChildKind.OTHER
        return cls(path=path, name=path.name, kind=kind)


@dataclass(frozen=True, slots=True)
class Relocate:
    """Move the child into ``category`` using ``policy``.

    ``label`` is the word used for the child in log lines.
    """

    category: str
    policy: MovePolicy
    label: str


def classify(
    child: Child,
    move_folders: bool,
    skip_set: frozenset[str] = SKIP_SET,
    extension_map: Mapping[str, str] = EXTENSION_MAP,
) -> Optional[Relocate]:
    """
    Classify a child of the organized folder.

    Args:
        child: Entry to classify
        move_folders: Whether directories and zip archives go to ``Folders``
        skip_set: Names that are never moved (the category folders)
        extension_map: Lowercase extension to category mapping

    Returns:
        The relocation to perform, or None to leave the child alone
    """
    # Category folders must be excluded before the directory rule
    if child.name in skip_set:
        return None

    if child.kind is ChildKind.DIRECTORY:
        if move_folders:
            return Relocate(FOLDERS_CATEGORY, MovePolicy.RETRY_ONLY, "folder")
        return None

    if child.kind is ChildKind.FILE:
        extension = child.extension
        category = category_for_extension(extension, extension_map)
        if category is not None:
            return Relocate(category, MovePolicy.DELAY_THEN_MOVE, "file")
        if extension == ZIP_EXTENSION and move_folders:
            return Relocate(FOLDERS_CATEGORY, MovePolicy.RETRY_ONLY, "zip file")

    return None
