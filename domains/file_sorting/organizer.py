"""
Organizer pass for the File Sorting domain.

One pass lists the immediate children of the organized folder once, moves
directories into ``Folders`` first, then moves regular files into their
category folders. A failed move is logged and the pass carries on.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from organizer.exceptions import RelocationError

from .classifier import Child, ChildKind, Relocate, classify
from .extensions import EXTENSION_MAP, FOLDERS_CATEGORY, SKIP_SET
from .mover import MoveExecutor, MoveTask


@dataclass(slots=True)
class PassReport:
    """Outcome counters for a single organizer pass."""

    moved: int = 0
    failed: int = 0
    skipped: int = 0
    empty: bool = False


class FolderOrganizer:
    """Sorts the immediate children of one folder into category folders."""

    def __init__(
        self,
        root: Path,
        executor: MoveExecutor,
        move_folders: bool = True,
        skip_set: frozenset[str] = SKIP_SET,
        extension_map: Mapping[str, str] = EXTENSION_MAP,
    ):
        """
        Initialize folder organizer.

        Args:
            root: Folder whose children are organized
            executor: Executor used for every move
            move_folders: Whether directories and zip archives are moved
            skip_set: Category folder names that are never moved
            extension_map: Lowercase extension to category mapping
        """
        self.root = root
        self.executor = executor
        self.move_folders = move_folders
        self.skip_set = skip_set
        self.extension_map = extension_map

    def list_children(self) -> Optional[list[Child]]:
        """
        Snapshot the immediate children of the root folder.

        Returns:
            Children in listing order, or None if the folder cannot be read
        """
        try:
            return [Child.from_path(path) for path in self.root.iterdir()]
        except OSError as e:
            logger.debug(f"Cannot list {self.root}: {e}")
            return None

    def organize(self) -> PassReport:
        """
        Run one full pass over the root folder.

        Raises:
            MoveInterrupted: If shutdown interrupted a move
        """
        report = PassReport()

        children = self.list_children()
        if not children:
            logger.info("No files to organize.")
            report.empty = True
            return report

        if self.move_folders:
            self._ensure_category(FOLDERS_CATEGORY)

        # Directories first, then files, both from the same snapshot
        for child in children:
            if child.kind is ChildKind.DIRECTORY:
                self._process(child, report)

        for child in children:
            if child.kind is ChildKind.FILE:
                self._process(child, report)

        logger.debug(
            f"Pass complete: {report.moved} moved, {report.failed} failed, "
            f"{report.skipped} skipped"
        )
        return report

    def _process(self, child: Child, report: PassReport):
        action = classify(child, self.move_folders, self.skip_set, self.extension_map)
        if action is None:
            report.skipped += 1
            return

        self._ensure_category(action.category)
        if self._relocate(child, action):
            report.moved += 1
        else:
            report.failed += 1

    def _relocate(self, child: Child, action: Relocate) -> bool:
        task = MoveTask(
            source=child.path,
            destination=self.root / action.category / child.name,
            policy=action.policy,
        )

        try:
            self.executor.execute(task)
        except RelocationError as e:
            logger.opt(exception=e).error(f"Failed to move {action.label}: {child.name}")
            return False

        logger.success(f"Moved {action.label}: {child.name} to folder: {action.category}")
        return True

    def _ensure_category(self, category: str):
        category_dir = self.root / category
        if category_dir.is_dir():
            return

        try:
            category_dir.mkdir(exist_ok=True)
        except OSError as e:
            # Moves into this category will fail and be reported per child
            logger.warning(f"Could not create category folder {category_dir}: {e}")
