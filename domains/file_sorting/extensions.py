"""
Extension to category mapping.

The map is built once at import time and exposed read-only; the skip set is
derived from it so category folders are never treated as children to sort.
"""

from types import MappingProxyType
from typing import Mapping, Optional

FOLDERS_CATEGORY = "Folders"
ZIP_EXTENSION = "zip"

EXTENSION_MAP: Mapping[str, str] = MappingProxyType({
    "jpg": "Images",
    "jpeg": "Images",
    "png": "Images",
    "gif": "Images",
    "bmp": "Images",
    "mp3": "Music",
    "wav": "Music",
    "flac": "Music",
    "txt": "Documents",
    "pdf": "Documents",
    "doc": "Documents",
    "docx": "Documents",
    "xls": "Spreadsheets",
    "xlsx": "Spreadsheets",
    "ppt": "Presentations",
    "pptx": "Presentations",
    "exe": "Executables",
})


def category_for_extension(
    extension: str,
    extension_map: Mapping[str, str] = EXTENSION_MAP,
) -> Optional[str]:
    """Look up the category for an extension, ignoring case."""
    return extension_map.get(extension.lower())


def build_skip_set(extension_map: Mapping[str, str] = EXTENSION_MAP) -> frozenset[str]:
    """Return every category folder name, ``Folders`` included."""
    return frozenset(extension_map.values()) | {FOLDERS_CATEGORY}


SKIP_SET = build_skip_set()
