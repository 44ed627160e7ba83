"""
File Sorting Domain

Keeps a single folder tidy:
- Regular files → category folder picked by extension
- Directories and zip archives → ``Folders``
- New children → sorted again as soon as the watcher sees them
"""

__all__ = ["classifier", "extensions", "mover", "organizer", "supervisor", "watchers"]
