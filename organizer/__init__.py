"""Folder Organizer - sorts a folder's children into category folders and keeps it sorted."""

__version__ = "1.0.0"
