"""Filesystem watchers for the File Sorting domain."""
