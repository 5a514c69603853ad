"""Shared helpers: atomic file I/O, locking and dictionary merging."""
