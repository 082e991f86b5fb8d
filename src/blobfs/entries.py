"""Entries returned by the file store.

    Entries are views built from the backend on every query; nothing here is
    ever written back to storage.
"""
from __future__ import annotations
import datetime
import typing as t
from .paths import leaf_name, parent_path


class FileStoreEntry:

    is_directory: bool = False

    def __init__(self, path: str, last_modified: t.Optional[datetime.datetime] = None):
        self.path = path
        self.last_modified = last_modified

    @property
    def name(self) -> str:
        return leaf_name(self.path)

    @property
    def directory_path(self) -> str:
        return parent_path(self.path)

    @property
    def length(self) -> int:
        return 0

    def __str__(self):
        return self.path

    def __repr__(self):
        return f"{self.__class__.__name__}({self.path!r})"

    def __eq__(self, other):
        if not isinstance(other, FileStoreEntry):
            return NotImplemented
        return (
            self.is_directory == other.is_directory
            and self.path == other.path
            and self.length == other.length
            and self.last_modified == other.last_modified
        )

    def __hash__(self):
        return hash((self.is_directory, self.path))


class FileEntry(FileStoreEntry):
    """An existing blob."""

    def __init__(self, path: str, size: int, last_modified: t.Optional[datetime.datetime] = None):
        super().__init__(path, last_modified)
        self._size = size or 0

    @property
    def length(self) -> int:
        return self._size


class DirectoryEntry(FileStoreEntry):
    """A directory, timestamped with the local clock when it was observed."""

    is_directory = True
