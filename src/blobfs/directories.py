"""Directory emulation on top of flat blob names.

    A directory exists when at least one blob has a name starting with the
    directory's prefix; there is no other record of it. Empty directories are
    made visible by uploading a small marker blob into them.
"""
import typing as t
from contextlib import aclosing
import zrlog
from .backend import BlobBackend
from .clock import Clock
from .entries import DirectoryEntry
from .exceptions import DirectoryConflictError, RootDirectoryError
from .paths import PathTranslator, combine, is_root, SEPARATOR
from .util import HaltFlag


DIRECTORY_MARKER_NAME = "BlobFS.Directory.txt"

DIRECTORY_MARKER_CONTENT = b"This is a directory marker file created by blobfs. It is safe to delete it."


class DirectoryEmulator:

    def __init__(self,
                 translator: PathTranslator,
                 backend: BlobBackend,
                 clock: Clock,
                 marker_name: str = DIRECTORY_MARKER_NAME):
        self._translator = translator
        self._backend = backend
        self._clock = clock
        self.marker_name = marker_name
        self._log = zrlog.get_logger("blobfs.directories")

    async def get_directory_info(self, path: str) -> t.Optional[DirectoryEntry]:
        if is_root(path):
            return DirectoryEntry(path, self._clock.utc_now())
        if await self.directory_exists(path):
            return DirectoryEntry(path, self._clock.utc_now())
        return None

    async def directory_exists(self, path: str) -> bool:
        """Check if anything at all is stored under the directory prefix."""
        if is_root(path):
            return True
        prefix = self._translator.to_prefix(path)
        async with aclosing(self._backend.walk(prefix, SEPARATOR)) as items:
            async for _ in items:
                return True
        return False

    async def create_directory(self, path: str) -> bool:
        if is_root(path):
            return True
        key = self._translator.to_object_key(path)
        if await self._backend.exists(key):
            raise DirectoryConflictError(f"Cannot create directory because the path [{path}] already exists and is a file")
        marker_key = self._translator.to_object_key(combine(path, self.marker_name))
        self._log.info(f"Creating directory [{path}]")
        await self._backend.upload(marker_key, DIRECTORY_MARKER_CONTENT, content_type="text/plain", overwrite=True)
        return True

    async def delete_directory(self, path: str, halt_flag: t.Optional[HaltFlag] = None) -> bool:
        if is_root(path):
            raise RootDirectoryError()
        prefix = self._translator.to_prefix(path)
        deleted = False
        async for record in HaltFlag.iterate(self._backend.list_blobs(prefix), halt_flag, True):
            await self._backend.delete_if_exists(record.name, include_snapshots=True)
            deleted = True
        if deleted:
            self._log.info(f"Deleted directory [{path}]")
        return deleted

    def is_marker(self, name: str) -> bool:
        return name == self.marker_name
