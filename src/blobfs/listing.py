import typing as t
from urllib.parse import unquote
from .backend import BlobBackend
from .clock import Clock
from .entries import DirectoryEntry, FileEntry, FileStoreEntry
from .paths import PathTranslator, combine, leaf_name, SEPARATOR


class ListingEngine:
    """Lists the immediate contents of a directory.

        Common prefixes returned by the backend become directories and blobs
        become files. The listing never descends into sub-directories. Directory
        marker blobs are hidden unless include_markers is set.
    """

    def __init__(self, translator: PathTranslator, backend: BlobBackend, clock: Clock, marker_name: str):
        self._translator = translator
        self._backend = backend
        self._clock = clock
        self._marker_name = marker_name

    async def list_directory(self,
                             path: t.Optional[str] = None,
                             include_sub_directories: bool = False,
                             include_markers: bool = False) -> list[FileStoreEntry]:
        # include_sub_directories is accepted for callers that pass it but has no
        # effect: sub-directories are always listed as single entries.
        path = (path or "").strip(SEPARATOR)
        prefix = self._translator.to_prefix(path)
        directories = []
        files = []
        async for item in self._backend.walk(prefix, SEPARATOR):
            if item.is_prefix:
                directories.append(DirectoryEntry(self._translator.from_prefix(item.name), self._clock.utc_now()))
            else:
                item_name = unquote(leaf_name(item.name))
                if include_markers or item_name != self._marker_name:
                    files.append(FileEntry(
                        combine(path, item_name),
                        item.record.size,
                        item.record.last_modified
                    ))
        return directories + files
