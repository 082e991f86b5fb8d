"""
    Hierarchical file store over a flat blob container.

    Blob storage has no directories: blobs have names that happen to contain
    slashes. This package presents those names as a tree of files and
    directories and synthesizes directory operations (existence, creation,
    deletion, listing) and file moves and copies from flat listing, upload,
    server-side copy and delete calls.

    Use BlobFileStore for all operations. Paths are relative to the store root
    (the empty string), use '/' as the separator and never start or end with one.
    Every call goes to the backend; nothing is cached.
"""
from .store import BlobFileStore, build_file_store
from .config import StoreOptions
from .entries import FileStoreEntry, FileEntry, DirectoryEntry
from .backend import BlobBackend, BlobRecord, ListingItem, CopyStatus, ReadStream
from .exceptions import (
    BlobFSError, FileStoreError, NotFoundError, AlreadyExistsError, DirectoryConflictError,
    InvalidArgumentError, RootDirectoryError, CopyFailedError, CopyTimeoutError, BackendError, ConfigError
)
from .util import HaltFlag, HaltInterrupt
