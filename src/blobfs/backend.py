"""Operations the file store needs from an object storage backend.

    The backend knows nothing about directories. It stores blobs under flat
    names and can list them either flat or grouped on a delimiter.
"""
from __future__ import annotations
import datetime
import enum
import typing as t


class CopyStatus(enum.Enum):
    """Status of a server-side copy as reported on the destination blob."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    ABORTED = "aborted"

    @staticmethod
    def parse(value) -> t.Optional[CopyStatus]:
        if value is None or isinstance(value, CopyStatus):
            return value
        return CopyStatus(str(value).lower())


class BlobRecord:
    """Properties of a single blob."""

    def __init__(self,
                 name: str,
                 size: int = 0,
                 last_modified: t.Optional[datetime.datetime] = None,
                 content_type: t.Optional[str] = None,
                 copy_status: t.Optional[CopyStatus] = None,
                 copy_status_description: t.Optional[str] = None):
        self.name = name
        self.size = size
        self.last_modified = last_modified
        self.content_type = content_type
        self.copy_status = copy_status
        self.copy_status_description = copy_status_description

    def __repr__(self):
        return f"BlobRecord({self.name!r}, size={self.size})"


class ListingItem:
    """A result from a hierarchical listing: either a common prefix or a blob."""

    def __init__(self, name: str, record: t.Optional[BlobRecord] = None):
        self.name = name
        self.record = record

    @property
    def is_prefix(self) -> bool:
        return self.record is None

    @staticmethod
    def prefix(name: str) -> ListingItem:
        return ListingItem(name)

    @staticmethod
    def blob(record: BlobRecord) -> ListingItem:
        return ListingItem(record.name, record)


@t.runtime_checkable
class ReadStream(t.Protocol):

    def chunks(self) -> t.AsyncIterator[bytes]:
        pass

    async def readall(self) -> bytes:
        pass


class BlobBackend:
    """Base class for object storage backends."""

    async def exists(self, name: str) -> bool:
        """Check if a blob exists with exactly this name."""
        raise NotImplementedError

    async def get_properties(self, name: str) -> t.Optional[BlobRecord]:
        """Get the properties of a blob or None if there is no such blob."""
        raise NotImplementedError

    async def upload(self, name: str, data, content_type: t.Optional[str] = None, overwrite: bool = True):
        """Write the data (bytes, readable or (async) iterable of bytes) to a blob."""
        raise NotImplementedError

    async def download(self, name: str) -> ReadStream:
        """Open a blob for reading; raises NotFoundError if it does not exist."""
        raise NotImplementedError

    async def delete_if_exists(self, name: str, include_snapshots: bool = True) -> bool:
        """Delete a blob, returning False if it was not there."""
        raise NotImplementedError

    async def start_copy(self, source_name: str, target_name: str):
        """Start an asynchronous server-side copy."""
        raise NotImplementedError

    def walk(self, prefix: str, delimiter: str = "/") -> t.AsyncIterator[ListingItem]:
        """List blobs and common prefixes directly under the prefix."""
        raise NotImplementedError

    def list_blobs(self, prefix: str) -> t.AsyncIterator[BlobRecord]:
        """List every blob whose name starts with the prefix."""
        raise NotImplementedError

    async def close(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
