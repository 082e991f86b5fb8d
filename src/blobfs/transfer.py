"""File level operations: metadata, streams, uploads, deletes, copies and moves.

    Copies are performed server-side. The backend starts the copy and reports
    its progress on the destination blob, so the destination is polled at a
    fixed interval until the copy leaves the pending state. Polling is bounded
    by a maximum number of attempts and can be interrupted with a HaltFlag.

    Moves are a copy followed by a delete of the source. They are not atomic:
    if the delete does not happen, both the source and the destination exist.
"""
from __future__ import annotations
import typing as t
import zrlog
from .backend import BlobBackend, BlobRecord, CopyStatus, ReadStream
from .clock import Clock
from .content_types import ContentTypeProvider, DEFAULT_CONTENT_TYPE
from .entries import FileEntry
from .exceptions import (
    AlreadyExistsError, CopyFailedError, CopyTimeoutError, InvalidArgumentError, NotFoundError
)
from .paths import PathTranslator, is_root
from .util import HaltFlag


DEFAULT_COPY_POLL_INTERVAL = 0.25
DEFAULT_COPY_MAX_POLLS = 2400


class CopyPollPolicy:

    def __init__(self, interval: float = DEFAULT_COPY_POLL_INTERVAL, max_polls: int = DEFAULT_COPY_MAX_POLLS):
        if interval < 0:
            raise InvalidArgumentError("Copy poll interval cannot be negative")
        if max_polls < 1:
            raise InvalidArgumentError("Copy poll attempts must be at least one")
        self.interval = interval
        self.max_polls = max_polls


class TransferEngine:

    def __init__(self,
                 translator: PathTranslator,
                 backend: BlobBackend,
                 clock: Clock,
                 content_types: ContentTypeProvider,
                 poll_policy: t.Optional[CopyPollPolicy] = None):
        self._translator = translator
        self._backend = backend
        self._clock = clock
        self._content_types = content_types
        self._poll_policy = poll_policy or CopyPollPolicy()
        self._log = zrlog.get_logger("blobfs.transfer")

    async def get_file_info(self, path: str) -> t.Optional[FileEntry]:
        if is_root(path):
            return None
        key = self._translator.to_object_key(path)
        if not await self._backend.exists(key):
            return None
        record = await self._backend.get_properties(key)
        if record is None:
            return None
        return FileEntry(path, record.size, record.last_modified)

    async def open_read_stream(self, path: t.Union[str, FileEntry]) -> ReadStream:
        if isinstance(path, FileEntry):
            path = path.path
        if is_root(path):
            raise NotFoundError("Cannot get file stream for the root directory")
        try:
            return await self._backend.download(self._translator.to_object_key(path))
        except NotFoundError as ex:
            raise NotFoundError(f"Cannot get file stream because the file [{path}] does not exist", wrapped=ex) from ex

    async def read_bytes(self, path: t.Union[str, FileEntry]) -> bytes:
        stream = await self.open_read_stream(path)
        return await stream.readall()

    async def create_file(self, path: str, data, overwrite: bool = False) -> str:
        if is_root(path):
            raise InvalidArgumentError("Cannot create a file at the root directory path")
        key = self._translator.to_object_key(path)
        if not overwrite and await self._backend.exists(key):
            raise AlreadyExistsError(f"Cannot create file [{path}] because it already exists")
        content_type = self._content_types.get_content_type(path)
        if content_type is None:
            self._log.warning(f"No content type known for [{path}], using {DEFAULT_CONTENT_TYPE}")
            content_type = DEFAULT_CONTENT_TYPE
        await self._backend.upload(key, data, content_type=content_type, overwrite=overwrite)
        return path

    async def delete_file(self, path: str) -> bool:
        if is_root(path):
            return False
        return await self._backend.delete_if_exists(self._translator.to_object_key(path))

    async def copy_file(self, source_path: str, target_path: str, halt_flag: t.Optional[HaltFlag] = None):
        if source_path == target_path:
            raise InvalidArgumentError("The source and target paths must not be the same")
        if is_root(source_path):
            raise NotFoundError("Cannot copy the root directory as a file")
        if is_root(target_path):
            raise InvalidArgumentError("Cannot copy a file onto the root directory path")
        source_key = self._translator.to_object_key(source_path)
        target_key = self._translator.to_object_key(target_path)
        if not await self._backend.exists(source_key):
            raise NotFoundError(f"Cannot copy file [{source_path}] because it does not exist")
        if await self._backend.exists(target_key):
            raise AlreadyExistsError(f"Cannot copy file [{source_path}] because a file already exists in the new path [{target_path}]")
        self._log.info(f"Copying [{source_path}] to [{target_path}]")
        await self._backend.start_copy(source_key, target_key)
        record = await self._wait_for_copy(target_key, halt_flag)
        if record.copy_status not in (None, CopyStatus.SUCCESS):
            status = record.copy_status.value
            self._log.error(f"Copy of [{source_path}] to [{target_path}] ended with status [{status}]")
            raise CopyFailedError(
                f"Error while copying file [{source_path}]; copy operation failed with status {status} and description {record.copy_status_description}",
                status,
                record.copy_status_description
            )

    async def _wait_for_copy(self, target_key: str, halt_flag: t.Optional[HaltFlag] = None) -> BlobRecord:
        attempts = 0
        while True:
            if halt_flag is not None:
                halt_flag.check_continue(True)
            await self._clock.sleep(self._poll_policy.interval)
            attempts += 1
            # Properties must be fetched again or the status never changes.
            record = await self._backend.get_properties(target_key)
            if record is None:
                raise NotFoundError(f"Copy target [{target_key}] disappeared while the copy was in progress")
            if record.copy_status != CopyStatus.PENDING:
                return record
            if attempts >= self._poll_policy.max_polls:
                self._log.error(f"Copy to [{target_key}] still pending after {attempts} checks")
                raise CopyTimeoutError(
                    f"Copy to [{target_key}] did not complete after {attempts} status checks",
                    attempts,
                    record.copy_status.value
                )
            if attempts % 40 == 0:
                self._log.warning(f"Copy to [{target_key}] still pending after {attempts} checks")

    async def move_file(self, source_path: str, target_path: str, halt_flag: t.Optional[HaltFlag] = None):
        await self.copy_file(source_path, target_path, halt_flag)
        self._log.info(f"Removing [{source_path}] after copying it to [{target_path}]")
        await self.delete_file(source_path)
