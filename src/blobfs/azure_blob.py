"""Azure Blob Storage backend built on the asynchronous Azure SDK."""
import asyncio
import functools
import inspect
import typing as t
from contextlib import aclosing
import aiohttp
import azure.core.exceptions as ace
import zrlog
from azure.identity.aio import DefaultAzureCredential
from azure.storage.blob import BlobProperties, ContentSettings
from azure.storage.blob.aio import ContainerClient
from .backend import BlobBackend, BlobRecord, CopyStatus, ListingItem, ReadStream
from .exceptions import BackendError, NotFoundError, BlobFSError


def _convert_azure_error(ex: ace.AzureError) -> BlobFSError:
    if isinstance(ex, ace.ResourceNotFoundError):
        return NotFoundError(f"Azure: Resource not found: {str(ex)}", wrapped=ex)
    if isinstance(ex, ace.ClientAuthenticationError):
        return BackendError(f"Azure: Client authentication error: {ex.__class__.__name__}: {str(ex)}", 2003, True, ex)
    if isinstance(ex, ace.ResourceExistsError):
        return BackendError(f"Azure: Resource already exists error: {ex.__class__.__name__}: {str(ex)}", 2005, False, ex)
    inner = ex.inner_exception
    if isinstance(inner, asyncio.TimeoutError) or isinstance(ex, ace.ServiceResponseTimeoutError):
        return BackendError(f"Azure: Connection timeout error: {ex.__class__.__name__}: {str(ex)}", 2001, True, ex)
    if isinstance(inner, aiohttp.ClientConnectionError) or isinstance(ex, ace.ServiceRequestError):
        return BackendError(f"Azure: Connection error: {ex.__class__.__name__}: {str(ex)}", 2002, True, ex)
    return BackendError(f"Azure: {ex.__class__.__name__}: {str(ex)}", 2000, False, ex)


def wrap_azure_errors(cb):
    """Converts Azure SDK errors into BlobFSErrors with recoverable set properly."""

    if inspect.isasyncgenfunction(cb):

        @functools.wraps(cb)
        async def _inner_gen(*args, **kwargs):
            try:
                async with aclosing(cb(*args, **kwargs)) as gen:
                    async for item in gen:
                        yield item
            except ace.AzureError as ex:
                raise _convert_azure_error(ex) from ex

        return _inner_gen

    @functools.wraps(cb)
    async def _inner(*args, **kwargs):
        try:
            return await cb(*args, **kwargs)
        except ace.AzureError as ex:
            raise _convert_azure_error(ex) from ex

    return _inner


def _to_record(properties: BlobProperties) -> BlobRecord:
    copy_status = None
    copy_description = None
    if properties.copy is not None and properties.copy.status:
        copy_status = CopyStatus.parse(properties.copy.status)
        copy_description = properties.copy.status_description
    content_type = None
    if properties.content_settings is not None:
        content_type = properties.content_settings.content_type
    return BlobRecord(
        name=properties.name,
        size=properties.size,
        last_modified=properties.last_modified,
        content_type=content_type,
        copy_status=copy_status,
        copy_status_description=copy_description,
    )


class AzureReadStream(ReadStream):
    """Wraps the SDK downloader so that errors while streaming are converted too."""

    def __init__(self, downloader):
        self._downloader = downloader

    @property
    def size(self) -> int:
        return self._downloader.size

    @wrap_azure_errors
    async def chunks(self) -> t.AsyncIterator[bytes]:
        async for chunk in self._downloader.chunks():
            yield chunk

    @wrap_azure_errors
    async def readall(self) -> bytes:
        return await self._downloader.readall()


class AzureBlobBackend(BlobBackend):

    def __init__(self,
                 container_name: str,
                 connection_string: t.Optional[str] = None,
                 account_url: t.Optional[str] = None,
                 credential=None):
        self._log = zrlog.get_logger("blobfs.azure")
        self._credential = None
        if connection_string:
            self._container = ContainerClient.from_connection_string(
                conn_str=connection_string,
                container_name=container_name
            )
        elif account_url:
            if credential is None:
                credential = DefaultAzureCredential()
                self._credential = credential
            self._container = ContainerClient(
                account_url=account_url,
                container_name=container_name,
                credential=credential
            )
        else:
            raise BackendError("Either a connection string or an account URL is required", 2010)
        self.container_name = container_name

    @property
    def container(self) -> ContainerClient:
        return self._container

    @wrap_azure_errors
    async def exists(self, name: str) -> bool:
        return await self._container.get_blob_client(name).exists()

    @wrap_azure_errors
    async def get_properties(self, name: str) -> t.Optional[BlobRecord]:
        try:
            properties = await self._container.get_blob_client(name).get_blob_properties()
        except ace.ResourceNotFoundError:
            return None
        return _to_record(properties)

    @wrap_azure_errors
    async def upload(self, name: str, data, content_type: t.Optional[str] = None, overwrite: bool = True):
        args = {
            'data': data,
            'overwrite': overwrite,
        }
        if content_type:
            args['content_settings'] = ContentSettings(content_type=content_type)
        self._log.debug(f"Uploading blob [{name}]")
        await self._container.get_blob_client(name).upload_blob(**args)

    @wrap_azure_errors
    async def download(self, name: str) -> ReadStream:
        self._log.debug(f"Downloading blob [{name}]")
        downloader = await self._container.get_blob_client(name).download_blob()
        return AzureReadStream(downloader)

    @wrap_azure_errors
    async def delete_if_exists(self, name: str, include_snapshots: bool = True) -> bool:
        kwargs = {}
        if include_snapshots:
            kwargs['delete_snapshots'] = 'include'
        try:
            await self._container.get_blob_client(name).delete_blob(**kwargs)
        except ace.ResourceNotFoundError:
            return False
        self._log.debug(f"Deleted blob [{name}]")
        return True

    @wrap_azure_errors
    async def start_copy(self, source_name: str, target_name: str):
        source = self._container.get_blob_client(source_name)
        target = self._container.get_blob_client(target_name)
        self._log.debug(f"Starting copy of [{source_name}] to [{target_name}]")
        await target.start_copy_from_url(source.url)

    @wrap_azure_errors
    async def walk(self, prefix: str, delimiter: str = "/") -> t.AsyncIterator[ListingItem]:
        async for item in self._container.walk_blobs(name_starts_with=prefix or None, delimiter=delimiter):
            if isinstance(item, BlobProperties):
                yield ListingItem.blob(_to_record(item))
            else:
                yield ListingItem.prefix(item.name)

    @wrap_azure_errors
    async def list_blobs(self, prefix: str) -> t.AsyncIterator[BlobRecord]:
        async for item in self._container.list_blobs(name_starts_with=prefix or None):
            yield _to_record(item)

    async def close(self):
        await self._container.close()
        if self._credential is not None:
            await self._credential.close()
