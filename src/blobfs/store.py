import typing as t
import zirconium as zr
from autoinject import injector
from .azure_blob import AzureBlobBackend
from .backend import BlobBackend, ReadStream
from .clock import Clock
from .config import StoreOptions
from .content_types import ContentTypeProvider
from .directories import DirectoryEmulator
from .entries import DirectoryEntry, FileEntry, FileStoreEntry
from .listing import ListingEngine
from .paths import PathTranslator
from .transfer import TransferEngine
from .util import HaltFlag


class BlobFileStore:
    """File store over a single blob container.

        Directories are emulated: they exist while any blob is stored under their
        prefix and empty ones are kept alive by a marker blob. The container is
        neither created nor checked; it must exist before the store is used.
    """

    clock: Clock = None
    content_types: ContentTypeProvider = None

    @injector.construct
    def __init__(self,
                 backend: BlobBackend,
                 options: t.Optional[StoreOptions] = None,
                 clock: t.Optional[Clock] = None,
                 content_types: t.Optional[ContentTypeProvider] = None):
        if clock is not None:
            self.clock = clock
        if content_types is not None:
            self.content_types = content_types
        self.options = options or StoreOptions(container_name="")
        self.backend = backend
        self.translator = PathTranslator(self.options.base_path)
        self.directories = DirectoryEmulator(self.translator, backend, self.clock, self.options.marker_name)
        self.listing = ListingEngine(self.translator, backend, self.clock, self.options.marker_name)
        self.transfers = TransferEngine(self.translator, backend, self.clock, self.content_types, self.options.poll_policy())

    async def get_file_info(self, path: str) -> t.Optional[FileEntry]:
        return await self.transfers.get_file_info(path)

    async def get_directory_info(self, path: str) -> t.Optional[DirectoryEntry]:
        return await self.directories.get_directory_info(path)

    async def list_directory(self,
                             path: t.Optional[str] = None,
                             include_sub_directories: bool = False,
                             include_markers: bool = False) -> list[FileStoreEntry]:
        return await self.listing.list_directory(path, include_sub_directories, include_markers)

    async def create_directory(self, path: str) -> bool:
        return await self.directories.create_directory(path)

    async def delete_directory(self, path: str, halt_flag: t.Optional[HaltFlag] = None) -> bool:
        return await self.directories.delete_directory(path, halt_flag)

    async def delete_file(self, path: str) -> bool:
        return await self.transfers.delete_file(path)

    async def copy_file(self, source_path: str, target_path: str, halt_flag: t.Optional[HaltFlag] = None):
        await self.transfers.copy_file(source_path, target_path, halt_flag)

    async def move_file(self, source_path: str, target_path: str, halt_flag: t.Optional[HaltFlag] = None):
        await self.transfers.move_file(source_path, target_path, halt_flag)

    async def open_read_stream(self, path: t.Union[str, FileEntry]) -> ReadStream:
        return await self.transfers.open_read_stream(path)

    async def read_bytes(self, path: t.Union[str, FileEntry]) -> bytes:
        return await self.transfers.read_bytes(path)

    async def create_file(self, path: str, data, overwrite: bool = False) -> str:
        return await self.transfers.create_file(path, data, overwrite)

    async def close(self):
        await self.backend.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @staticmethod
    def from_options(options: StoreOptions) -> "BlobFileStore":
        backend = AzureBlobBackend(
            options.container_name,
            connection_string=options.connection_string,
            account_url=options.account_url,
        )
        return BlobFileStore(backend, options)


@injector.inject
def build_file_store(section: str = "blobfs", config: zr.ApplicationConfig = None) -> BlobFileStore:
    """Build a store for the Azure container named in the application configuration."""
    return BlobFileStore.from_options(StoreOptions.from_config(config, section))
