import typing as t


class BlobFSError(Exception):
    """Super-type of all errors raised by blobfs code"""

    def __init__(self, msg: str, code_space: str = "GEN", code_number: int = None, is_recoverable: bool = False, wrapped: t.Optional[Exception] = None):
        self.internal_code = "" if code_number is None else f"{code_space}-{code_number}"
        super().__init__(f"{msg} [{self.internal_code}]")
        self.is_recoverable = is_recoverable
        self.wrapped = wrapped


class ConfigError(BlobFSError):

    def __init__(self, missing_key: str, code_space: str = "CONFIG", code_number: int = None):
        super().__init__(f"Missing configuration key [{missing_key}]", code_space, code_number)


class FileStoreError(BlobFSError):
    """Error class for file store operations."""

    def __init__(self, msg: str, code: int, is_recoverable: bool = False, wrapped: t.Optional[Exception] = None):
        super().__init__(msg, "FILESTORE", code, is_recoverable=is_recoverable, wrapped=wrapped)


class NotFoundError(FileStoreError):

    def __init__(self, msg: str, wrapped: t.Optional[Exception] = None):
        super().__init__(msg, 1000, wrapped=wrapped)


class AlreadyExistsError(FileStoreError):

    def __init__(self, msg: str):
        super().__init__(msg, 1001)


class DirectoryConflictError(FileStoreError):

    def __init__(self, msg: str):
        super().__init__(msg, 1002)


class InvalidArgumentError(FileStoreError, ValueError):

    def __init__(self, msg: str):
        super().__init__(msg, 1003)


class RootDirectoryError(FileStoreError):

    def __init__(self, msg: str = "Cannot delete the root directory"):
        super().__init__(msg, 1004)


class CopyFailedError(FileStoreError):
    """Raised when a server-side copy reaches a terminal state other than success."""

    def __init__(self, msg: str, status: str, status_description: t.Optional[str] = None):
        super().__init__(msg, 1005)
        self.status = status
        self.status_description = status_description


class CopyTimeoutError(FileStoreError):
    """Raised when a server-side copy is still pending after the maximum number of polls."""

    def __init__(self, msg: str, attempts: int, status: t.Optional[str] = None):
        super().__init__(msg, 1006, is_recoverable=True)
        self.attempts = attempts
        self.status = status


class BackendError(BlobFSError):
    """Wraps a failure from the underlying object storage client."""

    def __init__(self, msg: str, code: int, is_recoverable: bool = False, wrapped: t.Optional[Exception] = None):
        super().__init__(msg, "AZBLOB", code, is_recoverable=is_recoverable, wrapped=wrapped)
