import mimetypes
import typing as t
from autoinject import injector


DEFAULT_CONTENT_TYPE = "application/octet-stream"


@injector.injectable_global
class ContentTypeProvider:
    """Maps a path to a MIME type based on its extension."""

    def __init__(self):
        self._types = mimetypes.MimeTypes()

    def get_content_type(self, path: str) -> t.Optional[str]:
        content_type, _ = self._types.guess_type(path, strict=False)
        return content_type
