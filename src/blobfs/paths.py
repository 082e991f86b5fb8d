"""Translation between store paths and blob names.

    Store paths are slash-separated and relative to the store root, which is
    represented by the empty string. Blob names are the store path with the
    configured base prefix in front of them. Prefixes used for listing always
    end with exactly one separator.
"""
import typing as t


SEPARATOR = "/"


def combine(base: t.Optional[str], relative: t.Optional[str]) -> str:
    """Join two path segments with a single separator."""
    if not base:
        return relative or ""
    if not relative:
        return base
    return f"{base.rstrip(SEPARATOR)}{SEPARATOR}{relative.lstrip(SEPARATOR)}"


def normalize_prefix(prefix: t.Optional[str]) -> str:
    """Blob prefixes require exactly one trailing separator.

    The root has no prefix at all, so an empty value stays empty.
    """
    prefix = (prefix or "").strip(SEPARATOR)
    return f"{prefix}{SEPARATOR}" if prefix else ""


def is_root(path: t.Optional[str]) -> bool:
    """The root is the empty path; it is always a directory and never a file."""
    return not (path or "").strip(SEPARATOR)


def leaf_name(path: str) -> str:
    path = path.rstrip(SEPARATOR)
    return path[path.rfind(SEPARATOR) + 1:]


def parent_path(path: str) -> str:
    path = path.rstrip(SEPARATOR)
    pos = path.rfind(SEPARATOR)
    return "" if pos < 0 else path[:pos]


class PathTranslator:

    def __init__(self, base_path: t.Optional[str] = None):
        base_path = (base_path or "").strip(SEPARATOR)
        self.base_path = base_path
        self.base_prefix = normalize_prefix(base_path) if base_path else ""

    def to_object_key(self, path: str) -> str:
        """Get the blob name for a file path."""
        return combine(self.base_path, (path or "").strip(SEPARATOR))

    def to_prefix(self, path: str) -> str:
        """Get the listing prefix for a directory path."""
        return normalize_prefix(combine(self.base_path, path))

    def from_prefix(self, prefix: str) -> str:
        """Convert a listing prefix back into a store path."""
        if self.base_prefix and prefix.startswith(self.base_prefix):
            prefix = prefix[len(self.base_prefix):]
        return prefix.strip(SEPARATOR)
