"""Path and file metadata helpers: derived names, free paths, slugified renames."""

from .entry import FileInfo, PathEntry  # noqa: F401
from .utils import extension_from_filename, free_path, is_url, slugify_name  # noqa: F401

__all__ = [
    "FileInfo",
    "PathEntry",
    "extension_from_filename",
    "free_path",
    "is_url",
    "slugify_name",
]
