"""String-level path helpers shared by :class:`pathentry.entry.PathEntry`."""

from __future__ import annotations

import os
import re
from typing import Optional, Tuple
from urllib.parse import urlsplit

from slugify import slugify

from common.base.logging import get_logger
from common.base.ops import path_exists
from common.shared.loader import load_path_settings

log = get_logger(__name__)

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def extension_from_filename(filename: str) -> Optional[str]:
    """Return the text after the last ``.`` of ``filename``, or None without a dot."""
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[1]


def is_url(text: str) -> bool:
    """True when ``text`` is a well-formed URL that names a host."""
    if not text or any(ch.isspace() for ch in text):
        return False
    try:
        parts = urlsplit(text)
        host = parts.hostname
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return False
    return bool(host)


def slugify_name(text: str, separator: str = "-", lowercase: bool = True) -> str:
    """Reduce ``text`` to ASCII letters, digits and ``separator``."""
    return slugify(text, separator=separator, lowercase=lowercase)


def split_extension(path: str) -> Tuple[str, Optional[str]]:
    """
    Split ``path`` into ``(stem, extension)`` on the last dot of its basename.

    A leading dot (``.bashrc``) or a dot inside a directory name does not
    start an extension.
    """
    last_sep = max(path.rfind("/"), path.rfind(os.sep))
    dot = path.rfind(".")
    if dot <= last_sep + 1:
        return path, None
    return path[:dot], path[dot + 1:]


def _numbered_stem(separator: str) -> re.Pattern[str]:
    return re.compile(rf"^(?P<prefix>.*){re.escape(separator)}(?P<number>[0-9]+)$", re.DOTALL)


def free_path(path: os.PathLike[str] | str, separator: str = "-", *, max_attempts: Optional[int] = None) -> str:
    """
    Return ``path`` if nothing exists there, otherwise the first free variant.

    Variants are built by appending ``<separator>1`` before the extension, or
    by incrementing an existing ``<separator><N>`` suffix::

        a.txt, a-1.txt, a-2.txt exist  ->  a-3.txt

    The check is not atomic: another process may create the returned path
    before the caller uses it.

    Raises:
        ValueError: If ``separator`` is empty.
        FileExistsError: If no free path was found within ``max_attempts`` steps.
    """
    if not separator:
        raise ValueError("Separator must not be empty")
    limit = max_attempts if max_attempts is not None else load_path_settings().max_attempts
    pattern = _numbered_stem(separator)

    candidate = os.fspath(path)
    attempts = 0
    while path_exists(candidate):
        attempts += 1
        if attempts > limit:
            raise FileExistsError(f"No free path found for {os.fspath(path)} after {limit} attempts")

        stem, extension = split_extension(candidate)
        tail = "" if extension is None else f".{extension}"
        match = pattern.match(stem)
        if match:
            number = int(match.group("number")) + 1
            candidate = f"{match.group('prefix')}{separator}{number}{tail}"
        else:
            candidate = f"{stem}{separator}1{tail}"

    if attempts:
        log.debug(f"Free path for {os.fspath(path)} → {candidate}")
    return candidate
