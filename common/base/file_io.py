"""Whole-file I/O helpers with consistent defaults.

Text is read and written with ``newline=""`` so carriage returns survive a
round trip untouched; callers that care about line endings see the bytes that
are actually on disk.
"""

from __future__ import annotations

from contextlib import contextmanager
import os
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

import yaml


DEFAULT_ENCODING = "utf-8"
PRESERVE_NEWLINES = ""


def _to_path(path: os.PathLike[str] | str) -> Path:
    return Path(path).expanduser()


@contextmanager
def open_file(
    path: os.PathLike[str] | str,
    mode: str = "r",
    *,
    encoding: str = DEFAULT_ENCODING,
    newline: Optional[str] = None,
) -> Iterator[Any]:
    path_obj = _to_path(path)
    kwargs: dict[str, Any] = {}
    if "b" in mode:
        if newline is not None:
            raise ValueError("newline is not supported in binary mode")
    else:
        kwargs["encoding"] = encoding
        kwargs["newline"] = newline
    with open(path_obj, mode, **kwargs) as handle:
        yield handle


def read_text(path: os.PathLike[str] | str, encoding: str = DEFAULT_ENCODING) -> str:
    with open_file(path, "r", encoding=encoding, newline=PRESERVE_NEWLINES) as handle:
        return handle.read()


def write_text(path: os.PathLike[str] | str, content: str, encoding: str = DEFAULT_ENCODING) -> None:
    with open_file(path, "w", encoding=encoding, newline=PRESERVE_NEWLINES) as handle:
        handle.write(content)


def read_bytes(path: os.PathLike[str] | str, limit: Optional[int] = None) -> bytes:
    """Read the whole file, or only its first ``limit`` bytes."""
    with open_file(path, "rb") as handle:
        return handle.read() if limit is None else handle.read(limit)


def read_yaml(path: os.PathLike[str] | str) -> Mapping[str, Any] | list[Any]:
    with open_file(path, "r") as handle:
        data = yaml.safe_load(handle)
    return data if data is not None else {}


def write_bytes(path: os.PathLike[str] | str, content: bytes) -> None:
    with open_file(path, "wb") as handle:
        handle.write(content)
