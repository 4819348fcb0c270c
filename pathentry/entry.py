"""
pathentry.entry

A path or URL string with optional, lazily captured filesystem metadata.

An entry is *resolved* when something existed at its path when it was built
(or after a successful move); accessors then read the captured
:class:`FileInfo`. Otherwise the entry is *virtual* and every accessor is
derived from the literal string, using ``/`` for URLs and ``os.sep`` for local
paths.
"""

from __future__ import annotations

import codecs
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import chardet

from common.base.file_io import read_bytes, read_text, write_bytes, write_text
from common.base.logging import get_logger
from common.base.ops import (
    canonical_path,
    copy_file,
    human_size,
    path_exists,
    promote_upload,
    rename_file,
)
from common.shared.loader import PathSettings, load_path_settings

from .utils import extension_from_filename, free_path, is_url, slugify_name

log = get_logger(__name__)

URL_SEPARATOR = "/"
CRLF = b"\r\n"
_LINE_BREAK_RE = re.compile(rb"[\r\n]")


@dataclass(frozen=True)
class FileInfo:
    """Metadata snapshot of an existing filesystem entity."""

    path: str
    filename: str
    extension: Optional[str]
    parent: str
    size: Optional[int]
    is_file: bool
    is_dir: bool

    @classmethod
    def from_path(cls, path: os.PathLike[str] | str) -> "FileInfo":
        real = canonical_path(path)
        if not real.exists():
            raise FileNotFoundError(f"Nothing exists at {os.fspath(path)}")
        is_file = real.is_file()
        return cls(
            path=str(real),
            filename=real.name,
            extension=extension_from_filename(real.name),
            parent=str(real.parent),
            size=real.stat().st_size if is_file else None,
            is_file=is_file,
            is_dir=real.is_dir(),
        )


def _resolve(path: str) -> Optional[FileInfo]:
    if not path_exists(path):
        return None
    try:
        return FileInfo.from_path(path)
    except OSError as e:
        log.warning(f"Could not read metadata for {path}: {e}")
        return None


def _codec_name(name: str) -> Optional[str]:
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None


class PathEntry:
    """One file or URL-like path and the metadata captured for it."""

    def __init__(
        self,
        path: os.PathLike[str] | str,
        *,
        uploaded: bool = False,
        settings: Optional[PathSettings] = None,
    ) -> None:
        self.raw_path = os.fspath(path)
        self.uploaded = uploaded
        self._settings = settings
        self.last_move: Optional[bool] = None
        self.info: Optional[FileInfo] = _resolve(self.raw_path)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    free_path = staticmethod(free_path)
    extension_from_filename = staticmethod(extension_from_filename)

    @property
    def settings(self) -> PathSettings:
        if self._settings is None:
            self._settings = load_path_settings()
        return self._settings

    @property
    def is_resolved(self) -> bool:
        return self.info is not None

    def refresh(self) -> "PathEntry":
        """Re-capture metadata for the current location."""
        self.info = _resolve(self.pathname)
        return self

    # ------------------------------------------------------------------
    # Derived accessors
    # ------------------------------------------------------------------

    @property
    def is_url(self) -> bool:
        return is_url(self.raw_path)

    @property
    def _separator(self) -> str:
        return URL_SEPARATOR if self.is_url else os.sep

    @property
    def pathname(self) -> str:
        return self.info.path if self.info is not None else self.raw_path

    @property
    def filename(self) -> str:
        if self.info is not None:
            return self.info.filename
        return self.raw_path.rpartition(self._separator)[2]

    @property
    def extension(self) -> Optional[str]:
        """
        Text after the last ``.`` of :attr:`filename`, or None.

        In virtual mode only the final path component is considered, so a dot
        in a directory name (``/a.b/file``) does not produce an extension.
        """
        if self.info is not None:
            return self.info.extension
        return extension_from_filename(self.filename)

    @property
    def filename_without_extension(self) -> str:
        filename = self.filename
        extension = self.extension
        if extension is None:
            return filename
        return filename[: len(filename) - len(extension) - 1]

    @property
    def path(self) -> str:
        """Parent directory (or URL prefix before the last ``/``)."""
        if self.info is not None:
            return self.info.parent
        return self.raw_path.rpartition(self._separator)[0]

    @property
    def size(self) -> Optional[int]:
        return self.info.size if self.info is not None else None

    @property
    def human_size(self) -> Optional[str]:
        size = self.size
        return None if size is None else human_size(size)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def get_content(self, encoding: Optional[str] = None) -> Optional[str]:
        """Return the whole file as text, or None if it cannot be read or decoded."""
        encoding = encoding or self.settings.default_encoding
        try:
            return read_text(self.pathname, encoding)
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Unreadable file {self.pathname}: {e}")
            return None

    def set_content(self, text: str, encoding: Optional[str] = None) -> None:
        """Overwrite the file with ``text``. Raises OSError if it cannot be written."""
        encoding = encoding or self.settings.default_encoding
        write_text(self.pathname, text, encoding)
        log.debug(f"Wrote {len(text)} characters to {self.pathname}")
        if self.info is None:
            self.info = _resolve(self.raw_path)

    def normalize_end_lines(self) -> None:
        """
        Rewrite every ``\\r`` and every ``\\n`` as ``\\r\\n``.

        Each character is replaced on its own, so an existing ``\\r\\n`` pair
        comes out as ``\\r\\n\\r\\n``. The file is rewritten byte for byte, so
        single-byte and UTF-8 files keep their encoding. Raises OSError if the
        file cannot be read or written.
        """
        try:
            content = read_bytes(self.pathname)
        except OSError as e:
            log.warning(f"Unreadable file {self.pathname}: {e}")
            raise
        write_bytes(self.pathname, _LINE_BREAK_RE.sub(CRLF, content))
        log.debug(f"Normalized line endings in {self.pathname}")

    def detect_encoding(
        self,
        sample_size: Optional[int] = None,
        encodings: Optional[Iterable[str]] = None,
    ) -> Optional[str]:
        """
        Guess the encoding of the file from its leading bytes.

        chardet's guess is accepted when it is one of ``encodings``; otherwise
        the first candidate able to decode the sample wins. Returns None when
        the file is unreadable or empty, or no candidate fits.
        """
        size = sample_size or self.settings.encoding_sample_size
        candidates = tuple(encodings) if encodings is not None else self.settings.encodings
        try:
            sample = read_bytes(self.pathname, size)
        except OSError as e:
            log.warning(f"Cannot sample {self.pathname} for encoding detection: {e}")
            return None
        if not sample:
            return None

        guess = chardet.detect(sample).get("encoding")
        guessed_codec = _codec_name(guess) if guess else None
        if guessed_codec is not None:
            for name in candidates:
                if _codec_name(name) == guessed_codec:
                    return name

        for name in candidates:
            if _codec_name(name) is None:
                continue
            decoder = codecs.getincrementaldecoder(name)()
            try:
                decoder.decode(sample, final=False)
            except UnicodeDecodeError:
                continue
            return name

        log.debug(f"No candidate encoding matched {self.pathname} (chardet guessed {guess})")
        return None

    # ------------------------------------------------------------------
    # Move / copy / rename
    # ------------------------------------------------------------------

    def move(
        self,
        target: os.PathLike[str] | str,
        overwrite: bool = False,
        *,
        separator: Optional[str] = None,
    ) -> bool:
        """
        Move the file to ``target``.

        Unless ``overwrite`` is set, ``target`` first goes through
        :func:`free_path` so an existing file is never replaced. Uploaded
        entries are promoted with a cross-device capable move.

        Returns:
            True on success. On failure the entry keeps pointing at the
            original path and False is returned. The outcome is also kept
            in :attr:`last_move`.

        Raises:
            ValueError: If ``target`` is empty.
        """
        destination = os.fspath(target)
        if destination == "":
            raise ValueError("Cannot move: target path is empty")
        if not overwrite:
            destination = free_path(
                destination,
                separator or self.settings.separator,
                max_attempts=self.settings.max_attempts,
            )

        source = self.pathname
        mover = promote_upload if self.uploaded else rename_file
        if not mover(source, destination):
            self.last_move = False
            return False

        self.info = _resolve(destination)
        self.uploaded = False
        self.last_move = True
        log.info(f"Moved {source} → {destination}")
        return True

    def copy(
        self,
        target: os.PathLike[str] | str,
        overwrite: bool = False,
        *,
        separator: Optional[str] = None,
    ) -> Optional["PathEntry"]:
        """Copy the file to ``target`` and return an entry for the copy, or None."""
        destination = os.fspath(target)
        if not overwrite:
            destination = free_path(
                destination,
                separator or self.settings.separator,
                max_attempts=self.settings.max_attempts,
            )
        if not copy_file(self.pathname, destination):
            return None
        log.info(f"Copied {self.pathname} → {destination}")
        return PathEntry(destination, settings=self._settings)

    def _sibling(self, name: str) -> str:
        directory = self.path
        return os.path.join(directory, name) if directory else name

    def _fit_stem(self, slug: str, tail: str, budget: int, separator: str, overwrite: bool) -> str:
        stem = _truncate(slug, budget, separator)
        if overwrite:
            return stem
        # Reserve room for the suffix free_path would add, shrinking until it fits.
        while True:
            candidate = self._sibling(stem + tail)
            if candidate == self.pathname:
                return stem
            extra = len(free_path(candidate, separator, max_attempts=self.settings.max_attempts)) - len(candidate)
            if len(stem) + extra <= budget:
                return stem
            if budget - extra < 1:
                raise ValueError(f"Maximum length {budget + len(tail)} leaves no room for a unique name")
            stem = _truncate(slug, budget - extra, separator)

    def set_name_slugified(
        self,
        new_name: str,
        separator: Optional[str] = None,
        lowercase: Optional[bool] = None,
        max_length: Optional[int] = None,
        overwrite: bool = False,
    ) -> "PathEntry":
        """
        Rename the file to a slugified ``new_name`` keeping its extension.

        ``new_name`` must not include the extension. ``max_length`` bounds the
        final filename, extension and any collision suffix included. Unset
        arguments fall back to the configured path settings.
        :attr:`last_move` is False afterwards if the rename was attempted and
        failed, and None when the file already had the requested name.
        """
        separator = separator or self.settings.separator
        self.last_move = None
        lowercase = self.settings.lowercase if lowercase is None else lowercase
        if max_length is None:
            max_length = self.settings.max_length
        slug = slugify_name(new_name, separator, lowercase)
        if not slug:
            raise ValueError(f"Name {new_name!r} has no characters usable in a filename")

        extension = self.extension
        tail = f".{extension}" if extension else ""
        stem = slug
        if max_length is not None:
            budget = max_length - len(tail)
            if budget < 1:
                raise ValueError(f"Maximum length {max_length} cannot hold the extension {tail!r}")
            stem = self._fit_stem(slug, tail, budget, separator, overwrite)

        target = self._sibling(stem + tail)
        if target == self.pathname:
            log.debug(f"{self.pathname} already has the requested name")
            return self
        self.move(target, overwrite, separator=separator)
        return self

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_path": self.raw_path,
            "pathname": self.pathname,
            "filename": self.filename,
            "extension": self.extension,
            "filename_without_extension": self.filename_without_extension,
            "path": self.path,
            "is_url": self.is_url,
            "resolved": self.is_resolved,
            "size": self.size,
            "human_size": self.human_size,
        }

    def __fspath__(self) -> str:
        return self.pathname

    def __str__(self) -> str:
        return self.pathname

    def __repr__(self) -> str:
        mode = "resolved" if self.is_resolved else "virtual"
        return f"PathEntry({self.raw_path!r}, {mode})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathEntry):
            return NotImplemented
        return self.pathname == other.pathname

    # The pathname changes on move, so entries are not usable as dict keys.
    __hash__ = None  # type: ignore[assignment]


def _truncate(slug: str, length: int, separator: str) -> str:
    """Cut ``slug`` to ``length`` characters without leaving a dangling separator."""
    cut = slug[:length]
    return cut.rstrip(separator) or cut
