"""
common.base.ops

Filesystem primitives used by path entries.

Every mutating helper reports success as a boolean and logs the OS error
instead of raising, so callers decide whether a failure is fatal. None of
these operations are atomic with respect to other processes.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable

from .logging import get_logger

log = get_logger(__name__)

PathLike = os.PathLike[str] | str


# ----------------------------------------------------------------------
# PATH HELPERS
# ----------------------------------------------------------------------

def path_exists(path: PathLike) -> bool:
    """Return True if anything (file, directory, live symlink) exists at ``path``."""
    return os.path.exists(path)


def human_size(num: float, suffix: str = "B") -> str:
    units: Iterable[str] = ["", "K", "M", "G", "T", "P", "E", "Z"]
    value = float(num)
    for unit in units:
        if abs(value) < 1024.0:
            return f"{value:3.1f}{unit}{suffix}"
        value /= 1024.0
    return f"{value:.1f}Y{suffix}"


# ----------------------------------------------------------------------
# FILESYSTEM OPERATIONS
# ----------------------------------------------------------------------

def rename_file(src: PathLike, dst: PathLike) -> bool:
    """
    Rename ``src`` to ``dst``, replacing an existing destination file.

    Args:
        src: Existing source path.
        dst: Destination path. Its parent directory must already exist.

    Returns:
        True on success, False if the OS refused the rename.
    """
    try:
        os.replace(src, dst)
    except OSError as e:
        log.error(f"Rename failed {src} → {dst}: {e}")
        return False
    log.debug(f"Renamed {src} → {dst}")
    return True


def promote_upload(src: PathLike, dst: PathLike) -> bool:
    """
    Move an upload-staged temporary file to its final location.

    Staging directories often live on another device, so this goes through
    ``shutil.move`` (copy then unlink) rather than a plain rename. A directory
    destination is refused instead of receiving the file inside it, so ``dst``
    is always the final file path.
    """
    if Path(dst).is_dir():
        log.error(f"Upload promotion failed {src} → {dst}: destination is a directory")
        return False
    try:
        shutil.move(os.fspath(src), os.fspath(dst))
    except OSError as e:
        log.error(f"Upload promotion failed {src} → {dst}: {e}")
        return False
    log.debug(f"Promoted upload {src} → {dst}")
    return True


def copy_file(src: PathLike, dst: PathLike) -> bool:
    """Copy the bytes of ``src`` to ``dst``. Returns False if the copy failed."""
    try:
        shutil.copyfile(src, dst)
    except OSError as e:
        log.error(f"Copy failed {src} → {dst}: {e}")
        return False
    log.debug(f"Copied {src} → {dst}")
    return True


def canonical_path(path: PathLike) -> Path:
    """Absolute path with symlinks resolved."""
    return Path(path).resolve()
