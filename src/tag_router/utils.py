r"""
Path and filesystem helpers for the tag router.

This module provides:
- normalize_path(): Make a path absolute without following symlinks
- is_blank(): Check for missing/whitespace-only path arguments
- INVALID_FILENAME_CHARS: Characters that cannot appear in a path component
- transfer_file(): Move or copy one file to an already-chosen destination
- format_os_error(): Readable message for an OSError, with WinError codes
"""

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import FrozenSet, Optional, Union

from .types import TransferMode

logger = logging.getLogger(__name__)


def _invalid_filename_chars(platform: str) -> FrozenSet[str]:
    if platform == "win32":
        controls = {chr(code) for code in range(32)}
        return frozenset(controls | set('<>:"/\\|?*'))
    return frozenset({"\0", "/"})


# Characters that are illegal in a single path component on this platform
INVALID_FILENAME_CHARS = _invalid_filename_chars(sys.platform)


def is_blank(value: Optional[Union[str, Path]]) -> bool:
    """Return True if value is None, empty, or only whitespace."""
    return value is None or not str(value).strip()


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a path to absolute form.

    Relative paths are resolved against the current working directory and
    separators are normalized. Symlinks are NOT followed, so a link passed
    as the source is relocated as a link.

    Args:
        path: A file path as string or Path object

    Returns:
        Normalized absolute path as string

    Examples:
        >>> normalize_path("/data/./in/../in/file.txt")
        '/data/in/file.txt'
    """
    return os.path.abspath(os.path.normpath(str(path)))


def path_occupied(path: Union[str, Path]) -> bool:
    """Return True if anything (file, directory, or dangling link) is at path."""
    return os.path.lexists(str(path))


def transfer_file(
    src: Union[str, Path],
    dest: Union[str, Path],
    mode: TransferMode = TransferMode.MOVE
) -> None:
    """
    Move or copy a single file to dest.

    Moves use shutil.move, which is an atomic rename on the same filesystem
    and falls back to copy + delete across volumes. Copies use shutil.copy2,
    which also carries over timestamps and permission bits.

    The destination is not re-checked here; callers pick a free path first.

    Args:
        src: Source file path
        dest: Destination file path (parent must exist)
        mode: TransferMode.MOVE or TransferMode.COPY

    Raises:
        OSError: If the underlying move or copy fails
    """
    src_str = str(src)
    dest_str = str(dest)

    if mode is TransferMode.COPY:
        logger.debug(f"Copying: {src_str} -> {dest_str}")
        shutil.copy2(src_str, dest_str)
    else:
        logger.debug(f"Moving: {src_str} -> {dest_str}")
        shutil.move(src_str, dest_str)


def format_os_error(e: OSError) -> str:
    """
    Format an OSError into a user-facing message.

    Common Windows failures (locked file, path too long, access denied) get a
    short explanation in front; the WinError code is included when present.

    Args:
        e: The exception to format

    Returns:
        Formatted error string
    """
    error_code = getattr(e, "winerror", None)
    detail = f"[WinError {error_code}] {e}" if error_code is not None else str(e)

    if isinstance(e, PermissionError) or error_code == 5:
        return f"Permission denied: {detail}"
    if error_code == 32:
        return f"File is locked or in use: {detail}"
    if error_code == 206 or "name too long" in str(e).lower():
        return f"Path too long: {detail}"
    if error_code == 17:
        return f"Cannot move to a different drive: {detail}"
    return f"{type(e).__name__}: {detail}"
