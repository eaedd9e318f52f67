"""
Tag router for placing a file into a folder chosen by its [Tag].

This module is responsible for:
- Extracting the first [Tag] from a filename
- Resolving the tag to a folder name (case-insensitive map, raw tag, or default)
- Sanitizing folder names and filename stems (tag removed) for use as path components
- Creating the destination folder if needed
- Handling name collisions with " (1)", " (2)", etc. suffixes
- Moving or copying the file and reporting the outcome as a RouteResult
"""

import logging
import os
import re
import unicodedata
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Tuple, Union

from .types import RouteResult, RouteStatus, RoutingRequest, TagMap, TransferMode
from .utils import (
    INVALID_FILENAME_CHARS,
    format_os_error,
    is_blank,
    normalize_path,
    path_occupied,
    transfer_file,
)

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "Unsorted"

# Placeholder for names that sanitize to nothing
EMPTY_NAME = "_"

# Give up probing after this many suffixes
MAX_COLLISION_SUFFIX = 10000

TAG_PATTERN = re.compile(r"\[([^\]]+)\]")
_SEPARATOR_RUN = re.compile(r"[_\s]{2,}")


def extract_tag(filename: str) -> Optional[str]:
    """
    Return the text inside the first [...] in filename, stripped.

    Examples:
        >>> extract_tag("[Setup]installer.exe")
        'Setup'
        >>> extract_tag("report [ Log ] [old].txt")
        'Log'
        >>> extract_tag("plain.txt") is None
        True
    """
    match = TAG_PATTERN.search(filename)
    return match.group(1).strip() if match else None


def resolve_folder_name(
    tag: Optional[str],
    tag_map: Optional[Mapping] = None,
    default_folder: str = DEFAULT_FOLDER
) -> str:
    """
    Pick the destination folder name for a tag.

    A tag found in tag_map (case-insensitively) maps to its folder; any other
    tag is used as the folder name itself. No tag means default_folder.
    The returned name is not yet sanitized.
    """
    if tag is None:
        return default_folder
    if tag_map:
        if not isinstance(tag_map, TagMap):
            tag_map = TagMap(tag_map)
        if tag in tag_map:
            return tag_map[tag]
    return tag


def sanitize_name(name: Optional[str]) -> str:
    """
    Make name safe to use as a single path component.

    Steps, in order:
    - empty or whitespace-only input becomes "_"
    - Unicode NFKD decomposition
    - every character illegal in a path component becomes "_"
    - runs of two or more underscores/whitespace collapse to one space
    - surrounding whitespace is stripped; an empty result becomes "_"

    Sanitizing an already-sanitized name returns it unchanged.

    Args:
        name: Folder name or filename stem

    Returns:
        The sanitized name (never empty)
    """
    if is_blank(name):
        return EMPTY_NAME

    name = unicodedata.normalize("NFKD", name)
    name = "".join("_" if ch in INVALID_FILENAME_CHARS else ch for ch in name)
    name = _SEPARATOR_RUN.sub(" ", name).strip()

    # "." and ".." name the current and parent directory
    if name in (".", ".."):
        return EMPTY_NAME
    return name or EMPTY_NAME


def strip_tag(filename: str) -> str:
    """
    Remove the first [...] span from filename.

    Examples:
        >>> strip_tag("[Setup]dodo.txt")
        'dodo.txt'
        >>> strip_tag("plain.txt")
        'plain.txt'
    """
    return TAG_PATTERN.sub("", filename, count=1)


def split_extension(filename: str) -> Tuple[str, str]:
    """
    Split filename into (stem, extension), extension including its dot.

    Unlike os.path.splitext, a name that is only an extension (".txt",
    ".gitignore") has an empty stem.
    """
    stem, ext = os.path.splitext(filename)
    if not ext and stem.startswith(".") and stem.count(".") == 1:
        return "", stem
    return stem, ext


def sanitize_filename(filename: str) -> str:
    """Sanitize the stem of filename and reattach its extension verbatim."""
    stem, ext = split_extension(filename)
    return sanitize_name(stem) + ext


def resolve_destination(dest_dir: Union[str, Path], filename: str) -> str:
    """
    Resolve a free destination path for a file.

    If dest_dir/filename is occupied by a file, directory or link, tries
    "<stem> (1)<ext>", "<stem> (2)<ext>", ... until a free name is found.

    The check is not a reservation: another process can take the returned
    path before the caller writes to it.

    Args:
        dest_dir: The directory the file will be placed in
        filename: The desired (already sanitized) filename

    Returns:
        The full destination path (may have a suffix)

    Raises:
        FileExistsError: If no free name is found within MAX_COLLISION_SUFFIX
    """
    dest_dir = Path(dest_dir)

    candidate = dest_dir / filename
    if not path_occupied(candidate):
        return str(candidate)

    stem, ext = split_extension(filename)
    for counter in range(1, MAX_COLLISION_SUFFIX + 1):
        candidate = dest_dir / f"{stem} ({counter}){ext}"
        if not path_occupied(candidate):
            logger.debug(f"Name collision, using suffix {counter}: {candidate}")
            return str(candidate)

    raise FileExistsError(
        f"Could not find unique name for '{filename}' in {dest_dir} "
        f"after {MAX_COLLISION_SUFFIX} attempts"
    )


def _failure(
    request: RoutingRequest,
    source_path: str,
    status: RouteStatus,
    message: str,
    **details
) -> RouteResult:
    logger.warning(message)
    return RouteResult(
        source_path=source_path,
        dest_path=None,
        status=status,
        message=message,
        mode=request.mode,
        **details
    )


def route(request: RoutingRequest) -> RouteResult:
    """
    Route one file according to request.

    Never raises for routing failures; the outcome (including Argument,
    NotFound and I/O errors) is reported in the returned RouteResult.
    Nothing is rolled back on failure: a destination folder created before
    a failed transfer stays in place.

    Args:
        request: The RoutingRequest describing source, rules and mode

    Returns:
        RouteResult with status, message and the final destination path
    """
    if is_blank(request.src_path):
        return _failure(
            request, "", RouteStatus.ARGUMENT_ERROR,
            "src_path is required"
        )
    if is_blank(request.dest_root):
        return _failure(
            request, str(request.src_path), RouteStatus.ARGUMENT_ERROR,
            "dest_root is required"
        )

    src = normalize_path(request.src_path)
    if not os.path.isfile(src):
        return _failure(
            request, src, RouteStatus.NOT_FOUND,
            f"Source file not found: {src}"
        )

    filename = os.path.basename(src)
    tag = extract_tag(filename)
    folder_name = sanitize_name(
        resolve_folder_name(tag, request.tag_map, request.default_folder)
    )
    logger.debug(f"Tag {tag!r} resolved to folder '{folder_name}'")

    dest_dir = Path(normalize_path(request.dest_root)) / folder_name
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, ValueError) as e:
        # ValueError: the path itself is unusable (e.g. embedded NUL)
        detail = format_os_error(e) if isinstance(e, OSError) else str(e)
        return _failure(
            request, src, RouteStatus.IO_ERROR,
            f"Could not create folder {dest_dir}: {detail}",
            tag=tag, folder_name=folder_name,
        )

    # Destination name excludes the routing tag
    target_name = sanitize_filename(strip_tag(filename))
    try:
        dest_path = resolve_destination(dest_dir, target_name)
        logger.info(f"Routing ({request.mode.value}): {src} -> {dest_path}")
        transfer_file(src, dest_path, request.mode)
    except OSError as e:
        return _failure(
            request, src, RouteStatus.IO_ERROR,
            f"Failed to {request.mode.value} {src}: {format_os_error(e)}",
            tag=tag, folder_name=folder_name,
        )

    dest_name = Path(dest_path).name
    if dest_name != target_name:
        status = RouteStatus.SUCCESS_RENAMED
        message = f"Routed to {dest_path} (renamed from {target_name} to {dest_name})"
    else:
        status = RouteStatus.SUCCESS
        message = f"Routed to {dest_path}"

    return RouteResult(
        source_path=src,
        dest_path=dest_path,
        status=status,
        message=message,
        tag=tag,
        folder_name=folder_name,
        mode=request.mode,
    )


def route_file(
    src_path: Union[str, Path],
    dest_root: Union[str, Path],
    tag_map: Optional[Mapping] = None,
    default_folder: str = DEFAULT_FOLDER,
    move: bool = True
) -> RouteResult:
    """
    Move (or copy) src_path into dest_root/<folder for its [Tag]>.

    Args:
        src_path: The file to route
        dest_root: Root under which tag folders live (created as needed)
        tag_map: Optional case-insensitive tag -> folder mapping
        default_folder: Folder used when the filename carries no tag
        move: True to move the file, False to copy it

    Returns:
        RouteResult; on success dest_path is the final file path
    """
    request = RoutingRequest(
        src_path=src_path,
        dest_root=dest_root,
        tag_map=tag_map,
        default_folder=default_folder,
        mode=TransferMode.from_flag(move),
    )
    return route(request)


class TagRouter:
    """
    Routes files into tag folders under a fixed destination root.

    Holds the placement rules so the same tag table, default folder and
    transfer mode apply to every file passed to route().
    """

    def __init__(
        self,
        dest_root: Union[str, Path],
        tag_map: Optional[Mapping] = None,
        default_folder: str = DEFAULT_FOLDER,
        mode: TransferMode = TransferMode.MOVE
    ):
        """
        Initialize the router with placement rules.

        Args:
            dest_root: The destination root directory
            tag_map: Optional tag -> folder mapping (keys case-insensitive)
            default_folder: Folder used for untagged files
            mode: TransferMode.MOVE or TransferMode.COPY

        Raises:
            ValueError: If tag_map has keys that differ only by case
        """
        self.dest_root = dest_root
        self.tag_map = TagMap(tag_map) if tag_map is not None else None
        self.default_folder = default_folder
        self.mode = mode

    def route(self, src_path: Union[str, Path]) -> RouteResult:
        """Route a single file; see route() for the outcome contract."""
        return route(RoutingRequest(
            src_path=src_path,
            dest_root=self.dest_root,
            tag_map=self.tag_map,
            default_folder=self.default_folder,
            mode=self.mode,
        ))
