"""
Type definitions and data classes for the tag router.

This module defines:
- TransferMode: Enum selecting move or copy semantics
- TagMap: Case-insensitive mapping from tag text to folder name
- RoutingRequest: Data class describing one routing operation
- RouteStatus: Enum for routing outcomes (including error kinds)
- RouteResult: Data class representing the result of a routing operation
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple, Union


class TransferMode(Enum):
    """How the file is relocated."""
    MOVE = "move"
    COPY = "copy"

    @classmethod
    def from_flag(cls, move: bool) -> "TransferMode":
        """Convert a move/copy boolean to a TransferMode."""
        return cls.MOVE if move else cls.COPY


class TagMap(Mapping):
    """
    Read-only mapping from tag to folder name with case-insensitive keys.

    Keys are compared with str.casefold(), so "Log", "LOG" and "log" all
    address the same entry. Iteration yields keys as originally spelled.

    Raises:
        ValueError: If two keys are equal under case-insensitive comparison
    """

    def __init__(
        self,
        entries: Union[Mapping, Iterable[Tuple[str, str]], None] = None
    ):
        self._entries: Dict[str, Tuple[str, str]] = {}
        if entries is None:
            return
        items = entries.items() if isinstance(entries, Mapping) else entries
        for tag, folder in items:
            key = tag.casefold()
            if key in self._entries:
                existing = self._entries[key][0]
                raise ValueError(
                    f"Duplicate tag '{tag}' (conflicts with '{existing}')"
                )
            self._entries[key] = (tag, folder)

    def __getitem__(self, tag: str) -> str:
        return self._entries[tag.casefold()][1]

    def __contains__(self, tag) -> bool:
        return isinstance(tag, str) and tag.casefold() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (tag for tag, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TagMap({dict(self.items())!r})"


@dataclass
class RoutingRequest:
    """A single routing operation: what to place, where, and how."""
    src_path: str
    dest_root: str
    tag_map: Optional[TagMap] = None
    default_folder: str = "Unsorted"
    mode: TransferMode = TransferMode.MOVE

    def __post_init__(self):
        if self.tag_map is not None and not isinstance(self.tag_map, TagMap):
            self.tag_map = TagMap(self.tag_map)


class RouteStatus(Enum):
    """Status of a routing operation."""
    SUCCESS = "success"                  # Placed under the resolved name
    SUCCESS_RENAMED = "success_renamed"  # Placed with a collision suffix
    ARGUMENT_ERROR = "argument_error"    # Missing/blank required input
    NOT_FOUND = "not_found"              # Source file does not exist
    IO_ERROR = "io_error"                # Directory creation or transfer failed

    @property
    def is_error(self) -> bool:
        return self in (
            RouteStatus.ARGUMENT_ERROR,
            RouteStatus.NOT_FOUND,
            RouteStatus.IO_ERROR,
        )


@dataclass
class RouteResult:
    """Result of a routing operation."""
    source_path: str
    dest_path: Optional[str]
    status: RouteStatus
    message: str
    tag: Optional[str] = None
    folder_name: Optional[str] = None
    mode: TransferMode = TransferMode.MOVE

    @property
    def ok(self) -> bool:
        return not self.status.is_error
