"""Data models for diff parsing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True, slots=True)
class Hunk:
    """A contiguous change between two revisions of one file.

    ``old_start``/``new_start`` are 1-based. A zero length side means a pure
    insertion or deletion; its start is then the line *after which* the change
    applies (so it may be 0).
    """

    old_start: int
    old_len: int
    new_start: int
    new_len: int

    def inverse(self) -> Hunk:
        return Hunk(self.new_start, self.new_len, self.old_start, self.old_len)


@dataclass(frozen=True)
class DiffFile:
    """One file appearing in a diff, with its hunks."""

    path: str
    old_path: Optional[str] = None  # set on renames
    status: FileStatus = FileStatus.MODIFIED
    hunks: Tuple[Hunk, ...] = ()

    @property
    def lines_added(self) -> int:
        return sum(h.new_len for h in self.hunks)

    @property
    def lines_removed(self) -> int:
        return sum(h.old_len for h in self.hunks)


@dataclass(frozen=True)
class FileSkipped:
    """Record of a file whose content cannot be compared line by line."""

    path: str
    reason: str  # 'binary', 'mode_only', 'submodule'
