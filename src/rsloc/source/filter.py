"""Include/exclude glob filtering for Rust source files."""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import PurePath
from typing import List, Union

RUST_SUFFIX = ".rs"


def is_rust_source(path: Union[str, PurePath]) -> bool:
    return PurePath(path).suffix == RUST_SUFFIX


@dataclass
class FileFilter:
    """Decide which files take part in a run.

    A path matches when it is a ``.rs`` file, matches no exclude glob, and
    matches at least one include glob (an empty include list includes all).
    Globs are matched against the POSIX form of the path relative to the root.
    """

    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)

    def matches(self, path: Union[str, PurePath]) -> bool:
        if not is_rust_source(path):
            return False
        posix = PurePath(path).as_posix()
        if any(fnmatch(posix, pat) for pat in self.exclude):
            return False
        if not self.include:
            return True
        return any(fnmatch(posix, pat) for pat in self.include)
