"""Walk a directory tree for Rust source files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from rsloc.source.filter import FileFilter


class DiscoveryError(Exception):
    """Raised when the requested root does not exist."""


def _skip_dir(name: str) -> bool:
    return name.startswith(".") or name == "target"


def discover_files(root: Path, file_filter: FileFilter) -> List[str]:
    """Return matching files under *root* as sorted POSIX paths relative to it.

    *root* may also be a single file, which is returned by name if it matches.
    Hidden directories and ``target/`` are not entered.
    """
    if not root.exists():
        raise DiscoveryError(f"Path does not exist: {root}")

    if root.is_file():
        return [root.name] if file_filter.matches(root.name) else []

    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not _skip_dir(d))
        rel_dir = Path(dirpath).relative_to(root)
        for name in filenames:
            rel = (rel_dir / name).as_posix()
            if file_filter.matches(rel):
                found.append(rel)
    return sorted(found)
