"""Cargo crate discovery for the by-crate breakdown."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


@dataclass(frozen=True)
class CrateInfo:
    name: str
    root: str  # POSIX path relative to the workspace root, "." for the root crate


def _read_package_name(manifest: Path) -> Optional[str]:
    try:
        with open(manifest, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None
    package = data.get("package")
    if isinstance(package, dict) and isinstance(package.get("name"), str):
        return package["name"]
    return None


def discover_crates(root: Path) -> List[CrateInfo]:
    """Find every ``Cargo.toml`` with a ``[package]`` table below *root*.

    Virtual workspace manifests (no ``[package]``) are skipped. Hidden
    directories and ``target/`` are not entered.
    """
    if root.is_file():
        root = root.parent

    crates: List[CrateInfo] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d != "target")
        if "Cargo.toml" not in filenames:
            continue
        name = _read_package_name(Path(dirpath) / "Cargo.toml")
        if name is not None:
            crates.append(CrateInfo(name=name, root=Path(dirpath).relative_to(root).as_posix()))
    return crates


def find_workspace_root(start: Path) -> Optional[Path]:
    """Return the outermost directory at or above *start* holding a ``Cargo.toml``.

    *start* should be absolute; the result is ``None`` outside any Cargo project.
    """
    found: Optional[Path] = None
    for candidate in (start, *start.parents):
        if (candidate / "Cargo.toml").is_file():
            found = candidate
    return found


def module_name(crate: CrateInfo, rel_path: str) -> str:
    """Return the ``::``-joined module *rel_path* belongs to inside *crate*.

    Paths are taken relative to the crate's ``src/`` when the file lives
    there, else to the crate root. ``lib.rs``/``main.rs``/``mod.rs`` at the top
    are the crate itself, ``foo/mod.rs`` is ``foo`` and ``foo/bar.rs`` is
    ``foo::bar``.
    """
    path = PurePosixPath(rel_path)
    crate_root = PurePosixPath(crate.root)
    local = path if crate.root == "." else path.relative_to(crate_root)
    if local.parts and local.parts[0] == "src":
        local = local.relative_to("src")

    dirs = list(local.parent.parts)
    stem = local.stem
    if not dirs and stem in ("lib", "main", "mod"):
        parts = []
    elif stem == "mod":
        parts = dirs
    else:
        parts = dirs + [stem]
    return "::".join([crate.name, *parts])


def crate_for_path(crates: List[CrateInfo], rel_path: str) -> Optional[CrateInfo]:
    """Return the crate with the deepest root containing *rel_path*."""
    path = PurePosixPath(rel_path)
    best: Optional[CrateInfo] = None
    best_depth = -1
    for crate in crates:
        crate_root = PurePosixPath(crate.root)
        depth = 0 if crate.root == "." else len(crate_root.parts)
        if crate.root != "." and crate_root not in path.parents:
            continue
        if depth > best_depth:
            best, best_depth = crate, depth
    return best
