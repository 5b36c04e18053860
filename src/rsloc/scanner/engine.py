"""Count engine — classify files and fold them into totals.

Each file is scanned sequentially with its own state; files are independent,
so a run fans out over a thread pool and the per-file results are combined
with the (order-insensitive) aggregator.
"""

from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Collection, Dict, List, Optional

from rsloc.scanner.lexer import scan_lines
from rsloc.scanner.resolver import ClassifiedLine, resolve
from rsloc.source.discovery import discover_files
from rsloc.source.filter import FileFilter
from rsloc.source.paths import context_for_file
from rsloc.source.reader import ReadError, read_source
from rsloc.source.workspace import (
    CrateInfo,
    crate_for_path,
    discover_crates,
    find_workspace_root,
    module_name,
)
from rsloc.stats.aggregator import aggregate, combine
from rsloc.stats.models import (
    Context,
    CountResult,
    CrateStats,
    FailedFile,
    FileStats,
    ModuleStats,
)


def classify_file(content: str, base_context: Context = Context.PRODUCTION) -> List[ClassifiedLine]:
    """Classify every line of *content* as a ``(context, line_type)`` pair."""
    return resolve(scan_lines(content), base_context)


def classify_path(
    path: Path,
    root: Optional[Path] = None,
    *,
    workspace_root: Optional[Path] = None,
) -> List[ClassifiedLine]:
    """Read and classify one file.

    The base context comes from the file's place in its Cargo workspace (see
    :func:`~rsloc.source.paths.context_for_file`); *root* only shortens the
    path used in error messages. Raises ReadError if the file is unreadable,
    binary or not UTF-8.
    """
    label = path.relative_to(root).as_posix() if root is not None else path.as_posix()
    content = read_source(path, label)
    return classify_file(content, context_for_file(path, workspace_root))


def resolve_worker_count(jobs: int, n_items: int) -> int:
    """``jobs <= 0`` means one worker per CPU; never more workers than items."""
    if jobs <= 0:
        jobs = os.cpu_count() or 1
    return max(1, min(jobs, n_items))


@dataclass(frozen=True)
class _FileOutcome:
    path: str
    stats: Optional[FileStats] = None
    error: Optional[FailedFile] = None


def _count_one(
    base: Path,
    rel_path: str,
    workspace_root: Optional[Path],
    contexts: AbstractSet[Context],
) -> _FileOutcome:
    try:
        lines = classify_path(base / rel_path, base, workspace_root=workspace_root)
    except ReadError as exc:
        return _FileOutcome(rel_path, error=FailedFile(path=rel_path, reason=exc.reason))
    stats = aggregate(lines).only(contexts)
    return _FileOutcome(rel_path, stats=FileStats(path=rel_path, stats=stats))


def count_paths(
    root: Path,
    file_filter: Optional[FileFilter] = None,
    *,
    jobs: int = 0,
    by_crate: bool = False,
    by_module: bool = False,
    crates: Optional[Collection[str]] = None,
    contexts: Optional[AbstractSet[Context]] = None,
) -> CountResult:
    """Count every matching file under *root*.

    *crates* keeps only files of the named Cargo packages; *contexts* zeroes
    every context not listed (``None`` keeps all). Unreadable files are
    collected in ``CountResult.failed`` and left out of the totals; they never
    stop the run. Raises DiscoveryError if *root* is missing.
    """
    start = time.perf_counter()
    file_filter = file_filter or FileFilter()
    contexts = frozenset(contexts) if contexts else frozenset(Context)
    rel_paths = discover_files(root, file_filter)

    base = root.parent if root.is_file() else root
    workspace_root = find_workspace_root(base.resolve())

    crate_infos: List[CrateInfo] = []
    if by_crate or by_module or crates:
        crate_infos = discover_crates(base)
    if crates:
        wanted = set(crates)
        rel_paths = [
            rel for rel in rel_paths
            if (info := crate_for_path(crate_infos, rel)) is not None and info.name in wanted
        ]

    workers = resolve_worker_count(jobs, len(rel_paths))
    if workers == 1:
        outcomes = [_count_one(base, rel, workspace_root, contexts) for rel in rel_paths]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(
                pool.map(lambda rel: _count_one(base, rel, workspace_root, contexts), rel_paths)
            )

    files = [o.stats for o in outcomes if o.stats is not None]
    failed = [o.error for o in outcomes if o.error is not None]

    elapsed = (time.perf_counter() - start) * 1000
    return CountResult(
        root=str(root),
        total=combine(f.stats for f in files),
        files=files,
        crates=_group_by_crate(crate_infos, files) if by_crate else [],
        modules=_group_by_module(crate_infos, files) if by_module else [],
        failed=failed,
        duration_ms=round(elapsed, 2),
    )


def _group_by_crate(crate_infos: List[CrateInfo], files: List[FileStats]) -> List[CrateStats]:
    grouped: Dict[str, CrateStats] = {}
    for file_stats in files:
        info = crate_for_path(crate_infos, file_stats.path)
        if info is None:
            continue
        entry = grouped.setdefault(info.name, CrateStats(name=info.name, path=info.root))
        entry.add_file(file_stats)
    return sorted(grouped.values(), key=lambda c: c.name)


def _group_by_module(crate_infos: List[CrateInfo], files: List[FileStats]) -> List[ModuleStats]:
    """Files outside every crate belong to no module and are left out."""
    grouped: Dict[str, ModuleStats] = {}
    for file_stats in files:
        info = crate_for_path(crate_infos, file_stats.path)
        if info is None:
            continue
        name = module_name(info, file_stats.path)
        grouped.setdefault(name, ModuleStats(name=name)).add_file(file_stats)
    return sorted(grouped.values(), key=lambda m: m.name)
