"""Diff pipeline — git diff → per-file reconcile → totals."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Collection, Dict, List, Optional, Tuple, Union

from rsloc.diff.reconciler import ReconciliationError, reconcile
from rsloc.git.adapter import GitError, get_diff, resolve_revision, show_file
from rsloc.git.diff_parser import DiffParser
from rsloc.git.models import DiffFile, FileSkipped, FileStatus
from rsloc.scanner.engine import resolve_worker_count
from rsloc.source.filter import FileFilter, is_rust_source
from rsloc.source.paths import context_for_path
from rsloc.source.reader import ReadError, decode_source, read_source
from rsloc.source.workspace import CrateInfo, crate_for_path, discover_crates
from rsloc.stats.models import (
    Context,
    CrateDiffStats,
    DiffResult,
    FailedFile,
    FileDiffStats,
    LocStatsDiff,
)

WORKING_TREE = "working tree"
INDEX = "index"


@dataclass(frozen=True)
class _Revisions:
    repo_root: Path
    base: str
    head: Optional[str]
    staged: bool


def _old_content(revs: _Revisions, entry: DiffFile) -> Optional[str]:
    if entry.status is FileStatus.ADDED:
        return None
    path = entry.old_path or entry.path
    return decode_source(show_file(revs.repo_root, revs.base, path), path)


def _new_content(revs: _Revisions, entry: DiffFile) -> Optional[str]:
    if entry.status is FileStatus.DELETED:
        return None
    if revs.head is not None:
        return decode_source(show_file(revs.repo_root, revs.head, entry.path), entry.path)
    if revs.staged:
        return decode_source(show_file(revs.repo_root, None, entry.path), entry.path)
    return read_source(revs.repo_root / entry.path, entry.path)


def _reconcile_one(revs: _Revisions, entry: DiffFile) -> Union[FileDiffStats, FailedFile]:
    try:
        diff = reconcile(
            _old_content(revs, entry),
            _new_content(revs, entry),
            entry.hunks,
            context_for_path(entry.path),
            context_for_path(entry.old_path or entry.path),
        )
    except (GitError, ReadError, ReconciliationError) as exc:
        reason = exc.reason if isinstance(exc, ReadError) else str(exc)
        return FailedFile(path=entry.path, reason=reason)
    return FileDiffStats(
        path=entry.path,
        status=entry.status.value,
        diff=diff,
        old_path=entry.old_path,
    )


def _partition(
    entries: List[Union[DiffFile, FileSkipped]],
    file_filter: FileFilter,
) -> Tuple[List[DiffFile], int, int, List[str]]:
    """Split parsed entries into Rust files to reconcile and everything else."""
    rust: List[DiffFile] = []
    unclassified_added = 0
    unclassified_removed = 0
    binary: List[str] = []

    for entry in entries:
        if isinstance(entry, FileSkipped):
            if entry.reason == "binary":
                binary.append(entry.path)
            continue

        if not is_rust_source(entry.path) and not (entry.old_path and is_rust_source(entry.old_path)):
            unclassified_added += entry.lines_added
            unclassified_removed += entry.lines_removed
            continue

        if not (file_filter.matches(entry.path) or (entry.old_path and file_filter.matches(entry.old_path))):
            continue
        # A pure rename carries no content change.
        if entry.status is FileStatus.RENAMED and not entry.hunks:
            continue
        rust.append(entry)

    return rust, unclassified_added, unclassified_removed, sorted(binary)


def _group_by_crate(crate_infos: List[CrateInfo], files: List[FileDiffStats]) -> List[CrateDiffStats]:
    grouped: Dict[str, CrateDiffStats] = {}
    for file_diff in files:
        info = crate_for_path(crate_infos, file_diff.path)
        if info is None:
            continue
        entry = grouped.setdefault(info.name, CrateDiffStats(name=info.name, path=info.root))
        entry.add_file(file_diff)
    return sorted(grouped.values(), key=lambda c: c.name)


def diff_revisions(
    repo_root: Path,
    base: str = "HEAD",
    head: Optional[str] = None,
    *,
    staged: bool = False,
    file_filter: Optional[FileFilter] = None,
    jobs: int = 0,
    by_crate: bool = False,
    crates: Optional[Collection[str]] = None,
    contexts: Optional[AbstractSet[Context]] = None,
) -> DiffResult:
    """Compare *base* with *head*, the index (``staged``) or the working tree.

    *crates* keeps only files of the named Cargo packages and *contexts*
    zeroes every context not listed, as in ``count_paths``. Crates are looked
    up in the working tree. Raises GitError when the repository or a revision
    cannot be read; per-file failures are collected in ``DiffResult.failed``.
    """
    start = time.perf_counter()
    file_filter = file_filter or FileFilter()
    contexts = frozenset(contexts) if contexts else frozenset(Context)

    resolve_revision(repo_root, base)
    if head is not None:
        resolve_revision(repo_root, head)

    revs = _Revisions(repo_root=repo_root, base=base, head=head, staged=staged)
    entries = list(DiffParser(get_diff(repo_root, base, head, staged=staged)).parse())
    rust, unclassified_added, unclassified_removed, binary = _partition(entries, file_filter)

    crate_infos: List[CrateInfo] = []
    if by_crate or crates:
        crate_infos = discover_crates(repo_root)
    if crates:
        wanted = set(crates)
        rust = [
            entry for entry in rust
            if (info := crate_for_path(crate_infos, entry.path)) is not None and info.name in wanted
        ]

    workers = resolve_worker_count(jobs, len(rust))
    if workers == 1:
        outcomes = [_reconcile_one(revs, entry) for entry in rust]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(lambda entry: _reconcile_one(revs, entry), rust))

    files = sorted(
        (
            FileDiffStats(path=o.path, status=o.status, diff=o.diff.only(contexts), old_path=o.old_path)
            for o in outcomes
            if isinstance(o, FileDiffStats)
        ),
        key=lambda f: f.path,
    )
    failed = sorted((o for o in outcomes if isinstance(o, FailedFile)), key=lambda f: f.path)

    total = LocStatsDiff()
    for file_diff in files:
        total = total + file_diff.diff

    if head is not None:
        to_ref = head
    else:
        to_ref = INDEX if staged else WORKING_TREE

    elapsed = (time.perf_counter() - start) * 1000
    return DiffResult(
        root=str(repo_root),
        from_ref=base,
        to_ref=to_ref,
        total=total,
        files=files,
        crates=_group_by_crate(crate_infos, files) if by_crate else [],
        failed=failed,
        unclassified_added=unclassified_added,
        unclassified_removed=unclassified_removed,
        binary_files=binary,
        duration_ms=round(elapsed, 2),
    )
