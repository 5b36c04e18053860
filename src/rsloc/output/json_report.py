"""JSON reporter for scripts and CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Union

from rsloc.stats.models import (
    Context,
    CountResult,
    DiffResult,
    FailedFile,
    LocsDiff,
    LocStats,
    LocStatsDiff,
)

REPORT_VERSION = "1.0"


def stats_to_dict(stats: LocStats) -> Dict[str, Any]:
    out: Dict[str, Any] = {ctx.value: stats.get(ctx).to_dict() for ctx in Context}
    out["total"] = stats.total.to_dict()
    out["file_count"] = stats.file_count
    return out


def locs_diff_to_dict(diff: LocsDiff) -> Dict[str, Any]:
    return {
        "added": diff.added.to_dict(),
        "removed": diff.removed.to_dict(),
        "net": {
            "code": diff.net_code(),
            "docs": diff.net_docs(),
            "comments": diff.net_comments(),
            "blanks": diff.net_blanks(),
            "all": diff.net_all(),
        },
    }


def stats_diff_to_dict(diff: LocStatsDiff) -> Dict[str, Any]:
    out = {ctx.value: locs_diff_to_dict(diff.get(ctx)) for ctx in Context}
    out["total"] = locs_diff_to_dict(diff.total)
    return out


def _failed_list(failed: List[FailedFile]) -> List[Dict[str, str]]:
    return [{"path": f.path, "reason": f.reason} for f in failed]


def count_to_dict(
    result: CountResult,
    *,
    by_file: bool = False,
    by_crate: bool = False,
    by_module: bool = False,
) -> Dict[str, Any]:
    """Convert a CountResult to a JSON-serialisable dict."""
    data: Dict[str, Any] = {
        "version": REPORT_VERSION,
        "kind": "count",
        "root": result.root,
        "file_count": result.file_count,
        "total": stats_to_dict(result.total),
    }
    if by_crate:
        data["crates"] = [
            {
                "name": c.name,
                "path": c.path,
                "stats": stats_to_dict(c.stats),
            }
            for c in result.crates
        ]
    if by_module:
        data["modules"] = [
            {"name": m.name, "files": list(m.files), "stats": stats_to_dict(m.stats)}
            for m in result.modules
        ]
    if by_file:
        data["files"] = [{"path": f.path, "stats": stats_to_dict(f.stats)} for f in result.files]
    data["failed"] = _failed_list(result.failed)
    data["duration_ms"] = result.duration_ms
    return data


def diff_to_dict(result: DiffResult, *, by_file: bool = False, by_crate: bool = False) -> Dict[str, Any]:
    """Convert a DiffResult to a JSON-serialisable dict."""
    data: Dict[str, Any] = {
        "version": REPORT_VERSION,
        "kind": "diff",
        "root": result.root,
        "from": result.from_ref,
        "to": result.to_ref,
        "total": stats_diff_to_dict(result.total),
    }
    if by_crate:
        data["crates"] = [
            {"name": c.name, "path": c.path, "diff": stats_diff_to_dict(c.diff)}
            for c in result.crates
        ]
    if by_file:
        data["files"] = [
            {
                "path": f.path,
                "status": f.status,
                **({"old_path": f.old_path} if f.old_path else {}),
                "diff": stats_diff_to_dict(f.diff),
            }
            for f in result.files
        ]
    data["unclassified"] = {
        "added": result.unclassified_added,
        "removed": result.unclassified_removed,
    }
    data["binary_files"] = list(result.binary_files)
    data["failed"] = _failed_list(result.failed)
    data["duration_ms"] = result.duration_ms
    return data


def to_dict(
    result: Union[CountResult, DiffResult],
    *,
    by_file: bool = False,
    by_crate: bool = False,
    by_module: bool = False,
) -> Dict[str, Any]:
    if isinstance(result, DiffResult):
        return diff_to_dict(result, by_file=by_file, by_crate=by_crate)
    return count_to_dict(result, by_file=by_file, by_crate=by_crate, by_module=by_module)


def render(
    result: Union[CountResult, DiffResult],
    *,
    by_file: bool = False,
    by_crate: bool = False,
    by_module: bool = False,
) -> str:
    """Return formatted JSON string."""
    data = to_dict(result, by_file=by_file, by_crate=by_crate, by_module=by_module)
    return json.dumps(data, indent=2)
