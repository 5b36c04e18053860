"""CSV reporter — one row per (scope, context)."""

from __future__ import annotations

import csv
import io
from typing import Dict, Iterator, List, Union

from rsloc.stats.models import Context, CountResult, DiffResult, LocsDiff, LocStats, LocStatsDiff

_LOC_FIELDS = ["code", "docs", "comments", "blanks", "all"]

COUNT_COLUMNS = ["scope", "name", "context", *_LOC_FIELDS]
DIFF_COLUMNS = [
    "scope",
    "name",
    "context",
    *(f"added_{f}" for f in _LOC_FIELDS),
    *(f"removed_{f}" for f in _LOC_FIELDS),
    *(f"net_{f}" for f in _LOC_FIELDS),
]


def _stats_rows(scope: str, name: str, stats: LocStats) -> Iterator[Dict[str, object]]:
    for context in Context:
        yield {"scope": scope, "name": name, "context": context.value, **stats.get(context).to_dict()}
    yield {"scope": scope, "name": name, "context": "total", **stats.total.to_dict()}


def _diff_row(scope: str, name: str, context: str, diff: LocsDiff) -> Dict[str, object]:
    row: Dict[str, object] = {"scope": scope, "name": name, "context": context}
    for f in _LOC_FIELDS:
        added = getattr(diff.added, f)
        removed = getattr(diff.removed, f)
        row[f"added_{f}"] = added
        row[f"removed_{f}"] = removed
        row[f"net_{f}"] = added - removed
    return row


def _diff_rows(scope: str, name: str, diff: LocStatsDiff) -> Iterator[Dict[str, object]]:
    for context in Context:
        yield _diff_row(scope, name, context.value, diff.get(context))
    yield _diff_row(scope, name, "total", diff.total)


def count_rows(
    result: CountResult,
    *,
    by_file: bool = False,
    by_crate: bool = False,
    by_module: bool = False,
) -> List[Dict[str, object]]:
    rows = list(_stats_rows("total", result.root, result.total))
    if by_crate:
        for crate in result.crates:
            rows.extend(_stats_rows("crate", crate.name, crate.stats))
    if by_module:
        for module in result.modules:
            rows.extend(_stats_rows("module", module.name, module.stats))
    if by_file:
        for file_stats in result.files:
            rows.extend(_stats_rows("file", file_stats.path, file_stats.stats))
    return rows


def diff_rows(result: DiffResult, *, by_file: bool = False, by_crate: bool = False) -> List[Dict[str, object]]:
    rows = list(_diff_rows("total", f"{result.from_ref}..{result.to_ref}", result.total))
    if by_crate:
        for crate in result.crates:
            rows.extend(_diff_rows("crate", crate.name, crate.diff))
    if by_file:
        for file_diff in result.files:
            rows.extend(_diff_rows("file", file_diff.path, file_diff.diff))
    return rows


def render(
    result: Union[CountResult, DiffResult],
    *,
    by_file: bool = False,
    by_crate: bool = False,
    by_module: bool = False,
) -> str:
    """Return the CSV text, header row first."""
    buf = io.StringIO()
    if isinstance(result, DiffResult):
        writer = csv.DictWriter(buf, fieldnames=DIFF_COLUMNS, lineterminator="\n")
        rows = diff_rows(result, by_file=by_file, by_crate=by_crate)
    else:
        writer = csv.DictWriter(buf, fieldnames=COUNT_COLUMNS, lineterminator="\n")
        rows = count_rows(result, by_file=by_file, by_crate=by_crate, by_module=by_module)
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue()
