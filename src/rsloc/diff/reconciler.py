"""Diff reconciler — per-context added/removed counts for one file pair.

Both revisions are classified in full, from line 1, before any hunk is looked
at: comment depth, raw-string delimiters and test scopes all depend on
everything above a hunk, so classifying only the changed lines would be wrong
as soon as a hunk sits inside a block comment or a ``mod tests``.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from rsloc.git.models import Hunk
from rsloc.scanner.engine import classify_file
from rsloc.scanner.resolver import ClassifiedLine
from rsloc.stats.aggregator import locs_for
from rsloc.stats.models import Context, LineType, LocsDiff, LocStatsDiff


class ReconciliationError(Exception):
    """Raised when a hunk references lines the content does not have."""


def _check_range(side: str, start: int, length: int, total: int) -> None:
    if length < 0 or start < 0:
        raise ReconciliationError(f"invalid {side} range {start},{length}")
    if length == 0:
        # Pure insertion/deletion: start names the line the change follows.
        if start > total:
            raise ReconciliationError(
                f"{side} range {start},0 is past the end of a {total}-line file"
            )
        return
    if start < 1 or start + length - 1 > total:
        raise ReconciliationError(
            f"{side} range {start},{length} is outside a {total}-line file"
        )


def _select(lines: List[ClassifiedLine], start: int, length: int) -> List[ClassifiedLine]:
    if length == 0:
        return []
    return lines[start - 1 : start - 1 + length]


def _tally(lines: Iterable[ClassifiedLine]) -> Dict[Context, List[LineType]]:
    per_context: Dict[Context, List[LineType]] = {ctx: [] for ctx in Context}
    for context, line_type in lines:
        per_context[context].append(line_type)
    return per_context


def _build(added: Iterable[ClassifiedLine], removed: Iterable[ClassifiedLine]) -> LocStatsDiff:
    plus = _tally(added)
    minus = _tally(removed)
    diffs = {
        ctx: LocsDiff(added=locs_for(plus[ctx]), removed=locs_for(minus[ctx]))
        for ctx in Context
    }
    return LocStatsDiff(
        production=diffs[Context.PRODUCTION],
        test=diffs[Context.TEST],
        example=diffs[Context.EXAMPLE],
    )


def reconcile(
    old_content: Optional[str],
    new_content: Optional[str],
    hunks: Iterable[Hunk],
    base_context: Context = Context.PRODUCTION,
    old_base_context: Optional[Context] = None,
) -> LocStatsDiff:
    """Count the lines each hunk removes from *old_content* and adds to *new_content*.

    ``None`` stands for a side that does not exist: a file only in the new
    revision counts entirely as added, a file only in the old one entirely as
    removed, and *hunks* are not consulted. Raises ReconciliationError when a
    hunk points outside the content; ranges are never truncated.

    *old_base_context* is the old revision's starting context when it differs
    from the new one (a file renamed into or out of ``tests/``); it defaults to
    *base_context*.
    """
    if old_content is None and new_content is None:
        return LocStatsDiff()

    if old_base_context is None:
        old_base_context = base_context
    old_lines = classify_file(old_content, old_base_context) if old_content is not None else []
    new_lines = classify_file(new_content, base_context) if new_content is not None else []

    if old_content is None:
        return _build(added=new_lines, removed=[])
    if new_content is None:
        return _build(added=[], removed=old_lines)

    added: List[ClassifiedLine] = []
    removed: List[ClassifiedLine] = []
    for hunk in hunks:
        _check_range("old", hunk.old_start, hunk.old_len, len(old_lines))
        _check_range("new", hunk.new_start, hunk.new_len, len(new_lines))
        removed.extend(_select(old_lines, hunk.old_start, hunk.old_len))
        added.extend(_select(new_lines, hunk.new_start, hunk.new_len))

    return _build(added=added, removed=removed)
