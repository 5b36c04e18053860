"""Fold classified lines into line counts."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Tuple

from rsloc.stats.models import Context, LineType, Locs, LocStats


def locs_for(line_types: Iterable[LineType]) -> Locs:
    """Count a sequence of line types into a single :class:`Locs`."""
    counts = Counter(line_types)
    return Locs(
        code=counts[LineType.CODE],
        docs=counts[LineType.DOC],
        comments=counts[LineType.COMMENT],
        blanks=counts[LineType.BLANK],
    )


def aggregate(lines: Iterable[Tuple[Context, LineType]], *, file_count: int = 1) -> LocStats:
    """Fold one file's ``(context, line_type)`` sequence into a :class:`LocStats`."""
    per_context: dict[Context, list[LineType]] = {ctx: [] for ctx in Context}
    for context, line_type in lines:
        per_context[context].append(line_type)

    return LocStats(
        production=locs_for(per_context[Context.PRODUCTION]),
        test=locs_for(per_context[Context.TEST]),
        example=locs_for(per_context[Context.EXAMPLE]),
        file_count=file_count,
    )


def combine(stats: Iterable[LocStats]) -> LocStats:
    """Pointwise sum of many :class:`LocStats`; order does not matter."""
    total = LocStats()
    for item in stats:
        total = total + item
    return total
