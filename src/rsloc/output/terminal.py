"""Rich terminal reporter — line count tables and run summaries."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from rsloc.scanner.resolver import ClassifiedLine
from rsloc.stats.models import (
    Context,
    CountResult,
    DiffResult,
    FailedFile,
    Locs,
    LocsDiff,
    LocStats,
    LocStatsDiff,
)

_COUNT_FIELDS = ("code", "docs", "comments", "blanks", "all")
_BREAKDOWN_HEADERS = ("Code", "Tests", "Examples", "Docs", "Comments", "Blanks", "Total")

_CONTEXT_STYLE = {
    Context.PRODUCTION: "cyan",
    Context.TEST: "green",
    Context.EXAMPLE: "magenta",
}


def _new_table(title: str, label: str, headers: Sequence[str]) -> Table:
    table = Table(title=title, title_style="bold", border_style="dim")
    table.add_column(label, style="bold")
    for header in headers:
        table.add_column(header, justify="right")
    return table


def _breakdown_values(stats: LocStats) -> List[int]:
    """Code/Tests/Examples are code lines per context; the rest are totals."""
    total = stats.total
    return [
        stats.production.code,
        stats.test.code,
        stats.example.code,
        total.docs,
        total.comments,
        total.blanks,
        total.all,
    ]


def _diff_cell(added: int, removed: int) -> Text:
    cell = Text()
    cell.append(f"+{added}", style="green")
    cell.append("/")
    cell.append(f"-{removed}", style="red")
    cell.append(f"/{added - removed}")
    return cell


def _breakdown_diff_cells(diff: LocStatsDiff) -> List[Text]:
    total = diff.total
    pairs = [
        (diff.production.added.code, diff.production.removed.code),
        (diff.test.added.code, diff.test.removed.code),
        (diff.example.added.code, diff.example.removed.code),
        (total.added.docs, total.removed.docs),
        (total.added.comments, total.removed.comments),
        (total.added.blanks, total.removed.blanks),
        (total.added.all, total.removed.all),
    ]
    return [_diff_cell(a, r) for a, r in pairs]


def count_table(stats: LocStats, title: str = "Lines of code") -> Table:
    """One row per context plus a total row."""
    table = _new_table(title, "Context", [f.capitalize() for f in _COUNT_FIELDS])
    for context in Context:
        locs: Locs = stats.get(context)
        table.add_row(
            Text(context.value.capitalize(), style=_CONTEXT_STYLE[context]),
            *(str(getattr(locs, f)) for f in _COUNT_FIELDS),
        )
    table.add_section()
    table.add_row("Total", *(str(getattr(stats.total, f)) for f in _COUNT_FIELDS))
    return table


def diff_table(diff: LocStatsDiff, title: str = "Line changes") -> Table:
    """One row per context plus a total row; cells read ``+added/-removed/net``."""
    table = _new_table(title, "Context", [f.capitalize() for f in _COUNT_FIELDS])

    def cells(d: LocsDiff) -> List[Text]:
        return [_diff_cell(getattr(d.added, f), getattr(d.removed, f)) for f in _COUNT_FIELDS]

    for context in Context:
        table.add_row(
            Text(context.value.capitalize(), style=_CONTEXT_STYLE[context]),
            *cells(diff.get(context)),
        )
    table.add_section()
    table.add_row("Total", *cells(diff.total))
    return table


def render_count(
    result: CountResult,
    *,
    console: Console,
    by_file: bool = False,
    by_crate: bool = False,
    by_module: bool = False,
) -> None:
    """Print the count tables for *result* to *console*."""
    if by_crate and result.crates:
        table = _new_table("Crates", "Crate", _BREAKDOWN_HEADERS)
        for crate in result.crates:
            table.add_row(escape(crate.name), *(str(v) for v in _breakdown_values(crate.stats)))
        console.print(table)

    if by_module and result.modules:
        table = _new_table("Modules", "Module", _BREAKDOWN_HEADERS)
        for module in result.modules:
            table.add_row(escape(module.name), *(str(v) for v in _breakdown_values(module.stats)))
        console.print(table)

    if by_file and result.files:
        table = _new_table("Files", "File", _BREAKDOWN_HEADERS)
        for file_stats in result.files:
            table.add_row(escape(file_stats.path), *(str(v) for v in _breakdown_values(file_stats.stats)))
        console.print(table)

    console.print(count_table(result.total))


def render_diff(
    result: DiffResult,
    *,
    console: Console,
    by_file: bool = False,
    by_crate: bool = False,
) -> None:
    """Print the diff tables for *result* to *console*."""
    if by_crate and result.crates:
        table = _new_table("Crates", "Crate", _BREAKDOWN_HEADERS)
        for crate in result.crates:
            table.add_row(escape(crate.name), *_breakdown_diff_cells(crate.diff))
        console.print(table)

    if by_file and result.files:
        table = _new_table("Files", "File", _BREAKDOWN_HEADERS)
        for file_diff in result.files:
            label = file_diff.path
            if file_diff.old_path:
                label = f"{file_diff.old_path} → {file_diff.path}"
            table.add_row(escape(label), *_breakdown_diff_cells(file_diff.diff))
        console.print(table)

    console.print(diff_table(result.total, title=f"{result.from_ref} → {result.to_ref}"))


def render_lines(console: Console, path: str, lines: Iterable[ClassifiedLine], source: Sequence[str]) -> None:
    """Print a per-line ``context type | text`` trace of one file."""
    table = Table(title=escape(path), title_style="bold", border_style="dim", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Context")
    table.add_column("Type")
    table.add_column("Source", overflow="fold")
    for line_no, (classified, text) in enumerate(zip(lines, source), start=1):
        table.add_row(
            str(line_no),
            Text(classified.context.value, style=_CONTEXT_STYLE[classified.context]),
            classified.line_type.value,
            Text(text),
        )
    console.print(table)


def print_failed(console: Console, failed: Sequence[FailedFile]) -> None:
    if not failed:
        return
    console.print()
    console.print(f"[bold yellow]⚠️  {len(failed)} file(s) could not be read:[/bold yellow]")
    for item in failed:
        console.print(f"  [magenta]{escape(item.path)}[/magenta]: {escape(item.reason)}")


def print_count_summary(console: Console, result: CountResult) -> None:
    console.print()
    console.print(f"[dim]Files counted:[/dim]  {result.file_count}")
    if result.crates:
        console.print(f"[dim]Crates:[/dim]         {len(result.crates)}")
    if result.modules:
        console.print(f"[dim]Modules:[/dim]        {len(result.modules)}")
    console.print(f"[dim]Failed:[/dim]         {len(result.failed)}")
    console.print(f"[dim]Duration:[/dim]       {result.duration_ms:.0f}ms")


def print_diff_summary(console: Console, result: DiffResult) -> None:
    console.print()
    console.print(f"[dim]Rust files changed:[/dim]  {len(result.files)}")
    console.print(
        f"[dim]Other text files:[/dim]    +{result.unclassified_added}/-{result.unclassified_removed}"
    )
    if result.binary_files:
        console.print(f"[dim]Binary files:[/dim]        {len(result.binary_files)}")
    console.print(f"[dim]Failed:[/dim]              {len(result.failed)}")
    console.print(f"[dim]Duration:[/dim]            {result.duration_ms:.0f}ms")
