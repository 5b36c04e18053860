"""rsloc CLI — Typer application with count, diff, lines, and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union

import typer
from rich.console import Console

from rsloc import __version__
from rsloc.config.schema import OUTPUT_FORMATS, RslocConfig
from rsloc.stats.models import Context, CountResult, DiffResult, parse_contexts

app = typer.Typer(
    name="rsloc",
    help="Count Rust lines of code, split into production, test and example code.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _load(root: Path, config: Optional[str]) -> RslocConfig:
    """Load config for *root*, exit 2 on failure."""
    from rsloc.config.loader import ConfigError, load_config

    try:
        return load_config(root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _apply_overrides(
    cfg: RslocConfig,
    *,
    include: Optional[List[str]],
    exclude: Optional[List[str]],
    format: Optional[str],
    jobs: Optional[int],
    by_file: bool,
    by_crate: bool = False,
    by_module: bool = False,
    crates: Optional[List[str]] = None,
    types: Optional[List[str]] = None,
) -> None:
    """CLI flags win over config and environment."""
    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if include:
        cfg.count.include.extend(include)
    if exclude:
        cfg.count.exclude.extend(exclude)
    if crates:
        cfg.count.crates = list(crates)
    if types:
        cfg.count.types = [t for value in types for t in value.split(",")]
    if jobs is not None:
        if jobs < 0:
            console.print(f"[bold red]Invalid job count:[/bold red] {jobs}")
            raise typer.Exit(code=2)
        cfg.count.jobs = jobs
    cfg.output.by_file = cfg.output.by_file or by_file
    cfg.output.by_crate = cfg.output.by_crate or by_crate
    cfg.output.by_module = cfg.output.by_module or by_module


def _contexts(cfg: RslocConfig) -> frozenset[Context]:
    try:
        return parse_contexts(cfg.count.types)
    except ValueError as exc:
        console.print(f"[bold red]Invalid type:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _print_settings(cfg: RslocConfig, root: Path) -> None:
    console.print(f"[dim]Root: {root}[/dim]")
    console.print(f"[dim]Include: {cfg.count.include or ['*']}[/dim]")
    console.print(f"[dim]Exclude: {cfg.count.exclude}[/dim]")
    if cfg.count.crates:
        console.print(f"[dim]Crates: {cfg.count.crates}[/dim]")
    if cfg.count.types:
        console.print(f"[dim]Types: {cfg.count.types}[/dim]")
    console.print(f"[dim]Jobs: {cfg.count.jobs or 'auto'}[/dim]")
    console.print(f"[dim]Format: {cfg.output.format}[/dim]")


def _emit(result: Union[CountResult, DiffResult], cfg: RslocConfig, output: Optional[str], verbose: bool) -> None:
    """Render *result* in the configured format and optionally write it to a file."""
    from rsloc.output import csv_report, json_report, terminal, yaml_report

    by_file = cfg.output.by_file
    by_crate = cfg.output.by_crate
    by_module = cfg.output.by_module
    report_text: Optional[str] = None

    if cfg.output.format == "table":
        out = Console()
        if isinstance(result, DiffResult):
            terminal.render_diff(result, console=out, by_file=by_file, by_crate=by_crate)
        else:
            terminal.render_count(
                result, console=out, by_file=by_file, by_crate=by_crate, by_module=by_module,
            )
        if cfg.output.show_summary:
            if isinstance(result, DiffResult):
                terminal.print_diff_summary(console, result)
            else:
                terminal.print_count_summary(console, result)
        terminal.print_failed(console, result.failed)
    else:
        renderer = {"json": json_report, "csv": csv_report, "yaml": yaml_report}[cfg.output.format]
        report_text = renderer.render(result, by_file=by_file, by_crate=by_crate, by_module=by_module)
        print(report_text, end="" if report_text.endswith("\n") else "\n")

    if output:
        if report_text is None:
            # Table output is for people; files get JSON.
            report_text = json_report.render(result, by_file=by_file, by_crate=by_crate, by_module=by_module)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")


def _exit_for(result: Union[CountResult, DiffResult], cfg: RslocConfig) -> None:
    if result.failed and cfg.count.fail_on_error:
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── count ─────────────────────────────────────────────────────────────────────


@app.command()
def count(
    path: Path = typer.Argument(Path("."), help="Directory or file to count"),
    include: Optional[List[str]] = typer.Option(None, "--include", "-i", help="Only count files matching this glob"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Skip files matching this glob"),
    by_file: bool = typer.Option(False, "--by-file", help="Break the totals down per file"),
    by_crate: bool = typer.Option(False, "--by-crate", help="Break the totals down per crate"),
    by_module: bool = typer.Option(False, "--by-module", "-m", help="Break the totals down per module"),
    crate: Optional[List[str]] = typer.Option(None, "--crate", help="Only count this crate (repeatable)"),
    type_: Optional[List[str]] = typer.Option(None, "--type", "-t", help="Contexts to report: code,tests,examples"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: table | json | csv | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .rsloc.toml"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Worker threads (0 = one per CPU)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with timing"),
) -> None:
    """Count lines of Rust code under PATH."""
    from rsloc.scanner.engine import count_paths
    from rsloc.source.discovery import DiscoveryError
    from rsloc.source.filter import FileFilter

    cfg = _load(path, config)
    _apply_overrides(
        cfg, include=include, exclude=exclude, format=format, jobs=jobs,
        by_file=by_file, by_crate=by_crate, by_module=by_module, crates=crate, types=type_,
    )
    contexts = _contexts(cfg)

    if verbose or debug:
        _print_settings(cfg, path)

    file_filter = FileFilter(include=cfg.count.include, exclude=cfg.count.exclude)
    try:
        result = count_paths(
            path,
            file_filter,
            jobs=cfg.count.jobs,
            by_crate=cfg.output.by_crate,
            by_module=cfg.output.by_module,
            crates=cfg.count.crates,
            contexts=contexts,
        )
    except DiscoveryError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if debug:
        console.print(f"[dim]Count duration: {result.duration_ms:.0f}ms[/dim]")

    _emit(result, cfg, output, verbose)
    _exit_for(result, cfg)


# ── diff ──────────────────────────────────────────────────────────────────────


def parse_revisions(revs: List[str], staged: bool) -> Tuple[str, Optional[str]]:
    """Turn CLI revision arguments into ``(base, head)``.

    No revisions compares HEAD with the working tree (or the index with
    ``--staged``). ``A..B`` and ``A B`` compare two commits; a single ``A``
    compares A with HEAD.
    """
    if not revs:
        return "HEAD", None
    if staged:
        raise typer.BadParameter("--staged can only be used without revisions")
    if len(revs) > 2:
        raise typer.BadParameter("expected at most two revisions")
    if len(revs) == 2:
        return revs[0], revs[1]

    rev = revs[0]
    if ".." in rev:
        base, _, head = rev.partition("..")
        if not base or not head or head.startswith("."):
            raise typer.BadParameter(f"invalid revision range {rev!r}; use A..B or A B")
        return base, head
    return rev, "HEAD"


@app.command()
def diff(
    revs: Optional[List[str]] = typer.Argument(None, help="A..B, A B, or A (compared with HEAD)"),
    staged: bool = typer.Option(False, "--staged", "--cached", help="Compare HEAD with the index"),
    path: Path = typer.Option(Path("."), "--path", "-p", help="Any path inside the repository"),
    include: Optional[List[str]] = typer.Option(None, "--include", "-i", help="Only count files matching this glob"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Skip files matching this glob"),
    by_file: bool = typer.Option(False, "--by-file", help="Break the totals down per file"),
    by_crate: bool = typer.Option(False, "--by-crate", help="Break the changes down per crate"),
    crate: Optional[List[str]] = typer.Option(None, "--crate", help="Only count this crate (repeatable)"),
    type_: Optional[List[str]] = typer.Option(None, "--type", "-t", help="Contexts to report: code,tests,examples"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: table | json | csv | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .rsloc.toml"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Worker threads (0 = one per CPU)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with timing"),
) -> None:
    """Count lines added and removed between two revisions."""
    from rsloc.diff.engine import diff_revisions
    from rsloc.git.adapter import GitError, get_repo_root
    from rsloc.source.filter import FileFilter

    base, head = parse_revisions(revs or [], staged)

    if not path.exists():
        console.print(f"[bold red]Error:[/bold red] Path does not exist: {path}")
        raise typer.Exit(code=2)
    try:
        repo_root = get_repo_root(path.resolve() if path.is_dir() else path.resolve().parent)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    cfg = _load(repo_root, config)
    _apply_overrides(
        cfg, include=include, exclude=exclude, format=format, jobs=jobs,
        by_file=by_file, by_crate=by_crate, crates=crate, types=type_,
    )
    contexts = _contexts(cfg)

    if verbose or debug:
        _print_settings(cfg, repo_root)
        console.print(f"[dim]Comparing: {base} → {head or ('index' if staged else 'working tree')}[/dim]")

    file_filter = FileFilter(include=cfg.count.include, exclude=cfg.count.exclude)
    try:
        result = diff_revisions(
            repo_root,
            base,
            head,
            staged=staged,
            file_filter=file_filter,
            jobs=cfg.count.jobs,
            by_crate=cfg.output.by_crate,
            crates=cfg.count.crates,
            contexts=contexts,
        )
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if debug:
        console.print(f"[dim]Diff duration: {result.duration_ms:.0f}ms[/dim]")

    _emit(result, cfg, output, verbose)
    _exit_for(result, cfg)


# ── lines ─────────────────────────────────────────────────────────────────────


@app.command()
def lines(
    file: Path = typer.Argument(..., help="Rust source file to trace"),
) -> None:
    """Show the context and type assigned to every line of FILE."""
    from rsloc.output import terminal
    from rsloc.scanner.engine import classify_file
    from rsloc.scanner.lexer import split_lines
    from rsloc.source.paths import context_for_file
    from rsloc.source.reader import ReadError, read_source

    try:
        content = read_source(file)
    except ReadError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    classified = classify_file(content, context_for_file(file))
    terminal.render_lines(Console(), str(file), classified, split_lines(content))


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    path: Path = typer.Argument(Path("."), help="Directory to write .rsloc.toml into"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .rsloc.toml"),
) -> None:
    """Generate a starter .rsloc.toml."""
    from rsloc.config.defaults import DEFAULT_TOML
    from rsloc.config.loader import CONFIG_FILENAME

    if not path.is_dir():
        console.print(f"[bold red]Error:[/bold red] not a directory: {path}")
        raise typer.Exit(code=2)

    config_path = path / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"rsloc {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """rsloc — Rust lines of code, production vs tests vs examples."""
