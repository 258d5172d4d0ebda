"""CLI for source-bundle."""

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .bundle_service import BundleDeps, BundleService
from .config import load_bundle_config
from .context import ProjectContext
from .core import ChangeKind, VersionChanges
from .errors import ConfigError, EnumerationError
from .service_types import BuildResult
from .snapshot import SnapshotStore
from .utils import humanize_size


app = typer.Typer(help="""\
Bundle a project's tracked source files into a single artifact for an
in-app source viewer, and report what changed since the last version.""")

console = Console()


CHANGE_MARKERS = {
    ChangeKind.ADDED: "[green]+[/green]",
    ChangeKind.MODIFIED: "[yellow]~[/yellow]",
    ChangeKind.DELETED: "[red]-[/red]",
}


def _configure_logging(verbose: bool) -> None:
    if verbose or os.environ.get("DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _make_service(
    root: Optional[Path],
    output: Optional[Path] = None,
    fmt: Optional[str] = None,
    snapshot: Optional[Path] = None,
) -> BundleService:
    """Build a service for ``root`` with CLI overrides applied.

    Raises:
        typer.Exit: If the root or the configuration is invalid
    """
    target = Path(root or Path.cwd()).resolve()
    if not target.is_dir():
        console.print(f"[red]✗[/red] Invalid directory: {target}")
        raise typer.Exit(1)

    try:
        settings = load_bundle_config(target).with_overrides(
            output=str(output) if output else None,
            format=fmt,
            snapshot_file=str(snapshot) if snapshot else None,
        )
    except ConfigError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    ctx = ProjectContext(target, settings=settings)
    return BundleService(deps=BundleDeps(ctx=ctx, store=SnapshotStore(ctx.snapshot_path)))


def display_changes(changes: VersionChanges, limit: Optional[int] = None) -> None:
    """Print a change table and summary line."""
    summary = changes.summary
    console.print(
        f"\n[bold]Changes from {changes.from_version} → {changes.to_version}:[/bold]"
    )
    console.print(
        f"  [green]+{summary.added_count} added[/green], "
        f"[yellow]~{summary.modified_count} modified[/yellow], "
        f"[red]-{summary.deleted_count} deleted[/red]"
    )
    console.print(f"  +{summary.total_additions} / -{summary.total_deletions} lines")

    if not changes.changes:
        return

    rows = changes.changes if limit is None else changes.changes[:limit]
    table = Table()
    table.add_column("", width=1)
    table.add_column("Path", style="cyan")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    for change in rows:
        table.add_row(CHANGE_MARKERS[change.kind], change.path, str(change.additions), str(change.deletions))
    console.print(table)

    hidden = len(changes.changes) - len(rows)
    if hidden > 0:
        console.print(f"[dim]… and {hidden} more[/dim]")


def display_build(result: BuildResult) -> None:
    bundle = result.bundle
    stats = bundle.stats

    console.print(f"[bold]Version:[/bold] {bundle.version}")
    if result.previous_version:
        console.print(f"[bold]Previous version:[/bold] {result.previous_version}")
    console.print(f"Found {stats.total_files} text files and {stats.total_images} images")

    if result.changes is not None and result.changes.has_changes:
        display_changes(result.changes, limit=20)
    elif result.changes is not None:
        console.print(f"\n[dim]No file changes since {result.changes.from_version}[/dim]")
    elif result.same_version:
        console.print(f"\n[dim]Same version ({bundle.version}) - no changes tracked[/dim]")

    if result.snapshot_written:
        console.print(f"\n[green]✓[/green] Snapshot saved for version {bundle.version}")

    for warning in result.warnings:
        console.print(f"[yellow]⚠[/yellow] {warning}")

    console.print("\n[green]✓[/green] Source bundle generated")
    console.print(
        f"  Files: {stats.total_files} (+ {stats.total_images} images), "
        f"{humanize_size(stats.total_size)} uncompressed"
    )
    if result.output_path is not None:
        console.print(f"  Output: {result.output_path}")

    if stats.languages:
        table = Table(title="Languages")
        table.add_column("Extension", style="cyan")
        table.add_column("Files", justify="right")
        for ext, count in sorted(stats.languages.items(), key=lambda kv: (-kv[1], kv[0])):
            table.add_row(ext, str(count))
        console.print(table)


@app.command()
def generate(
    root: Optional[Path] = typer.Argument(None, help="Project root (default: current directory)"),
    version: Optional[str] = typer.Option(None, "--version", "-V", help="Version label (default: from package.json or pyproject.toml)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file, relative to the project root"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: ts or json"),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Snapshot file, relative to the project root"),
    no_snapshot: bool = typer.Option(False, "--no-snapshot", help="Do not update the snapshot"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Generate the source bundle.

    A new snapshot is written on the first run and whenever the version label
    changes. Rebuilding the same version never touches the snapshot.

    Examples:
        source-bundle generate                      # Bundle the current project
        source-bundle generate -V 1.2.0 -f json     # Explicit version, JSON output
        source-bundle generate --no-snapshot        # Preview without updating the snapshot
    """
    _configure_logging(verbose)
    service = _make_service(root, output=output, fmt=fmt, snapshot=snapshot)

    try:
        result = service.generate(version, write_snapshot=not no_snapshot)
    except EnumerationError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]✗[/red] Could not write bundle: {e}")
        raise typer.Exit(1)

    display_build(result)


@app.command()
def status(
    root: Optional[Path] = typer.Argument(None, help="Project root (default: current directory)"),
    version: Optional[str] = typer.Option(None, "--version", "-V", help="Version label (default: from package.json or pyproject.toml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Show changes between the stored snapshot and the working tree.

    Nothing is written.
    """
    _configure_logging(verbose)
    service = _make_service(root)

    try:
        report = service.status(version)
    except EnumerationError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    for warning in report.warnings:
        console.print(f"[yellow]⚠[/yellow] {warning}")

    if not report.has_snapshot:
        console.print("[dim]No snapshot yet - the next generate will create one[/dim]")
        return

    console.print(f"[bold]Snapshot:[/bold] {report.snapshot_version} ({report.snapshot_date})")
    console.print(f"[bold]Current version:[/bold] {report.version}")
    if report.up_to_date:
        console.print("[green]✓[/green] No changes since the snapshot")
    else:
        display_changes(report.changes)


def main():
    app()


if __name__ == "__main__":
    main()
