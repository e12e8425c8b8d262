# ABOUTME: The `folio sync` command for reconciling the catalog with a media root.
# ABOUTME: Scans work directories, upserts works and pages, and optionally prunes stale works.

import sqlite3
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from folio.cli.options import db_option
from folio.core.scanner import RootUnreadableError, WorkEntry
from folio.core.sync import DEFAULT_WORKERS, CatalogSync
from folio.db.catalog import WorkCatalog
from folio.db.connection import DEFAULT_DB_PATH, open_catalog

console = Console()


def _print_work(entry: WorkEntry) -> None:
    console.print(f"Synced [bold]{escape(entry.key)}[/bold] ({entry.page_count} pages)")


@click.command("sync")
@click.option(
    "-r", "--root",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=["FOLIO_ROOT", "MEDIA_ROOT"],
    required=True,
    help="Media root whose subdirectories are works (env FOLIO_ROOT or MEDIA_ROOT).",
)
@db_option
@click.option(
    "--prune/--no-prune",
    default=False,
    help="Delete catalog works whose directory no longer exists.",
)
@click.option(
    "-w", "--workers",
    type=click.IntRange(min=1),
    default=DEFAULT_WORKERS,
    show_default=True,
    help="Number of directories scanned concurrently.",
)
def sync(root: Path, db_path: Path | None, prune: bool, workers: int) -> None:
    """Sync the catalog with the work directories under the media root."""
    root = root.resolve()
    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        syncer = CatalogSync(WorkCatalog(conn), workers=workers)
        result = syncer.sync(root, prune=prune, on_work=_print_work)
    except RootUnreadableError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(1) from exc
    except sqlite3.Error as exc:
        console.print(f"[red]Catalog write failed: {escape(str(exc))}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    # Summary
    summary = f"Sync finished: [green]{result.processed} work(s) processed[/green]"
    if prune:
        summary += f", [yellow]{len(result.pruned)} pruned[/yellow]"
    console.print(f"\n{summary}")

    if result.issues:
        console.print(f"\n[yellow]{len(result.issues)} issue(s) recovered from:[/yellow]")
        for path, msg in result.issues:
            console.print(f"  [dim]{escape(str(path))}:[/dim] {escape(msg)}")
