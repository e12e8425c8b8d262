# ABOUTME: The `folio info` command for displaying a work and its pages.
# ABOUTME: Looks a work up by numeric ID or by catalog key.

from datetime import datetime, timezone
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from folio.cli.options import db_option
from folio.db.catalog import WorkCatalog
from folio.db.connection import DEFAULT_DB_PATH, open_catalog
from folio.db.mapping import WorkRecord

console = Console()


def _lookup(catalog: WorkCatalog, ref: str) -> WorkRecord | None:
    """Resolve a work reference: all-digit refs try the ID first, then the key."""
    if ref.isdigit():
        record = catalog.get_by_id(int(ref))
        if record is not None:
            return record
    return catalog.get_by_key(ref)


def _format_published(published_at: int) -> str:
    """Render epoch ms as a UTC timestamp, or raw ms when outside datetime's range."""
    try:
        moment = datetime.fromtimestamp(published_at / 1000, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return f"{published_at} ms"
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


@click.command("info")
@click.argument("work")
@db_option
def info(work: str, db_path: Path | None) -> None:
    """Show a work's fields and pages, by ID or key."""
    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        catalog = WorkCatalog(conn)
        record = _lookup(catalog, work)
        pages = catalog.get_pages(record.id) if record else []
    finally:
        conn.close()

    if record is None:
        console.print(f"[red]Work {escape(work)} not found.[/red]")
        raise SystemExit(1)

    meta = record.metadata
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=12)
    table.add_column("Value")

    table.add_row("ID", str(record.id))
    table.add_row("Key", escape(record.key))
    table.add_row("Title", escape(meta.title))
    if meta.category:
        table.add_row("Category", escape(meta.category))
    if meta.tags:
        table.add_row("Tags", escape(", ".join(meta.tags)))
    if meta.published_at is not None:
        table.add_row("Published", _format_published(meta.published_at))
    if record.rating is not None:
        table.add_row("Rating", f"{record.rating}/5")
    table.add_row("Pages", str(len(pages)))
    table.add_row("Added", record.date_added)

    console.print(table)

    if pages:
        page_table = Table()
        page_table.add_column("#", style="dim", justify="right")
        page_table.add_column("Path")
        page_table.add_column("Size", justify="right")
        for page in pages:
            size = f"{page.width}x{page.height}" if page.width and page.height else "?"
            page_table.add_row(str(page.page_index), escape(page.path), size)
        console.print(page_table)
