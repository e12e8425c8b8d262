# ABOUTME: The `folio ls` command for listing cataloged works.
# ABOUTME: Displays a Rich table of all works in the catalog database.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from folio.cli.options import db_option
from folio.db.catalog import WorkCatalog
from folio.db.connection import DEFAULT_DB_PATH, open_catalog

console = Console()


@click.command("ls")
@db_option
def ls(db_path: Path | None) -> None:
    """List all works in the catalog."""
    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        catalog = WorkCatalog(conn)
        records = catalog.list_all()
        counts = catalog.page_counts()
    finally:
        conn.close()

    if not records:
        console.print("[yellow]No works in the catalog.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Key")
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Pages", justify="right")
    table.add_column("Rating", width=6)

    for record in records:
        table.add_row(
            str(record.id),
            escape(record.key),
            escape(record.title),
            escape(record.metadata.category or ""),
            str(counts.get(record.id, 0)),
            str(record.rating) if record.rating is not None else "",
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} work(s)[/dim]")
