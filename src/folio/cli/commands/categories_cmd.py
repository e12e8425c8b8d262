# ABOUTME: The `folio categories` command for listing distinct work categories.
# ABOUTME: Prints one category per line in natural order.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from folio.cli.options import db_option
from folio.db.catalog import WorkCatalog
from folio.db.connection import DEFAULT_DB_PATH, open_catalog

console = Console()


@click.command("categories")
@db_option
def categories(db_path: Path | None) -> None:
    """List the distinct categories in the catalog."""
    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        names = WorkCatalog(conn).list_categories()
    finally:
        conn.close()

    if not names:
        console.print("[yellow]No categories in the catalog.[/yellow]")
        return

    for name in names:
        console.print(escape(name))
