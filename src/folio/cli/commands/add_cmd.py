# ABOUTME: The `folio add` command for creating a work outside of sync.
# ABOUTME: Rejects empty titles and keys that already exist in the catalog.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from folio.cli.options import db_option
from folio.db.catalog import DuplicateWorkError, WorkCatalog
from folio.db.connection import DEFAULT_DB_PATH, open_catalog

console = Console()


@click.command("add")
@click.argument("title")
@click.option(
    "-k", "--key",
    default=None,
    help="Catalog key (default: the title). Slashes become dashes.",
)
@db_option
def add(title: str, key: str | None, db_path: Path | None) -> None:
    """Create an empty work with TITLE."""
    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        catalog = WorkCatalog(conn)
        work_id = catalog.create_work(title, key=key)
        record = catalog.get_by_id(work_id)
    except (ValueError, DuplicateWorkError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    created_key = record.key if record else ""
    console.print(f"Created work {work_id} with key [cyan]{escape(created_key)}[/cyan].")
