# ABOUTME: The `folio rate` command for setting or clearing a work's rating.
# ABOUTME: Ratings are integers from 1 to 5; sync never modifies them.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from folio.cli.options import db_option
from folio.db.catalog import WorkCatalog
from folio.db.connection import DEFAULT_DB_PATH, open_catalog

console = Console()


@click.command("rate")
@click.argument("work_id", type=int)
@click.argument("rating", type=int, required=False)
@click.option("--clear", is_flag=True, default=False, help="Remove the rating.")
@db_option
def rate(work_id: int, rating: int | None, clear: bool, db_path: Path | None) -> None:
    """Set the RATING (1-5) of a work, or --clear it."""
    if clear == (rating is not None):
        console.print("[red]Give either a rating or --clear.[/red]")
        raise SystemExit(1)

    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        WorkCatalog(conn).set_rating(work_id, None if clear else rating)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(1) from exc
    finally:
        conn.close()

    if clear:
        console.print(f"Cleared rating of work {work_id}.")
    else:
        console.print(f"Rated work {work_id}: [bold]{rating}[/bold]/5.")
