# ABOUTME: Shared Click options for Folio CLI commands.
# ABOUTME: Provides reusable decorators for common flags like --db.

from pathlib import Path

import click

from folio.db.connection import DEFAULT_DB_PATH

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="FOLIO_DB",
    default=None,
    help=f"Path to catalog database (env FOLIO_DB, default: {DEFAULT_DB_PATH})",
)
