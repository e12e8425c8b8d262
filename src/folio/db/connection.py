# ABOUTME: Opens the Folio catalog database and brings its schema up to date.
# ABOUTME: Creates the file on first use, then applies each pending migration in version order.

import logging
import sqlite3
from pathlib import Path

from folio.db.schema import MIGRATIONS, SCHEMA_V1

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".folio" / "catalog.db"

# Seconds to wait on a lock held by another process (e.g. a reader during sync)
_BUSY_TIMEOUT = 10.0


def _get_schema_version(conn: sqlite3.Connection) -> int:
    """Highest applied schema version, or 0 for an empty database."""
    has_table = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
    ).fetchone()
    if has_table is None:
        return 0
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] or 0


def _ensure_schema(conn: sqlite3.Connection) -> None:
    """Create the base schema if missing, then run newer migrations one by one."""
    version = _get_schema_version(conn)
    if version == 0:
        logger.debug("Creating catalog schema v1")
        conn.executescript(SCHEMA_V1)
        version = 1

    for target, script in MIGRATIONS:
        if target <= version:
            continue
        logger.debug("Migrating catalog schema to v%d", target)
        conn.executescript(f"BEGIN;\n{script}\nCOMMIT;")
        version = target


def open_catalog(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the Folio catalog database.

    Parent directories are created as needed. The returned connection uses
    WAL journaling, enforces foreign keys (so page rows cascade with their
    work) and yields sqlite3.Row rows.

    Args:
        path: Database file. Defaults to DEFAULT_DB_PATH.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), timeout=_BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    _ensure_schema(conn)
    return conn
