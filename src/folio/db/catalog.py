# ABOUTME: Read and write operations for the Folio work catalog.
# ABOUTME: Atomic per-work sync upserts, stale-work pruning, manual creation, and ratings.

import sqlite3

from folio.core.keys import natural_key, normalize_key
from folio.core.scanner import WorkEntry
from folio.db.mapping import (
    PageRecord,
    WorkRecord,
    metadata_to_row,
    page_to_row,
    row_to_page,
    row_to_record,
)

# Keeps IN (...) lists under SQLite's bound-parameter limit
_DELETE_CHUNK = 500

MIN_RATING = 1
MAX_RATING = 5


class DuplicateWorkError(Exception):
    """Raised when creating a work whose key already exists."""


class WorkCatalog:
    """Wraps a sqlite3 connection and provides typed access to works and pages."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- Queries ---

    def get_by_id(self, work_id: int) -> WorkRecord | None:
        """Retrieve a work by its row ID."""
        cursor = self._conn.execute("SELECT * FROM works WHERE id = ?", (work_id,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def get_by_key(self, key: str) -> WorkRecord | None:
        """Retrieve a work by its catalog key."""
        cursor = self._conn.execute("SELECT * FROM works WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def list_all(self) -> list[WorkRecord]:
        """Return all works in the catalog, ordered by title."""
        cursor = self._conn.execute("SELECT * FROM works ORDER BY title, key")
        return [row_to_record(row) for row in cursor.fetchall()]

    def list_keys(self) -> list[str]:
        """Return every work key in the catalog."""
        cursor = self._conn.execute("SELECT key FROM works ORDER BY key")
        return [row[0] for row in cursor.fetchall()]

    def list_categories(self) -> list[str]:
        """Return the distinct non-empty categories in natural order."""
        cursor = self._conn.execute(
            "SELECT DISTINCT category FROM works WHERE category IS NOT NULL AND category != ''"
        )
        return sorted((row[0] for row in cursor.fetchall()), key=natural_key)

    def get_pages(self, work_id: int) -> list[PageRecord]:
        """Return a work's pages ordered by page_index."""
        cursor = self._conn.execute(
            "SELECT * FROM pages WHERE work_id = ? ORDER BY page_index",
            (work_id,),
        )
        return [row_to_page(row) for row in cursor.fetchall()]

    def page_counts(self) -> dict[int, int]:
        """Map work ID to its number of pages (works without pages are omitted)."""
        cursor = self._conn.execute(
            "SELECT work_id, COUNT(*) FROM pages GROUP BY work_id"
        )
        return {row[0]: row[1] for row in cursor.fetchall()}

    # --- Sync writes ---

    def sync_work(self, entry: WorkEntry) -> int:
        """Upsert a scanned work and replace its pages in one transaction.

        A new key inserts a work with no rating. An existing key updates only
        the sync-owned columns in place; rating is never written here. All of
        the work's pages are then deleted and the scanned pages inserted.

        Returns:
            The work's row ID.

        Raises:
            sqlite3.Error: If the transaction fails; nothing is committed.
        """
        row = metadata_to_row(entry.metadata)

        with self._conn:
            existing = self._conn.execute(
                "SELECT id FROM works WHERE key = ?", (entry.key,)
            ).fetchone()

            if existing is None:
                columns = ", ".join(["key", *row.keys()])
                placeholders = ", ".join("?" for _ in range(len(row) + 1))
                cursor = self._conn.execute(
                    f"INSERT INTO works ({columns}) VALUES ({placeholders})",
                    [entry.key, *row.values()],
                )
                work_id = cursor.lastrowid
            else:
                work_id = existing[0]
                set_clause = ", ".join(f"{k} = ?" for k in row)
                self._conn.execute(
                    f"UPDATE works SET {set_clause} WHERE id = ?",
                    [*row.values(), work_id],
                )

            self._conn.execute("DELETE FROM pages WHERE work_id = ?", (work_id,))
            if entry.pages:
                self._conn.executemany(
                    "INSERT INTO pages (work_id, page_index, path, width, height, ratio) "
                    "VALUES (:work_id, :page_index, :path, :width, :height, :ratio)",
                    [page_to_row(work_id, page) for page in entry.pages],
                )

        return work_id  # type: ignore[return-value]

    def prune(self, active_keys: set[str]) -> list[str]:
        """Delete every work whose key is not in active_keys, with its pages.

        Pages are deleted before works, and both deletes share one transaction.

        Returns:
            The pruned keys, sorted.
        """
        stale = [
            (row[0], row[1])
            for row in self._conn.execute("SELECT id, key FROM works").fetchall()
            if row[1] not in active_keys
        ]
        if not stale:
            return []

        stale_ids = [work_id for work_id, _ in stale]
        with self._conn:
            for start in range(0, len(stale_ids), _DELETE_CHUNK):
                chunk = stale_ids[start : start + _DELETE_CHUNK]
                placeholders = ", ".join("?" for _ in chunk)
                self._conn.execute(
                    f"DELETE FROM pages WHERE work_id IN ({placeholders})", chunk
                )
                self._conn.execute(
                    f"DELETE FROM works WHERE id IN ({placeholders})", chunk
                )

        return sorted(key for _, key in stale)

    # --- Manual edits ---

    def create_work(self, title: str, key: str | None = None) -> int:
        """Create an empty work outside of sync.

        The key defaults to the title and is normalized with normalize_key.
        Unlike sync, an existing key is a conflict, not an update.

        Returns:
            The new work's row ID.

        Raises:
            ValueError: If the title or the normalized key is empty.
            DuplicateWorkError: If a work with this key already exists.
        """
        clean_title = title.strip()
        if not clean_title:
            raise ValueError("Title must not be empty")

        clean_key = normalize_key(key if key is not None else clean_title)
        if not clean_key:
            raise ValueError("Key must not be empty")

        try:
            with self._conn:
                cursor = self._conn.execute(
                    "INSERT INTO works (key, title) VALUES (?, ?)",
                    (clean_key, clean_title),
                )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE constraint failed: works.key" in str(exc):
                raise DuplicateWorkError(f"Work with key {clean_key!r} already exists") from exc
            raise

        return cursor.lastrowid  # type: ignore[return-value]

    def set_rating(self, work_id: int, rating: int | None) -> None:
        """Set or clear a work's rating.

        Raises:
            ValueError: If rating is not None or an integer in 1..5, or the
                work does not exist.
        """
        if rating is not None and (
            isinstance(rating, bool)
            or not isinstance(rating, int)
            or not MIN_RATING <= rating <= MAX_RATING
        ):
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating!r}")

        with self._conn:
            cursor = self._conn.execute(
                "UPDATE works SET rating = ? WHERE id = ?", (rating, work_id)
            )

        if cursor.rowcount == 0:
            raise ValueError(f"Work with id {work_id} not found")
