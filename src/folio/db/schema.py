# ABOUTME: SQL DDL statements for the Folio catalog database schema.
# ABOUTME: Defines the works and pages tables, their indexes, and versioned migrations.

SCHEMA_V1 = """
-- One row per work directory
CREATE TABLE works (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    key           TEXT NOT NULL,
    title         TEXT NOT NULL,
    category      TEXT,
    tags          TEXT,
    raw_metadata  TEXT,
    published_at  INTEGER,
    date_added    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE UNIQUE INDEX idx_works_key ON works(key);
CREATE INDEX idx_works_category ON works(category) WHERE category IS NOT NULL;

-- One row per image page, owned by a work
CREATE TABLE pages (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    work_id     INTEGER NOT NULL REFERENCES works(id) ON DELETE CASCADE,
    page_index  INTEGER NOT NULL,
    path        TEXT NOT NULL,
    width       INTEGER,
    height      INTEGER,
    ratio       REAL
);

CREATE INDEX idx_pages_work_index ON pages(work_id, page_index);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

# V2: user rating, owned by the rating command and never touched by sync
SCHEMA_V2 = """
ALTER TABLE works ADD COLUMN rating INTEGER CHECK (rating BETWEEN 1 AND 5);

INSERT INTO schema_version (version) VALUES (2);
"""

MIGRATIONS: list[tuple[int, str]] = [
    (2, SCHEMA_V2),
]
