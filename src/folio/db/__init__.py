# ABOUTME: Public API for the Folio catalog database layer.
# ABOUTME: Exports connection management, catalog operations, and record types.

from folio.db.catalog import DuplicateWorkError, WorkCatalog
from folio.db.connection import DEFAULT_DB_PATH, open_catalog
from folio.db.mapping import PageRecord, WorkRecord

__all__ = [
    "DEFAULT_DB_PATH",
    "DuplicateWorkError",
    "PageRecord",
    "WorkCatalog",
    "WorkRecord",
    "open_catalog",
]
