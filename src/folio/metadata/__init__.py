# ABOUTME: Sidecar metadata extraction and publish-date resolution.
# ABOUTME: Exports the extractor entry points and the WorkMetadata type.

from folio.metadata.dates import parse_date_value, resolve_published_at
from folio.metadata.sidecar import (
    SidecarReadError,
    extract_metadata,
    load_work_metadata,
    pick_sidecar,
    read_sidecar,
)
from folio.metadata.types import MetaDocument, WorkMetadata

__all__ = [
    "MetaDocument",
    "SidecarReadError",
    "WorkMetadata",
    "extract_metadata",
    "load_work_metadata",
    "parse_date_value",
    "pick_sidecar",
    "read_sidecar",
    "resolve_published_at",
]
