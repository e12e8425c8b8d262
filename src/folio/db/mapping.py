# ABOUTME: Converts between scanned work entries and SQLite row dictionaries.
# ABOUTME: Handles JSON serialization of the tags list.

import json
from dataclasses import dataclass
from typing import Any

from folio.core.pages import PageEntry
from folio.metadata.types import WorkMetadata


@dataclass
class WorkRecord:
    """A cataloged work: WorkMetadata plus database-owned fields."""

    id: int
    key: str
    metadata: WorkMetadata
    rating: int | None
    date_added: str

    @property
    def title(self) -> str:
        return self.metadata.title


@dataclass
class PageRecord:
    """A cataloged page row."""

    id: int
    work_id: int
    page_index: int
    path: str
    width: int | None
    height: int | None
    ratio: float | None


def encode_tags(tags: list[str] | None) -> str | None:
    """Serialize tags as a JSON array; None and [] are stored as NULL."""
    return json.dumps(tags, ensure_ascii=False) if tags else None


def decode_tags(raw: str | None) -> list[str] | None:
    """Deserialize a stored tags column, tolerating junk written by other tools."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, list):
        return None
    tags = [tag.strip() for tag in parsed if isinstance(tag, str) and tag.strip()]
    return tags or None


def metadata_to_row(metadata: WorkMetadata) -> dict[str, Any]:
    """Convert WorkMetadata to the sync-owned columns of the works table.

    Rating is not included; sync never writes it.
    """
    return {
        "title": metadata.title,
        "category": metadata.category,
        "tags": encode_tags(metadata.tags),
        "raw_metadata": metadata.raw_metadata,
        "published_at": metadata.published_at,
    }


def page_to_row(work_id: int, page: PageEntry) -> dict[str, Any]:
    """Convert a scanned page to a pages row."""
    return {
        "work_id": work_id,
        "page_index": page.page_index,
        "path": page.path,
        "width": page.width,
        "height": page.height,
        "ratio": page.ratio,
    }


def row_to_metadata(row: Any) -> WorkMetadata:
    """Convert a works row (dict-like) back to WorkMetadata."""
    return WorkMetadata(
        title=row["title"],
        category=row["category"],
        tags=decode_tags(row["tags"]),
        raw_metadata=row["raw_metadata"],
        published_at=row["published_at"],
    )


def row_to_record(row: Any) -> WorkRecord:
    """Convert a full works row to a WorkRecord."""
    return WorkRecord(
        id=row["id"],
        key=row["key"],
        metadata=row_to_metadata(row),
        rating=row["rating"],
        date_added=row["date_added"],
    )


def row_to_page(row: Any) -> PageRecord:
    """Convert a pages row to a PageRecord."""
    return PageRecord(
        id=row["id"],
        work_id=row["work_id"],
        page_index=row["page_index"],
        path=row["path"],
        width=row["width"],
        height=row["height"],
        ratio=row["ratio"],
    )
