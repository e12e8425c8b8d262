# ABOUTME: Sidecar metadata discovery and extraction for work directories.
# ABOUTME: Picks the best JSON sidecar, parses it permissively, and pulls title/category/tags.

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from folio.core.keys import SortKey, natural_key
from folio.metadata.dates import resolve_published_at
from folio.metadata.types import MetaDocument, WorkMetadata

logger = logging.getLogger(__name__)

SIDECAR_EXTENSION = ".json"

# Most specific sidecar names first; compared case-insensitively.
SIDECAR_PREFERENCE: tuple[str, ...] = (
    ".album.json",
    "meta.json",
    "metadata.json",
    "info.json",
)


class SidecarReadError(Exception):
    """Raised when a sidecar file cannot be read or is not valid JSON."""


def pick_sidecar(
    file_names: Iterable[str], sort_key: SortKey = natural_key
) -> str | None:
    """Choose the sidecar file for a work directory.

    Preferred names win in preference order. Otherwise the first JSON file
    in sort order is chosen, so the pick is deterministic.

    Args:
        file_names: Names of the regular files in the work directory.
        sort_key: Ordering used when no preferred name is present.

    Returns:
        The chosen file name, or None if the directory has no JSON file.
    """
    candidates = [
        name for name in file_names if Path(name).suffix.lower() == SIDECAR_EXTENSION
    ]
    if not candidates:
        return None

    by_lower = {}
    for name in sorted(candidates, key=sort_key):
        by_lower.setdefault(name.lower(), name)

    for preferred in SIDECAR_PREFERENCE:
        if preferred in by_lower:
            return by_lower[preferred]

    return min(candidates, key=sort_key)


def read_sidecar(path: Path) -> MetaDocument | None:
    """Read and parse a sidecar file.

    Returns:
        The parsed JSON object, or None if the document is valid JSON but not
        an object (a bare list or scalar carries no usable fields).

    Raises:
        SidecarReadError: If the file cannot be read or decoded.
    """
    try:
        raw = path.read_text(encoding="utf-8")
        parsed = json.loads(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SidecarReadError(f"Failed to parse metadata {path}: {exc}") from exc

    if isinstance(parsed, dict):
        return parsed
    return None


def get_string(document: MetaDocument, field: str) -> str | None:
    """Return a field's trimmed string value, or None if absent, empty, or not a string."""
    value = document.get(field)
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def _first_string(document: MetaDocument, *fields: str) -> str | None:
    for field in fields:
        value = get_string(document, field)
        if value is not None:
            return value
    return None


def extract_tags(value: Any) -> list[str] | None:
    """Normalize a raw tags value.

    A list keeps its string entries; a string is split on commas. Entries are
    trimmed and empty ones dropped. An empty result is None, not [].
    """
    if isinstance(value, list):
        tags = [item.strip() for item in value if isinstance(item, str)]
    elif isinstance(value, str):
        tags = [item.strip() for item in value.split(",")]
    else:
        return None

    tags = [tag for tag in tags if tag]
    return tags or None


def extract_metadata(document: MetaDocument | None, key: str) -> WorkMetadata:
    """Build WorkMetadata from a parsed sidecar document.

    With no document, the title falls back to the catalog key and every
    other field is absent.
    """
    if document is None:
        return WorkMetadata(title=key)

    return WorkMetadata(
        title=_first_string(document, "title", "name") or key,
        category=_first_string(document, "category", "type"),
        tags=extract_tags(document.get("tags")),
        raw_metadata=json.dumps(document, ensure_ascii=False),
        published_at=resolve_published_at(document),
    )


def load_work_metadata(
    directory: Path,
    file_names: Iterable[str],
    key: str,
    sort_key: SortKey = natural_key,
) -> tuple[WorkMetadata, str | None]:
    """Locate, parse, and extract metadata for one work directory.

    A malformed sidecar is logged and treated as if no sidecar existed.

    Returns:
        (metadata, error) where error describes a sidecar that failed to
        parse, or None.
    """
    sidecar = pick_sidecar(file_names, sort_key)
    if sidecar is None:
        return extract_metadata(None, key), None

    try:
        document = read_sidecar(directory / sidecar)
    except SidecarReadError as exc:
        logger.warning("%s", exc)
        return extract_metadata(None, key), str(exc)

    return extract_metadata(document, key), None
