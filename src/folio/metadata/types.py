# ABOUTME: Core metadata data structures for a scanned work.
# ABOUTME: WorkMetadata is what the sidecar extractor hands to the catalog.

from dataclasses import dataclass
from typing import Any

# A parsed sidecar document: the tree json.loads produces for a JSON object.
# Values are dict, list, str, int, float, bool, or None; never assume which.
MetaDocument = dict[str, Any]


@dataclass
class WorkMetadata:
    """Descriptive metadata for a work, normalized from its sidecar file.

    Every field except title is optional. A work without a usable sidecar
    still gets a title: its catalog key.
    """

    title: str
    category: str | None = None
    tags: list[str] | None = None
    raw_metadata: str | None = None
    published_at: int | None = None
