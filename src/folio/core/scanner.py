# ABOUTME: Work directory scanner: one WorkEntry per top-level directory of the media root.
# ABOUTME: Combines key derivation, sidecar metadata, and page scanning for a single work.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from folio.core.keys import SortKey, derive_key, natural_key
from folio.core.pages import PageEntry, scan_pages
from folio.metadata.sidecar import load_work_metadata
from folio.metadata.types import WorkMetadata

logger = logging.getLogger(__name__)


class RootUnreadableError(Exception):
    """Raised when the scan root itself cannot be listed."""


@dataclass
class WorkEntry:
    """A scanned work directory, ready to be written to the catalog."""

    key: str
    directory: Path
    metadata: WorkMetadata
    pages: list[PageEntry] = field(default_factory=list)
    issues: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)


def list_work_directories(root: Path, sort_key: SortKey = natural_key) -> list[Path]:
    """List the immediate, non-hidden subdirectories of the scan root in sort order.

    Raises:
        RootUnreadableError: If root cannot be listed.
    """
    try:
        children = list(root.iterdir())
    except OSError as exc:
        raise RootUnreadableError(f"Failed to read root directory: {root}") from exc

    directories = [
        child for child in children if not child.name.startswith(".") and child.is_dir()
    ]
    return sorted(directories, key=lambda path: sort_key(path.name))


def _list_files(directory: Path) -> list[str]:
    return [child.name for child in directory.iterdir() if child.is_file()]


def scan_work(root: Path, directory: Path, sort_key: SortKey = natural_key) -> WorkEntry:
    """Scan a single work directory.

    Never raises for per-work problems: an unlistable directory, a malformed
    sidecar, or an unreadable image is logged and recorded in the entry's
    issues, and the entry carries whatever could still be derived.
    """
    key = derive_key(root, directory)
    issues: list[tuple[Path, str]] = []

    try:
        file_names = _list_files(directory)
    except OSError as exc:
        logger.warning("Failed to list work directory %s: %s", directory, exc)
        issues.append((directory, str(exc)))
        file_names = []

    metadata, sidecar_error = load_work_metadata(directory, file_names, key, sort_key)
    if sidecar_error is not None:
        issues.append((directory, sidecar_error))

    pages = scan_pages(root, directory, file_names, sort_key, errors=issues)

    return WorkEntry(
        key=key,
        directory=directory,
        metadata=metadata,
        pages=pages,
        issues=issues,
    )
