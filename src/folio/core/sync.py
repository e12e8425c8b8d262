# ABOUTME: Reconciliation pass that makes the catalog mirror the media root.
# ABOUTME: Scans work directories in a bounded thread pool and applies each as one transaction.

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from folio.core.keys import SortKey, natural_key
from folio.core.scanner import WorkEntry, list_work_directories, scan_work
from folio.db.catalog import WorkCatalog

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


@dataclass
class SyncResult:
    """Summary of a reconciliation pass."""

    processed: int = 0
    pages: int = 0
    pruned: list[str] = field(default_factory=list)
    issues: list[tuple[Path, str]] = field(default_factory=list)


# Called once per work after its catalog transaction commits
WorkCallback = Callable[[WorkEntry], None]


class CatalogSync:
    """Drives a reconciliation pass over a media root.

    Directory scans are independent and run on a bounded pool of worker
    threads; catalog writes stay on the calling thread, in sort order, over
    the catalog's single connection.
    """

    def __init__(
        self,
        catalog: WorkCatalog,
        *,
        sort_key: SortKey = natural_key,
        workers: int = DEFAULT_WORKERS,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._catalog = catalog
        self._sort_key = sort_key
        self._workers = workers

    def sync(
        self,
        root: Path,
        prune: bool = False,
        on_work: WorkCallback | None = None,
    ) -> SyncResult:
        """Reconcile the catalog with the work directories under root.

        Each immediate, non-hidden subdirectory of root is scanned and
        upserted by key. With prune, works whose directories were not seen
        in this pass are deleted along with their pages.

        Args:
            root: The media root to scan.
            prune: Delete catalog works that no longer have a directory.
            on_work: Optional progress callback, called per synced work.

        Returns:
            SyncResult with processed/page counts, pruned keys, and the
            recoverable issues encountered.

        Raises:
            RootUnreadableError: If root cannot be listed.
            sqlite3.Error: If a catalog write fails.
        """
        directories = list_work_directories(root, self._sort_key)
        result = SyncResult()
        processed_keys: set[str] = set()

        executor = ThreadPoolExecutor(max_workers=self._workers)
        try:
            futures = [
                executor.submit(scan_work, root, directory, self._sort_key)
                for directory in directories
            ]
            # Results are consumed in submission order, so writes follow sort order
            for future in futures:
                entry = future.result()
                self._catalog.sync_work(entry)
                processed_keys.add(entry.key)
                result.processed += 1
                result.pages += entry.page_count
                result.issues.extend(entry.issues)
                logger.info("Synced %s (%d pages)", entry.key, entry.page_count)
                if on_work is not None:
                    on_work(entry)
        finally:
            # On a failed write, scans not yet started are dropped
            executor.shutdown(wait=True, cancel_futures=True)

        if prune:
            result.pruned = self._catalog.prune(processed_keys)
            if result.pruned:
                logger.info("Pruned %d work entries", len(result.pruned))

        logger.info("Sync finished: %d works processed", result.processed)
        return result
