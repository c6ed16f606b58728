"""Sync engine: drains drafts into the document store.

Drafts are written one key at a time. A key that fails stays in the cache
and is reported; the remaining keys still sync. Calling sync again after a
partial failure only retries what is still pending.
"""

import logging
from typing import List

from src.content_tree.errors import MicrotextError
from src.document_store.document_store import DocumentStore

from .draft_cache import DraftCache
from .models import SyncFailure, SyncReport

logger = logging.getLogger(__name__)


class SyncEngine:
    """Reconciles a DraftCache into a DocumentStore.

    Example:
        >>> engine = SyncEngine(store, FileDraftCache())
        >>> report = engine.sync("home")
        >>> report.raise_for_failures()
    """

    def __init__(self, store: DocumentStore, cache: DraftCache):
        self.store = store
        self.cache = cache

    def sync(self, page_id: str) -> SyncReport:
        """Write every pending draft of a page.

        Returns:
            SyncReport listing synced paths and per-key failures
        """
        report = SyncReport(page_id=page_id)
        entries = self.cache.enumerate(page_id)

        if not entries:
            logger.debug(f"No drafts to sync for page {page_id}")
            return report

        logger.info(f"Syncing {len(entries)} draft(s) for page {page_id}")

        for entry in entries:
            try:
                self.store.set_field(page_id, entry.path, entry.value)
            except MicrotextError as e:
                logger.warning(f"Failed to sync {page_id}#{entry.path}: {e}")
                report.failures.append(SyncFailure(entry.path, e.error_type, str(e)))
                continue

            self.cache.clear(page_id, entry.path)
            report.synced.append(entry.path)

        if report.failures:
            logger.warning(
                f"Synced {len(report.synced)} of {len(entries)} draft(s) for page {page_id}"
            )
        else:
            logger.info(f"Synced {len(report.synced)} draft(s) for page {page_id}")
        return report

    def sync_all(self) -> List[SyncReport]:
        """Sync every page that has pending drafts."""
        return [self.sync(page_id) for page_id in self.cache.pages()]
