"""Draft cache and sync engine.

This package keeps not-yet-durable edits locally and reconciles them into
the document store one key at a time.
"""

from .draft_cache import DraftCache, FileDraftCache, InMemoryDraftCache
from .errors import DraftCacheError, SyncPartialFailureError
from .models import DraftEntry, SyncFailure, SyncReport
from .sync_engine import SyncEngine

__all__ = [
    'DraftCache',
    'InMemoryDraftCache',
    'FileDraftCache',
    'SyncEngine',
    'DraftEntry',
    'SyncFailure',
    'SyncReport',
    'DraftCacheError',
    'SyncPartialFailureError',
]
