"""Typed exception hierarchy for draft cache and sync errors."""

from typing import TYPE_CHECKING

from src.content_tree.errors import MicrotextError

if TYPE_CHECKING:
    from src.drafts.models import SyncReport


class DraftCacheError(MicrotextError):
    """Raised when the draft cache cannot be read or written."""
    error_type = "DraftCacheError"

    def __init__(self, cache_path: str, message: str):
        super().__init__(f"Draft cache error at {cache_path}: {message}")
        self.cache_path = cache_path
        self.message = message


class SyncPartialFailureError(MicrotextError):
    """Raised when some drafts of a page could not be synced.

    Attributes:
        report: The SyncReport with per-key outcomes
    """
    error_type = "SyncPartialFailure"

    def __init__(self, report: "SyncReport"):
        paths = ", ".join(failure.path for failure in report.failures)
        super().__init__(
            f"Failed to sync {len(report.failures)} draft(s) for page {report.page_id}: {paths}"
        )
        self.report = report
