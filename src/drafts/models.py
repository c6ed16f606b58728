"""Data models for drafts and sync reports."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import SyncPartialFailureError


@dataclass
class DraftEntry:
    """A locally cached, not-yet-durable edit.

    Attributes:
        page_id: Page the edit belongs to
        path: Dot path of the edited field
        value: Proposed text
        timestamp: ISO 8601 UTC time the draft was saved
    """
    page_id: str
    path: str
    value: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageId": self.page_id,
            "path": self.path,
            "value": self.value,
            "timestamp": self.timestamp,
        }


@dataclass
class SyncFailure:
    """One draft that could not be written to the document store."""
    path: str
    error_type: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "errorType": self.error_type, "message": self.message}


@dataclass
class SyncReport:
    """Per-key outcome of syncing one page's drafts.

    Attributes:
        page_id: Page that was synced
        synced: Paths written and cleared from the cache
        failures: Drafts left in the cache, with the reason each failed
    """
    page_id: str
    synced: List[str] = field(default_factory=list)
    failures: List[SyncFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise SyncPartialFailureError if any draft failed to sync."""
        if self.failures:
            raise SyncPartialFailureError(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageId": self.page_id,
            "success": self.success,
            "synced": len(self.synced),
            "syncedPaths": list(self.synced),
            "errors": [failure.to_dict() for failure in self.failures],
        }
