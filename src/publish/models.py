"""Data models for publish results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PublishResult:
    """Outcome of a publish.

    Attributes:
        published: True if a commit was made
        files_changed: Number of content files included in the commit
        message: Commit message used (None when nothing was published)
        commit_id: Identifier of the new commit (None when nothing was published)
        files: Content files included in the commit
    """
    published: bool
    files_changed: int
    message: Optional[str] = None
    commit_id: Optional[str] = None
    files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "published": self.published,
            "filesChanged": self.files_changed,
            "message": self.message,
            "commitId": self.commit_id,
        }


@dataclass
class PublishStatus:
    """Outstanding content changes not yet published."""
    unpublished_changes: int
    files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"unpublishedChanges": self.unpublished_changes, "files": list(self.files)}
