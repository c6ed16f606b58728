"""Publish gate: batches outstanding content changes into one commit."""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from src.content_tree.errors import ValidationError

from .commit_primitive import CommitPrimitive
from .errors import GitRepositoryError, PublishFailedError
from .models import PublishResult, PublishStatus

logger = logging.getLogger(__name__)


class PublishGate:
    """Commits every changed content file as a single versioned unit.

    Example:
        >>> gate = PublishGate(GitCommitter(".", "src/pages"))
        >>> gate.status().unpublished_changes
        2
        >>> gate.publish("Refresh landing copy").files_changed
        2
    """

    def __init__(
        self,
        committer: CommitPrimitive,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.committer = committer
        self._clock = clock

    def _changed_files(self) -> List[str]:
        try:
            return self.committer.changed_files()
        except GitRepositoryError as e:
            raise PublishFailedError(str(e))

    def status(self) -> PublishStatus:
        """Report outstanding uncommitted content files without committing."""
        files = self._changed_files()
        return PublishStatus(unpublished_changes=len(files), files=files)

    def publish(self, message: Optional[str] = None) -> PublishResult:
        """Commit all outstanding content changes.

        Args:
            message: Commit message; defaults to "Content update <timestamp>"

        Returns:
            PublishResult; ``published`` is False with zero files when there
            was nothing to commit

        Raises:
            ValidationError: If message is not a string
            PublishFailedError: If the commit primitive fails
        """
        if message is not None and not isinstance(message, str):
            raise ValidationError(f"must be a string, got {type(message).__name__}", "message")

        files = self._changed_files()
        if not files:
            logger.info("No changes to publish")
            return PublishResult(published=False, files_changed=0)

        if not message or not message.strip():
            message = f"Content update {self._clock().isoformat(timespec='seconds')}"

        try:
            commit_id = self.committer.commit(files, message)
        except GitRepositoryError as e:
            logger.error(f"Publish failed: {e}")
            raise PublishFailedError(str(e), files)

        logger.info(f"Published {len(files)} file(s): {message}")
        return PublishResult(
            published=True,
            files_changed=len(files),
            message=message,
            commit_id=commit_id,
            files=files,
        )
