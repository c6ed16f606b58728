"""Publish gate for content changes.

This package batches every outstanding content file change into one atomic
commit through a pluggable version-control primitive (git by default).
"""

from .commit_primitive import GIT_TIMEOUT, CommitPrimitive, GitCommitter
from .errors import GitRepositoryError, PublishFailedError
from .models import PublishResult, PublishStatus
from .publish_gate import PublishGate

__all__ = [
    'CommitPrimitive',
    'GitCommitter',
    'GIT_TIMEOUT',
    'PublishGate',
    'PublishResult',
    'PublishStatus',
    'GitRepositoryError',
    'PublishFailedError',
]
