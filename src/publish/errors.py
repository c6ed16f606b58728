"""Typed exception hierarchy for publish errors."""

from typing import List, Optional

from src.content_tree.errors import MicrotextError


class GitRepositoryError(MicrotextError):
    """Raised when git repository operations fail.

    Attributes:
        repo_path: Path to git repository
        message: Error description
        git_output: Git command stderr output
    """
    error_type = "GitRepositoryError"

    def __init__(self, repo_path: str, message: str, git_output: str = ""):
        super().__init__(f"Git repository error at {repo_path}: {message}")
        self.repo_path = repo_path
        self.message = message
        self.git_output = git_output


class PublishFailedError(MicrotextError):
    """Raised when the commit primitive fails; nothing was committed.

    Attributes:
        reason: Error description from the commit primitive
        files: Files that were about to be committed
    """
    error_type = "PublishFailed"

    def __init__(self, reason: str, files: Optional[List[str]] = None):
        super().__init__(f"Publish failed: {reason}")
        self.reason = reason
        self.files = files or []
        self.files_changed = 0
