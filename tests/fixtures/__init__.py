"""Test fixtures for microtext tests.

This module provides test fixtures for:
- Sample content files (frontmatter + body)
- Git repository fixtures for publish testing
"""

from .content_pages import (
    ABOUT_PAGE,
    HOME_PAGE,
    INDEX_PAGE,
    NO_FRONTMATTER_PAGE,
    NO_MICROTEXT_PAGE,
    SAMPLE_FILES,
)
from .git_test_repos import (
    content_repo,
    get_commit_count,
    get_latest_commit_files,
    get_latest_commit_message,
    get_latest_commit_sha,
    git_available,
)

__all__ = [
    "ABOUT_PAGE",
    "HOME_PAGE",
    "INDEX_PAGE",
    "NO_FRONTMATTER_PAGE",
    "NO_MICROTEXT_PAGE",
    "SAMPLE_FILES",
    "content_repo",
    "get_commit_count",
    "get_latest_commit_files",
    "get_latest_commit_message",
    "get_latest_commit_sha",
    "git_available",
]
