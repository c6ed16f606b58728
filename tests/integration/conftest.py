"""Pytest configuration and fixtures for integration tests.

Integration tests use real files under tmp_path and, where available, a
real git executable.
"""

import pytest

from tests.fixtures.content_pages import ABOUT_PAGE, HOME_PAGE
from tests.fixtures.git_test_repos import content_repo, git_available


@pytest.fixture
def repo():
    """Git repository with the home and about pages committed under src/pages."""
    if not git_available():
        pytest.skip("git executable not available")
    with content_repo({"home.mdx": HOME_PAGE, "about/index.mdx": ABOUT_PAGE}) as repo_path:
        yield repo_path
