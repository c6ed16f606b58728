"""Version-control primitives used by the publish gate.

The publish gate only needs two things from version control: which content
files differ from the last commit, and an atomic "stage these files and
commit them" step. GitCommitter provides both by shelling out to git.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import List

from .errors import GitRepositoryError

logger = logging.getLogger(__name__)

# Git command timeout in seconds
GIT_TIMEOUT = 10


class CommitPrimitive(ABC):
    """Atomic stage-and-commit over a set of content files."""

    @abstractmethod
    def changed_files(self) -> List[str]:
        """List content files that differ from the last commit."""

    @abstractmethod
    def commit(self, files: List[str], message: str) -> str:
        """Stage ``files`` and commit them as one unit.

        Returns:
            Identifier of the new commit
        """


class GitCommitter(CommitPrimitive):
    """Commits content changes to a git repository.

    Only paths under ``pathspec`` (relative to the repository root) are
    considered content; anything else in the working tree is left alone.

    Example:
        >>> committer = GitCommitter(".", "src/pages")
        >>> committer.changed_files()
        ['src/pages/index.mdx']
        >>> sha = committer.commit(['src/pages/index.mdx'], "Update hero copy")
    """

    def __init__(self, repo_path: str, pathspec: str = "."):
        """Initialize git committer.

        Args:
            repo_path: Path to the repository root
            pathspec: Content directory relative to the repository root
        """
        self.repo_path = repo_path
        self.pathspec = pathspec
        self._ensure_absolute_path()

    def _ensure_absolute_path(self) -> None:
        """Convert repo_path to absolute path if relative."""
        if not os.path.isabs(self.repo_path):
            self.repo_path = os.path.abspath(self.repo_path)

    def _run(self, args: List[str], action: str) -> subprocess.CompletedProcess:
        """Run a git command in the repository.

        Raises:
            GitRepositoryError: If git is missing, times out or exits non-zero
        """
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                timeout=GIT_TIMEOUT,
            )
        except subprocess.TimeoutExpired:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message=f"Git {action} timed out after {GIT_TIMEOUT} seconds",
            )
        except FileNotFoundError:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message="Git command not found. Please install git.",
            )

        if result.returncode != 0:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message=f"Failed to {action}",
                git_output=result.stderr,
            )
        return result

    def changed_files(self) -> List[str]:
        """List changed, added, deleted and untracked files under the pathspec."""
        result = self._run(
            ["status", "--porcelain", "-z", "--untracked-files=all", "--", self.pathspec],
            "read status",
        )

        files: List[str] = []
        records = result.stdout.split("\0")
        position = 0
        while position < len(records):
            record = records[position]
            position += 1
            if len(record) < 4:
                continue
            status, path = record[:2], record[3:]
            files.append(path)
            # Renames and copies are followed by their source path; a rename
            # also deletes that path
            if "R" in status or "C" in status:
                source = records[position] if position < len(records) else ""
                position += 1
                if "R" in status and source and source not in files:
                    files.append(source)

        logger.debug(f"{len(files)} changed file(s) under {self.pathspec}")
        return files

    def commit(self, files: List[str], message: str) -> str:
        """Stage and commit ``files`` only, leaving other staged work untouched."""
        if not files:
            raise GitRepositoryError(self.repo_path, "No files to commit")

        # Paths gone from the working tree (deleted, renamed away) cannot be
        # added, but the commit pathspec still records their removal
        present = [f for f in files if os.path.lexists(os.path.join(self.repo_path, f))]
        if present:
            self._run(["add", "--all", "--", *present], "stage files")
        self._run(["commit", "-m", message, "--", *files], "commit")
        sha = self._get_head_sha()
        logger.info(f"Committed {len(files)} file(s): {sha[:8]}")
        return sha

    def _get_head_sha(self) -> str:
        """Get current HEAD commit SHA."""
        return self._run(["rev-parse", "HEAD"], "get HEAD SHA").stdout.strip()
