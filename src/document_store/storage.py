"""Storage backends for content files.

The document store never touches the filesystem directly; it talks to a
StorageBackend addressed by root-relative POSIX paths. FilesystemBackend
confines every access to a content root and writes atomically.
InMemoryBackend keeps files in a dict for tests and embedding.
"""

import logging
import os
import posixpath
import tempfile
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from src.content_tree.errors import InvalidPathError

from .errors import StorageError

logger = logging.getLogger(__name__)

# Maximum content file size in bytes (5 MB)
MAX_FILE_SIZE = 5 * 1024 * 1024


class StorageBackend(ABC):
    """Interface for reading and writing content files by relative path."""

    @abstractmethod
    def exists(self, relative_path: str) -> bool:
        """Return True if a file exists at ``relative_path``.

        Raises:
            InvalidPathError: If the path escapes the content root
        """

    @abstractmethod
    def read_text(self, relative_path: str) -> str:
        """Read a file as UTF-8 text."""

    @abstractmethod
    def write_text(self, relative_path: str, text: str) -> None:
        """Replace a file's contents with ``text``."""

    @abstractmethod
    def list_files(self, extension: str) -> List[str]:
        """List relative paths of all files ending in ``extension``."""

    @abstractmethod
    def describe(self, relative_path: str) -> str:
        """Human-readable location of a file for logs and errors."""


class FilesystemBackend(StorageBackend):
    """Stores content files under a fixed root directory.

    Every relative path is canonicalised (symlinks resolved) and must stay
    inside the root, otherwise InvalidPathError is raised before any I/O.

    Example:
        >>> backend = FilesystemBackend("src/pages")
        >>> backend.read_text("index.mdx")
    """

    def __init__(self, root: str, max_file_size: int = MAX_FILE_SIZE):
        self.root = os.path.abspath(root)
        self.max_file_size = max_file_size

    def _full_path(self, relative_path: str) -> str:
        """Resolve a relative path and validate it stays under the root."""
        if not relative_path or os.path.isabs(relative_path) or "\x00" in relative_path:
            raise InvalidPathError(relative_path, "must be a relative path inside the content root")

        real_base = os.path.realpath(self.root)
        real_path = os.path.realpath(os.path.join(self.root, relative_path))

        if not real_path.startswith(real_base + os.sep):
            raise InvalidPathError(
                relative_path,
                f"Path traversal detected: resolves outside content root {self.root}"
            )
        return real_path

    def exists(self, relative_path: str) -> bool:
        return os.path.isfile(self._full_path(relative_path))

    def read_text(self, relative_path: str) -> str:
        full_path = self._full_path(relative_path)
        try:
            size = os.path.getsize(full_path)
            if size > self.max_file_size:
                raise StorageError(
                    full_path,
                    'read',
                    f'File size ({size / (1024 * 1024):.2f} MB) exceeds maximum allowed size '
                    f'({self.max_file_size / (1024 * 1024):.0f} MB)'
                )
            with open(full_path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except StorageError:
            raise
        except FileNotFoundError:
            raise StorageError(full_path, 'read', 'File not found')
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(full_path, 'read', str(e))

    def write_text(self, relative_path: str, text: str) -> None:
        """Write atomically: temp file in the target directory, then replace."""
        full_path = self._full_path(relative_path)
        directory = os.path.dirname(full_path)
        temp_path: Optional[str] = None

        try:
            os.makedirs(directory, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=".microtext-", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
            if os.path.exists(full_path):
                os.chmod(temp_path, os.stat(full_path).st_mode & 0o777)
            os.replace(temp_path, full_path)
            temp_path = None
        except OSError as e:
            raise StorageError(full_path, 'write', str(e))
        finally:
            if temp_path is not None:
                try:
                    os.remove(temp_path)
                except OSError as e:
                    logger.warning(f"Failed to remove temp file {temp_path}: {e}")

        logger.debug(f"Wrote {len(text)} characters to {full_path}")

    def list_files(self, extension: str) -> List[str]:
        if not os.path.isdir(self.root):
            return []

        found = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith('.'))
            for filename in sorted(filenames):
                if filename.endswith(extension) and not filename.startswith('.'):
                    full_path = os.path.join(dirpath, filename)
                    relative = os.path.relpath(full_path, self.root)
                    found.append(relative.replace(os.sep, '/'))
        return found

    def describe(self, relative_path: str) -> str:
        return os.path.join(self.root, relative_path)


class InMemoryBackend(StorageBackend):
    """Keeps content files in a dict keyed by normalised relative path."""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files: Dict[str, str] = {}
        self.writes: List[str] = []
        for relative_path, text in (files or {}).items():
            self.files[self._normalise(relative_path)] = text

    def _normalise(self, relative_path: str) -> str:
        if not relative_path or relative_path.startswith('/') or "\x00" in relative_path:
            raise InvalidPathError(relative_path, "must be a relative path inside the content root")
        normalised = posixpath.normpath(relative_path)
        if normalised == '.' or normalised == '..' or normalised.startswith('../'):
            raise InvalidPathError(
                relative_path, "Path traversal detected: resolves outside content root"
            )
        return normalised

    def exists(self, relative_path: str) -> bool:
        return self._normalise(relative_path) in self.files

    def read_text(self, relative_path: str) -> str:
        key = self._normalise(relative_path)
        if key not in self.files:
            raise StorageError(key, 'read', 'File not found')
        return self.files[key]

    def write_text(self, relative_path: str, text: str) -> None:
        key = self._normalise(relative_path)
        self.files[key] = text
        self.writes.append(key)

    def list_files(self, extension: str) -> List[str]:
        return sorted(path for path in self.files if path.endswith(extension))

    def describe(self, relative_path: str) -> str:
        return f"memory://{relative_path}"
