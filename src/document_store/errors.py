"""Typed exception hierarchy for document store errors.

All exceptions inherit from DocumentStoreError and include the page or file
they concern so callers can report them without re-deriving context.
"""

from typing import Optional

from src.content_tree.errors import MicrotextError


class DocumentStoreError(MicrotextError):
    """Base exception for all document store errors."""
    error_type = "DocumentStoreError"


class PageNotFoundError(DocumentStoreError):
    """Raised when no content file exists for a page id."""
    error_type = "NotFound"

    def __init__(self, page_id: str):
        super().__init__(f"Page not found: {page_id}")
        self.page_id = page_id


class StaleValueError(DocumentStoreError):
    """Raised when a compare-and-set write finds a different live value."""
    error_type = "StaleValue"

    def __init__(self, page_id: str, path: str, expected: Optional[str], actual: Optional[str]):
        super().__init__(
            f"Stale value for {page_id}#{path}: expected {expected!r}, found {actual!r}"
        )
        self.page_id = page_id
        self.path = path
        self.expected = expected
        self.actual = actual


class ConflictError(DocumentStoreError):
    """Raised when a write presents a revision token that is no longer current."""
    error_type = "Conflict"

    def __init__(self, page_id: str, expected_revision: str, actual_revision: str):
        super().__init__(
            f"Revision conflict on page {page_id}: expected {expected_revision[:12]}, "
            f"current is {actual_revision[:12]}"
        )
        self.page_id = page_id
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision


class DocumentFormatError(DocumentStoreError):
    """Raised when a content file's frontmatter cannot be parsed."""
    error_type = "DocumentFormatError"

    def __init__(self, file_path: str, message: str):
        super().__init__(f"Frontmatter error in {file_path}: {message}")
        self.file_path = file_path
        self.message = message


class StorageError(DocumentStoreError):
    """Raised when a storage backend read or write fails."""
    error_type = "StorageError"

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Storage operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
