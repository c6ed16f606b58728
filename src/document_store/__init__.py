"""Document store for microtext content files.

This package loads content files, exposes field and array operations over
the content tree held in their YAML frontmatter, and writes them back while
preserving everything outside that tree.
"""

from .document_store import DEFAULT_TEMPLATE, UNSET, DocumentStore
from .errors import (
    ConflictError,
    DocumentFormatError,
    DocumentStoreError,
    PageNotFoundError,
    StaleValueError,
    StorageError,
)
from .frontmatter_handler import ContentDocument, FrontmatterHandler
from .models import ArrayInfo, ArrayOpResult, FieldUpdate
from .storage import FilesystemBackend, InMemoryBackend, StorageBackend

__all__ = [
    'DocumentStore',
    'DEFAULT_TEMPLATE',
    'UNSET',
    'ContentDocument',
    'FrontmatterHandler',
    'StorageBackend',
    'FilesystemBackend',
    'InMemoryBackend',
    'FieldUpdate',
    'ArrayOpResult',
    'ArrayInfo',
    'DocumentStoreError',
    'PageNotFoundError',
    'StaleValueError',
    'ConflictError',
    'DocumentFormatError',
    'StorageError',
]
