"""Root pytest configuration for all tests.

Provides content stores over the sample pages, in memory and on disk.
"""

from pathlib import Path

import pytest

from src.document_store.document_store import DocumentStore
from src.document_store.storage import FilesystemBackend, InMemoryBackend
from src.drafts.draft_cache import InMemoryDraftCache
from tests.fixtures.content_pages import SAMPLE_FILES
from tests.helpers.fakes import TickingClock


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    """In-memory backend holding the sample pages."""
    return InMemoryBackend(dict(SAMPLE_FILES))


@pytest.fixture
def store(memory_backend: InMemoryBackend) -> DocumentStore:
    """Document store over the in-memory sample pages."""
    return DocumentStore(memory_backend)


@pytest.fixture
def draft_cache() -> InMemoryDraftCache:
    return InMemoryDraftCache(clock=TickingClock())


@pytest.fixture
def pages_dir(tmp_path: Path) -> Path:
    """Content root on disk holding the sample pages."""
    root = tmp_path / "pages"
    for relative_path, text in SAMPLE_FILES.items():
        file_path = root / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(text.encode("utf-8"))
    return root


@pytest.fixture
def disk_store(pages_dir: Path) -> DocumentStore:
    """Document store over the sample pages on disk."""
    return DocumentStore(FilesystemBackend(str(pages_dir)))
