"""Data models for CLI operations."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional

from src.document_store.document_store import (
    DEFAULT_CONTENT_FIELD,
    DEFAULT_EXTENSION,
    DEFAULT_TEMPLATE,
)
from src.drafts.draft_cache import FileDraftCache


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): Invalid input, configuration or I/O failure
    - PARTIAL_FAILURE (2): Some items of a batch failed, or a write found a stale value
    - NOT_FOUND (3): The requested page does not exist
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    PARTIAL_FAILURE = 2
    NOT_FOUND = 3


@dataclass
class EditorConfig:
    """Project configuration, read from .microtext/config.yaml.

    Attributes:
        content_root: Directory holding the content files
        content_field: Frontmatter key that holds the editable tree
        extension: Content file extension
        drafts_file: YAML file backing the local draft cache
        repo_root: Git repository root used for publishing
        default_template: Item appended by "array add" when no template is given
        interpreter_model: Model used for instruction interpretation (None = default)
        interpreter_timeout: Interpreter HTTP timeout in seconds
    """
    content_root: str = "src/pages"
    content_field: str = DEFAULT_CONTENT_FIELD
    extension: str = DEFAULT_EXTENSION
    drafts_file: str = FileDraftCache.DEFAULT_DRAFTS_FILE
    repo_root: str = "."
    default_template: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_TEMPLATE))
    interpreter_model: Optional[str] = None
    interpreter_timeout: int = 60
