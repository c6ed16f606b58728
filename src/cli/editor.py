"""Wires the editor's components together from configuration."""

import logging
import os
from typing import Dict, List

from src.document_store.document_store import DocumentStore
from src.document_store.storage import FilesystemBackend
from src.drafts.draft_cache import FileDraftCache
from src.drafts.sync_engine import SyncEngine
from src.publish.commit_primitive import GitCommitter
from src.publish.publish_gate import PublishGate
from src.tool_surface.interpreter import AnthropicInterpreter
from src.tool_surface.models import ProposedChange
from src.tool_surface.tool_surface import ToolSurface

from .models import EditorConfig

logger = logging.getLogger(__name__)


class Editor:
    """Holds one instance of every component for a project.

    Attributes:
        config: Loaded configuration
        store: Document store over the content root
        drafts: File-backed draft cache
        sync_engine: Drains drafts into the store
        publish_gate: Commits content changes to git
        tools: Agent-facing tool surface
    """

    def __init__(self, config: EditorConfig):
        self.config = config
        self.store = DocumentStore(
            FilesystemBackend(config.content_root),
            content_field=config.content_field,
            extension=config.extension,
            default_template=config.default_template,
        )
        self.drafts = FileDraftCache(config.drafts_file)
        self.sync_engine = SyncEngine(self.store, self.drafts)
        self.publish_gate = PublishGate(
            GitCommitter(config.repo_root, self._content_pathspec())
        )
        self.tools = ToolSurface(self.store, self._interpret)

    def _content_pathspec(self) -> str:
        pathspec = os.path.relpath(
            os.path.abspath(self.config.content_root),
            os.path.abspath(self.config.repo_root),
        )
        return pathspec.replace(os.sep, '/')

    def _interpret(self, instruction: str, flat_content: Dict[str, str]) -> List[ProposedChange]:
        # Credentials are only required once an instruction is actually interpreted
        interpreter = AnthropicInterpreter.from_env(
            model=self.config.interpreter_model,
            timeout=self.config.interpreter_timeout,
        )
        return interpreter(instruction, flat_content)
