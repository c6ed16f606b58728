"""Tool surface: the operation set exposed to external agents.

Four stateless operations with stable names:

    enumerate-pages        list editable pages
    read-content           flattened path -> text map of a page
    write-field            direct single-field write
    interpret-instruction  natural-language edit, applied with compare-and-set

Instruction edits are checked one by one against the live document at the
moment they are applied. A proposal whose expected old value no longer
matches is skipped and reported, so an interpreter working from a stale
read can never overwrite a concurrent edit.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from src.content_tree.addressing import parse_path, resolve_text
from src.content_tree.errors import MicrotextError, ValidationError
from src.content_tree.flatten import flatten
from src.document_store.document_store import DocumentStore
from src.document_store.errors import StaleValueError
from src.document_store.models import FieldUpdate

from .errors import InterpreterError, UnknownToolError
from .interpreter import Interpreter
from .models import (
    STATUS_APPLIED,
    STATUS_SKIPPED,
    STATUS_WOULD_APPLY,
    ChangeOutcome,
    InstructionReport,
    ProposedChange,
)

logger = logging.getLogger(__name__)

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "enumerate-pages",
        "description": "List all pages available for editing",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "read-content",
        "description": "Get all microtext for a page as path -> text pairs",
        "inputSchema": {
            "type": "object",
            "properties": {
                "pageId": {"type": "string", "description": 'Page id (e.g., "index", "about")'},
            },
            "required": ["pageId"],
        },
    },
    {
        "name": "write-field",
        "description": "Set one microtext value by its path",
        "inputSchema": {
            "type": "object",
            "properties": {
                "pageId": {"type": "string", "description": 'Page id (e.g., "index")'},
                "path": {
                    "type": "string",
                    "description": 'Microtext path (e.g., "hero.headline", "features.0.title")',
                },
                "value": {"type": "string", "description": "New text"},
            },
            "required": ["pageId", "path", "value"],
        },
    },
    {
        "name": "interpret-instruction",
        "description": (
            "Edit content with a natural-language instruction. Each proposed change "
            "is applied only if the field still holds the value the interpreter saw."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "pageId": {"type": "string", "description": 'Page id (e.g., "index")'},
                "instruction": {
                    "type": "string",
                    "description": 'Instruction (e.g., "Make the headline more urgent")',
                },
                "apply": {
                    "type": "boolean",
                    "description": "Apply changes (true) or only preview them (false)",
                    "default": True,
                },
            },
            "required": ["pageId", "instruction"],
        },
    },
]


class ToolSurface:
    """Agent-facing operations built on the document store.

    Example:
        >>> tools = ToolSurface(store, AnthropicInterpreter.from_env())
        >>> tools.call("read-content", {"pageId": "home"})
        {'pageId': 'home', 'content': {'hero.headline': 'A'}}
    """

    def __init__(self, store: DocumentStore, interpreter: Optional[Interpreter] = None):
        self.store = store
        self.interpreter = interpreter
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "enumerate-pages": self._call_enumerate_pages,
            "read-content": self._call_read_content,
            "write-field": self._call_write_field,
            "interpret-instruction": self._call_interpret_instruction,
        }

    # -- operations ------------------------------------------------------

    def enumerate_pages(self) -> List[str]:
        return self.store.list_pages()

    def read_content(self, page_id: str) -> Dict[str, str]:
        return flatten(self.store.get(page_id))

    def write_field(self, page_id: str, path: str, value: str) -> FieldUpdate:
        return self.store.set_field(page_id, path, value)

    def interpret_instruction(
        self, page_id: str, instruction: str, apply: bool = True
    ) -> InstructionReport:
        """Ask the interpreter for edits and apply each one with compare-and-set.

        Args:
            page_id: Page to edit
            instruction: Natural-language instruction
            apply: When False, report which proposals would apply without writing

        Returns:
            InstructionReport with one outcome per proposal, in proposal order

        Raises:
            ValidationError: If the instruction is empty
            PageNotFoundError: If the page does not exist
            InterpreterError: If no interpreter is configured or it fails
        """
        if not isinstance(instruction, str) or not instruction.strip():
            raise ValidationError("must be a non-empty string", "instruction")
        if self.interpreter is None:
            raise InterpreterError("no interpreter configured")

        snapshot = self.read_content(page_id)
        try:
            raw_proposals = self.interpreter(instruction, snapshot)
        except MicrotextError:
            raise
        except Exception as e:
            raise InterpreterError(f"{type(e).__name__}: {e}") from e

        report = InstructionReport(page_id=page_id, instruction=instruction, applied_requested=apply)
        for raw in raw_proposals or []:
            change = ProposedChange.from_dict(raw)
            if apply:
                outcome = self._apply(page_id, change)
            else:
                outcome = self._preview(page_id, change)
            report.outcomes.append(outcome)

        logger.info(
            f"Instruction on page {page_id}: {len(report.applied)} applied, "
            f"{len(report.skipped)} skipped of {len(report.outcomes)} proposal(s)"
        )
        return report

    def _validate_change(self, change: ProposedChange) -> None:
        if not isinstance(change.path, str) or not change.path:
            raise ValidationError("must be a non-empty string", "path")
        parse_path(change.path)
        if not isinstance(change.new_value, str):
            raise ValidationError("must be a string", "newValue")
        if change.expected_old_value is not None and not isinstance(change.expected_old_value, str):
            raise ValidationError("must be a string or null", "expectedOldValue")

    def _apply(self, page_id: str, change: ProposedChange) -> ChangeOutcome:
        try:
            self._validate_change(change)
            self.store.set_field(
                page_id, change.path, change.new_value, expected_value=change.expected_old_value
            )
        except StaleValueError as e:
            logger.warning(f"Skipped stale change to {page_id}#{change.path}")
            return ChangeOutcome(change, STATUS_SKIPPED, e.error_type, str(e), e.actual)
        except MicrotextError as e:
            logger.warning(f"Skipped change to {page_id}#{change.path}: {e}")
            return ChangeOutcome(change, STATUS_SKIPPED, e.error_type, str(e))
        return ChangeOutcome(change, STATUS_APPLIED)

    def _preview(self, page_id: str, change: ProposedChange) -> ChangeOutcome:
        try:
            self._validate_change(change)
            live = resolve_text(self.store.get(page_id), change.path)
        except MicrotextError as e:
            return ChangeOutcome(change, STATUS_SKIPPED, e.error_type, str(e))

        if live != change.expected_old_value:
            stale = StaleValueError(page_id, change.path, change.expected_old_value, live)
            return ChangeOutcome(change, STATUS_SKIPPED, stale.error_type, str(stale), live)
        return ChangeOutcome(change, STATUS_WOULD_APPLY)

    # -- dispatch --------------------------------------------------------

    def tool_definitions(self) -> List[Dict[str, Any]]:
        return [dict(definition) for definition in TOOL_DEFINITIONS]

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a tool by its stable name.

        Domain errors are returned, not raised, as
        ``{"isError": True, "errorType": ..., "error": ...}``.
        """
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownToolError(name)
            if arguments is None:
                arguments = {}
            if not isinstance(arguments, dict):
                raise ValidationError("must be an object", "arguments")
            return handler(arguments)
        except MicrotextError as e:
            logger.warning(f"Tool {name} failed: {e}")
            return {"isError": True, "errorType": e.error_type, "error": str(e)}

    @staticmethod
    def _require(arguments: Dict[str, Any], key: str) -> Any:
        if arguments.get(key) is None:
            raise ValidationError("is required", key)
        return arguments[key]

    def _call_enumerate_pages(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return {"pages": self.enumerate_pages()}

    def _call_read_content(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        page_id = self._require(arguments, "pageId")
        return {"pageId": page_id, "content": self.read_content(page_id)}

    def _call_write_field(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        update = self.write_field(
            self._require(arguments, "pageId"),
            self._require(arguments, "path"),
            self._require(arguments, "value"),
        )
        return {"success": True, **update.to_dict()}

    def _call_interpret_instruction(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        apply = arguments.get("apply", True)
        if not isinstance(apply, bool):
            raise ValidationError("must be a boolean", "apply")
        report = self.interpret_instruction(
            self._require(arguments, "pageId"),
            self._require(arguments, "instruction"),
            apply=apply,
        )
        return {"success": True, **report.to_dict()}
