"""Unit tests for the agent tool surface (tool_surface.py)."""

import pytest

from src.content_tree.errors import ValidationError
from src.content_tree.flatten import flatten
from src.document_store.errors import PageNotFoundError
from src.tool_surface.errors import InterpreterError
from src.tool_surface.models import (
    STATUS_APPLIED,
    STATUS_SKIPPED,
    STATUS_WOULD_APPLY,
    ProposedChange,
)
from src.tool_surface.tool_surface import TOOL_DEFINITIONS, ToolSurface
from tests.helpers.fakes import ScriptedInterpreter


def _proposal(path, old, new, rationale="why"):
    return {"path": path, "expectedOldValue": old, "newValue": new, "rationale": rationale}


class TestOperations:
    """Test cases for the direct operations."""

    def test_enumerate_pages(self, store):
        assert ToolSurface(store).enumerate_pages() == ["about", "home", "index"]

    def test_read_content_is_flat(self, store):
        content = ToolSurface(store).read_content("home")

        assert content["hero.headline"] == "A"
        assert content["features.2.desc"] == "No lock-in"

    def test_write_field(self, store):
        update = ToolSurface(store).write_field("home", "hero.headline", "B")

        assert update.previous_value == "A"
        assert flatten(store.get("home"))["hero.headline"] == "B"


class TestInterpretInstruction:
    """Test cases for interpret_instruction with compare-and-set."""

    def test_applies_matching_proposals(self, store):
        interpreter = ScriptedInterpreter([_proposal("hero.headline", "A", "Ship now")])
        tools = ToolSurface(store, interpreter)

        report = tools.interpret_instruction("home", "Make it urgent")

        assert [o.status for o in report.outcomes] == [STATUS_APPLIED]
        assert flatten(store.get("home"))["hero.headline"] == "Ship now"
        instruction, snapshot = interpreter.calls[0]
        assert instruction == "Make it urgent"
        assert snapshot["hero.headline"] == "A"

    def test_stale_proposal_skipped_and_reported(self, store):
        """A field edited after the interpreter read it is not overwritten."""
        interpreter = ScriptedInterpreter(
            [
                _proposal("hero.headline", "A", "Interpreter text"),
                _proposal("hero.subhead", "Build sites faster", "Build faster"),
            ],
            before_return=lambda: store.set_field("home", "hero.headline", "Human text"),
        )
        tools = ToolSurface(store, interpreter)

        report = tools.interpret_instruction("home", "Tighten copy")

        assert [o.status for o in report.outcomes] == [STATUS_SKIPPED, STATUS_APPLIED]
        skipped = report.skipped[0]
        assert skipped.error_type == "StaleValue"
        assert skipped.live_value == "Human text"
        flat = flatten(store.get("home"))
        assert flat["hero.headline"] == "Human text"
        assert flat["hero.subhead"] == "Build faster"

    def test_invalid_proposals_skipped(self, store):
        interpreter = ScriptedInterpreter([
            _proposal("hero", None, "reshape"),
            _proposal("hero.headline", "A", 7),
            "not a proposal",
            _proposal("hero.headline", "A", "Fine"),
        ])

        report = ToolSurface(store, interpreter).interpret_instruction("home", "Edit")

        assert [o.status for o in report.outcomes] == [
            STATUS_SKIPPED, STATUS_SKIPPED, STATUS_SKIPPED, STATUS_APPLIED
        ]
        assert [o.error_type for o in report.skipped] == [
            "InvalidPath", "ValidationError", "ValidationError"
        ]

    def test_new_field_proposal_expects_unset(self, store):
        interpreter = ScriptedInterpreter([_proposal("hero.badge", None, "New!")])

        report = ToolSurface(store, interpreter).interpret_instruction("home", "Add a badge")

        assert report.outcomes[0].status == STATUS_APPLIED
        assert flatten(store.get("home"))["hero.badge"] == "New!"

    def test_legacy_key_names_accepted(self, store):
        interpreter = ScriptedInterpreter([
            {"id": "hero.headline", "oldValue": "A", "newValue": "B", "reasoning": "shorter"}
        ])

        report = ToolSurface(store, interpreter).interpret_instruction("home", "Edit")

        assert report.outcomes[0].change.rationale == "shorter"
        assert report.outcomes[0].status == STATUS_APPLIED

    def test_preview_does_not_write(self, store, memory_backend):
        interpreter = ScriptedInterpreter([
            _proposal("hero.headline", "A", "B"),
            _proposal("hero.subhead", "Wrong", "C"),
        ])

        report = ToolSurface(store, interpreter).interpret_instruction("home", "Edit", apply=False)

        assert [o.status for o in report.outcomes] == [STATUS_WOULD_APPLY, STATUS_SKIPPED]
        assert report.outcomes[1].live_value == "Build sites faster"
        assert memory_backend.writes == []

    def test_no_proposals(self, store):
        report = ToolSurface(store, ScriptedInterpreter([])).interpret_instruction("home", "Nothing")

        assert report.outcomes == []
        assert report.to_dict()["appliedCount"] == 0

    def test_proposed_change_objects_accepted(self, store):
        interpreter = ScriptedInterpreter([ProposedChange("hero.headline", "A", "B")])

        report = ToolSurface(store, interpreter).interpret_instruction("home", "Edit")

        assert report.outcomes[0].status == STATUS_APPLIED

    def test_empty_instruction_rejected(self, store):
        with pytest.raises(ValidationError):
            ToolSurface(store, ScriptedInterpreter()).interpret_instruction("home", "  ")

    def test_missing_page(self, store):
        with pytest.raises(PageNotFoundError):
            ToolSurface(store, ScriptedInterpreter()).interpret_instruction("pricing", "Edit")

    def test_no_interpreter_configured(self, store):
        with pytest.raises(InterpreterError):
            ToolSurface(store).interpret_instruction("home", "Edit")

    def test_unexpected_interpreter_failure_wrapped(self, store):
        interpreter = ScriptedInterpreter(error=RuntimeError("model crashed"))

        with pytest.raises(InterpreterError, match="model crashed"):
            ToolSurface(store, interpreter).interpret_instruction("home", "Edit")


class TestCall:
    """Test cases for dispatch by tool name."""

    def test_tool_definitions(self, store):
        names = [tool["name"] for tool in ToolSurface(store).tool_definitions()]

        assert names == [tool["name"] for tool in TOOL_DEFINITIONS]
        assert names == ["enumerate-pages", "read-content", "write-field", "interpret-instruction"]

    def test_enumerate_pages(self, store):
        assert ToolSurface(store).call("enumerate-pages") == {"pages": ["about", "home", "index"]}

    def test_read_content(self, store):
        response = ToolSurface(store).call("read-content", {"pageId": "about"})

        assert response == {"pageId": "about", "content": {"intro": "We make tools."}}

    def test_write_field(self, store):
        response = ToolSurface(store).call(
            "write-field", {"pageId": "home", "path": "hero.headline", "value": "B"}
        )

        assert response == {
            "success": True,
            "pageId": "home",
            "path": "hero.headline",
            "previousValue": "A",
            "newValue": "B",
        }

    def test_interpret_instruction(self, store):
        tools = ToolSurface(store, ScriptedInterpreter([_proposal("hero.headline", "Old", "B")]))

        response = tools.call("interpret-instruction", {"pageId": "home", "instruction": "Edit"})

        assert response["success"] is True
        assert response["skippedCount"] == 1
        assert response["changes"][0]["status"] == "skipped"
        assert response["changes"][0]["errorType"] == "StaleValue"

    def test_errors_returned_not_raised(self, store):
        response = ToolSurface(store).call("read-content", {"pageId": "pricing"})

        assert response["isError"] is True
        assert response["errorType"] == "NotFound"

    def test_missing_argument(self, store):
        response = ToolSurface(store).call("write-field", {"pageId": "home", "path": "a"})

        assert response["errorType"] == "ValidationError"
        assert "value" in response["error"]

    def test_unknown_tool(self, store):
        response = ToolSurface(store).call("delete-everything", {})

        assert response["isError"] is True
        assert response["errorType"] == "ValidationError"

    def test_non_object_arguments(self, store):
        response = ToolSurface(store).call("read-content", ["home"])

        assert response["errorType"] == "ValidationError"

    def test_non_boolean_apply(self, store):
        response = ToolSurface(store, ScriptedInterpreter()).call(
            "interpret-instruction", {"pageId": "home", "instruction": "x", "apply": "no"}
        )

        assert response["errorType"] == "ValidationError"
