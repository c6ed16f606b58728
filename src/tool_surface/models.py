"""Data models for instruction interpretation."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

STATUS_APPLIED = "applied"
STATUS_WOULD_APPLY = "would_apply"
STATUS_SKIPPED = "skipped"


@dataclass
class ProposedChange:
    """One edit proposed by the interpreter.

    Attributes:
        path: Dot path of the field to change
        expected_old_value: Value the interpreter saw (None for unset fields)
        new_value: Replacement text
        rationale: Short explanation from the interpreter
    """
    path: Any
    expected_old_value: Any
    new_value: Any
    rationale: str = ""

    @classmethod
    def from_dict(cls, raw: Any) -> "ProposedChange":
        """Build a proposal from interpreter output, accepting legacy key names."""
        if isinstance(raw, ProposedChange):
            return raw
        if not isinstance(raw, dict):
            return cls(path=None, expected_old_value=None, new_value=None, rationale=repr(raw))
        return cls(
            path=raw.get("path", raw.get("id")),
            expected_old_value=raw.get("expectedOldValue", raw.get("oldValue")),
            new_value=raw.get("newValue"),
            rationale=str(raw.get("rationale", raw.get("reasoning", "")) or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "expectedOldValue": self.expected_old_value,
            "newValue": self.new_value,
            "rationale": self.rationale,
        }


@dataclass
class ChangeOutcome:
    """What happened to one proposed change.

    Attributes:
        change: The proposal
        status: "applied", "would_apply" (preview) or "skipped"
        error_type: Taxonomy name of the reason a change was skipped
        reason: Human-readable reason a change was skipped
        live_value: Value found in the document when the change was checked
    """
    change: ProposedChange
    status: str
    error_type: Optional[str] = None
    reason: Optional[str] = None
    live_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = self.change.to_dict()
        result["status"] = self.status
        if self.status == STATUS_SKIPPED:
            result["errorType"] = self.error_type
            result["reason"] = self.reason
            result["liveValue"] = self.live_value
        return result


@dataclass
class InstructionReport:
    """Per-proposal outcomes of interpreting one instruction."""
    page_id: str
    instruction: str
    applied_requested: bool = True
    outcomes: List[ChangeOutcome] = field(default_factory=list)

    @property
    def applied(self) -> List[ChangeOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_APPLIED]

    @property
    def skipped(self) -> List[ChangeOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_SKIPPED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageId": self.page_id,
            "instruction": self.instruction,
            "applied": self.applied_requested,
            "appliedCount": len(self.applied),
            "skippedCount": len(self.skipped),
            "changes": [outcome.to_dict() for outcome in self.outcomes],
        }
