"""Typed exception hierarchy for tool surface errors."""

from typing import Optional

from src.content_tree.errors import MicrotextError


class InterpreterError(MicrotextError):
    """Raised when the natural-language interpreter fails or returns unusable output.

    Attributes:
        status_code: HTTP status of the failed call, when there was one
    """
    error_type = "InterpreterError"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"Interpreter error: {message}")
        self.message = message
        self.status_code = status_code


class UnknownToolError(MicrotextError):
    """Raised when a tool call names an operation that does not exist."""
    error_type = "ValidationError"

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name
