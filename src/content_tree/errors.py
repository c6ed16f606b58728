"""Typed exception hierarchy for content tree errors.

This module defines the root of all microtext-editor exceptions and the
errors raised while addressing or converting content trees. Every exception
carries an ``error_type`` naming its category so batch reports and tool
responses can surface it without inspecting the class.
"""

from typing import Optional


class MicrotextError(Exception):
    """Base exception for all microtext-editor errors.

    Use this to catch any application-level error from the editor.
    """
    error_type = "MicrotextError"


class ValidationError(MicrotextError):
    """Raised when an input is missing or malformed."""
    error_type = "ValidationError"

    def __init__(self, message: str, field: Optional[str] = None):
        if field:
            full_message = f"Invalid value for '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message)
        self.field = field
        self.original_message = message


class InvalidPathError(MicrotextError):
    """Raised when a path is malformed, reshapes existing data, or escapes the content root."""
    error_type = "InvalidPath"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path '{path}': {reason}")
        self.path = path
        self.reason = reason


class IndexOutOfRangeError(MicrotextError):
    """Raised when an array index falls outside the array."""
    error_type = "IndexOutOfRange"

    def __init__(self, path: str, index: int, length: int):
        super().__init__(
            f"Index {index} out of bounds for '{path}' (array length: {length})"
        )
        self.path = path
        self.index = index
        self.length = length
