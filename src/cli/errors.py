"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError and include descriptive messages with
context to help with debugging.
"""

from typing import Optional

from src.content_tree.errors import MicrotextError


class CLIError(MicrotextError):
    """Base exception for all CLI-related errors."""
    error_type = "CLIError"


class ConfigError(CLIError):
    """Raised when configuration loading or validation fails."""
    error_type = "ConfigError"

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
