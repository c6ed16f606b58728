"""Command-line interface for microtext editing.

This package provides the `microtext` CLI tool, which wires the document
store, draft cache, sync engine, publish gate and tool surface together
from a project configuration file.
"""

from .config import ConfigLoader
from .editor import Editor
from .errors import CLIError, ConfigError
from .models import EditorConfig, ExitCode

__all__ = [
    'ConfigLoader',
    'Editor',
    'EditorConfig',
    'ExitCode',
    'CLIError',
    'ConfigError',
]
