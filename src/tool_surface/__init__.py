"""Tool surface for external agents.

This package exposes page enumeration, content reads, single-field writes
and compare-and-set application of interpreted natural-language edits.
"""

from .errors import InterpreterError, UnknownToolError
from .interpreter import AnthropicInterpreter, Interpreter, build_prompt, parse_proposals
from .models import ChangeOutcome, InstructionReport, ProposedChange
from .server import build_server, run_stdio, serve
from .tool_surface import TOOL_DEFINITIONS, ToolSurface

__all__ = [
    'ToolSurface',
    'TOOL_DEFINITIONS',
    'Interpreter',
    'AnthropicInterpreter',
    'build_prompt',
    'parse_proposals',
    'ProposedChange',
    'ChangeOutcome',
    'InstructionReport',
    'build_server',
    'run_stdio',
    'serve',
    'InterpreterError',
    'UnknownToolError',
]
