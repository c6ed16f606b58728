"""Content tree library for microtext editing.

This package provides the tagged-variant content tree, dot-path addressing
into it, and the flatten/unflatten transforms used by every other layer.
"""

from .addressing import assign, format_path, parse_path, resolve, resolve_text, resolve_value
from .errors import (
    IndexOutOfRangeError,
    InvalidPathError,
    MicrotextError,
    ValidationError,
)
from .flatten import flatten, unflatten, unflatten_into
from .models import ArrayNode, Leaf, Node, ObjectNode, from_data, to_data

__all__ = [
    'ArrayNode',
    'Leaf',
    'Node',
    'ObjectNode',
    'from_data',
    'to_data',
    'parse_path',
    'format_path',
    'resolve',
    'resolve_value',
    'resolve_text',
    'assign',
    'flatten',
    'unflatten',
    'unflatten_into',
    'MicrotextError',
    'ValidationError',
    'InvalidPathError',
    'IndexOutOfRangeError',
]
