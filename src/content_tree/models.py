"""Data models for content trees.

A content tree is a tagged variant of three node kinds:

- ``Leaf``: a scalar value; only string leaves hold editable text
- ``ArrayNode``: an ordered list of nodes
- ``ObjectNode``: an insertion-ordered mapping of field name to node

Non-string YAML scalars (numbers, booleans, null, dates) are carried as
leaves so that they round-trip through a document unchanged, but they are
never offered for editing.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .errors import ValidationError

# Maximum nesting depth accepted when converting loaded YAML into a tree
MAX_TREE_DEPTH = 32

SCALAR_TYPES = (str, int, float, bool, datetime.date, datetime.datetime, type(None))


@dataclass
class Leaf:
    """A scalar node.

    Attributes:
        value: The scalar value (editable only when it is a string)
    """
    value: Any

    @property
    def is_text(self) -> bool:
        return isinstance(self.value, str)


@dataclass
class ArrayNode:
    """An ordered, dense list of nodes."""
    items: List["Node"] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class ObjectNode:
    """An ordered mapping of field name to node."""
    fields: Dict[str, "Node"] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.fields)


Node = Union[Leaf, ArrayNode, ObjectNode]


def from_data(obj: Any, _depth: int = 0) -> Node:
    """Convert plain YAML-loaded data into a content tree.

    Args:
        obj: dict, list or scalar as produced by ``yaml.safe_load``

    Returns:
        The equivalent Node

    Raises:
        ValidationError: If the data is nested too deeply or holds an
            unsupported type
    """
    if _depth > MAX_TREE_DEPTH:
        raise ValidationError(
            f"Content exceeds maximum nesting depth of {MAX_TREE_DEPTH}"
        )

    if isinstance(obj, dict):
        return ObjectNode(
            {str(key): from_data(value, _depth + 1) for key, value in obj.items()}
        )
    if isinstance(obj, list):
        return ArrayNode([from_data(item, _depth + 1) for item in obj])
    if isinstance(obj, SCALAR_TYPES):
        return Leaf(obj)

    raise ValidationError(
        f"Unsupported content value of type {type(obj).__name__}"
    )


def to_data(node: Node) -> Any:
    """Convert a content tree back into plain data suitable for ``yaml.safe_dump``."""
    if isinstance(node, ObjectNode):
        return {key: to_data(child) for key, child in node.fields.items()}
    if isinstance(node, ArrayNode):
        return [to_data(item) for item in node.items]
    return node.value
