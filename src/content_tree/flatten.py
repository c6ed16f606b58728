"""Bidirectional transform between content trees and flat path maps.

``flatten`` walks a tree depth-first and emits one entry per text leaf.
``unflatten_into`` is the targeted inverse: it writes a single path through
the addressor, leaving every other leaf exactly where it was.
"""

from typing import Dict, List

from .addressing import Segment, assign, format_path
from .models import ArrayNode, Leaf, Node, ObjectNode


def flatten(tree: Node) -> Dict[str, str]:
    """Flatten a tree into an ordered ``path -> text`` mapping.

    Example:
        >>> flatten(from_data({"hero": {"headline": "Hi"}, "tags": ["a"]}))
        {'hero.headline': 'Hi', 'tags.0': 'a'}
    """
    entries: Dict[str, str] = {}
    _walk(tree, [], entries)
    return entries


def _walk(node: Node, prefix: List[Segment], entries: Dict[str, str]) -> None:
    if isinstance(node, ObjectNode):
        for key, child in node.fields.items():
            _walk(child, prefix + [key], entries)
    elif isinstance(node, ArrayNode):
        for index, item in enumerate(node.items):
            _walk(item, prefix + [index], entries)
    elif isinstance(node, Leaf) and node.is_text and prefix:
        entries[format_path(prefix)] = node.value


def unflatten_into(tree: Node, path: str, value: str) -> None:
    """Write one flat entry back into ``tree`` in place."""
    assign(tree, path, value)


def unflatten(entries: Dict[str, str]) -> ObjectNode:
    """Build a new tree from a flat mapping, one targeted write per entry.

    All-digit segments create arrays, so an object field named "0" in the
    source tree comes back as an array item. Use ``unflatten_into`` on the
    original tree to keep such fields.
    """
    tree = ObjectNode()
    for path, value in entries.items():
        unflatten_into(tree, path, value)
    return tree
