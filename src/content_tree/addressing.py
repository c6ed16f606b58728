"""Dot-path addressing into content trees.

Paths are ``.``-separated segments. A segment made only of ASCII digits is
an array index; anything else is a field name::

    hero.headline        -> ["hero", "headline"]
    features.0.title     -> ["features", 0, "title"]

Reads never raise for missing data: ``resolve`` returns ``None`` when any
part of the path is absent. Writes create missing containers, inferring
their kind from the segment that follows (index -> array, name -> object),
and refuse to reshape data that already exists.
"""

import logging
from typing import List, Optional, Union

from .errors import IndexOutOfRangeError, InvalidPathError
from .models import ArrayNode, Leaf, Node, ObjectNode

logger = logging.getLogger(__name__)

Segment = Union[str, int]

PATH_SEPARATOR = "."


def parse_path(path: str) -> List[Segment]:
    """Split a dot path into field-name and index segments.

    Args:
        path: Dot-separated path (e.g., "features.0.title")

    Returns:
        List of segments, with digit-only segments converted to int

    Raises:
        InvalidPathError: If the path is empty or has an empty segment
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError(str(path), "path must be a non-empty string")

    segments: List[Segment] = []
    for raw in path.split(PATH_SEPARATOR):
        if not raw:
            raise InvalidPathError(path, "path contains an empty segment")
        if raw.isascii() and raw.isdigit():
            segments.append(int(raw))
        else:
            segments.append(raw)
    return segments


def format_path(segments: List[Segment]) -> str:
    """Join segments back into a dot path."""
    return PATH_SEPARATOR.join(str(segment) for segment in segments)


def resolve(tree: Node, path: str) -> Optional[Node]:
    """Return the node at ``path`` or ``None`` when it does not exist.

    An index segment on an object is looked up as a field name, so a field
    literally called "0" stays reachable.
    """
    current: Optional[Node] = tree
    for segment in parse_path(path):
        if isinstance(current, ObjectNode):
            current = current.fields.get(str(segment))
        elif isinstance(current, ArrayNode):
            if isinstance(segment, int) and segment < len(current.items):
                current = current.items[segment]
            else:
                current = None
        else:
            current = None

        if current is None:
            return None
    return current


def resolve_value(tree: Node, path: str) -> Optional[str]:
    """Return the text at ``path``, or ``None`` if it is absent or not text."""
    node = resolve(tree, path)
    if isinstance(node, Leaf) and node.is_text:
        return node.value
    return None


def resolve_text(tree: Node, path: str) -> Optional[str]:
    """Like ``resolve_value``, but refuse paths that hold a non-text scalar.

    Raises:
        InvalidPathError: If ``path`` addresses a number, boolean or other
            non-string value (null counts as unset)
    """
    node = resolve(tree, path)
    if isinstance(node, Leaf) and not node.is_text and node.value is not None:
        raise InvalidPathError(path, f"value is a {type(node.value).__name__}, not text")
    return resolve_value(tree, path)


def assign(tree: Node, path: str, value: Union[Node, str]) -> None:
    """Write ``value`` at ``path``, creating intermediate containers on demand.

    Args:
        tree: Root container to mutate in place
        path: Dot path to write
        value: Node, or a string which is wrapped in a Leaf

    Raises:
        InvalidPathError: If the path would reshape existing data (a name
            segment on an array, descending through a text value, or
            replacing a container with a value)
        IndexOutOfRangeError: If an index is more than one past the end of
            an existing array
    """
    node = Leaf(value) if isinstance(value, str) else value
    segments = parse_path(path)

    if isinstance(tree, Leaf):
        raise InvalidPathError(path, "cannot write into a value")

    current: Node = tree
    for position, segment in enumerate(segments[:-1]):
        child = _child(current, segment, path)
        if child is None or (isinstance(child, Leaf) and child.value is None):
            next_segment = segments[position + 1]
            child = ArrayNode() if isinstance(next_segment, int) else ObjectNode()
            _put(current, segment, child)
            logger.debug(
                f"Created {type(child).__name__} at "
                f"'{format_path(segments[:position + 1])}'"
            )
        elif isinstance(child, Leaf):
            raise InvalidPathError(
                path,
                f"'{format_path(segments[:position + 1])}' holds a value, not a container"
            )
        current = child

    last = segments[-1]
    existing = _child(current, last, path)
    if isinstance(node, Leaf) and isinstance(existing, (ArrayNode, ObjectNode)):
        raise InvalidPathError(path, "path addresses a container, not a value")
    _put(current, last, node)


def _child(container: Node, segment: Segment, path: str) -> Optional[Node]:
    """Look up a child for writing, rejecting shape changes."""
    if isinstance(container, ObjectNode):
        return container.fields.get(str(segment))

    if isinstance(container, ArrayNode):
        if not isinstance(segment, int):
            raise InvalidPathError(
                path, f"segment '{segment}' is not an index but addresses an array"
            )
        length = len(container.items)
        if segment < length:
            return container.items[segment]
        if segment == length:
            return None
        raise IndexOutOfRangeError(path, segment, length)

    raise InvalidPathError(path, f"segment '{segment}' addresses a value")


def _put(container: Node, segment: Segment, node: Node) -> None:
    if isinstance(container, ObjectNode):
        container.fields[str(segment)] = node
    elif isinstance(container, ArrayNode):
        if segment < len(container.items):
            container.items[segment] = node
        else:
            container.items.append(node)
