"""Data models for document store operations.

Result objects are plain dataclasses. ``to_dict`` renders each one in the
camelCase shape used on the wire by the tool surface and the CLI's JSON
output.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ARRAY_OPS = ("add", "remove")


@dataclass
class FieldUpdate:
    """Outcome of a single field write.

    Attributes:
        page_id: Page that was written
        path: Dot path of the field
        previous_value: Text before the write (None if the field was unset)
        new_value: Text after the write
    """
    page_id: str
    path: str
    previous_value: Optional[str]
    new_value: str

    @property
    def changed(self) -> bool:
        return self.previous_value != self.new_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageId": self.page_id,
            "path": self.path,
            "previousValue": self.previous_value,
            "newValue": self.new_value,
        }


@dataclass
class ArrayOpResult:
    """Outcome of an array add or remove.

    Attributes:
        op: "add" or "remove"
        array_path: Dot path of the array
        index: Index of the appended or removed item
        item: The appended or removed item as plain data
        new_length: Array length after the operation
    """
    op: str
    array_path: str
    index: int
    item: Any
    new_length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "op": self.op,
            "arrayPath": self.array_path,
            "index": self.index,
            "item": self.item,
            "newLength": self.new_length,
        }


@dataclass
class ArrayInfo:
    """Snapshot of an array's items."""
    array_path: str
    items: List[Any] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {"arrayPath": self.array_path, "items": self.items, "length": self.length}
