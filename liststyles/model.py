# liststyles/model.py
"""
Document model for flat list items.

A document is an ordered arena of elements addressed by stable integer ids.
Lists have no container node: a "structural list" is a maximal run of
consecutive ``listItem`` elements sharing ``listType`` and ``listIndent``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class ListType(str, Enum):
    BULLETED = "bulleted"
    NUMBERED = "numbered"
    TODO = "todo"


class ListStyleSentinel(str, Enum):
    """Style value meaning "no explicit style set". Never serialized to the view."""

    DEFAULT = "default"


DEFAULT_LIST_STYLE = ListStyleSentinel.DEFAULT

LIST_ITEM = "listItem"
PARAGRAPH = "paragraph"


class UnknownNodeError(KeyError):
    """Raised when a node id is not (or no longer) part of the document."""


@dataclass(eq=False)
class Element:
    id: int
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    text: str = ""

    @property
    def is_list_item(self) -> bool:
        return self.name == LIST_ITEM

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes

    def to_dict(self) -> Dict[str, Any]:
        attrs = {k: (v.value if isinstance(v, Enum) else v) for k, v in self.attributes.items()}
        return {"id": self.id, "name": self.name, "text": self.text, "attributes": attrs}


def same_structural_list(a: Optional[Element], b: Optional[Element]) -> bool:
    """True if both are list items with equal ``listType`` and ``listIndent``.

    ``listStyle`` is intentionally not compared: a style difference splits the
    rendered container but does not change list identity.
    """
    if a is None or b is None or not a.is_list_item or not b.is_list_item:
        return False
    if a.get_attribute("listType") != b.get_attribute("listType"):
        return False
    return a.get_attribute("listIndent") == b.get_attribute("listIndent")


# ─── Change log ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ChangeRecord:
    type: str                  # insert | remove | attribute
    name: str                  # element name at the time of the change
    node_id: int
    position: int              # document index at the time of the change
    attribute_key: Optional[str] = None
    old_value: Any = None
    new_value: Any = None


class Differ:
    """Buffers the changes made during one settle cycle."""

    def __init__(self) -> None:
        self._changes: List[ChangeRecord] = []

    def record(self, change: ChangeRecord) -> None:
        self._changes.append(change)

    def get_changes(self) -> List[ChangeRecord]:
        return list(self._changes)

    @property
    def is_empty(self) -> bool:
        return not self._changes

    def reset(self) -> None:
        self._changes = []


# ─── Document arena ──────────────────────────────────────────────────────────

class Document:
    def __init__(self) -> None:
        self._order: List[int] = []
        self._nodes: Dict[int, Element] = {}
        self._next_id = 1
        self.differ = Differ()

    def __iter__(self) -> Iterator[Element]:
        for node_id in self._order:
            yield self._nodes[node_id]

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def new_id(self) -> int:
        node_id = self._next_id
        self._next_id += 1
        return node_id

    def get(self, node_id: int) -> Element:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def index_of(self, node_id: int) -> int:
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id)
        return self._order.index(node_id)

    def node_at(self, index: int) -> Optional[Element]:
        if 0 <= index < len(self._order):
            return self._nodes[self._order[index]]
        return None

    def sibling_before(self, node_id: int) -> Optional[Element]:
        return self.node_at(self.index_of(node_id) - 1)

    def sibling_after(self, node_id: int) -> Optional[Element]:
        return self.node_at(self.index_of(node_id) + 1)

    def list_items(self) -> List[Element]:
        return [node for node in self if node.is_list_item]

    # Low-level mutation, only called by the writer.

    def _attach(self, element: Element, index: int) -> None:
        self._nodes[element.id] = element
        self._order.insert(index, element.id)

    def _detach(self, node_id: int) -> Element:
        index = self.index_of(node_id)
        del self._order[index]
        return self._nodes.pop(node_id)
