# liststyles/writer.py
from typing import Any, Dict, Optional

from .model import ChangeRecord, Document, Element
from .schema import Schema


class SchemaError(ValueError):
    """Raised when an attribute is written onto an element that may not carry it."""


class Writer:
    """Mutates the document and records every change into its differ.

    Only handed out by ``Model.change()``; never keep one outside that scope.
    """

    def __init__(self, document: Document, schema: Schema) -> None:
        self._doc = document
        self._schema = schema

    def create_element(self, name: str, attributes: Optional[Dict[str, Any]] = None, text: str = "") -> Element:
        return Element(id=self._doc.new_id(), name=name, attributes=dict(attributes or {}), text=text)

    def insert(self, element: Element, index: int) -> Element:
        index = max(0, min(index, len(self._doc)))
        self._doc._attach(element, index)
        self._record("insert", element, index)
        return element

    def append(self, element: Element) -> Element:
        return self.insert(element, len(self._doc))

    def insert_after(self, element: Element, anchor: Element) -> Element:
        return self.insert(element, self._doc.index_of(anchor.id) + 1)

    def remove(self, node: Element) -> None:
        index = self._doc.index_of(node.id)
        self._doc._detach(node.id)
        self._record("remove", node, index)

    def rename(self, node: Element, new_name: str) -> None:
        """Change the element name in place (recorded as remove + insert)."""
        if node.name == new_name:
            return
        index = self._doc.index_of(node.id)
        self._record("remove", node, index)
        node.name = new_name
        self._record("insert", node, index)

    def set_attribute(self, key: str, value: Any, node: Element) -> bool:
        """Set ``key`` on ``node``. Returns False when the value was already set."""
        if not self._schema.check_attribute(node, key):
            raise SchemaError(f"attribute {key!r} is not allowed on {node.name!r} (id={node.id})")
        old = node.attributes.get(key)
        if key in node.attributes and old == value:
            return False
        node.attributes[key] = value
        self._record("attribute", node, self._doc.index_of(node.id), key, old, value)
        return True

    def remove_attribute(self, key: str, node: Element) -> bool:
        if key not in node.attributes:
            return False
        old = node.attributes.pop(key)
        self._record("attribute", node, self._doc.index_of(node.id), key, old, None)
        return True

    def _record(self, change_type: str, node: Element, index: int,
                key: Optional[str] = None, old: Any = None, new: Any = None) -> None:
        self._doc.differ.record(ChangeRecord(
            type=change_type,
            name=node.name,
            node_id=node.id,
            position=index,
            attribute_key=key,
            old_value=old,
            new_value=new,
        ))
