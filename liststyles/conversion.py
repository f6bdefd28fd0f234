# liststyles/conversion.py
"""
Upcast (HTML → model) and downcast (model → view) dispatchers.

Both are thin drivers around a :class:`~liststyles.pipeline.Pipeline`: they
walk their input in document order and fire one event per element or
attribute; the registered handlers do the actual conversion.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from .engine import Model
from .model import ChangeRecord, Document, Element
from .pipeline import Pipeline
from .schema import Schema
from .view import Mapper, View, ViewWriter
from .writer import Writer

logger = logging.getLogger(__name__)


# ─── Upcast ──────────────────────────────────────────────────────────────────

@dataclass
class UpcastData:
    view_item: Any                       # bs4 Tag, or NavigableString for "$text"
    depth: int = 0
    model_item: Optional[Element] = None
    consumed: bool = False
    # Tags the consuming handler wants converted one nesting level deeper.
    nested: List[Tag] = field(default_factory=list)


@dataclass
class UpcastApi:
    writer: Writer
    schema: Schema
    document: Document


class UpcastDispatcher:
    def __init__(self, model: Model) -> None:
        self.model = model
        self.pipeline = Pipeline("upcast")

    def on(self, event: str, callback, *, name: str = "", priority: str = "normal"):
        return self.pipeline.on(event, callback, name=name, priority=priority)

    def convert(self, html: str, writer: Writer) -> List[Element]:
        """Append the model elements for ``html`` to the document. Returns them in order."""
        soup = BeautifulSoup(html or "", "lxml")
        root = soup.body if soup.body is not None else soup
        api = UpcastApi(writer=writer, schema=self.model.schema, document=self.model.document)
        created: List[Element] = []
        self._convert_children(root, 0, api, created)
        return created

    def _convert_children(self, tag: Tag, depth: int, api: UpcastApi, created: List[Element]) -> None:
        for child in list(tag.children):
            if isinstance(child, Tag):
                self._convert_tag(child, depth, api, created)
            elif type(child) is NavigableString and child.strip():
                data = UpcastData(view_item=child, depth=depth)
                self.pipeline.fire("$text", data, api)
                if data.model_item is not None:
                    created.append(data.model_item)

    def _convert_tag(self, tag: Tag, depth: int, api: UpcastApi, created: List[Element]) -> None:
        data = UpcastData(view_item=tag, depth=depth)
        self.pipeline.fire(f"element:{tag.name}", data, api)
        if data.model_item is not None:
            created.append(data.model_item)
        if not data.consumed:
            self._convert_children(tag, depth, api, created)
            return
        for nested in data.nested:
            self._convert_tag(nested, depth + 1, api, created)


# ─── Downcast ────────────────────────────────────────────────────────────────

@dataclass
class InsertData:
    item: Element


@dataclass
class AttributeData:
    item: Element
    attribute_key: str
    attribute_old_value: Any
    attribute_new_value: Any


@dataclass
class DowncastApi:
    writer: ViewWriter
    mapper: Mapper
    view: View
    document: Document


class DowncastDispatcher:
    def __init__(self, model: Model, view: View) -> None:
        self.model = model
        self.view = view
        self.pipeline = Pipeline("downcast")

    def on(self, event: str, callback, *, name: str = "", priority: str = "normal"):
        return self.pipeline.on(event, callback, name=name, priority=priority)

    def _api(self) -> DowncastApi:
        return DowncastApi(
            writer=self.view.writer,
            mapper=self.view.mapper,
            view=self.view,
            document=self.model.document,
        )

    def render_document(self) -> None:
        """Rebuild the whole view by inserting every model element in document order."""
        self.view.reset()
        api = self._api()
        for node in self.model.document:
            self.pipeline.fire(f"insert:{node.name}", InsertData(item=node), api)
            for key in sorted(node.attributes):
                self.pipeline.fire(
                    f"attribute:{key}:{node.name}",
                    AttributeData(node, key, None, node.attributes[key]),
                    api,
                )

    def convert_attribute_changes(self, changes: List[ChangeRecord]) -> None:
        """Dispatch attribute changes onto the existing view, in document order."""
        doc = self.model.document
        first_old = {}
        for change in changes:
            if change.type != "attribute" or change.node_id not in doc:
                continue
            first_old.setdefault((change.node_id, change.attribute_key), change.old_value)

        ordered = sorted(first_old, key=lambda k: doc.index_of(k[0]))
        api = self._api()
        for node_id, key in ordered:
            node = doc.get(node_id)
            old = first_old[(node_id, key)]
            new = node.get_attribute(key)
            if old == new:
                continue
            logger.debug("downcast attribute %s on %s#%d: %r -> %r", key, node.name, node_id, old, new)
            self.pipeline.fire(f"attribute:{key}:{node.name}", AttributeData(node, key, old, new), api)
