# liststyles/commands.py
"""
Structural list commands.

Every command returns the list of elements it changed (document order) and
then fires its ``execute`` pipeline with that list, so other features can
react to the command after its own change has settled.
"""

import logging
from typing import Iterable, List

from .model import LIST_ITEM, PARAGRAPH, Element, ListType
from .pipeline import Pipeline

logger = logging.getLogger(__name__)


class CommandError(ValueError):
    """Unknown command name or invalid command arguments."""


class Command:
    name = "command"

    def __init__(self, editor) -> None:
        self.editor = editor
        self.pipeline = Pipeline(f"command:{self.name}")

    def on_execute(self, callback, *, name: str = "", priority: str = "normal"):
        return self.pipeline.on("execute", callback, name=name, priority=priority)

    def execute(self, *args, **kwargs) -> List[Element]:
        changed = self._execute(*args, **kwargs)
        if changed:
            self.pipeline.fire("execute", list(changed))
        return changed

    def _execute(self, *args, **kwargs) -> List[Element]:
        raise NotImplementedError

    def _blocks(self, item_ids: Iterable[int]) -> List[Element]:
        doc = self.editor.model.document
        blocks = [doc.get(node_id) for node_id in dict.fromkeys(item_ids)]
        return sorted(blocks, key=lambda n: doc.index_of(n.id))


class IndentListCommand(Command):
    """Changes ``listIndent`` of the selected items and of their sub-items by ``indent_by``."""

    def __init__(self, editor, name: str, indent_by: int) -> None:
        self.name = name
        super().__init__(editor)
        self.indent_by = indent_by

    def is_enabled(self, item_ids: Iterable[int]) -> bool:
        items = [b for b in self._blocks(item_ids) if b.is_list_item]
        if not items:
            return False
        if self.indent_by < 0:
            return True

        # Indenting needs a previous item at the same level (and of the same type) to nest under.
        first = items[0]
        doc = self.editor.model.document
        prev = doc.sibling_before(first.id)
        while prev is not None and prev.is_list_item and prev.get_attribute("listIndent") > first.get_attribute("listIndent"):
            prev = doc.sibling_before(prev.id)
        return bool(
            prev is not None
            and prev.is_list_item
            and prev.get_attribute("listIndent") == first.get_attribute("listIndent")
            and prev.get_attribute("listType") == first.get_attribute("listType")
        )

    def _execute(self, item_ids: Iterable[int]) -> List[Element]:
        item_ids = list(item_ids)
        if not self.is_enabled(item_ids):
            logger.debug("%s: disabled for %r", self.name, item_ids)
            return []

        doc = self.editor.model.document
        items = [b for b in self._blocks(item_ids) if b.is_list_item]
        last = items[-1]
        following = doc.sibling_after(last.id)
        while (
            following is not None
            and following.is_list_item
            and following.get_attribute("listIndent") > last.get_attribute("listIndent")
        ):
            if following not in items:
                items.append(following)
            following = doc.sibling_after(following.id)

        with self.editor.model.change() as writer:
            # Outdent from the last item so intermediate states stay valid.
            for item in (reversed(items) if self.indent_by < 0 else items):
                indent = item.get_attribute("listIndent") + self.indent_by
                if indent < 0:
                    writer.rename(item, PARAGRAPH)
                else:
                    writer.set_attribute("listIndent", indent, item)
        return items


class ListTypeCommand(Command):
    """Turns blocks into list items of one type, or back into paragraphs."""

    def __init__(self, editor, name: str, list_type: ListType) -> None:
        self.name = name
        super().__init__(editor)
        self.list_type = list_type

    def value(self, item_ids: Iterable[int]) -> bool:
        blocks = self._blocks(item_ids)
        return bool(blocks) and all(
            b.is_list_item and b.get_attribute("listType") == self.list_type for b in blocks
        )

    def _execute(self, item_ids: Iterable[int]) -> List[Element]:
        item_ids = list(item_ids)
        blocks = self._blocks(item_ids)
        if not blocks:
            return []
        turn_off = self.value(item_ids)
        changed: List[Element] = []

        with self.editor.model.change() as writer:
            for block in blocks:
                if turn_off:
                    writer.rename(block, PARAGRAPH)
                elif not block.is_list_item:
                    writer.rename(block, LIST_ITEM)
                    writer.set_attribute("listType", self.list_type, block)
                    writer.set_attribute("listIndent", 0, block)
                elif block.get_attribute("listType") != self.list_type:
                    writer.set_attribute("listType", self.list_type, block)
                else:
                    continue
                changed.append(block)
        return changed
