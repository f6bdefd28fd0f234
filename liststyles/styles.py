# liststyles/styles.py
"""
The ``listStyle`` attribute of list items.

Keeps the per-item ``listStyle`` attribute consistent with the document and
with the rendered ``ul``/``ol`` containers:

- upcast: ``list-style-type`` of the HTML container → ``listStyle`` of each item;
- downcast: a ``listStyle`` change relabels, splits or joins the rendered container;
- post-fixer: every inserted list item gets a style, inherited or default;
- indent/outdent: items moved to another level take the style of that level.

The ``default`` sentinel means "no explicit style" and is never rendered.
"""

import logging
import re
from typing import List, Optional

from .commands import Command
from .model import DEFAULT_LIST_STYLE, LIST_ITEM, Element, ListType, same_structural_list
from .view import LIST_STYLE_TYPE, Position, ViewElement

logger = logging.getLogger(__name__)

LIST_STYLE = "listStyle"

_RE_LIST_STYLE_TYPE = re.compile(r"(?:^|;)\s*list-style-type\s*:\s*([^;!]+)", re.IGNORECASE)


def setup_list_styles(editor) -> None:
    model = editor.model

    model.schema.extend(LIST_ITEM, allow_attributes=(LIST_STYLE,))
    model.schema.add_attribute_check(_disallow_style_on_todo)

    editor.commands["listStyles"] = ListStyleCommand(editor)

    editor.commands["indentList"].on_execute(
        fix_list_after_indent(editor), name="listStyle:indent", priority="low"
    )
    editor.commands["outdentList"].on_execute(
        fix_list_after_outdent(editor), name="listStyle:outdent", priority="low"
    )

    model.register_post_fixer(fix_list_style_on_inserted_items(model))

    editor.upcast.on("element:li", upcast_list_style, name="listStyle:upcast", priority="low")
    editor.downcast.on(
        f"attribute:{LIST_STYLE}:{LIST_ITEM}", downcast_list_style, name="listStyle:downcast", priority="low"
    )


def _disallow_style_on_todo(node: Element, key: str) -> Optional[bool]:
    if key == LIST_STYLE and node.is_list_item and node.get_attribute("listType") == ListType.TODO:
        return False
    return None


def parse_list_style_type(style: Optional[str]) -> Optional[str]:
    """Return the ``list-style-type`` value of an inline style declaration, if any."""
    if not style:
        return None
    m = _RE_LIST_STYLE_TYPE.search(style)
    if not m:
        return None
    value = m.group(1).strip().lower()
    return value or None


# ─── Upcast ──────────────────────────────────────────────────────────────────

def upcast_list_style(data, api) -> None:
    """Copy ``list-style-type`` from the ``li``'s container onto the new list item."""
    item = data.model_item
    if item is None or not item.is_list_item:
        return
    if not api.schema.check_attribute(item, LIST_STYLE):
        return
    container = data.view_item.parent
    style = parse_list_style_type(container.get("style")) if container is not None else None
    api.writer.set_attribute(LIST_STYLE, style or DEFAULT_LIST_STYLE, item)


# ─── Downcast ────────────────────────────────────────────────────────────────

def _set_list_style(writer, style, container: ViewElement) -> None:
    if style and style != DEFAULT_LIST_STYLE:
        writer.set_style(LIST_STYLE_TYPE, str(style), container)
    else:
        writer.remove_style(LIST_STYLE_TYPE, container)


def _isolate(writer, li: ViewElement) -> None:
    writer.break_container(writer.position_before(li))
    writer.break_container(writer.position_after(li))


def _previous_at_level(doc, item: Element) -> Optional[Element]:
    # Deeper items in between are nested inside the previous item's ``li``.
    prev = doc.sibling_before(item.id)
    indent = item.get_attribute("listIndent", 0)
    while prev is not None and prev.is_list_item and prev.get_attribute("listIndent", 0) > indent:
        prev = doc.sibling_before(prev.id)
    return prev


def _next_at_level(doc, item: Element) -> Optional[Element]:
    following = doc.sibling_after(item.id)
    indent = item.get_attribute("listIndent", 0)
    while following is not None and following.is_list_item and following.get_attribute("listIndent", 0) > indent:
        following = doc.sibling_after(following.id)
    return following


def _can_merge(first: ViewElement, second: ViewElement) -> bool:
    return (
        first.parent is not None
        and first.parent is second.parent
        and second.index == first.index + 1
        and first.name == second.name
    )


def _matching_run(api, fragment: ViewElement, style) -> int:
    """Number of leading ``li`` in ``fragment`` whose items carry ``style``."""
    run = 0
    for child in fragment.children:
        node_id = api.mapper.to_model(child)
        if node_id is None or node_id not in api.document:
            break
        if api.document.get(node_id).get_attribute(LIST_STYLE) != style:
            break
        run += 1
    return run


def _join_following(api, item: Element, style, li: ViewElement) -> None:
    # The fragment right after the item may now start with items of the same style.
    following = _next_at_level(api.document, item)
    if not same_structural_list(item, following) or following.get_attribute(LIST_STYLE) != style:
        return
    next_li = api.mapper.to_view(following.id)
    if next_li is None or next_li.parent is li.parent:
        return
    fragment = next_li.parent
    if not _can_merge(li.parent, fragment):
        return
    # Only the leading run moves over; the rest keeps its own container.
    api.writer.break_container(Position(fragment, _matching_run(api, fragment, style)))
    api.writer.merge_containers(li.parent, fragment)


def downcast_list_style(data, api) -> None:
    item = data.item
    style = data.attribute_new_value
    writer = api.writer
    li = api.mapper.to_view(item.id)
    if li is None or li.parent is None:
        return

    prev = _previous_at_level(api.document, item)

    if same_structural_list(prev, item) and prev.get_attribute(LIST_STYLE) == style:
        prev_li = api.mapper.to_view(prev.id)
        if prev_li is None:
            return
        if prev_li.parent is li.parent:
            _join_following(api, item, style, li)
            return
        # Left split from an earlier change: join the previous fragment again.
        _isolate(writer, li)
        if _can_merge(prev_li.parent, li.parent):
            writer.merge_containers(prev_li.parent, li.parent)
        else:
            _set_list_style(writer, style, li.parent)
    else:
        # First item of a list, or a style change: the item gets a container of its own.
        _isolate(writer, li)
        _set_list_style(writer, style, li.parent)

    _join_following(api, item, style, li)


# ─── Post-fixer ──────────────────────────────────────────────────────────────

def fix_list_style_on_inserted_items(model):
    """Post-fixer: every inserted list item must carry ``listStyle``.

    Items inherit the style of the item right after the inserted run when it is
    a list item of the same type, otherwise they get the default sentinel.

        Paragraph[]
        ■ List item 1.   [listStyle="square"]
        ■ List item 2.

        execute("bulletedList")

        ■ Paragraph[]    [listStyle="square"]
        ■ List item 1.   [listStyle="square"]
        ■ List item 2.

    Items whose ``listType`` changed in the same cycle (e.g. a to-do item turned
    into a bulleted one) are handled as if they were inserted.
    """
    def fix_list_style(writer) -> bool:
        doc = model.document
        candidates = {}
        for change in doc.differ.get_changes():
            if change.node_id not in doc:
                continue
            if change.type == "insert" and change.name == LIST_ITEM:
                candidates[change.node_id] = True
            elif change.type == "attribute" and change.attribute_key == "listType":
                candidates[change.node_id] = True

        inserted = [doc.get(node_id) for node_id in candidates if doc.get(node_id).is_list_item]
        if not inserted:
            return False
        inserted.sort(key=lambda node: doc.index_of(node.id))

        boundary = doc.sibling_after(inserted[-1].id)

        was_fixed = False
        for item in inserted:
            if item.has_attribute(LIST_STYLE) or not model.schema.check_attribute(item, LIST_STYLE):
                continue
            if (
                boundary is not None
                and boundary.is_list_item
                and boundary.get_attribute("listType") == item.get_attribute("listType")
                and boundary.has_attribute(LIST_STYLE)
            ):
                style = boundary.get_attribute(LIST_STYLE)
            else:
                style = DEFAULT_LIST_STYLE
            writer.set_attribute(LIST_STYLE, style, item)
            was_fixed = True
        return was_fixed

    return fix_list_style


# ─── Indent / outdent ────────────────────────────────────────────────────────

def _changed_list_items(doc, changed: List[Element]) -> List[Element]:
    items = [node for node in changed if node.id in doc and node.is_list_item]
    return sorted(items, key=lambda node: doc.index_of(node.id))


def _apply_style(editor, items: List[Element], indent: int, style) -> None:
    schema = editor.model.schema
    with editor.model.change() as writer:
        for item in items:
            if item.get_attribute("listIndent") == indent and schema.check_attribute(item, LIST_STYLE):
                writer.set_attribute(LIST_STYLE, style, item)


def fix_list_after_indent(editor):
    """Items that became a nested list join the style of that nested list.

        ■ List item 1.
            ⬤ List item 2.
        ■ List item 3.[]

        execute("indentList")

        ■ List item 1.
            ⬤ List item 2.
            ⬤ List item 3.[]

    With no nested list to join, the items start a new one with the default style.
    """
    def on_indent(changed: List[Element]) -> None:
        doc = editor.model.document
        items = _changed_list_items(doc, changed)
        if not items:
            return

        first = items[0]
        indent = first.get_attribute("listIndent")
        list_type = first.get_attribute("listType")
        affected = {item.id for item in items}

        reference = None
        node = doc.sibling_before(first.id)
        while node is not None and node.is_list_item and node.get_attribute("listIndent") >= indent:
            if node.get_attribute("listIndent") == indent:
                if node.get_attribute("listType") == list_type:
                    reference = node
                break
            node = doc.sibling_before(node.id)

        if reference is None:
            node = doc.sibling_after(first.id)
            while node is not None and node.id in affected:
                node = doc.sibling_after(node.id)
            if (
                node is not None
                and node.is_list_item
                and node.get_attribute("listIndent") == indent
                and node.get_attribute("listType") == list_type
            ):
                reference = node

        style = DEFAULT_LIST_STYLE
        if reference is not None and reference.has_attribute(LIST_STYLE):
            style = reference.get_attribute(LIST_STYLE)
        logger.debug("indent: %d item(s) at level %d take style %r", len(items), indent, style)
        _apply_style(editor, items, indent, style)

    return on_indent


def fix_list_after_outdent(editor):
    """Outdented items copy the style of the nearest item at their new level.

        ■ List item 1.
            ○ List item 2.[]
        ■ List item 3.

        execute("outdentList")

        ■ List item 1.
        ■ List item 2.[]
        ■ List item 3.

    Without a previous item at that level the next sibling is used; without
    either nothing changes.
    """
    def on_outdent(changed: List[Element]) -> None:
        doc = editor.model.document
        items = _changed_list_items(doc, changed)
        if not items:
            return

        first = items[0]
        indent = first.get_attribute("listIndent")
        affected = {item.id for item in items}

        reference = None
        node = doc.sibling_before(first.id)
        while node is not None and node.is_list_item:
            if node.get_attribute("listIndent") == indent:
                reference = node
                break
            node = doc.sibling_before(node.id)

        if reference is None:
            node = doc.sibling_after(first.id)
            while node is not None and node.id in affected and node.get_attribute("listIndent") == indent:
                node = doc.sibling_after(node.id)
            reference = node

        if reference is None or not reference.is_list_item or not reference.has_attribute(LIST_STYLE):
            return

        _apply_style(editor, items, indent, reference.get_attribute(LIST_STYLE))

    return on_outdent


# ─── Command ─────────────────────────────────────────────────────────────────

def structural_list_items(doc, item: Element) -> List[Element]:
    """All items of the structural list ``item`` belongs to, in document order.

    Deeper items are skipped; a shallower item, a non-list block or an item of
    another type at the same level ends the list.
    """
    indent = item.get_attribute("listIndent")
    list_type = item.get_attribute("listType")

    def same_list(node) -> Optional[bool]:
        if node is None or not node.is_list_item or node.get_attribute("listIndent") < indent:
            return False
        if node.get_attribute("listIndent") > indent:
            return None
        return node.get_attribute("listType") == list_type

    def collect(step) -> List[Element]:
        found: List[Element] = []
        node = step(item.id)
        verdict = same_list(node)
        while verdict is not False:
            if verdict:
                found.append(node)
            node = step(node.id)
            verdict = same_list(node)
        return found

    before = collect(doc.sibling_before)
    after = collect(doc.sibling_after)

    return list(reversed(before)) + [item] + after


class ListStyleCommand(Command):
    """Sets ``listStyle`` on every item of the list containing the given item."""

    name = "listStyles"

    def is_enabled(self, item_id: int) -> bool:
        node = self.editor.model.document.get(item_id)
        return node.is_list_item and self.editor.model.schema.check_attribute(node, LIST_STYLE)

    def value(self, item_id: int):
        if not self.is_enabled(item_id):
            return None
        return self.editor.model.document.get(item_id).get_attribute(LIST_STYLE)

    def _execute(self, item_id: int, style: Optional[str] = None) -> List[Element]:
        if not self.is_enabled(item_id):
            return []
        doc = self.editor.model.document
        items = structural_list_items(doc, doc.get(item_id))
        with self.editor.model.change() as writer:
            for item in items:
                writer.set_attribute(LIST_STYLE, style or DEFAULT_LIST_STYLE, item)
        return items
