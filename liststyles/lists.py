# liststyles/lists.py
"""
Structural list support: schema, HTML upcast, view downcast and commands.

This module knows nothing about ``listStyle``; it only builds list items and
groups them into ``ul``/``ol`` containers by type and indent.
"""

from typing import Optional

from bs4 import NavigableString, Tag

from .commands import IndentListCommand, ListTypeCommand
from .model import LIST_ITEM, PARAGRAPH, Element, ListType
from .view import ViewElement

TODO_LIST_CLASS = "todo-list"
_PARAGRAPH_TAGS = ("p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre")


def setup_lists(editor) -> None:
    schema = editor.model.schema
    schema.register(PARAGRAPH)
    schema.register(LIST_ITEM, allow_attributes=("listType", "listIndent"))

    for tag_name in _PARAGRAPH_TAGS:
        editor.upcast.on(f"element:{tag_name}", upcast_paragraph, name="lists:paragraph")
    editor.upcast.on("$text", upcast_text, name="lists:text")
    editor.upcast.on("element:li", upcast_list_item, name="lists:li")

    editor.downcast.on(f"insert:{PARAGRAPH}", downcast_paragraph, name="lists:paragraph")
    editor.downcast.on(f"insert:{LIST_ITEM}", downcast_list_item, name="lists:li")

    editor.commands["indentList"] = IndentListCommand(editor, "indentList", 1)
    editor.commands["outdentList"] = IndentListCommand(editor, "outdentList", -1)
    editor.commands["bulletedList"] = ListTypeCommand(editor, "bulletedList", ListType.BULLETED)
    editor.commands["numberedList"] = ListTypeCommand(editor, "numberedList", ListType.NUMBERED)
    editor.commands["todoList"] = ListTypeCommand(editor, "todoList", ListType.TODO)


# ─── Upcast ──────────────────────────────────────────────────────────────────

def list_type_of(container: Optional[Tag], item: Optional[Tag] = None) -> ListType:
    """Map an HTML list container (and its ``li``) onto a :class:`ListType`."""
    if container is None or container.name not in ("ul", "ol"):
        return ListType.BULLETED
    if container.name == "ol":
        return ListType.NUMBERED
    if TODO_LIST_CLASS in (container.get("class") or ()):
        return ListType.TODO
    if item is not None and item.find("input", attrs={"type": "checkbox"}, recursive=False) is not None:
        return ListType.TODO
    return ListType.BULLETED


def _own_text(tag: Tag) -> str:
    """Text of ``tag`` without the text of nested lists."""
    parts = [
        str(text) for text in tag.find_all(string=True)
        if type(text) is NavigableString and text.find_parent(["li", "ul", "ol"]) is tag
    ]
    return " ".join("".join(parts).split())


def upcast_paragraph(data, api) -> None:
    tag = data.view_item
    element = api.writer.create_element(PARAGRAPH, text=" ".join(tag.get_text().split()))
    api.writer.append(element)
    data.model_item = element
    data.consumed = True


def upcast_text(data, api) -> None:
    element = api.writer.create_element(PARAGRAPH, text=" ".join(str(data.view_item).split()))
    api.writer.append(element)
    data.model_item = element


def upcast_list_item(data, api) -> None:
    li = data.view_item
    attributes = {
        "listType": list_type_of(li.parent, li),
        "listIndent": data.depth,
    }
    element = api.writer.create_element(LIST_ITEM, attributes, text=_own_text(li))
    api.writer.append(element)
    data.model_item = element
    data.consumed = True
    data.nested = [
        nested for nested in li.find_all(["ul", "ol"])
        if nested.find_parent("li") is li
    ]


# ─── Downcast ────────────────────────────────────────────────────────────────

def _create_container(writer, list_type) -> ViewElement:
    if list_type == ListType.NUMBERED:
        return writer.create_element("ol")
    if list_type == ListType.TODO:
        return writer.create_element("ul", {"class": TODO_LIST_CLASS})
    return writer.create_element("ul")


def downcast_paragraph(data, api) -> None:
    p = api.writer.create_element("p", text=data.item.text)
    api.writer.append(api.view.root, p)
    api.mapper.bind(data.item.id, p)


def downcast_list_item(data, api) -> None:
    """Place the item's ``li`` in the view.

    The item joins the container of the previous item at its level when both
    share type and indent, nests inside the previous shallower item, or opens
    a new top-level container.
    """
    item: Element = data.item
    writer, mapper, doc = api.writer, api.mapper, api.document
    indent = item.get_attribute("listIndent", 0)
    list_type = item.get_attribute("listType")

    li = writer.create_element("li", text=item.text)
    mapper.bind(item.id, li)

    anchor = doc.sibling_before(item.id)
    while anchor is not None and anchor.is_list_item and anchor.get_attribute("listIndent", 0) > indent:
        anchor = doc.sibling_before(anchor.id)
    anchor_li = mapper.to_view(anchor.id) if anchor is not None and anchor.is_list_item else None

    if anchor_li is None:
        container = _create_container(writer, list_type)
        writer.append(api.view.root, container)
    elif anchor.get_attribute("listIndent", 0) == indent:
        if anchor.get_attribute("listType") == list_type:
            writer.insert(writer.position_after(anchor_li), li)
            return
        container = _create_container(writer, list_type)
        writer.insert(writer.position_after(anchor_li.parent), container)
    else:
        container = _create_container(writer, list_type)
        writer.append(anchor_li, container)

    writer.append(container, li)
