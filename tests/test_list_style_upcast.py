# tests/test_list_style_upcast.py
"""
HTML → model conversion of list items and their list-style-type.

Coverage:
  1. parse_list_style_type extracts the declaration from inline styles
  2. explicit style vs. missing declaration (default sentinel)
  3. nested lists: indent from nesting depth, style from the own container
  4. to-do lists never receive listStyle
"""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from liststyles.editor import Editor
from liststyles.model import DEFAULT_LIST_STYLE, ListType
from liststyles.styles import parse_list_style_type


def _attrs(editor, text):
    node = editor.find(text)
    assert node is not None, f"no element with text {text!r}"
    return node.attributes


# ─── 1. parse_list_style_type ────────────────────────────────────────────────

@pytest.mark.parametrize(
    "style,expected",
    [
        ("list-style-type:square", "square"),
        ("color: red; list-style-type: Upper-Roman ; margin:0", "upper-roman"),
        ("list-style-type: circle !important", "circle"),
        ("color: red", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_list_style_type(style, expected):
    assert parse_list_style_type(style) == expected


def test_parse_ignores_similar_property_names():
    assert parse_list_style_type("x-list-style-type: disc") is None


# ─── 2. explicit vs. default ─────────────────────────────────────────────────

def test_explicit_style_is_copied_to_every_item():
    editor = Editor()
    editor.set_data('<ul style="list-style-type:square"><li>a</li><li>b</li></ul>')

    assert _attrs(editor, "a")["listStyle"] == "square"
    assert _attrs(editor, "b")["listStyle"] == "square"
    assert _attrs(editor, "a")["listType"] == ListType.BULLETED


def test_missing_declaration_gives_default_sentinel():
    editor = Editor()
    editor.set_data("<ol><li>one</li></ol>")

    attrs = _attrs(editor, "one")
    assert attrs["listType"] == ListType.NUMBERED
    assert attrs["listStyle"] is DEFAULT_LIST_STYLE
    # 默认样式不会被渲染出来
    assert editor.get_data() == "<ol><li>one</li></ol>"


def test_other_declarations_do_not_count():
    editor = Editor()
    editor.set_data('<ul style="margin-left: 10px"><li>a</li></ul>')
    assert _attrs(editor, "a")["listStyle"] == DEFAULT_LIST_STYLE


def test_paragraphs_around_lists_are_kept():
    editor = Editor()
    editor.set_data('<p>intro</p><ul style="list-style-type:disc"><li>a</li></ul><h2>end</h2>')

    assert [n["name"] for n in editor.items()] == ["paragraph", "listItem", "paragraph"]
    assert "listStyle" not in _attrs(editor, "intro")


# ─── 3. nesting ──────────────────────────────────────────────────────────────

def test_nested_list_uses_its_own_container_style():
    editor = Editor()
    editor.set_data(
        '<ul style="list-style-type:square">'
        '<li>a<ol style="list-style-type:lower-roman"><li>a.1</li><li>a.2</li></ol></li>'
        "<li>b</li>"
        "</ul>"
    )

    assert [n.text for n in editor.model.document] == ["a", "a.1", "a.2", "b"]
    assert _attrs(editor, "a")["listIndent"] == 0
    assert _attrs(editor, "a.1")["listIndent"] == 1
    assert _attrs(editor, "a.1")["listType"] == ListType.NUMBERED
    assert _attrs(editor, "a.1")["listStyle"] == "lower-roman"
    assert _attrs(editor, "b")["listStyle"] == "square"


def test_nested_list_without_declaration_is_default():
    editor = Editor()
    editor.set_data('<ul style="list-style-type:square"><li>a<ul><li>a.1</li></ul></li></ul>')

    assert _attrs(editor, "a")["listStyle"] == "square"
    assert _attrs(editor, "a.1")["listStyle"] == DEFAULT_LIST_STYLE


# ─── 4. to-do lists ──────────────────────────────────────────────────────────

def test_todo_items_have_no_list_style():
    editor = Editor()
    editor.set_data(
        '<ul class="todo-list" style="list-style-type:square">'
        '<li><input type="checkbox">buy milk</li>'
        "</ul>"
    )

    attrs = _attrs(editor, "buy milk")
    assert attrs["listType"] == ListType.TODO
    assert "listStyle" not in attrs
    assert editor.get_data() == '<ul class="todo-list"><li>buy milk</li></ul>'


def test_checkbox_marks_a_plain_ul_as_todo():
    editor = Editor()
    editor.set_data('<ul><li><input type="checkbox" checked>done</li></ul>')

    attrs = _attrs(editor, "done")
    assert attrs["listType"] == ListType.TODO
    assert "listStyle" not in attrs
