# tests/test_numbering.py
"""
Tests for liststyles/numbering.py: Word export of the rendered lists.

Coverage:
  1. marker_for maps list-style-type onto numFmt / lvlText
  2. create_list_num_id adds a fresh abstractNum + num to the document
  3. apply_numpr writes w:numPr onto the paragraph
  4. export_docx: one list definition per rendered container, nesting indent
  5. save_docx error handling
"""

from pathlib import Path
import sys

import pytest
from docx import Document
from docx.oxml.ns import qn

sys.path.append(str(Path(__file__).resolve().parents[1]))

from liststyles.editor import Editor
from liststyles.numbering import apply_numpr, create_list_num_id, export_docx, marker_for, save_docx
from liststyles.settings import load_settings
from liststyles.view import LIST_STYLE_TYPE, ViewElement

PROFILES_DIR = Path(__file__).resolve().parents[1] / "profiles"


def _container(name, style=None, css_class=None) -> ViewElement:
    attrs = {"class": css_class} if css_class else {}
    el = ViewElement(name, attrs)
    if style:
        el._styles[LIST_STYLE_TYPE] = style
    return el


def _numbering(doc):
    return doc.part.numbering_part._element


def _abstract_num(doc, num_id):
    for child in _numbering(doc):
        if child.tag == qn("w:abstractNum") and child.get(qn("w:abstractNumId")) == str(num_id):
            return child
    return None


def _lvl_val(abstract_num, tag):
    return abstract_num.find(qn("w:lvl")).find(qn(tag)).get(qn("w:val"))


def _num_id(paragraph):
    pPr = paragraph._p.find(qn("w:pPr"))
    if pPr is None or pPr.find(qn("w:numPr")) is None:
        return None
    return int(pPr.find(qn("w:numPr")).find(qn("w:numId")).get(qn("w:val")))


def _paragraphs_by_text(doc):
    return {p.text: p for p in doc.paragraphs}


# ─── 1. marker_for ───────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "name,style,expected",
    [
        ("ul", None, ("bullet", "•")),
        ("ul", "circle", ("bullet", "o")),
        ("ol", None, ("decimal", "%1.")),
        ("ol", "upper-roman", ("upperRoman", "%1.")),
        ("ol", "lower-latin", ("lowerLetter", "%1.")),
        ("ol", "decimal-leading-zero", ("decimalZero", "%1.")),
    ],
)
def test_marker_for_builtin_styles(name, style, expected):
    assert marker_for(_container(name, style)) == expected


def test_marker_for_todo_list():
    assert marker_for(_container("ul", css_class="todo-list")) == ("bullet", "☐")


def test_marker_for_override_wins():
    overrides = {"lower-greek": {"num_fmt": "lowerLetter", "lvl_text": "%1)"}}
    assert marker_for(_container("ol", "lower-greek"), overrides) == ("lowerLetter", "%1)")


def test_marker_for_unknown_style_warns_and_falls_back():
    with pytest.warns(UserWarning, match="lower-greek"):
        marker = marker_for(_container("ol", "lower-greek"))
    assert marker == ("decimal", "%1.")


# ─── 2. create_list_num_id ───────────────────────────────────────────────────

def test_create_list_num_id_adds_definitions():
    doc = Document()
    first = create_list_num_id(doc, "bullet", "o", left_twips=720, hanging_twips=360)
    second = create_list_num_id(doc, "decimal", "%1.")

    assert first != second
    abstract = _abstract_num(doc, first)
    assert abstract is not None
    assert _lvl_val(abstract, "w:numFmt") == "bullet"
    assert _lvl_val(abstract, "w:lvlText") == "o"
    ind = abstract.find(qn("w:lvl")).find(qn("w:pPr")).find(qn("w:ind"))
    assert ind.get(qn("w:left")) == "720"

    nums = [c for c in _numbering(doc) if c.tag == qn("w:num")]
    assert str(second) in [n.get(qn("w:numId")) for n in nums]

    # abstractNum 必须排在所有 w:num 之前
    tags = [c.tag for c in _numbering(doc)]
    last_abstract = max(i for i, t in enumerate(tags) if t == qn("w:abstractNum"))
    first_num = min(i for i, t in enumerate(tags) if t == qn("w:num"))
    assert last_abstract < first_num


def test_create_list_num_id_marker_font_and_size():
    doc = Document()
    num_id = create_list_num_id(doc, "bullet", "▪", marker_font="Symbol", size_pt=10.5)

    rPr = _abstract_num(doc, num_id).find(qn("w:lvl")).find(qn("w:rPr"))
    assert rPr.find(qn("w:rFonts")).get(qn("w:ascii")) == "Symbol"
    assert rPr.find(qn("w:sz")).get(qn("w:val")) == "21"


# ─── 3. apply_numpr ──────────────────────────────────────────────────────────

def test_apply_numpr_replaces_existing_numbering():
    doc = Document()
    p = doc.add_paragraph("item")
    apply_numpr(p, 3)
    apply_numpr(p, 5, ilvl=1)

    numPrs = p._p.find(qn("w:pPr")).findall(qn("w:numPr"))
    assert len(numPrs) == 1
    assert _num_id(p) == 5
    assert numPrs[0].find(qn("w:ilvl")).get(qn("w:val")) == "1"


# ─── 4. export_docx ──────────────────────────────────────────────────────────

def test_export_gives_each_container_its_own_list():
    editor = Editor()
    editor.set_data(
        '<ul style="list-style-type:square"><li>a</li><li>b</li></ul>'
        '<ul style="list-style-type:circle"><li>c</li></ul>'
        "<p>mid</p>"
        '<ol style="list-style-type:upper-roman"><li>d</li></ol>'
    )

    doc = export_docx(editor.view)
    paras = _paragraphs_by_text(doc)

    assert _num_id(paras["a"]) == _num_id(paras["b"])
    assert _num_id(paras["a"]) != _num_id(paras["c"])
    assert _num_id(paras["mid"]) is None
    assert _lvl_val(_abstract_num(doc, _num_id(paras["c"])), "w:lvlText") == "o"
    assert _lvl_val(_abstract_num(doc, _num_id(paras["d"])), "w:numFmt") == "upperRoman"
    assert [p.text for p in doc.paragraphs if p.text] == ["a", "b", "c", "mid", "d"]


def test_export_split_container_becomes_two_lists():
    editor = Editor()
    editor.set_data('<ol style="list-style-type:decimal"><li>1</li><li>2</li></ol>')
    with editor.model.change() as writer:
        writer.set_attribute("listStyle", "lower-alpha", editor.find("2"))

    doc = export_docx(editor.view)
    paras = _paragraphs_by_text(doc)

    assert _num_id(paras["1"]) != _num_id(paras["2"])
    assert _lvl_val(_abstract_num(doc, _num_id(paras["2"])), "w:numFmt") == "lowerLetter"


def test_export_nested_list_is_indented_further():
    editor = Editor()
    editor.set_data("<ul><li>a<ul><li>a.1</li></ul></li></ul>")

    doc = export_docx(editor.view)
    paras = _paragraphs_by_text(doc)

    def left(text):
        abstract = _abstract_num(doc, _num_id(paras[text]))
        return int(abstract.find(qn("w:lvl")).find(qn("w:pPr")).find(qn("w:ind")).get(qn("w:left")))

    assert [p.text for p in doc.paragraphs if p.text] == ["a", "a.1"]
    assert left("a") == 360
    assert left("a.1") == 720


def test_export_uses_profile_marker_overrides():
    editor = Editor()
    editor.set_data('<ol style="list-style-type:lower-greek"><li>alpha</li></ol>')
    settings = load_settings(str(PROFILES_DIR / "default.yaml"))

    doc = export_docx(editor.view, settings)

    abstract = _abstract_num(doc, _num_id(_paragraphs_by_text(doc)["alpha"]))
    assert _lvl_val(abstract, "w:numFmt") == "lowerLetter"


# ─── 5. save_docx ────────────────────────────────────────────────────────────

def test_save_docx_roundtrip(tmp_path):
    editor = Editor()
    editor.set_data("<ol><li>x</li></ol>")
    out = tmp_path / "lists.docx"

    save_docx(export_docx(editor.view), str(out))

    reopened = Document(str(out))
    assert [p.text for p in reopened.paragraphs if p.text] == ["x"]


def test_save_docx_wraps_failures(tmp_path):
    target = tmp_path / "missing-dir" / "out.docx"
    with pytest.raises(IOError, match="missing-dir"):
        save_docx(Document(), str(target))
