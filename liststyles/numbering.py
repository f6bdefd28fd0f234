# liststyles/numbering.py
"""
Word export of the rendered list view.

Every rendered ``ul``/``ol`` container becomes its own single-level Word list
definition (``w:abstractNum`` + ``w:num``), so a container split in the view is
a separate list in Word too. The marker follows the container's
``list-style-type``; containers without one use the type's default marker.
"""

import warnings
from typing import Dict, Optional, Tuple

from docx import Document
from docx.document import Document as DocxDocument
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.text.paragraph import Paragraph

from .lists import TODO_LIST_CLASS
from .settings import Settings, default_settings
from .view import LIST_STYLE_TYPE, View, ViewElement


# Map list-style-type → (w:numFmt value, w:lvlText value)
_STYLE_TO_WORD: Dict[str, Tuple[str, str]] = {
    "disc":                 ("bullet",      "•"),
    "circle":               ("bullet",      "o"),
    "square":               ("bullet",      "▪"),
    "decimal":              ("decimal",     "%1."),
    "decimal-leading-zero": ("decimalZero", "%1."),
    "lower-roman":          ("lowerRoman",  "%1."),
    "upper-roman":          ("upperRoman",  "%1."),
    "lower-alpha":          ("lowerLetter", "%1."),
    "lower-latin":          ("lowerLetter", "%1."),
    "upper-alpha":          ("upperLetter", "%1."),
    "upper-latin":          ("upperLetter", "%1."),
}

_DEFAULT_STYLE_BY_CONTAINER = {"ul": "disc", "ol": "decimal"}
_TODO_MARKER = ("bullet", "☐")


def marker_for(container: ViewElement, overrides: Optional[Dict[str, Dict[str, str]]] = None) -> Tuple[str, str]:
    """Return ``(num_fmt, lvl_text)`` for a rendered container."""
    if TODO_LIST_CLASS in container.attributes.get("class", "").split():
        return _TODO_MARKER

    default_style = _DEFAULT_STYLE_BY_CONTAINER.get(container.name, "disc")
    style = (container.get_style(LIST_STYLE_TYPE) or default_style).lower()

    if overrides and style in overrides:
        marker = overrides[style]
        return marker["num_fmt"], marker["lvl_text"]
    if style in _STYLE_TO_WORD:
        return _STYLE_TO_WORD[style]

    warnings.warn(
        f"[numbering] list-style-type {style!r} has no Word equivalent, using {default_style!r}",
        stacklevel=2,
    )
    return _STYLE_TO_WORD[default_style]


# ─── Numbering XML helpers ────────────────────────────────────────────────────

_NUMBERING_CT = "application/vnd.openxmlformats-officedocument.wordprocessingml.numbering+xml"
_NUMBERING_RT = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/numbering"


def _w(tag: str, val=None, **attrs):
    """``OxmlElement('w:<tag>')`` with ``w:val`` and other ``w:`` attributes set."""
    el = OxmlElement(f"w:{tag}")
    if val is not None:
        el.set(qn("w:val"), str(val))
    for key, value in attrs.items():
        el.set(qn(f"w:{key}"), str(value))
    return el


def _numbering_element(doc):
    """``w:numbering`` of *doc*; documents without ``word/numbering.xml`` get an empty part."""
    try:
        return doc.part.numbering_part._element
    except NotImplementedError:
        pass

    # python-docx cannot create a numbering part itself (NumberingPart.new is not implemented)
    from docx.opc.packuri import PackURI
    from docx.oxml.ns import nsdecls
    from docx.parts.numbering import NumberingPart

    blob = ("<w:numbering %s/>" % nsdecls("w", "r")).encode("utf-8")
    part = NumberingPart.load(PackURI("/word/numbering.xml"), _NUMBERING_CT, blob, doc.part.package)
    doc.part.relate_to(part, _NUMBERING_RT)
    return part._element


def _next_free_id(nelem) -> int:
    """Smallest id above every ``w:abstractNumId`` / ``w:numId`` already present."""
    ids = [0]
    for child in nelem:
        for attr in ("w:abstractNumId", "w:numId"):
            raw = child.get(qn(attr))
            if raw is not None and raw.isdigit():
                ids.append(int(raw))
    return max(ids) + 1


def _marker_rpr(marker_font: Optional[str], size_pt: Optional[float]):
    rPr = _w("rPr")
    if marker_font:
        rPr.append(_w("rFonts", ascii=marker_font, hAnsi=marker_font, cs=marker_font, eastAsia=marker_font))
    if size_pt is not None:
        half_points = max(2, int(round(float(size_pt) * 2)))
        rPr.append(_w("sz", half_points))
        rPr.append(_w("szCs", half_points))
    return rPr


def _build_abstract_num(
    abs_id: int,
    num_fmt: str,
    lvl_text: str,
    left_twips: int,
    hanging_twips: int,
    marker_font: Optional[str] = None,
    size_pt: Optional[float] = None,
):
    """Single-level ``w:abstractNum``: one rendered container is one Word list."""
    pPr = _w("pPr")
    pPr.append(_w("ind", left=left_twips, hanging=hanging_twips))

    lvl = _w("lvl", ilvl=0)
    for child in (_w("start", 1), _w("numFmt", num_fmt), _w("lvlText", lvl_text), _w("lvlJc", "left"), pPr):
        lvl.append(child)
    if marker_font or size_pt is not None:
        lvl.append(_marker_rpr(marker_font, size_pt))

    abstract_num = _w("abstractNum", abstractNumId=abs_id)
    abstract_num.append(_w("multiLevelType", "singleLevel"))
    abstract_num.append(lvl)
    return abstract_num


def create_list_num_id(
    doc,
    num_fmt: str,
    lvl_text: str,
    left_twips: int = 360,
    hanging_twips: int = 360,
    marker_font: Optional[str] = None,
    size_pt: Optional[float] = None,
) -> int:
    """Register a new list definition and return its ``w:numId``.

    The ``w:abstractNum`` goes before the first ``w:num`` (schema order), the
    ``w:num`` at the end; both share one id.
    """
    nelem = _numbering_element(doc)
    new_id = _next_free_id(nelem)

    abstract_num = _build_abstract_num(
        new_id, num_fmt, lvl_text, left_twips, hanging_twips, marker_font=marker_font, size_pt=size_pt
    )
    nums = nelem.findall(qn("w:num"))
    if nums:
        nums[0].addprevious(abstract_num)
    else:
        nelem.append(abstract_num)

    num = _w("num", numId=new_id)
    num.append(_w("abstractNumId", new_id))
    nelem.append(num)
    return new_id


def apply_numpr(paragraph: Paragraph, num_id: int, ilvl: int = 0) -> None:
    """Attach the paragraph to list *num_id* (replaces any previous ``w:numPr``)."""
    pPr = paragraph._p.get_or_add_pPr()
    for old in pPr.findall(qn("w:numPr")):
        pPr.remove(old)
    numPr = _w("numPr")
    numPr.append(_w("ilvl", ilvl))
    numPr.append(_w("numId", num_id))
    pPr.append(numPr)


def _pt_to_twips(pt: float) -> int:
    return int(round(float(pt) * 20))


# ─── Export ──────────────────────────────────────────────────────────────────

def export_docx(view: View, settings: Optional[Settings] = None, doc=None):
    """Write the rendered view into a python-docx ``Document`` and return it."""
    settings = settings or default_settings()
    cfg = settings.raw["docx"]
    overrides = settings.raw.get("markers") or {}
    if doc is None:
        doc = Document()

    def walk(parent: ViewElement, level: int) -> None:
        for child in parent.children:
            if child.is_container:
                num_fmt, lvl_text = marker_for(child, overrides)
                num_id = create_list_num_id(
                    doc,
                    num_fmt,
                    lvl_text,
                    left_twips=_pt_to_twips(cfg["left_indent_pt"] + level * cfg["indent_step_pt"]),
                    hanging_twips=_pt_to_twips(cfg["hanging_indent_pt"]),
                    marker_font=cfg.get("marker_font"),
                    size_pt=cfg.get("size_pt"),
                )
                for li in child.children:
                    apply_numpr(doc.add_paragraph(li.text), num_id)
                    walk(li, level + 1)
            elif child.name == "p":
                doc.add_paragraph(child.text)

    walk(view.root, 0)
    return doc


def save_docx(doc: DocxDocument, output_path: str) -> None:
    """将 Document 写入指定路径，写入失败时抛出 IOError 并附带路径信息。"""
    try:
        doc.save(output_path)
    except Exception as e:
        raise IOError(f"保存 DOCX 失败，目标路径：{output_path!r}") from e
