# service/normalize_service.py
from __future__ import annotations

import io
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from config import LISTSTYLE_MAX_POSTFIX_PASSES, LISTSTYLE_PROFILE
from liststyles.editor import Editor
from liststyles.numbering import export_docx, save_docx
from liststyles.settings import Settings, load_settings


def ensure_html_path(path: str) -> str:
    """若用户传入不带扩展名，则默认补 .html"""
    root, ext = os.path.splitext(path)
    if ext == "":
        return path + ".html"
    return path


def default_items_path(output_path: str) -> str:
    root, _ = os.path.splitext(output_path)
    return root + ".items.json"


@dataclass
class NormalizeResult:
    html: str
    items: List[Dict[str, Any]]
    output_path: Optional[str] = None
    items_path: Optional[str] = None
    docx_path: Optional[str] = None


def build_editor(html: str) -> Editor:
    editor = Editor(max_postfix_passes=LISTSTYLE_MAX_POSTFIX_PASSES)
    editor.set_data(html)
    return editor


def _settings(profile_path: Optional[str]) -> Settings:
    return load_settings(profile_path or LISTSTYLE_PROFILE)


def normalize_html(html: str) -> NormalizeResult:
    """Run ``html`` through the model and return the re-rendered markup plus the item snapshot."""
    editor = build_editor(html)
    return NormalizeResult(html=editor.get_data(), items=editor.items())


def render_docx_bytes(html: str, profile_path: Optional[str] = None) -> bytes:
    editor = build_editor(html)
    doc = export_docx(editor.view, _settings(profile_path))
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def normalize_html_file(
    input_path: str,
    output_path: str,
    profile_path: Optional[str] = None,
    docx_path: Optional[str] = None,
    write_items: bool = True,
) -> NormalizeResult:
    """
    文件路径版：适合 CLI 场景。

    - input_path: 输入 HTML
    - output_path: 输出 HTML（允许不写扩展名，会自动补 .html）
    - profile_path: YAML 导出配置；None 则使用 LISTSTYLE_PROFILE
    - docx_path: 同时导出 Word 文档的路径；None 则不导出
    - write_items: 是否把模型快照写到 <output>.items.json
    """
    output_path = ensure_html_path(output_path)

    with open(input_path, "r", encoding="utf-8") as f:
        source = f.read()

    editor = build_editor(source)
    html = editor.get_data()
    items = editor.items()

    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html)

    items_path = None
    if write_items:
        items_path = default_items_path(output_path)
        with open(items_path, "w", encoding="utf-8") as f:
            json.dump(items, f, ensure_ascii=False, indent=2)

    if docx_path:
        save_docx(export_docx(editor.view, _settings(profile_path)), docx_path)

    return NormalizeResult(
        html=html,
        items=items,
        output_path=output_path,
        items_path=items_path,
        docx_path=docx_path,
    )
