# liststyles/settings.py
from dataclasses import dataclass
from typing import Any, Dict

import yaml


@dataclass
class Settings:
    raw: Dict[str, Any]


def _ensure_dict(value: Any, key: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"settings.{key} must be a mapping")
    return value


def _validate_and_fill_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    cfg = dict(data)

    docx = dict(_ensure_dict(cfg.get("docx") or {}, "docx"))
    docx.setdefault("left_indent_pt", 18)
    docx.setdefault("indent_step_pt", 18)
    docx.setdefault("hanging_indent_pt", 18)
    docx.setdefault("marker_font", None)
    docx.setdefault("size_pt", None)
    for key in ("left_indent_pt", "indent_step_pt", "hanging_indent_pt"):
        try:
            value = float(docx[key])
        except (TypeError, ValueError):
            raise ValueError(f"settings.docx.{key} must be a number")
        if value < 0:
            raise ValueError(f"settings.docx.{key} must be >= 0")
        docx[key] = value
    cfg["docx"] = docx

    markers = _ensure_dict(cfg.get("markers") or {}, "markers")
    normalized = {}
    for style, marker in markers.items():
        marker = _ensure_dict(marker, f"markers.{style}")
        for key in ("num_fmt", "lvl_text"):
            if not marker.get(key):
                raise ValueError(f"settings.markers.{style}.{key} is required")
        normalized[str(style).lower()] = {"num_fmt": str(marker["num_fmt"]), "lvl_text": str(marker["lvl_text"])}
    cfg["markers"] = normalized

    return cfg


def default_settings() -> Settings:
    return Settings(raw=_validate_and_fill_defaults({}))


def load_settings(path: str) -> Settings:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Settings file not found: {path!r}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("settings file must be a YAML mapping at top-level")

    return Settings(raw=_validate_and_fill_defaults(data))
