from __future__ import annotations

import io
import logging
import os
import secrets
from pathlib import Path

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.responses import StreamingResponse

from api.schema import NormalizeRequest, NormalizeResponse
from config import REQUIRE_AUTH, SERVER_API_KEY
from service.normalize_service import normalize_html, render_docx_bytes

logger = logging.getLogger(__name__)

if REQUIRE_AUTH and not SERVER_API_KEY:
    raise RuntimeError("REQUIRE_AUTH=true but SERVER_API_KEY is empty")

app = FastAPI(
    title="List Styles API",
    version="0.1.0",
    description="Normalize list markup: every list item gets a list style, containers are regrouped by style.",
)

_DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _verify_api_key(x_api_key: str = Header(default="")) -> None:
    """若 SERVER_API_KEY 已配置，则验证请求头中的 X-API-Key。"""
    if SERVER_API_KEY and not secrets.compare_digest(x_api_key, SERVER_API_KEY):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


_REPO_ROOT = Path(__file__).resolve().parent.parent
_PROFILES_ROOT = (_REPO_ROOT / "profiles").resolve()


def _resolve_profile_path(profile_path: str) -> str:
    """校验并解析 profile_path：必须是 profiles/ 内的 .yaml/.yml 文件，且不能逃逸（含符号链接）。"""
    if not profile_path:
        raise HTTPException(status_code=400, detail="profile_path is required")

    raw = Path(profile_path)
    if raw.is_absolute():
        raise HTTPException(status_code=400, detail="profile_path must be a relative path within profiles/")

    normalized = Path(os.path.normpath(profile_path))
    if normalized.parts[:1] != ("profiles",):
        raise HTTPException(status_code=400, detail="profile_path must point within the profiles/ directory")

    candidate = (_REPO_ROOT / normalized).resolve()
    if _PROFILES_ROOT not in (candidate, *candidate.parents):
        raise HTTPException(status_code=400, detail="profile_path must stay within profiles/")

    if candidate.suffix.lower() not in {".yaml", ".yml"}:
        raise HTTPException(status_code=400, detail="profile_path must be a YAML file")
    if not candidate.is_file():
        raise HTTPException(status_code=400, detail="profile file does not exist")

    return str(candidate)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/v1/lists/normalize", response_model=NormalizeResponse, dependencies=[Depends(_verify_api_key)])
def normalize(req: NormalizeRequest) -> NormalizeResponse:
    if not req.html.strip():
        raise HTTPException(status_code=400, detail="Empty html")

    try:
        result = normalize_html(req.html)
    except Exception as e:  # pragma: no cover
        logger.error("normalize failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e

    return NormalizeResponse(html=result.html, items=result.items)


@app.post("/v1/lists/docx", dependencies=[Depends(_verify_api_key)])
def normalize_to_docx(req: NormalizeRequest):
    if not req.html.strip():
        raise HTTPException(status_code=400, detail="Empty html")

    profile_path = _resolve_profile_path(req.profile_path)

    try:
        out_bytes = render_docx_bytes(req.html, profile_path)
    except Exception as e:  # pragma: no cover
        logger.error("normalize_to_docx failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e

    return StreamingResponse(
        io.BytesIO(out_bytes),
        media_type=_DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="lists.docx"'},
    )
