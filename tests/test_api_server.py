from pathlib import Path
import sys

import pytest

fastapi = pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

import api.server as server_module
from api.server import app

SAMPLE_HTML = (
    '<ul style="list-style-type:square"><li>a</li><li>b</li></ul>'
    '<ul style="list-style-type:square"><li>c</li></ul>'
)


@pytest.fixture()
def client():
    return TestClient(app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_normalize_endpoint(client):
    resp = client.post("/v1/lists/normalize", json={"html": SAMPLE_HTML})

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["status"] == "ok"
    assert payload["html"] == '<ul style="list-style-type:square"><li>a</li><li>b</li><li>c</li></ul>'
    assert [item["attributes"]["listStyle"] for item in payload["items"]] == ["square"] * 3
    assert payload["items"][0]["attributes"]["listType"] == "bulleted"


def test_normalize_reports_default_style(client):
    resp = client.post("/v1/lists/normalize", json={"html": "<ol><li>x</li></ol>"})

    assert resp.status_code == 200
    assert resp.json()["items"][0]["attributes"]["listStyle"] == "default"


def test_normalize_rejects_empty_html(client):
    resp = client.post("/v1/lists/normalize", json={"html": "   "})
    assert resp.status_code == 400


def test_docx_endpoint(client):
    resp = client.post("/v1/lists/docx", json={"html": SAMPLE_HTML, "profile_path": "profiles/default.yaml"})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
    assert resp.content[:2] == b"PK"


@pytest.mark.parametrize(
    "profile_path",
    ["../config.py", "/etc/passwd", "profiles/../config.py", "profiles/missing.yaml", "config.py"],
)
def test_docx_endpoint_rejects_bad_profile_paths(client, profile_path):
    resp = client.post("/v1/lists/docx", json={"html": SAMPLE_HTML, "profile_path": profile_path})
    assert resp.status_code == 400


def test_api_key_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(server_module, "SERVER_API_KEY", "secret")

    resp = client.post("/v1/lists/normalize", json={"html": SAMPLE_HTML})
    assert resp.status_code == 401

    resp = client.post("/v1/lists/normalize", json={"html": SAMPLE_HTML}, headers={"X-API-Key": "secret"})
    assert resp.status_code == 200

    # /health 不需要鉴权
    assert client.get("/health").status_code == 200
