import json

from fastapi.testclient import TestClient

from sku_normalizer.config import Settings, get_settings
from sku_normalizer.main import app, get_color_table
from sku_normalizer.normalize import decode_text
from sku_normalizer.rules import ColorTable

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_normalize_text():
    r = client.post("/normalize", json={"text": "GOLD-5X5\n\n  \nOLIVEGOLD10X10"})
    assert r.status_code == 200

    data = r.json()
    assert [x["original"] for x in data["results"]] == ["GOLD-5X5", "OLIVEGOLD10X10"]
    assert data["results"][0] == {
        "original": "GOLD-5X5",
        "normalized": "GOLD-5X5",
        "size": "5x5",
        "color": "GOLD",
        "warnings": [],
        "status": "ok",
    }
    assert data["results"][1]["warnings"] == ["Multiple colors detected."]
    assert data["summary"] == {
        "lines": 2,
        "ok": 1,
        "warn": 1,
        "warnings": {"Multiple colors detected.": 1},
    }


def test_normalize_with_injected_table():
    app.dependency_overrides[get_color_table] = lambda: ColorTable(colors=("TEAL",), synonyms={"TL": "TEAL"})
    try:
        r = client.post("/normalize", json={"text": "tl 2x2"})
    finally:
        app.dependency_overrides.clear()

    result = r.json()["results"][0]
    assert result["color"] == "TEAL"
    assert result["normalized"] == "TEAL2X2"


def test_normalize_file_strips_bom():
    raw = b"\xef\xbb\xbfGOLD-5X5\r\nsilver 1x1\r\n"
    files = {"file": ("skus.txt", raw, "text/plain")}
    r = client.post("/normalize/file", files=files)
    assert r.status_code == 200

    data = r.json()
    assert [x["original"] for x in data["results"]] == ["GOLD-5X5", "silver 1x1"]
    assert data["encoding"] == "utf-8-sig"


def test_normalize_file_rejects_extension():
    files = {"file": ("skus.pdf", b"GOLD-5X5", "application/pdf")}
    r = client.post("/normalize/file", files=files)
    assert r.status_code == 422


def test_normalize_file_rejects_large_upload():
    app.dependency_overrides[get_settings] = lambda: Settings(max_upload_bytes=4)
    try:
        files = {"file": ("skus.csv", b"GOLD-5X5", "text/csv")}
        r = client.post("/normalize/file", files=files)
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 413


def test_normalize_file_accepts_upload_at_limit():
    app.dependency_overrides[get_settings] = lambda: Settings(max_upload_bytes=8)
    try:
        files = {"file": ("skus.csv", b"GOLD-5X5", "text/csv")}
        r = client.post("/normalize/file", files=files)
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 200
    assert r.json()["results"][0]["color"] == "GOLD"


def test_color_table_follows_settings_override(tmp_path):
    path = tmp_path / "colors.json"
    path.write_text(json.dumps({"colors": ["TEAL"], "synonyms": {"TL": "TEAL"}}), encoding="utf-8")

    app.dependency_overrides[get_settings] = lambda: Settings(color_table_path=str(path))
    try:
        r = client.post("/normalize", json={"text": "tl 2x2"})
    finally:
        app.dependency_overrides.clear()

    result = r.json()["results"][0]
    assert result["color"] == "TEAL"
    assert result["normalized"] == "TEAL2X2"


def test_render():
    r = client.post("/render", json={"text": "GOLD-5X5"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert '<span class="badge ok">OK</span>' in r.text

    r = client.post("/render", json={"text": "\n \n"})
    assert "No results yet." in r.text


def test_export_csv():
    r = client.post("/export", json={"text": "GOLD-5X5\n10x20 blk gunm"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "text/csv; charset=utf-8"
    assert 'filename="normalized_skus.csv"' in r.headers["content-disposition"]

    lines = r.text.split("\r\n")
    assert lines[0] == "original,normalized,size,color,warnings"
    assert lines[1] == "GOLD-5X5,GOLD-5X5,5x5,GOLD,"
    assert len(lines) == 3


def test_export_requires_lines():
    r = client.post("/export", json={"text": "   "})
    assert r.status_code == 422


def test_decode_text_fallbacks():
    assert decode_text(b"") == ("", "utf-8")
    text, _ = decode_text("GOLD-5X5\nblack 1x1\n".encode("utf-8"))
    assert text == "GOLD-5X5\nblack 1x1\n"
