from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)

pytestmark = pytest.mark.api

GEMINI_RESPONSE = """**Spesies**: Ikan Nila
**Skor Keseluruhan**: 7.8/9
**Kategori**: BAIK

PARAMETER SNI 2729-2013:
| Parameter | Kondisi | Skor | Status |
|-----------|---------|------|--------|
| **Mata** | Jernih, cembung | 8 | Visual |
| **Insang** | Merah cerah | 9 | Visual |
| **Lendir** | Bening, tipis | 8 | Visual |
| **Daging** | Elastis | 7 | Visual |
| **Tekstur** | Kompak | 7 | Visual |
| **Bau** | Tidak dapat dinilai | - | Non-Visual |
"""

JPEG = ("fish.jpg", b"\xff\xd8\xff\xe0 fake jpeg body", "image/jpeg")


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "gemini_configured" in data


def test_analyze_text():
    response = client.post(
        "/analyze/text",
        json={"text": GEMINI_RESPONSE, "analysis_type": "freshness"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["analysis_type"] == "freshness"
    assert data["freshness"]["overall_score"] == 7.8
    assert data["freshness"]["category"] == "Good"
    assert data["freshness"]["attributes"][0]["name"] == "eyes"
    assert data["freshness"]["attributes"][0]["confidence"] == "high"
    assert data["species"] is None
    assert data["validation"]["is_valid"] is True
    assert data["generation_config"]["seed"] == 42
    assert data["degraded"] is False


def test_analyze_text_empty_uses_defaults():
    response = client.post("/analyze/text", json={"text": "", "analysis_type": "both"})
    assert response.status_code == 200
    data = response.json()
    assert data["freshness"]["auto_assigned_count"] == 5
    assert data["species"]["name"] == "Unidentified species"
    assert data["freshness"]["subject_name"] == "Unidentified species"


def test_analyze_text_rejects_unknown_kind():
    response = client.post("/analyze/text", json={"text": "x", "analysis_type": "colour"})
    assert response.status_code == 422


def test_analyze_image():
    with patch(
        "services.gemini_client.generate_analysis",
        new=AsyncMock(return_value=GEMINI_RESPONSE),
    ) as mock_generate:
        response = client.post(
            "/analyze",
            files={"image": JPEG},
            data={"analysis_type": "freshness"},
        )
    assert response.status_code == 200
    data = response.json()
    assert data["freshness"]["overall_score"] == 7.8
    assert data["freshness"]["subject_name"] == "Ikan Nila"
    assert data["degraded"] is False

    image_bytes, mime_type, prompt, config = mock_generate.call_args.args
    assert image_bytes == JPEG[1]
    assert mime_type == "image/jpeg"
    assert "SNI 2729-2013" in prompt
    assert config.creativity_level == 0.1
    assert data["generation_config"]["seed"] == config.seed


def test_analyze_image_same_bytes_same_seed():
    with patch(
        "services.gemini_client.generate_analysis",
        new=AsyncMock(return_value=GEMINI_RESPONSE),
    ):
        first = client.post("/analyze", files={"image": JPEG}, data={"analysis_type": "species"})
        second = client.post("/analyze", files={"image": JPEG}, data={"analysis_type": "species"})
    assert first.json()["generation_config"] == second.json()["generation_config"]
    assert first.json()["generation_config"]["creativity_level"] == 0.05


def test_analyze_image_degraded_when_gemini_unavailable():
    with patch("services.gemini_client.generate_analysis", new=AsyncMock(return_value=None)):
        response = client.post("/analyze", files={"image": JPEG}, data={"analysis_type": "freshness"})
    assert response.status_code == 200
    data = response.json()
    assert data["degraded"] is True
    assert data["freshness"]["overall_score"] == 6.6
    assert data["freshness"]["category"] == "Fair"


def test_analyze_rejects_non_image():
    response = client.post(
        "/analyze",
        files={"image": ("notes.txt", b"not an image", "text/plain")},
        data={"analysis_type": "freshness"},
    )
    assert response.status_code == 400


def test_analyze_rejects_unknown_kind():
    response = client.post("/analyze", files={"image": JPEG}, data={"analysis_type": "colour"})
    assert response.status_code == 400


def test_analyze_rejects_empty_upload():
    response = client.post(
        "/analyze",
        files={"image": ("empty.jpg", b"", "image/jpeg")},
        data={"analysis_type": "freshness"},
    )
    assert response.status_code == 400
