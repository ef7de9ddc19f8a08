"""
Tests for the contract analysis API.
"""

import json
import pytest
from fastapi.testclient import TestClient

from signloop.api.routes import get_analyzer
from signloop.api.server import create_app


@pytest.fixture
def make_api_client(config, make_analyzer):
    """Fixture building a TestClient whose analyzer returns the given model content."""
    def _make_client(content):
        app = create_app(config)
        analyzer = make_analyzer(content)
        app.dependency_overrides[get_analyzer] = lambda: analyzer
        return TestClient(app)
    return _make_client


def test_health(make_api_client, valid_analysis):
    """Health endpoint reports the version."""
    client = make_api_client(valid_analysis)

    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_analyze_text(make_api_client, provider_requests, valid_analysis, sample_contract):
    """Text analysis returns the validated result with provenance."""
    client = make_api_client(valid_analysis)

    response = client.post("/api/v1/analyze", json={
        "text": sample_contract,
        "metadata": {"contractType": "Service", "region": "US"},
    })

    assert response.status_code == 200
    body = response.json()
    assert body["result"] == valid_analysis
    assert body["provider"] == "openrouter"
    assert body["model"] == "xiaomi/mimo-v2-flash:free"
    assert body["extraction"] is None

    prompt = json.loads(provider_requests[0].content)["messages"][0]["content"]
    assert "Type: Service" in prompt


def test_analyze_text_requires_text(make_api_client, provider_requests, valid_analysis):
    """Empty text is rejected before the model is called."""
    client = make_api_client(valid_analysis)

    response = client.post("/api/v1/analyze", json={"text": ""})

    assert response.status_code == 400
    assert response.json()["error_type"] == "EmptyDocumentError"
    assert provider_requests == []


def test_analyze_text_unparsable_model_output(make_api_client):
    """Model output without JSON maps to a bad gateway."""
    client = make_api_client("I'm unable to review contracts.")

    response = client.post("/api/v1/analyze", json={"text": "Some contract"})

    assert response.status_code == 502
    assert response.json()["error_type"] == "UnparsableResponseError"


def test_extract_file(make_api_client, valid_analysis, sample_contract):
    """Uploads are extracted according to their content type."""
    client = make_api_client(valid_analysis)

    response = client.post(
        "/api/v1/extract",
        files={"file": ("contract.txt", sample_contract.encode("utf-8"), "text/plain")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["text"] == sample_contract.strip()
    assert body["method"] == "pdf_parse"
    assert body["confidence"] == 100
    assert body["char_count"] == len(sample_contract.strip())


def test_extract_unsupported_file(make_api_client, valid_analysis):
    """Unsupported content types map to 415."""
    client = make_api_client(valid_analysis)

    response = client.post(
        "/api/v1/extract",
        files={"file": ("contract.docx", b"PK\x03\x04", "application/msword")},
    )

    assert response.status_code == 415
    assert response.json()["error_type"] == "UnsupportedMediaTypeError"


def test_analyze_file(make_api_client, provider_requests, valid_analysis, sample_contract):
    """File analysis returns the result together with extraction details."""
    client = make_api_client(valid_analysis)

    response = client.post(
        "/api/v1/analyze/file",
        files={"file": ("contract.txt", sample_contract.encode("utf-8"), "text/plain")},
        data={"region": "UK"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["result"]["risk_badge"] == "HIGH"
    assert body["extraction"]["method"] == "pdf_parse"

    prompt = json.loads(provider_requests[0].content)["messages"][0]["content"]
    assert "Region: UK" in prompt
    assert "Type: Unknown" in prompt
