"""
HTTP API tests — health, validate, simulate, design (Gemini patched).
"""

import json
from unittest.mock import patch

EXTRACT = "structflow.routers.simulation.ParameterExtractor.extract"


# ============================================================
# Health / index
# ============================================================

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "app": "structflow"}


def test_index_lists_endpoints(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "POST /api/simulate" in resp.json()["endpoints"]


# ============================================================
# /api/validate
# ============================================================

def test_validate_standard_document(client, standard_json):
    resp = client.post("/api/validate", content=standard_json)
    data = resp.json()

    assert resp.status_code == 200
    assert data["is_valid"] is True
    assert data["errors"] == []
    assert data["schema"]["pipe"]["id"] == "PIPE-001"


def test_validate_empty_object_uses_defaults(client):
    data = client.post("/api/validate", content="{}").json()
    assert data["is_valid"] is True
    assert data["schema"]["pipe"]["material"] == "concrete"


def test_validate_reports_every_violation(client, standard_document):
    standard_document["pipe"].update({"diameter_mm": -1, "slope": 99, "material": "wood"})
    data = client.post("/api/validate", content=json.dumps(standard_document)).json()

    assert data["is_valid"] is False
    assert len(data["errors"]) >= 3


def test_validate_malformed_body_is_400(client):
    assert client.post("/api/validate", content="{ nope").status_code == 400
    assert client.post("/api/validate", content="").status_code == 400
    assert client.post("/api/validate", content="[1]").status_code == 400


# ============================================================
# /api/simulate
# ============================================================

def test_simulate_standard_document(client, standard_json):
    resp = client.post("/api/simulate", content=standard_json)
    data = resp.json()

    assert resp.status_code == 200
    assert data["overall_status"] == "DANGER"
    assert data["pipe_id"] == "PIPE-001"
    assert "error_reason" not in data
    assert data["flow"]["status"] == "DANGER"
    assert data["stress"]["status"] == "DANGER"


def test_simulate_invalid_document_is_422_error_result(client, standard_document):
    standard_document["pipe"]["diameter_mm"] = 5000
    resp = client.post("/api/simulate", content=json.dumps(standard_document))
    data = resp.json()

    assert resp.status_code == 422
    assert data["overall_status"] == "ERROR"
    assert data["pipe_id"] == "PIPE-001"
    assert "pipe.diameter_mm" in data["error_reason"]


def test_simulate_does_not_backfill_or_trust_client_flag(client):
    body = json.dumps({"pipe": {"id": "PIPE-X", "diameter_mm": 300}, "is_validated": True})
    resp = client.post("/api/simulate", content=body)

    assert resp.status_code == 422
    assert resp.json()["overall_status"] == "ERROR"


# ============================================================
# /api/design
# ============================================================

def test_design_success(client, healthy_document):
    with patch(EXTRACT, return_value=json.dumps(healthy_document)):
        resp = client.post("/api/design", json={"text": "600mm ductile iron storm drain"})
    data = resp.json()

    assert resp.status_code == 200
    assert data["success"] is True
    assert data["overall_status"] in ("NORMAL", "WARNING", "DANGER")
    assert data["schema"]["pipe"]["id"] == "PIPE-DI-600"
    assert data["result"]["pipe_id"] == "PIPE-DI-600"
    assert data["natural_summary"].startswith("[PIPE-DI-600]")
    assert data["error_message"] is None


def test_design_extraction_reason_is_reported(client):
    with patch(EXTRACT, return_value='{"pipe": null, "reason": "No dimensions given."}'):
        data = client.post("/api/design", json={"text": "a pipe somewhere"}).json()

    assert data["success"] is False
    assert data["overall_status"] == "ERROR"
    assert "No dimensions given." in data["error_message"]
    assert data["result"] is None


def test_design_extraction_unavailable(client):
    with patch(EXTRACT, return_value=None):
        data = client.post("/api/design", json={"text": "300mm sewer"}).json()

    assert data["success"] is False
    assert data["error_message"]


def test_design_blank_text_and_unknown_domain(client):
    data = client.post("/api/design", json={"text": "   "}).json()
    assert data["success"] is False

    resp = client.post("/api/design", json={"text": "300mm sewer", "domain": "bridge"})
    assert resp.status_code == 400


def test_oversized_number_does_not_crash_validate_or_simulate(client, standard_document):
    huge = "1" + "0" * 400
    resp = client.post("/api/validate", content='{"pipe": {"diameter_mm": ' + huge + "}}")
    assert resp.status_code == 200
    assert resp.json()["is_valid"] is True

    body = json.dumps(standard_document).replace('"diameter_mm": 300', '"diameter_mm": ' + huge)
    resp = client.post("/api/simulate", content=body)
    assert resp.status_code == 422
    assert "pipe.diameter_mm" in resp.json()["error_reason"]
