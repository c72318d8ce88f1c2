"""
Shared test fixtures — standard design documents, validated schemas, test client.
"""

import json
import os

import pytest
from fastapi.testclient import TestClient

# No real Gemini calls from the test suite
os.environ["GEMINI_API_KEY"] = ""

from structflow.adapters.schema_importer import import_from_json
from structflow.main import app


def standard_design_document() -> dict:
    """300 mm concrete sewer, standard urban loading."""
    return {
        "pipe": {
            "id": "PIPE-001",
            "diameter_mm": 300,
            "length_m": 50.0,
            "material": "concrete",
            "slope": 0.005,
            "roughness_coefficient": 0.013,
        },
        "load": {
            "soil_depth_m": 2.0,
            "traffic_load_kn": 50.0,
            "internal_pressure_kpa": 10.0,
        },
        "environment": {
            "flow_type": "gravity",
            "fluid": "wastewater",
        },
    }


def healthy_design_document() -> dict:
    """600 mm ductile iron at half capacity — passes both checks."""
    return {
        "pipe": {
            "id": "PIPE-DI-600",
            "diameter_mm": 600,
            "length_m": 120.0,
            "material": "ductile_iron",
            "slope": 0.005,
            "roughness_coefficient": 0.013,
        },
        "load": {
            "soil_depth_m": 2.0,
            "traffic_load_kn": 10.0,
            "internal_pressure_kpa": 10.0,
        },
        "environment": {
            "flow_type": "gravity",
            "fluid": "stormwater",
        },
    }


@pytest.fixture
def standard_json():
    return json.dumps(standard_design_document())


@pytest.fixture
def standard_schema(standard_json):
    """Validated schema built from the standard document."""
    schema, outcome = import_from_json(standard_json)
    assert outcome.valid, outcome.errors
    return schema


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def standard_document():
    return standard_design_document()


@pytest.fixture
def healthy_document():
    return healthy_design_document()
