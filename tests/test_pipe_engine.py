"""
Pipe simulation engine tests — orchestration, status arbitration, error results.

Tests:
1-3. Missing / unvalidated / incomplete schemas → ERROR, never raises
4.   Standard document (full bore, small concrete pipe) → DANGER
5.   Healthy 600 mm ductile iron at half capacity → NORMAL
6.   Stress WARNING with normal flow → WARNING
7.   Calculator failure → ERROR with the message
8-9. Severity helpers and engine registry
"""

import json
from unittest.mock import patch

import pytest

from structflow.adapters.schema_importer import import_from_json
from structflow.engine.flow_calculator import calculate_full_flow
from structflow.engine.pipe_engine import UNKNOWN_PIPE_ID, PipeSimulationEngine
from structflow.engine.registry import get_engine, has_engine, list_engines
from structflow.engine.results import (
    FlowStatus,
    OverallStatus,
    StressStatus,
    severity,
    status_for_severity,
)
from structflow.parametric.models import DesignSchema


def _validated(document: dict) -> DesignSchema:
    schema, outcome = import_from_json(json.dumps(document))
    assert outcome.valid, outcome.errors
    return schema


def _at_half_capacity(document: dict, **load_overrides) -> DesignSchema:
    document["load"].update(load_overrides)
    schema = _validated(document)
    document["design_flow_m3s"] = 0.5 * calculate_full_flow(schema.pipe)
    return _validated(document)


# ============================================================
# Error results
# ============================================================

def test_missing_schema_returns_error():
    result = PipeSimulationEngine().run(None)

    assert result.overall_status == OverallStatus.ERROR
    assert result.error_reason
    assert result.pipe_id == UNKNOWN_PIPE_ID
    assert result.flow is None and result.stress is None


def test_unvalidated_schema_returns_error(standard_schema):
    unvalidated = standard_schema.model_copy(update={"is_validated": False})
    result = PipeSimulationEngine().run(unvalidated)

    assert result.overall_status == OverallStatus.ERROR
    assert "validation" in result.error_reason
    assert result.pipe_id == "PIPE-001"
    assert result.summary.startswith("Simulation error")


def test_validated_flag_without_pipe_block_returns_error():
    """A hand-built schema that claims validation but has no pipe block."""
    result = PipeSimulationEngine().run(DesignSchema(is_validated=True))

    assert result.overall_status == OverallStatus.ERROR
    assert result.error_reason
    assert result.pipe_id == UNKNOWN_PIPE_ID


# ============================================================
# Status arbitration
# ============================================================

def test_standard_document_is_danger(standard_document):
    """No design flow → full bore (DANGER); 300 mm concrete SF ≈ 0.10 (DANGER)."""
    result = PipeSimulationEngine().run(_validated(standard_document))

    assert result.overall_status == OverallStatus.DANGER
    assert result.flow.status == FlowStatus.DANGER
    assert result.stress.status == StressStatus.DANGER
    assert "flow status: DANGER" in result.warnings
    assert "stress status: DANGER" in result.warnings
    assert result.error_reason is None
    assert "immediate review" in result.summary


def test_healthy_design_is_normal(healthy_document):
    result = PipeSimulationEngine().run(_at_half_capacity(healthy_document))

    assert result.overall_status == OverallStatus.NORMAL
    assert result.flow.status == FlowStatus.NORMAL
    assert result.stress.status == StressStatus.SAFE
    assert result.stress.safety_factor >= 2.0
    assert result.warnings == []
    assert result.pipe_id == "PIPE-DI-600"
    assert result.summary.startswith("Within design criteria")


def test_stress_warning_with_normal_flow_is_warning(healthy_document):
    """Soil 3 m + 50 kPa internal on 600 mm ductile iron → SF ≈ 1.76."""
    result = PipeSimulationEngine().run(
        _at_half_capacity(healthy_document, soil_depth_m=3.0, internal_pressure_kpa=50.0))

    assert result.stress.status == StressStatus.WARNING
    assert 1.5 <= result.stress.safety_factor < 2.0
    assert result.flow.status == FlowStatus.NORMAL
    assert result.overall_status == OverallStatus.WARNING
    assert result.warnings == ["stress status: WARNING"]
    assert result.summary.startswith("Review recommended")


def test_calculator_failure_becomes_error_result(standard_schema):
    with patch("structflow.engine.pipe_engine.calculate_flow",
               side_effect=RuntimeError("boom")):
        result = PipeSimulationEngine().run(standard_schema)

    assert result.overall_status == OverallStatus.ERROR
    assert "boom" in result.error_reason
    assert result.pipe_id == "PIPE-001"


# ============================================================
# Helpers / registry
# ============================================================

def test_severity_ranking():
    assert severity(FlowStatus.NORMAL) == severity(StressStatus.SAFE) == 0
    assert severity(FlowStatus.WARNING) == severity(StressStatus.WARNING) == 1
    assert severity("DANGER") == 2
    assert severity("SOMETHING_ELSE") == 3

    assert status_for_severity(0) == OverallStatus.NORMAL
    assert status_for_severity(2) == OverallStatus.DANGER
    assert status_for_severity(3) == OverallStatus.ERROR


def test_engine_registry():
    assert has_engine("pipe")
    assert not has_engine("bridge")
    assert list_engines() == ["pipe"]
    assert isinstance(get_engine("pipe"), PipeSimulationEngine)

    with pytest.raises(ValueError, match="bridge"):
        get_engine("bridge")
