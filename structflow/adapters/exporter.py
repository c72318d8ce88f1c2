"""
Result exporter — JSON in and out, plus the flat and text summaries the
dashboard and the natural-language reply use.

JSON uses snake_case keys (the model field names) and drops None values
instead of writing nulls.
"""

import logging
from typing import Dict, Optional

from pydantic import ValidationError

from ..engine.results import SimulationResult
from ..parametric.models import DesignSchema

logger = logging.getLogger(__name__)


def to_json(result: SimulationResult) -> str:
    return result.model_dump_json(exclude_none=True, indent=2)


def from_json(text: str) -> Optional[SimulationResult]:
    """Parse result JSON. Returns None on empty or malformed input."""
    if not text or not text.strip():
        return None
    try:
        return SimulationResult.model_validate_json(text)
    except ValidationError as e:
        logger.warning("Could not parse SimulationResult JSON: %s", e)
        return None


def serialize_schema(schema: DesignSchema) -> str:
    return schema.model_dump_json(exclude_none=True, indent=2)


def deserialize_schema(text: str) -> Optional[DesignSchema]:
    """Strict typed decode of a DesignSchema document. None on failure."""
    if not text or not text.strip():
        return None
    try:
        return DesignSchema.model_validate_json(text)
    except ValidationError as e:
        logger.warning("Could not parse DesignSchema JSON: %s", e)
        return None


def to_panel_summary(result: SimulationResult) -> Dict[str, str]:
    """Flat string dict for the result panel. Missing sub-results show N/A."""
    flow = result.flow
    stress = result.stress

    return {
        "pipe_id": result.pipe_id,
        "calculated_at": result.calculated_at,
        "status": result.overall_status.value,
        "velocity_ms": f"{flow.velocity_ms:.2f} m/s" if flow else "N/A",
        "flow_rate_m3s": f"{flow.flow_rate_m3s:.4f} m³/s" if flow else "N/A",
        "fill_ratio": f"{flow.fill_ratio:.0%}" if flow else "N/A",
        "flow_status": flow.status.value if flow else "N/A",
        "safety_factor": f"{stress.safety_factor:.2f}" if stress else "N/A",
        "stress_status": stress.status.value if stress else "N/A",
        "summary": result.summary or "",
        "warnings": "; ".join(result.warnings) if result.warnings else "none",
    }


def to_natural_language_summary(result: SimulationResult) -> str:
    lines = [
        f"[{result.pipe_id}] Simulation result — {result.calculated_at}",
        f"Overall status: {result.overall_status.value}",
    ]

    if result.flow:
        f = result.flow
        lines.append(
            f"Flow: {f.flow_rate_m3s:.4f} m³/s | velocity: {f.velocity_ms:.2f} m/s | "
            f"fill ratio: {f.fill_ratio:.0%} [{f.status.value}]"
        )
        for note in f.warnings:
            lines.append(f"  - {note}")

    if result.stress:
        s = result.stress
        lines.append(
            f"Max stress: {s.max_stress_kpa:.1f} kPa | safety factor: "
            f"{s.safety_factor:.2f} [{s.status.value}]"
        )

    if result.warnings:
        lines.append(f"Warnings: {', '.join(result.warnings)}")

    if result.error_reason:
        lines.append(f"Error: {result.error_reason}")

    lines.append(result.summary or "")
    return "\n".join(lines)
