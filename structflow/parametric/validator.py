"""
Design schema validator.

Checks every block against its engineering ranges and collects all of the
violations instead of stopping at the first one, so a caller (person or LLM)
can fix everything in one round trip.

Ranges follow the KDS 57 17 00 sewer design standard where it applies:
  diameter 100–3000 mm, slope 0.1%–20%, Manning n 0.005–0.05.
"""

import math
from typing import List, Optional, Tuple

from pydantic import BaseModel

from .models import (
    DesignSchema,
    EnvironmentConditions,
    FlowType,
    Fluid,
    LoadConditions,
    Material,
    PipeParameters,
)

ALLOWED_MATERIALS = [m.value for m in Material]
ALLOWED_FLOW_TYPES = [f.value for f in FlowType]
ALLOWED_FLUIDS = [f.value for f in Fluid]

DIAMETER_RANGE_MM = (100.0, 3000.0)
MAX_LENGTH_M = 10000.0
SLOPE_RANGE = (0.001, 0.2)
ROUGHNESS_RANGE = (0.005, 0.05)

SOIL_DEPTH_RANGE_M = (0.0, 30.0)
TRAFFIC_LOAD_RANGE_KN = (0.0, 500.0)
INTERNAL_PRESSURE_RANGE_KPA = (0.0, 1000.0)


class ValidationOutcome(BaseModel):
    valid: bool
    errors: List[str] = []

    @classmethod
    def success(cls) -> "ValidationOutcome":
        return cls(valid=True, errors=[])

    @classmethod
    def failure(cls, errors) -> "ValidationOutcome":
        if isinstance(errors, str):
            errors = [errors]
        return cls(valid=False, errors=list(errors))

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None

    def __str__(self) -> str:
        return "VALID" if self.valid else "INVALID: " + " | ".join(self.errors)


def _in_range(value, low: float, high: float, low_inclusive: bool = True) -> bool:
    if value is None or not math.isfinite(value):
        return False
    above_low = value >= low if low_inclusive else value > low
    return above_low and value <= high


def _in_vocabulary(value: Optional[str], allowed: list) -> bool:
    return (value or "").strip().lower() in allowed


def validate_schema(schema: DesignSchema) -> ValidationOutcome:
    """
    Validate a whole DesignSchema.

    Message order: pipe, load, environment, design flow — field declaration
    order inside each block.
    """
    errors: List[str] = []

    _validate_pipe(schema.pipe, errors)
    _validate_load(schema.load, errors)
    _validate_environment(schema.environment, errors)
    _validate_design_flow(schema.design_flow_m3s, errors)

    if errors:
        return ValidationOutcome.failure(errors)
    return ValidationOutcome.success()


def mark_validated(schema: DesignSchema) -> Tuple[DesignSchema, ValidationOutcome]:
    """Validate and return a copy of the schema with is_validated set from the outcome."""
    outcome = validate_schema(schema)
    marked = schema.model_copy(deep=True, update={"is_validated": outcome.valid})
    return marked, outcome


def _validate_pipe(pipe: Optional[PipeParameters], errors: List[str]) -> None:
    if pipe is None:
        errors.append("Pipe parameter block is missing.")
        return

    if not (pipe.id or "").strip():
        errors.append("pipe.id is required.")

    low, high = DIAMETER_RANGE_MM
    if not _in_range(pipe.diameter_mm, low, high):
        errors.append(f"pipe.diameter_mm must be {low:g}–{high:g} mm. Got: {pipe.diameter_mm}")

    if not _in_range(pipe.length_m, 0.0, MAX_LENGTH_M, low_inclusive=False):
        errors.append(f"pipe.length_m must be greater than 0 and at most {MAX_LENGTH_M:g} m. "
                      f"Got: {pipe.length_m}")

    if not _in_vocabulary(pipe.material, ALLOWED_MATERIALS):
        errors.append(f"pipe.material must be one of [{', '.join(ALLOWED_MATERIALS)}]. "
                      f"Got: '{pipe.material}'")

    low, high = SLOPE_RANGE
    if not _in_range(pipe.slope, low, high):
        errors.append(f"pipe.slope must be {low:g}–{high:g}. Got: {pipe.slope}")

    low, high = ROUGHNESS_RANGE
    if not _in_range(pipe.roughness_coefficient, low, high):
        errors.append(f"pipe.roughness_coefficient must be {low:g}–{high:g}. "
                      f"Got: {pipe.roughness_coefficient}")


def _validate_load(load: Optional[LoadConditions], errors: List[str]) -> None:
    if load is None:
        errors.append("Load parameter block is missing.")
        return

    low, high = SOIL_DEPTH_RANGE_M
    if not _in_range(load.soil_depth_m, low, high):
        errors.append(f"load.soil_depth_m must be {low:g}–{high:g} m. Got: {load.soil_depth_m}")

    low, high = TRAFFIC_LOAD_RANGE_KN
    if not _in_range(load.traffic_load_kn, low, high):
        errors.append(f"load.traffic_load_kn must be {low:g}–{high:g} kN. "
                      f"Got: {load.traffic_load_kn}")

    low, high = INTERNAL_PRESSURE_RANGE_KPA
    if not _in_range(load.internal_pressure_kpa, low, high):
        errors.append(f"load.internal_pressure_kpa must be {low:g}–{high:g} kPa. "
                      f"Got: {load.internal_pressure_kpa}")


def _validate_environment(env: Optional[EnvironmentConditions], errors: List[str]) -> None:
    if env is None:
        errors.append("Environment parameter block is missing.")
        return

    if not _in_vocabulary(env.flow_type, ALLOWED_FLOW_TYPES):
        errors.append(f"environment.flow_type must be one of [{', '.join(ALLOWED_FLOW_TYPES)}]. "
                      f"Got: '{env.flow_type}'")

    if not _in_vocabulary(env.fluid, ALLOWED_FLUIDS):
        errors.append(f"environment.fluid must be one of [{', '.join(ALLOWED_FLUIDS)}]. "
                      f"Got: '{env.fluid}'")


def _validate_design_flow(design_flow_m3s: Optional[float], errors: List[str]) -> None:
    if design_flow_m3s is None:
        return
    if not math.isfinite(design_flow_m3s) or design_flow_m3s <= 0:
        errors.append(f"design_flow_m3s must be greater than 0 m³/s when supplied. "
                      f"Got: {design_flow_m3s}")
