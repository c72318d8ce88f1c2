"""
Design parameter model — the shapes that travel between intake, validation
and the simulation engine.

Units are carried in the field names (_mm, _m, _kn, _kpa, _m3s).
Numeric fields are Optional: None means "not determined yet" and is what the
conservative-default backfill looks for. A deliberate 0 stays a 0.
"""

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Material(str, enum.Enum):
    CONCRETE = "concrete"
    DUCTILE_IRON = "ductile_iron"
    PVC = "pvc"
    STEEL = "steel"
    HDPE = "hdpe"


class FlowType(str, enum.Enum):
    GRAVITY = "gravity"
    PRESSURE = "pressure"


class Fluid(str, enum.Enum):
    WASTEWATER = "wastewater"
    STORMWATER = "stormwater"
    CLEAN_WATER = "clean_water"


# Conservative defaults — applied to anything the intake could not determine.
# Same values the extraction prompt tells the LLM to fall back on.
PIPE_DEFAULTS = {
    "diameter_mm": 300.0,
    "length_m": 50.0,
    "material": Material.CONCRETE.value,
    "slope": 0.005,
    "roughness_coefficient": 0.013,
}

LOAD_DEFAULTS = {
    "soil_depth_m": 2.0,
    "traffic_load_kn": 50.0,
    "internal_pressure_kpa": 10.0,
}

ENVIRONMENT_DEFAULTS = {
    "flow_type": FlowType.GRAVITY.value,
    "fluid": Fluid.WASTEWATER.value,
}

SCHEMA_VERSION = "1.0"


def _now_iso() -> str:
    return datetime.utcnow().isoformat()


class PipeParameters(BaseModel):
    id: str = ""
    diameter_mm: Optional[float] = None
    length_m: Optional[float] = None
    material: Optional[str] = None
    slope: Optional[float] = None              # rise/run, 0.005 = 0.5%
    roughness_coefficient: Optional[float] = None  # Manning n


class LoadConditions(BaseModel):
    soil_depth_m: Optional[float] = None       # cover above the crown
    traffic_load_kn: Optional[float] = None
    internal_pressure_kpa: Optional[float] = None


class EnvironmentConditions(BaseModel):
    flow_type: Optional[str] = None
    fluid: Optional[str] = None


class DesignSchema(BaseModel):
    """
    Aggregate root for one design request.

    is_validated is only ever set from a ValidationOutcome
    (see parametric.validator.mark_validated). The simulation engine refuses
    to run anything that has not been through the validator.
    """
    schema_version: str = SCHEMA_VERSION
    created_at: str = Field(default_factory=_now_iso)
    pipe: Optional[PipeParameters] = None
    load: Optional[LoadConditions] = None
    environment: Optional[EnvironmentConditions] = None
    # None → evaluate at full-bore capacity
    design_flow_m3s: Optional[float] = None
    is_validated: bool = False
    # Set when upstream extraction gave up and explained why
    extraction_failure_reason: Optional[str] = None


# Field name → expected JSON type, per block. Drives the presence-aware merge.
PIPE_FIELDS = {
    "id": str,
    "diameter_mm": float,
    "length_m": float,
    "material": str,
    "slope": float,
    "roughness_coefficient": float,
}

LOAD_FIELDS = {
    "soil_depth_m": float,
    "traffic_load_kn": float,
    "internal_pressure_kpa": float,
}

ENVIRONMENT_FIELDS = {
    "flow_type": str,
    "fluid": str,
}

BLOCKS = {
    "pipe": (PipeParameters, PIPE_FIELDS),
    "load": (LoadConditions, LOAD_FIELDS),
    "environment": (EnvironmentConditions, ENVIRONMENT_FIELDS),
}
