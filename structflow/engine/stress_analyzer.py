"""
Structural stress check for a buried pipe — simplified ring (hoop) theory.

    σ = (W_total × D) / (2 × t)
    W_total = earth pressure + traffic pressure + internal pressure

Assumptions:
  - wall thickness t = 10% of D (KS minimum wall approximation)
  - earth pressure: Marston, trench condition, W_e = γ × H × C_d
  - traffic load spread over the pipe's own footprint π(D/2)²
    (not a full Boussinesq distribution)

Safety factor bands (KS D 4301):
  SAFE    : SF >= 2.0
  WARNING : 1.5 <= SF < 2.0
  DANGER  : SF < 1.5
"""

import math
from typing import Optional

from ..parametric.models import LoadConditions, Material, PipeParameters
from .results import StressResult, StressStatus

# Allowable stress by material (kPa) — KS D 4301 basis for concrete
ALLOWABLE_STRESS_KPA = {
    Material.CONCRETE.value: 400.0,
    Material.DUCTILE_IRON.value: 1500.0,
    Material.PVC.value: 200.0,
    Material.STEEL.value: 1200.0,
    Material.HDPE.value: 180.0,
}
DEFAULT_ALLOWABLE_STRESS_KPA = ALLOWABLE_STRESS_KPA[Material.CONCRETE.value]

SOIL_UNIT_WEIGHT_KN_M3 = 19.0   # saturated clay
MARSTON_LOAD_FACTOR = 1.5       # trench installation
WALL_THICKNESS_RATIO = 0.10

SAFETY_FACTOR_SAFE = 2.0
SAFETY_FACTOR_WARNING = 1.5

# Reported when there is no load at all (σ = 0)
MAX_SAFETY_FACTOR = 999.0


def get_allowable_stress(material: Optional[str]) -> float:
    key = (material or "").strip().lower()
    return ALLOWABLE_STRESS_KPA.get(key, DEFAULT_ALLOWABLE_STRESS_KPA)


def earth_pressure_kpa(soil_depth_m: float) -> float:
    return SOIL_UNIT_WEIGHT_KN_M3 * soil_depth_m * MARSTON_LOAD_FACTOR


def traffic_pressure_kpa(traffic_load_kn: float, diameter_m: float) -> float:
    footprint_m2 = math.pi * (diameter_m / 2.0) ** 2
    return traffic_load_kn / footprint_m2


def calculate_hoop_stress(pipe: PipeParameters, load: LoadConditions) -> float:
    """Hoop stress in kPa (kPa × m / m)."""
    diameter_m = pipe.diameter_mm / 1000.0
    wall_thickness_m = diameter_m * WALL_THICKNESS_RATIO

    total_load_kpa = (earth_pressure_kpa(load.soil_depth_m)
                      + traffic_pressure_kpa(load.traffic_load_kn, diameter_m)
                      + load.internal_pressure_kpa)

    return (total_load_kpa * diameter_m) / (2.0 * wall_thickness_m)


def stress_status(safety_factor: float) -> StressStatus:
    if safety_factor >= SAFETY_FACTOR_SAFE:
        return StressStatus.SAFE
    if safety_factor >= SAFETY_FACTOR_WARNING:
        return StressStatus.WARNING
    return StressStatus.DANGER


def analyze_stress(pipe: PipeParameters, load: LoadConditions) -> StressResult:
    allowable = get_allowable_stress(pipe.material)
    hoop_stress = calculate_hoop_stress(pipe, load)

    if hoop_stress > 0:
        safety_factor = allowable / hoop_stress
    else:
        safety_factor = MAX_SAFETY_FACTOR

    return StressResult(
        max_stress_kpa=round(hoop_stress, 2),
        safety_factor=round(safety_factor, 3),
        status=stress_status(safety_factor),
    )
