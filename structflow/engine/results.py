"""
Result objects returned by the simulation engine.

Errors never surface as exceptions: SimulationResult.error() carries
overall_status=ERROR plus the reason instead.
"""

import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FlowStatus(str, enum.Enum):
    NORMAL = "NORMAL"
    WARNING = "WARNING"
    DANGER = "DANGER"


class StressStatus(str, enum.Enum):
    SAFE = "SAFE"
    WARNING = "WARNING"
    DANGER = "DANGER"


class OverallStatus(str, enum.Enum):
    NORMAL = "NORMAL"
    WARNING = "WARNING"
    DANGER = "DANGER"
    ERROR = "ERROR"


# Severity arbitration — the worse sub-result decides the overall status.
# Anything not listed ranks as ERROR.
SEVERITY_RANK = {
    "NORMAL": 0,
    "SAFE": 0,
    "WARNING": 1,
    "DANGER": 2,
}
ERROR_RANK = 3

RANK_TO_STATUS = {
    0: OverallStatus.NORMAL,
    1: OverallStatus.WARNING,
    2: OverallStatus.DANGER,
}


def severity(status) -> int:
    value = status.value if isinstance(status, enum.Enum) else str(status)
    return SEVERITY_RANK.get(value, ERROR_RANK)


def status_for_severity(rank: int) -> OverallStatus:
    return RANK_TO_STATUS.get(rank, OverallStatus.ERROR)


def _now_iso() -> str:
    return datetime.utcnow().isoformat()


class FlowResult(BaseModel):
    """Manning flow check result."""
    velocity_ms: float
    flow_rate_m3s: float
    fill_ratio: float            # design flow / full-bore flow, clamped 0–1
    status: FlowStatus = FlowStatus.NORMAL
    warnings: List[str] = []


class StressResult(BaseModel):
    """Ring stress check result."""
    max_stress_kpa: float
    safety_factor: float         # allowable / actual
    status: StressStatus = StressStatus.SAFE


class SimulationResult(BaseModel):
    pipe_id: str = ""
    calculated_at: str = Field(default_factory=_now_iso)
    flow: Optional[FlowResult] = None
    stress: Optional[StressResult] = None
    warnings: List[str] = []
    overall_status: OverallStatus = OverallStatus.NORMAL
    summary: Optional[str] = None
    error_reason: Optional[str] = None

    @classmethod
    def error(cls, pipe_id: str, reason: str) -> "SimulationResult":
        return cls(
            pipe_id=pipe_id,
            overall_status=OverallStatus.ERROR,
            error_reason=reason,
            summary=f"Simulation error: {reason}",
        )
