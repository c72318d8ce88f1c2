"""
Pipe simulation engine — entry point of the calculation core.

Runs the flow calculator and the stress analyzer on a validated schema and
assembles one SimulationResult. Never raises: a missing schema, an
unvalidated schema or a failure inside a calculator all come back as
overall_status=ERROR with error_reason set.
"""

import logging
from typing import List, Optional

from ..parametric.models import DesignSchema
from .base import SimulationEngine
from .flow_calculator import calculate_flow
from .results import (
    FlowResult,
    OverallStatus,
    SimulationResult,
    StressResult,
    severity,
    status_for_severity,
)
from .stress_analyzer import analyze_stress

logger = logging.getLogger(__name__)

UNKNOWN_PIPE_ID = "UNKNOWN"

_ELEVATED = ("WARNING", "DANGER")


class PipeSimulationEngine(SimulationEngine):

    def run(self, schema: Optional[DesignSchema]) -> SimulationResult:
        if schema is None:
            return SimulationResult.error(UNKNOWN_PIPE_ID, "DesignSchema is missing.")

        pipe_id = (schema.pipe.id if schema.pipe is not None else "") or UNKNOWN_PIPE_ID

        # No self-validation: the caller has to run the validator first
        if not schema.is_validated:
            return SimulationResult.error(
                pipe_id,
                "Schema has not passed validation. Run it through the validator "
                "before simulating.",
            )

        try:
            flow = calculate_flow(schema.pipe, schema.design_flow_m3s)
            stress = analyze_stress(schema.pipe, schema.load)
        except Exception as e:
            logger.warning("Simulation failed for %s: %s", pipe_id, e)
            return SimulationResult.error(pipe_id, f"Unexpected error during calculation: {e}")

        warnings: List[str] = []
        overall = self._overall_status(flow, stress, warnings)

        return SimulationResult(
            pipe_id=pipe_id,
            flow=flow,
            stress=stress,
            warnings=warnings,
            overall_status=overall,
            summary=self._build_summary(overall, flow, stress),
        )

    def _overall_status(self, flow: FlowResult, stress: StressResult,
                        warnings: List[str]) -> OverallStatus:
        """Worst sub-result wins."""
        if flow.status.value in _ELEVATED:
            warnings.append(f"flow status: {flow.status.value}")
        if stress.status.value in _ELEVATED:
            warnings.append(f"stress status: {stress.status.value}")

        return status_for_severity(max(severity(flow.status), severity(stress.status)))

    def _build_summary(self, overall: OverallStatus, flow: FlowResult,
                       stress: StressResult) -> str:
        if overall == OverallStatus.NORMAL:
            return (f"Within design criteria. Velocity {flow.velocity_ms:.2f} m/s, "
                    f"safety factor {stress.safety_factor:.2f}.")
        if overall == OverallStatus.WARNING:
            return (f"Review recommended. Velocity {flow.velocity_ms:.2f} m/s "
                    f"(flow {flow.status.value}), safety factor "
                    f"{stress.safety_factor:.2f} (stress {stress.status.value}).")
        if overall == OverallStatus.DANGER:
            return (f"Design criteria exceeded — immediate review required. "
                    f"Flow: {flow.status.value}, stress: {stress.status.value}.")
        return "Simulation error — check the input parameters."
