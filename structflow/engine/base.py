"""
Abstract base class for simulation engines.

Input: a validated DesignSchema
Output: SimulationResult — never an exception
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..parametric.models import DesignSchema
from .results import SimulationResult


class SimulationEngine(ABC):
    """All domain engines inherit from this. Swap the engine, keep the intake."""

    @abstractmethod
    def run(self, schema: Optional[DesignSchema]) -> SimulationResult:
        """
        Run every check for one schema and return the combined result.
        Implementations must report failures through SimulationResult.error().
        """
