"""
Which engine runs a given kind of design.

Only drainage pipes exist today. The /api/design endpoint looks the domain
up here so a request for anything else fails with a 400 before Gemini is
called.
"""

from .base import SimulationEngine
from .pipe_engine import PipeSimulationEngine

ENGINES: dict[str, type] = {
    "pipe": PipeSimulationEngine,
}


def get_engine(domain: str = "pipe") -> SimulationEngine:
    try:
        engine_cls = ENGINES[domain]
    except KeyError:
        known = ", ".join(sorted(ENGINES))
        raise ValueError(f"Unknown design domain '{domain}' (supported: {known})") from None
    return engine_cls()


def has_engine(domain: str) -> bool:
    return domain in ENGINES


def list_engines() -> list[str]:
    return sorted(ENGINES)
