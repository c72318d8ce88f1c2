"""
Prompt builder for natural-language parameter extraction.

Rules the prompt enforces:
  - JSON only, no prose or markdown
  - null + a top-level "reason" when a value cannot be determined
  - fixed units: mm, m, kN, kPa, slope as a decimal
  - conservative defaults for ambiguous input
"""

import json

from ..config import settings
from ..parametric.models import (
    ENVIRONMENT_DEFAULTS,
    LOAD_DEFAULTS,
    PIPE_DEFAULTS,
    FlowType,
    Fluid,
    Material,
)


def _default_lines() -> str:
    lines = []
    for defaults in (PIPE_DEFAULTS, LOAD_DEFAULTS, ENVIRONMENT_DEFAULTS):
        for key, value in defaults.items():
            lines.append(f"- {key}: {json.dumps(value)}")
    return "\n".join(lines)


def build_system_prompt() -> str:
    materials = ", ".join(m.value for m in Material)
    flow_types = " | ".join(f'"{f.value}"' for f in FlowType)
    fluids = " | ".join(f'"{f.value}"' for f in Fluid)

    return f"""You are a structural design parameter extraction assistant for drainage pipe systems.

RULES (MUST FOLLOW):
1. Respond ONLY with valid JSON. No explanation, no markdown, no extra text.
2. Extract pipe design parameters from the user's natural language input.
3. If a value cannot be determined, use null and include a "reason" field.
4. Use ONLY these units: diameter in mm, length in m, slope as decimal (0.005 = 0.5%), loads in kN or kPa.
5. For ambiguous inputs, use conservative (safe) defaults.
6. material must be one of: {materials}

OUTPUT SCHEMA:
{{
  "pipe": {{
    "id": "PIPE-001",
    "diameter_mm": <number | null>,
    "length_m": <number | null>,
    "material": <string | null>,
    "slope": <number | null>,
    "roughness_coefficient": <number | null>
  }},
  "load": {{
    "soil_depth_m": <number | null>,
    "traffic_load_kn": <number | null>,
    "internal_pressure_kpa": <number | null>
  }},
  "environment": {{
    "flow_type": {flow_types},
    "fluid": {fluids}
  }},
  "design_flow_m3s": <number | null>,
  "reason": <string | null>
}}

CONSERVATIVE DEFAULTS (use when ambiguous):
{_default_lines()}"""


def build_user_message(natural_language_input: str) -> str:
    return f'Extract pipe design parameters from the following input:\n\n"{natural_language_input}"'


def build_gemini_request(natural_language_input: str) -> dict:
    """Request body for Gemini generateContent."""
    return {
        "systemInstruction": {"parts": [{"text": build_system_prompt()}]},
        "contents": [{
            "role": "user",
            "parts": [{"text": build_user_message(natural_language_input)}],
        }],
        "generationConfig": {
            "temperature": 0.1,
            "responseMimeType": "application/json",
        },
    }


def gemini_endpoint(model: str = None) -> str:
    model = model or settings.GEMINI_MODEL
    return f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
