"""
Turns raw LLM response text into a DesignSchema.

The LLM may wrap its JSON in a markdown fence or surround it with prose, so
the JSON object is pulled out first. A top-level "reason" means the model
could not extract usable values; that short-circuits the merge.
"""

import json
import re
from typing import Optional, Tuple

from ..adapters.schema_importer import merge_from_llm_json
from ..parametric.models import DesignSchema

# Fenced ```json block first, otherwise the widest {...} span
_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)


def extract_json(text: str) -> Optional[str]:
    """Return the JSON object text inside an LLM response, or None."""
    if not text or not text.strip():
        return None

    match = _FENCED_JSON.search(text)
    if match:
        return match.group(1)

    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        return text[start:end + 1]
    return None


def extract_reason(json_text: str) -> Optional[str]:
    """Top-level non-blank "reason" string, or None."""
    try:
        document = json.loads(json_text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(document, dict):
        return None
    reason = document.get("reason")
    if isinstance(reason, str) and reason.strip():
        return reason.strip()
    return None


def parse_llm_response(llm_response_text: str,
                       base_schema: Optional[DesignSchema] = None
                       ) -> Tuple[Optional[DesignSchema], Optional[str]]:
    """
    Parse an LLM response into a schema.

    Returns (schema, error):
        (None, msg)    — no JSON found, or it did not decode
        (schema, msg)  — extraction gave a reason, or validation failed;
                         schema.is_validated is False
        (schema, None) — merged and valid
    """
    json_text = extract_json(llm_response_text)
    if json_text is None:
        return None, "No JSON object found in the LLM response."

    reason = extract_reason(json_text)
    if reason is not None:
        return (DesignSchema(extraction_failure_reason=reason),
                f"LLM parameter extraction failed: {reason}")

    merged, validation = merge_from_llm_json(json_text, base_schema)
    if merged is None:
        return None, "Could not decode the LLM JSON."

    if not validation.valid:
        return merged, f"Validation failed: {', '.join(validation.errors)}"

    return merged, None
