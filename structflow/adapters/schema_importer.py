"""
Schema importer — builds a DesignSchema from JSON and validates it.

The merge is the important part. An LLM extraction usually returns only the
fields it could determine, so a missing key must never wipe a value the base
schema already holds. Presence is checked on the raw decoded document
(`key in block`), never by comparing decoded values to a zero/default:
a base slope of 0.003 survives an overlay that omits `slope`, and an overlay
that says `"slope": 0.01` always wins.

Present keys only overwrite when the value has the right JSON type.
Wrong-typed values (and nulls) are skipped, not treated as merge errors.
"""

import json
import logging
import math
from datetime import datetime
from typing import Optional, Tuple

from ..parametric.models import (
    BLOCKS,
    ENVIRONMENT_DEFAULTS,
    LOAD_DEFAULTS,
    PIPE_DEFAULTS,
    DesignSchema,
    EnvironmentConditions,
    LoadConditions,
    PipeParameters,
)
from ..parametric.validator import ValidationOutcome, mark_validated

logger = logging.getLogger(__name__)


class SchemaParseError(ValueError):
    """Overlay text is not a JSON object."""


def parse_document(text: str) -> dict:
    """Decode JSON text into a dict, or raise SchemaParseError."""
    if not text or not text.strip():
        raise SchemaParseError("JSON document is empty.")
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise SchemaParseError(f"Invalid JSON: {e}") from e
    if not isinstance(document, dict):
        raise SchemaParseError(
            f"Expected a JSON object at the top level, got {type(document).__name__}."
        )
    return document


def _coerce(value, expected: type):
    """Return the value if it matches the expected JSON type, else None."""
    if expected is float:
        # bool is an int subclass — "diameter_mm": true is not a diameter
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            value = float(value)
        except OverflowError:
            return None
        return value if math.isfinite(value) else None
    if expected is str:
        return value if isinstance(value, str) else None
    return None


def _overlay_block(current, raw_block, model_cls, fields: dict):
    """Apply one raw overlay block onto the current block (which may be None)."""
    if not isinstance(raw_block, dict):
        return current

    merged = current.model_copy(deep=True) if current is not None else model_cls()
    for field_name, expected in fields.items():
        if field_name not in raw_block:
            continue
        value = _coerce(raw_block[field_name], expected)
        if value is None:
            logger.debug("Ignoring wrong-typed overlay value for %s: %r",
                         field_name, raw_block[field_name])
            continue
        setattr(merged, field_name, value)
    return merged


def apply_overlay(schema: DesignSchema, document: dict) -> DesignSchema:
    """Copy every present, type-correct field of a decoded overlay onto a schema copy."""
    merged = schema.model_copy(deep=True)

    for block_name, (model_cls, fields) in BLOCKS.items():
        if block_name in document:
            current = getattr(merged, block_name)
            setattr(merged, block_name,
                    _overlay_block(current, document[block_name], model_cls, fields))

    if "design_flow_m3s" in document:
        design_flow = _coerce(document["design_flow_m3s"], float)
        if design_flow is not None:
            merged.design_flow_m3s = design_flow

    for key in ("schema_version", "created_at"):
        if key in document:
            text = _coerce(document[key], str)
            if text and text.strip():
                setattr(merged, key, text)

    reason = document.get("reason")
    if isinstance(reason, str) and reason.strip():
        merged.extraction_failure_reason = reason.strip()

    return merged


# Geometry fields whose valid range excludes 0: a zero there was never measured.
# Load fields keep an explicit 0 (surface pipe, no traffic, no internal head).
ZERO_MEANS_UNSET = frozenset({"diameter_mm", "length_m", "slope", "roughness_coefficient"})


def _is_unset(value, field_name: str = "") -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return field_name in ZERO_MEANS_UNSET and value == 0


def backfill_defaults(schema: DesignSchema) -> DesignSchema:
    """Fill every field that is still unset with its conservative default."""
    filled = schema.model_copy(deep=True)
    if filled.pipe is None:
        filled.pipe = PipeParameters()
    if filled.load is None:
        filled.load = LoadConditions()
    if filled.environment is None:
        filled.environment = EnvironmentConditions()

    if _is_unset(filled.pipe.id):
        filled.pipe.id = f"PIPE-{datetime.utcnow():%Y%m%d%H%M%S}"

    for block, defaults in (
        (filled.pipe, PIPE_DEFAULTS),
        (filled.load, LOAD_DEFAULTS),
        (filled.environment, ENVIRONMENT_DEFAULTS),
    ):
        for field_name, default in defaults.items():
            if _is_unset(getattr(block, field_name), field_name):
                setattr(block, field_name, default)

    return filled


def merge_schema(base: Optional[DesignSchema], overlay_text: str) -> DesignSchema:
    """
    Merge a (possibly partial) JSON overlay onto a base schema.

    Starts from a deep copy of base, or an empty schema. Fields absent from
    the overlay keep their base value. Anything still unset afterwards gets a
    conservative default. Does not validate and never sets is_validated.

    Raises SchemaParseError when overlay_text is not a JSON object.
    """
    document = parse_document(overlay_text)
    start = base.model_copy(deep=True) if base is not None else DesignSchema()
    merged = apply_overlay(start, document)
    return backfill_defaults(merged)


def import_from_json(json_text: str,
                     apply_conservative_defaults: bool = True
                     ) -> Tuple[Optional[DesignSchema], ValidationOutcome]:
    """
    Build a schema from a complete JSON document and validate it.

    Returns (schema, outcome). schema is None when the text does not parse.
    The returned schema has is_validated set from the outcome.
    """
    try:
        document = parse_document(json_text)
    except SchemaParseError as e:
        return None, ValidationOutcome.failure(f"JSON parsing failed: {e}")

    schema = apply_overlay(DesignSchema(), document)
    if apply_conservative_defaults:
        schema = backfill_defaults(schema)

    return mark_validated(schema)


def merge_from_llm_json(llm_json: str,
                        base_schema: Optional[DesignSchema] = None
                        ) -> Tuple[Optional[DesignSchema], ValidationOutcome]:
    """
    Merge a partial LLM response onto an existing schema and validate.

    Only the fields the LLM actually returned overwrite the base.
    """
    try:
        merged = merge_schema(base_schema, llm_json)
    except SchemaParseError as e:
        logger.warning("LLM response is not a usable JSON object: %s", e)
        return None, ValidationOutcome.failure(f"LLM response is not valid JSON: {e}")

    return mark_validated(merged)
