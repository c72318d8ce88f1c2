"""
Simulation API.

POST /api/validate  — Validate a DesignSchema JSON body (no simulation)
POST /api/simulate  — Validate + run the pipe engine, return SimulationResult
POST /api/design    — Natural language → Gemini → schema → simulation
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..adapters.exporter import to_natural_language_summary
from ..adapters.schema_importer import SchemaParseError, import_from_json, parse_document
from ..engine.registry import get_engine
from ..engine.results import OverallStatus, SimulationResult
from ..llm.extractor import ParameterExtractor
from ..llm.parameter_parser import parse_llm_response

router = APIRouter(tags=["simulation"])

# Singleton — the engine holds no state
engine = get_engine("pipe")


class DesignRequest(BaseModel):
    text: str
    domain: str = "pipe"


def _dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json", exclude_none=True)


async def _read_body(request: Request) -> str:
    body = (await request.body()).decode("utf-8", errors="replace")
    if not body.strip():
        raise HTTPException(status_code=400, detail="Request body is empty.")
    try:
        parse_document(body)
    except SchemaParseError as e:
        raise HTTPException(status_code=400, detail=f"Invalid DesignSchema JSON: {e}")
    return body


@router.post("/validate")
async def validate(request: Request):
    """Import with conservative defaults and report every violation."""
    body = await _read_body(request)
    schema, outcome = import_from_json(body)
    return {
        "is_valid": outcome.valid,
        "errors": outcome.errors,
        "schema": _dump(schema) if schema is not None else None,
    }


@router.post("/simulate")
async def simulate(request: Request):
    """
    Run the engine on a DesignSchema body.

    The body is always re-validated (without defaults) — a client-supplied
    is_validated flag is not trusted. Invalid input → 422 with an ERROR result.
    """
    body = await _read_body(request)
    schema, outcome = import_from_json(body, apply_conservative_defaults=False)

    if schema is None or not outcome.valid:
        pipe_id = schema.pipe.id if schema is not None and schema.pipe is not None else ""
        error = SimulationResult.error(
            pipe_id or "UNKNOWN",
            f"Validation failed: {', '.join(outcome.errors)}",
        )
        return JSONResponse(status_code=422, content=_dump(error))

    result = engine.run(schema)
    return JSONResponse(content=_dump(result))


@router.post("/design")
def design(request: DesignRequest):
    """
    Full pipeline from a natural-language description.

    Extraction and validation failures come back with success=False and an
    error_message, never as a 500.
    """
    try:
        domain_engine = get_engine(request.domain)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not request.text or not request.text.strip():
        return _design_failure("Input text is empty.")

    llm_text = ParameterExtractor().extract(request.text)
    if llm_text is None:
        return _design_failure("Parameter extraction call failed.")

    schema, parse_error = parse_llm_response(llm_text)
    if schema is None:
        return _design_failure(f"Parameter parsing failed: {parse_error}")
    if not schema.is_validated:
        return _design_failure(parse_error or "Validation failed.", schema=_dump(schema))

    result = domain_engine.run(schema)
    return {
        "success": result.overall_status != OverallStatus.ERROR,
        "overall_status": result.overall_status.value,
        "schema": _dump(schema),
        "result": _dump(result),
        "natural_summary": to_natural_language_summary(result),
        "error_message": result.error_reason,
    }


def _design_failure(message: str, schema: Optional[dict] = None) -> dict:
    return {
        "success": False,
        "overall_status": OverallStatus.ERROR.value,
        "schema": schema,
        "result": None,
        "natural_summary": None,
        "error_message": message,
    }
