from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .parametric.models import SCHEMA_VERSION
from .routers import simulation

logger = logging.getLogger("structflow")

app = FastAPI(
    title="StructFlow Simulation API",
    description="Drainage pipe hydraulic and structural design checks",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ALLOW_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(simulation.router, prefix="/api")


@app.get("/")
def index():
    return {
        "service": "StructFlow Simulation API",
        "version": app.version,
        "endpoints": ["POST /api/simulate", "POST /api/validate", "POST /api/design", "GET /health"],
    }


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.on_event("startup")
def log_startup():
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set — /api/design will report extraction failures")
    logger.info("StructFlow API started (schema version %s)", SCHEMA_VERSION)
