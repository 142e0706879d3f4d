# app/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, global error handler, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.routers import bin_events, health, raw_events, root
from app.database import create_tables
from app.config import settings
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Smart Bin Telemetry API",
    description="Stores raw and per-cycle telemetry from the smart bin controller. JSON and CSV readback.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (device firmware and dashboards post from anywhere) ────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(root.router,                      tags=["Status"])
app.include_router(health.router,                    tags=["Health"])
app.include_router(raw_events.router, prefix="/api", tags=["Raw Events"])
app.include_router(bin_events.router, prefix="/api", tags=["Bin Events"])


# ── Startup ───────────────────────────────────────────────────────────────────
def init_schema():
    """
    Create tables and indexes. A failure is logged and the API starts anyway,
    so data routes answer 500 until the database is fixed. SCHEMA_INIT_STRICT
    turns the failure into a startup abort.
    """
    try:
        create_tables()
    except Exception as e:
        logger.error(f"Database init error: {e}", exc_info=True)
        if settings.SCHEMA_INIT_STRICT:
            raise
        return False
    logger.info("Database initialized")
    return True


@app.on_event("startup")
async def startup():
    logger.info("Smart Bin API starting up...")
    init_schema()
    logger.info(f"Listening on http://{settings.HOST}:{settings.PORT} ({settings.ENVIRONMENT})")
    logger.info("RAW CSV: GET /api/raw-events/csv")
    logger.info("STRUCTURED CSV: GET /api/bin-events/csv")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Smart Bin API shutting down...")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
