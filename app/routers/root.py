# app/routers/root.py
"""GET /: liveness banner and endpoint map for whoever is wiring up the device."""

from fastapi import APIRouter

router = APIRouter()

ENDPOINTS = {
    "raw_event": "POST /api/raw-event",
    "bin_event": "POST /api/bin-event",
    "raw_csv": "GET /api/raw-events/csv",
    "structured_csv": "GET /api/bin-events/csv",
    "raw_json": "GET /api/raw-events",
    "structured_json": "GET /api/bin-events",
    "health": "GET /health",
}


@router.get("/", summary="API status and endpoint map")
def index():
    return {
        "status": "ok",
        "message": "Smart Bin API Running",
        "endpoints": ENDPOINTS,
    }
