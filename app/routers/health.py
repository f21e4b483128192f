# app/routers/health.py

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "movimientos-api",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check - the stores are wired once the lifespan has run."""
    state = request.app.state
    checks = {
        name: "ok" if getattr(state, name, None) is not None else "missing"
        for name in ("movement_store", "ledger_store", "concept_catalog")
    }
    return {
        "status": "ready" if all(v == "ok" for v in checks.values()) else "starting",
        "checks": checks,
    }
