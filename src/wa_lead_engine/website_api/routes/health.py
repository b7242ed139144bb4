"""Liveness and readiness probes."""

from fastapi import APIRouter

from ... import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "service": "wa-lead-engine-api", "version": __version__}


@router.get("/ready")
async def ready():
    """Ready once the lead database answers a stats query."""
    from ..services.database import get_database

    try:
        get_database().get_stats()
    except Exception as e:
        return {"status": "not_ready", "detail": str(e)}
    return {"status": "ready"}
