"""Admin dashboard routes for triaging registered investors."""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ...core.scorer import Priority
from ...storage.database import LeadDatabase
from ..middleware.auth import verify_signature
from ..services.database import get_database

router = APIRouter(
    prefix="/v1/admin",
    tags=["dashboard"],
    dependencies=[Depends(verify_signature)],
)


@router.get("/profiles")
async def list_profiles(
    priority: Optional[str] = None,
    limit: int = Query(default=50, le=500),
    offset: int = 0,
    db: LeadDatabase = Depends(get_database),
):
    """List investor profiles, highest lead score first."""
    tier = None
    if priority:
        try:
            tier = Priority(priority.upper())
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail={
                    "success": False,
                    "error": "validation_error",
                    "detail": f"Invalid priority. Must be one of: {[p.value for p in Priority]}",
                },
            )
    profiles = db.list_profiles(priority=tier, limit=limit, offset=offset)
    return {"profiles": [p.to_dict() for p in profiles], "count": len(profiles)}


@router.get("/profiles/{account_id}")
async def get_profile(account_id: str, db: LeadDatabase = Depends(get_database)):
    """Get a single investor profile."""
    profile = db.get_profile(account_id)
    if not profile:
        raise HTTPException(
            status_code=404,
            detail={"success": False, "error": "not_found", "detail": "Profile not found"},
        )
    return {"profile": profile.to_dict()}


@router.get("/leads")
async def list_leads(
    limit: int = Query(default=50, le=500),
    offset: int = 0,
    db: LeadDatabase = Depends(get_database),
):
    """List contact-form leads, newest first."""
    leads = db.list_leads(limit=limit, offset=offset)
    return {"leads": [lead.to_dict() for lead in leads], "count": len(leads)}


@router.get("/stats")
async def stats(db: LeadDatabase = Depends(get_database)):
    """Counts by priority plus lead and opportunity totals."""
    return db.get_stats()
