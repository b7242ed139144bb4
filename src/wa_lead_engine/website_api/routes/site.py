"""Public site routes: contact form and opportunity listings."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ...integrations.crm import CrmConfig, CrmIntegration
from ...storage.database import LeadDatabase
from ...storage.models import Opportunity
from ..config import settings
from ..middleware.auth import verify_signature
from ..schemas.registration import ErrorResponse
from ..schemas.site import ContactRequest, ContactResponse, OpportunityCreate
from ..services.database import get_database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["site"])


def _validation_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"success": False, "error": "validation_error", "detail": detail},
    )


async def _read_json(request: Request) -> dict:
    try:
        body = await request.json()
    except Exception:
        raise _validation_error("Invalid JSON body")
    if not isinstance(body, dict):
        raise _validation_error("Invalid JSON body")
    return body


def get_crm() -> CrmIntegration:
    return CrmIntegration(CrmConfig(webhook_url=settings.crm_webhook_url))


@router.post(
    "/contact",
    response_model=ContactResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def contact(
    request: Request,
    db: LeadDatabase = Depends(get_database),
    crm: CrmIntegration = Depends(get_crm),
):
    """Store a contact-form lead and forward it to the CRM."""
    body = await _read_json(request)
    try:
        payload = ContactRequest(**body)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise _validation_error(f"Name and Email are required ({fields})")

    try:
        lead = db.add_lead(
            name=payload.name.strip(),
            email=str(payload.email),
            message=payload.message,
            interest=payload.interest,
        )
    except Exception:
        logger.exception("Failed to save lead")
        raise HTTPException(
            status_code=500,
            detail={"success": False, "error": "server_error", "detail": "Failed to save lead"},
        )

    crm_status = crm.forward_lead(lead)
    db.set_lead_crm_status(lead.id, crm_status)

    return ContactResponse(success=True, lead_id=lead.id, crm_integration=crm_status.value)


@router.get("/opportunities")
async def list_opportunities(db: LeadDatabase = Depends(get_database)):
    """List opportunities, newest first."""
    return {"success": True, "data": [o.to_dict() for o in db.list_opportunities()]}


@router.post(
    "/opportunities",
    status_code=201,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_opportunity(
    request: Request,
    _auth=Depends(verify_signature),
    db: LeadDatabase = Depends(get_database),
):
    """Create an opportunity (admin only)."""
    body = await _read_json(request)
    try:
        payload = OpportunityCreate(**body)
    except ValidationError:
        raise _validation_error("Title and Investment Amount are required")

    try:
        opportunity = db.add_opportunity(Opportunity(**payload.model_dump()))
    except ValueError as e:
        raise _validation_error(str(e))

    return {"success": True, "data": opportunity.to_dict()}
