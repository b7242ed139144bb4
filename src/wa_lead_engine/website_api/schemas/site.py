"""Pydantic models for the contact form and opportunity listings."""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from ...storage.models import OpportunityStatus


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    message: Optional[str] = Field(default=None, max_length=5000)
    interest: Optional[str] = Field(
        default=None,
        description="Interest path picked on the form: investor, owner or general",
    )


class ContactResponse(BaseModel):
    success: bool
    lead_id: int
    crm_integration: str


class OpportunityCreate(BaseModel):
    title: str = Field(..., min_length=1)
    investment_amount: float = Field(..., gt=0)
    suburb_or_area: Optional[str] = None
    province: Optional[str] = None
    product_type: Optional[str] = None
    status: OpportunityStatus = OpportunityStatus.AVAILABLE
    description: Optional[str] = None
