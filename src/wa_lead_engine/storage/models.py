"""Data models for account, profile, lead and opportunity storage."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from ..core.scorer import Priority


class MembershipTier(Enum):
    """Investor membership tier on a profile."""

    REGISTERED = "REGISTERED"
    ACCREDITED = "ACCREDITED"
    PREVE = "PREVE"


class OpportunityStatus(Enum):
    """Availability of an investment opportunity."""

    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"


class CrmStatus(Enum):
    """Result of forwarding a contact lead to the CRM webhook."""

    SKIPPED = "skipped"
    SUCCESS = "success"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class Profile:
    """An investor profile with its lead score."""

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    tier: MembershipTier = MembershipTier.REGISTERED
    is_admin: bool = False

    # Scoring
    lead_score: int = 0
    lead_priority: Priority = Priority.COLD
    onboarding_answers_json: Optional[str] = None

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def onboarding_answers(self) -> Dict[str, Any]:
        if not self.onboarding_answers_json:
            return {}
        return json.loads(self.onboarding_answers_json)

    @property
    def display_name(self) -> str:
        """Get best available name for display."""
        return self.full_name or self.email or f"Investor {self.id[:8]}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "tier": self.tier.value,
            "is_admin": self.is_admin,
            "lead_score": self.lead_score,
            "lead_priority": self.lead_priority.value,
            "onboarding_answers": self.onboarding_answers,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class ContactLead:
    """A contact-form submission from the marketing site."""

    name: str
    email: str
    id: Optional[int] = None
    message: Optional[str] = None
    interest: Optional[str] = None  # "investor", "owner", ...
    status: str = "new"
    crm_status: CrmStatus = CrmStatus.SKIPPED
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "interest": self.interest,
            "status": self.status,
            "crm_status": self.crm_status.value,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class Opportunity:
    """A property investment opportunity listed on the site."""

    title: str
    investment_amount: float
    id: Optional[int] = None
    suburb_or_area: Optional[str] = None
    province: Optional[str] = None
    product_type: Optional[str] = None
    status: OpportunityStatus = OpportunityStatus.AVAILABLE
    description: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "investment_amount": self.investment_amount,
            "suburb_or_area": self.suburb_or_area,
            "province": self.province,
            "product_type": self.product_type,
            "status": self.status.value,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
