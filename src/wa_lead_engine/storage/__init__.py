"""Storage layer for accounts, profiles, leads and opportunities."""

from .database import LeadDatabase
from .models import (
    Profile, MembershipTier, ContactLead, CrmStatus, Opportunity, OpportunityStatus,
)

__all__ = [
    "LeadDatabase",
    "Profile",
    "MembershipTier",
    "ContactLead",
    "CrmStatus",
    "Opportunity",
    "OpportunityStatus",
]
