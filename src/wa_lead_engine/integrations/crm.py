"""CRM webhook integration for contact-form leads."""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

import requests

from ..storage.models import ContactLead, CrmStatus

logger = logging.getLogger(__name__)

LEAD_SOURCE = "wealthassist-website"

INTEREST_TAGS = {
    "investor": "investor-interest",
    "owner": "property-owner-interest",
}
DEFAULT_TAG = "website-lead"


@dataclass
class CrmConfig:
    """CRM "inbound webhook" configuration."""

    webhook_url: Optional[str] = None
    timeout_seconds: int = 10
    enabled: bool = True


def tags_for_interest(interest: Optional[str]) -> List[str]:
    """CRM tags for the interest path picked on the contact form."""
    return [INTEREST_TAGS.get(interest or "", DEFAULT_TAG)]


def build_payload(lead: ContactLead) -> Dict[str, Any]:
    """Payload the CRM workflow expects for a new website lead."""
    return {
        "name": lead.name,
        "email": lead.email,
        "message": lead.message,
        "tags": tags_for_interest(lead.interest),
        "source": LEAD_SOURCE,
        "customData": {
            "interest_path": lead.interest,
            "db_id": lead.id,
        },
    }


class CrmIntegration:
    """Forward contact leads to the CRM's inbound webhook.

    Forwarding is best effort: the lead is already stored, so a CRM
    outage is reported through the returned status rather than raised.
    """

    def __init__(self, config: CrmConfig):
        self.config = config

    def forward_lead(self, lead: ContactLead) -> CrmStatus:
        """Send a lead to the CRM and report how it went."""
        if not self.config.enabled or not self.config.webhook_url:
            return CrmStatus.SKIPPED

        try:
            response = requests.post(
                self.config.webhook_url,
                json=build_payload(lead),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"CRM connection error: {e}")
            return CrmStatus.ERROR

        if response.ok:
            logger.info(f"Lead {lead.id} forwarded to CRM")
            return CrmStatus.SUCCESS

        logger.error(f"CRM webhook failed: {response.status_code} {response.text}")
        return CrmStatus.FAILED


def forward_lead(lead: ContactLead, webhook_url: Optional[str]) -> CrmStatus:
    """Quick helper to forward a lead with default settings."""
    return CrmIntegration(CrmConfig(webhook_url=webhook_url)).forward_lead(lead)
