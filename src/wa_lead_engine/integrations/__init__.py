"""Integrations with external services and CRMs."""

from .crm import CrmIntegration, CrmConfig, forward_lead

__all__ = [
    "CrmIntegration",
    "CrmConfig",
    "forward_lead",
]
