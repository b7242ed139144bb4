"""Contracts for the services the registration wizard submits to."""

from abc import ABC, abstractmethod
from typing import Dict, Any

from ..core.scorer import ScoringResult

DEFAULT_MIN_PASSWORD_LENGTH = 6


class CredentialProvider(ABC):
    """Creates applicant accounts."""

    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH

    @abstractmethod
    def create_account(self, email: str, password: str, display_name: str) -> str:
        """Create an account and return its id.

        Raises AccountCreationError (e.g. for a duplicate email).
        """
        pass


class ProfileStore(ABC):
    """Stores the lead score against an account's profile."""

    @abstractmethod
    def update_profile(
        self,
        account_id: str,
        result: ScoringResult,
        raw_answers: Dict[str, Any],
    ) -> None:
        """Attach score, priority and raw answers to the profile.

        Raises ProfileUpdateError on failure.
        """
        pass
