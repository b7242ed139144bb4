"""Registration wizard - the four-step intake that feeds the lead scorer.

The wizard owns one applicant's identity fields and their LeadAnswers while
registration is in progress. Steps move strictly one at a time; each step
must be complete before ``advance()`` moves on. ``submit()`` on the last
step creates the account, scores the answers once and attaches the score
to the new profile.
"""

import logging
import re
import threading
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Optional, Dict, Any, Callable

from ..core.answers import LeadAnswers, coerce_answer
from ..core.scorer import LeadScorer, ScoringResult
from .collaborators import CredentialProvider, ProfileStore
from .errors import (
    AccountCreationError,
    IntakeClosedError,
    IntakeValidationError,
    SubmissionInProgressError,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class IntakeStep(IntEnum):
    """Wizard steps, in order."""

    IDENTITY = 1
    INVESTMENT_GOALS = 2
    FINANCIAL_CAPACITY = 3
    RISK_PROFILE = 4

    @property
    def title(self) -> str:
        return self.name.replace("_", " ").title()


class SubmissionState(Enum):
    """Lifecycle of the final submit action."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


class SubmissionOutcome(Enum):
    """How a successful submission went."""

    SUCCESS = "success"
    SUCCEEDED_WITH_WARNING = "succeeded_with_warning"  # account created, profile not updated


@dataclass(frozen=True)
class ApplicantIdentity:
    """Credential fields collected on step 1. Not part of the scored answers."""

    name: str = ""
    email: str = ""
    password: str = ""


IDENTITY_FIELDS = ("name", "email", "password")


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a submission that created an account."""

    outcome: SubmissionOutcome
    account_id: str
    result: ScoringResult
    profile_error: Optional[str] = None

    @property
    def has_warning(self) -> bool:
        return self.outcome == SubmissionOutcome.SUCCEEDED_WITH_WARNING


class IntakeSession:
    """State machine for one applicant's registration."""

    def __init__(
        self,
        credentials: CredentialProvider,
        profiles: ProfileStore,
        scorer: Optional[LeadScorer] = None,
    ):
        self.credentials = credentials
        self.profiles = profiles
        self.scorer = scorer or LeadScorer()

        self.identity = ApplicantIdentity()
        self.answers = LeadAnswers()
        self.submission_state = SubmissionState.IDLE
        self.error: Optional[str] = None
        self.result: Optional[SubmissionResult] = None

        self._step = IntakeStep.IDENTITY
        self._submit_lock = threading.Lock()
        self._validators: Dict[IntakeStep, Callable[[], None]] = {
            IntakeStep.IDENTITY: self._validate_identity,
            IntakeStep.INVESTMENT_GOALS: lambda: None,  # forced choices, always complete
            IntakeStep.FINANCIAL_CAPACITY: self._validate_capital,
            IntakeStep.RISK_PROFILE: lambda: None,
        }

    @property
    def current_step(self) -> IntakeStep:
        return self._step

    def update_answer(self, key: str, value: Any):
        """Set one identity field or answer.

        Raises IntakeValidationError for unknown keys or invalid values;
        nothing is changed in that case.
        """
        self._ensure_editable()

        if key in IDENTITY_FIELDS:
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise IntakeValidationError(f"{key} must be text", field=key)
            self.identity = replace(self.identity, **{key: value})
            return

        try:
            coerced = coerce_answer(key, value)
        except ValueError as e:
            raise IntakeValidationError(str(e), field=key) from e
        self.answers = replace(self.answers, **{key: coerced})

    def validate_step(self, step: Optional[IntakeStep] = None):
        """Raise IntakeValidationError if the step can't be left yet."""
        self._validators[step or self._step]()

    def advance(self) -> IntakeStep:
        """Move to the next step if the current one is complete."""
        self._ensure_editable()
        if self._step == IntakeStep.RISK_PROFILE:
            raise IntakeValidationError("Already on the last step; submit instead")
        self.validate_step()
        self._step = IntakeStep(self._step + 1)
        self.error = None
        return self._step

    def go_back(self) -> IntakeStep:
        """Move to the previous step. Answers are kept."""
        self._ensure_editable()
        if self._step == IntakeStep.IDENTITY:
            raise IntakeValidationError("Already on the first step")
        self._step = IntakeStep(self._step - 1)
        return self._step

    def submit(self) -> SubmissionResult:
        """Create the account, score the answers and store the score.

        Raises AccountCreationError if the account couldn't be created;
        the wizard stays on the last step with every answer intact so the
        applicant can retry. A failed profile update doesn't fail the
        submission; it is reported on the result instead.
        """
        if not self._submit_lock.acquire(blocking=False):
            raise SubmissionInProgressError("Submission already in progress")
        try:
            return self._submit()
        finally:
            self._submit_lock.release()

    def _submit(self) -> SubmissionResult:
        if self.submission_state == SubmissionState.COMPLETED:
            raise IntakeClosedError("Registration already submitted")
        if self._step != IntakeStep.RISK_PROFILE:
            raise IntakeValidationError("Complete every step before submitting")
        self._validate_identity()

        self.submission_state = SubmissionState.IN_FLIGHT
        self.error = None
        identity = self.identity

        try:
            account_id = self.credentials.create_account(
                identity.email.strip(), identity.password, identity.name.strip()
            )
        except AccountCreationError as e:
            self.submission_state = SubmissionState.FAILED
            self.error = str(e) or "Registration failed"
            logger.info(f"Account creation failed for {identity.email}: {self.error}")
            raise
        except Exception:
            self.submission_state = SubmissionState.FAILED
            self.error = "Registration failed"
            raise

        result = self.scorer.score(self.answers)

        profile_error = None
        try:
            self.profiles.update_profile(account_id, result, self.answers.to_dict())
        except Exception as e:
            profile_error = str(e) or e.__class__.__name__
            logger.warning(f"Profile update failed for account {account_id}: {profile_error}")

        outcome = (
            SubmissionOutcome.SUCCEEDED_WITH_WARNING if profile_error
            else SubmissionOutcome.SUCCESS
        )
        self.result = SubmissionResult(
            outcome=outcome,
            account_id=account_id,
            result=result,
            profile_error=profile_error,
        )
        self.submission_state = SubmissionState.COMPLETED
        logger.info(
            f"Registered account {account_id}: score={result.score} "
            f"priority={result.priority.value}"
        )
        return self.result

    def to_dict(self) -> Dict[str, Any]:
        """Wizard state for display. The password is never included."""
        return {
            "step": int(self._step),
            "step_name": self._step.title,
            "identity": {
                "name": self.identity.name,
                "email": self.identity.email,
                "has_password": bool(self.identity.password),
            },
            "answers": self.answers.to_dict(),
            "submission_state": self.submission_state.value,
            "error": self.error,
        }

    def _ensure_editable(self):
        if self.submission_state == SubmissionState.IN_FLIGHT:
            raise SubmissionInProgressError("Submission already in progress")
        if self.submission_state == SubmissionState.COMPLETED:
            raise IntakeClosedError("Registration already submitted")

    def _validate_identity(self):
        identity = self.identity
        if not identity.name.strip():
            raise IntakeValidationError("Full name is required", field="name")
        if not identity.email.strip():
            raise IntakeValidationError("Email is required", field="email")
        if not EMAIL_PATTERN.match(identity.email.strip()):
            raise IntakeValidationError("Invalid email format", field="email")
        if not identity.password:
            raise IntakeValidationError("Password is required", field="password")
        min_length = self.credentials.min_password_length
        if len(identity.password) < min_length:
            raise IntakeValidationError(
                f"Password must be at least {min_length} characters", field="password"
            )

    def _validate_capital(self):
        answers = self.answers
        if answers.capital_type.uses_cash and answers.cash_amount is None:
            raise IntakeValidationError(
                "Select your available cash capital", field="cash_amount"
            )
