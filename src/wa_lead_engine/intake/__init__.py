"""Registration wizard that collects and submits investor profiles."""

from .wizard import (
    IntakeSession,
    IntakeStep,
    SubmissionState,
    SubmissionOutcome,
    SubmissionResult,
    ApplicantIdentity,
)
from .collaborators import CredentialProvider, ProfileStore
from .errors import (
    IntakeError,
    IntakeValidationError,
    SubmissionInProgressError,
    IntakeClosedError,
    CollaboratorError,
    AccountCreationError,
    ProfileUpdateError,
)

__all__ = [
    "IntakeSession",
    "IntakeStep",
    "SubmissionState",
    "SubmissionOutcome",
    "SubmissionResult",
    "ApplicantIdentity",
    "CredentialProvider",
    "ProfileStore",
    "IntakeError",
    "IntakeValidationError",
    "SubmissionInProgressError",
    "IntakeClosedError",
    "CollaboratorError",
    "AccountCreationError",
    "ProfileUpdateError",
]
