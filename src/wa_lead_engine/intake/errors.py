"""Exceptions raised by the registration wizard and its collaborators."""


class IntakeError(Exception):
    """Base exception for the intake flow."""
    pass


class IntakeValidationError(IntakeError):
    """Raised when the current step is incomplete or an answer is invalid."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class SubmissionInProgressError(IntakeError):
    """Raised when the wizard is touched while a submission is in flight."""
    pass


class IntakeClosedError(IntakeError):
    """Raised when the wizard is touched after a completed submission."""
    pass


class CollaboratorError(IntakeError):
    """Base for failures reported by the account or profile collaborators."""
    pass


class AccountCreationError(CollaboratorError):
    """Account could not be created; nothing was submitted."""
    pass


class ProfileUpdateError(CollaboratorError):
    """Account exists but the score could not be attached to its profile."""
    pass
