"""Registration wizard routes.

The website drives one IntakeSession per applicant through these endpoints:
create a session, update answers, move between steps and finally submit.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from ...intake.errors import (
    AccountCreationError,
    IntakeClosedError,
    IntakeValidationError,
    SubmissionInProgressError,
)
from ...intake.wizard import IntakeSession
from ...storage.database import LeadDatabase
from ..schemas.registration import (
    AnswerUpdate, RegistrationState, SubmissionResponse, ErrorResponse,
)
from ..services.database import get_database
from ..services.registrations import RegistrationRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/registrations", tags=["registration"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def _error(status_code: int, error: str, detail: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"success": False, "error": error, "detail": detail},
    )


def _state(session_id: str, session: IntakeSession) -> RegistrationState:
    return RegistrationState(session_id=session_id, **session.to_dict())


def _get_session(session_id: str, registry: RegistrationRegistry) -> IntakeSession:
    try:
        return registry.get(session_id)
    except KeyError:
        raise _error(404, "not_found", "Registration session not found or expired")


def _run_step(session_id: str, registry: RegistrationRegistry, action) -> RegistrationState:
    session = _get_session(session_id, registry)
    try:
        action(session)
    except IntakeValidationError as e:
        raise _error(400, "validation_error", str(e))
    except SubmissionInProgressError as e:
        raise _error(409, "submission_in_progress", str(e))
    except IntakeClosedError as e:
        raise _error(409, "already_submitted", str(e))
    return _state(session_id, session)


@router.post("", response_model=RegistrationState, status_code=201)
async def start_registration(
    db: LeadDatabase = Depends(get_database),
    registry: RegistrationRegistry = Depends(get_registry),
):
    """Start a new registration wizard on step 1."""
    session_id, session = registry.create(db)
    return _state(session_id, session)


@router.get("/{session_id}", response_model=RegistrationState, responses=ERROR_RESPONSES)
async def get_registration(
    session_id: str,
    registry: RegistrationRegistry = Depends(get_registry),
):
    """Current step, answers and submission state."""
    return _state(session_id, _get_session(session_id, registry))


@router.patch("/{session_id}/answers", response_model=RegistrationState, responses=ERROR_RESPONSES)
async def update_answer(
    session_id: str,
    payload: AnswerUpdate,
    registry: RegistrationRegistry = Depends(get_registry),
):
    """Set one identity field or answer."""
    return _run_step(
        session_id, registry,
        lambda session: session.update_answer(payload.key, payload.value),
    )


@router.post("/{session_id}/next", response_model=RegistrationState, responses=ERROR_RESPONSES)
async def next_step(
    session_id: str,
    registry: RegistrationRegistry = Depends(get_registry),
):
    """Advance if the current step is complete."""
    return _run_step(session_id, registry, lambda session: session.advance())


@router.post("/{session_id}/back", response_model=RegistrationState, responses=ERROR_RESPONSES)
async def previous_step(
    session_id: str,
    registry: RegistrationRegistry = Depends(get_registry),
):
    """Go back one step, keeping every answer."""
    return _run_step(session_id, registry, lambda session: session.go_back())


@router.post(
    "/{session_id}/submit",
    response_model=SubmissionResponse,
    responses={**ERROR_RESPONSES, 422: {"model": ErrorResponse}},
)
def submit_registration(
    session_id: str,
    registry: RegistrationRegistry = Depends(get_registry),
):
    """Create the account and attach the lead score.

    A failed account creation keeps the session on the last step so the
    applicant can fix their details and submit again. Declared sync so
    password hashing runs in the threadpool, not on the event loop.
    """
    session = _get_session(session_id, registry)
    try:
        submission = session.submit()
    except IntakeValidationError as e:
        raise _error(400, "validation_error", str(e))
    except SubmissionInProgressError as e:
        raise _error(409, "submission_in_progress", str(e))
    except IntakeClosedError as e:
        raise _error(409, "already_submitted", str(e))
    except AccountCreationError as e:
        raise _error(422, "account_creation_failed", str(e) or "Registration failed")
    except Exception:
        logger.exception("Registration submit error")
        raise _error(500, "server_error", "Internal processing error")

    return SubmissionResponse(
        outcome=submission.outcome.value,
        account_id=submission.account_id,
        score=submission.result.score,
        priority=submission.result.priority.value,
        warning=submission.profile_error,
    )
