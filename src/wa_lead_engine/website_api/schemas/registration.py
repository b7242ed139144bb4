"""Pydantic models for the registration wizard API."""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class AnswerUpdate(BaseModel):
    key: str = Field(..., description="Identity field (name, email, password) or answer name")
    value: Any = None


class IdentityState(BaseModel):
    name: str = ""
    email: str = ""
    has_password: bool = False


class RegistrationState(BaseModel):
    session_id: str
    step: int
    step_name: str
    identity: IdentityState
    answers: Dict[str, Any]
    submission_state: str
    error: Optional[str] = None


class SubmissionResponse(BaseModel):
    success: bool = True
    outcome: str
    account_id: str
    score: int
    priority: str
    warning: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    detail: str
