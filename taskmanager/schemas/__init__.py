"""Pydantic request/response schemas."""

from taskmanager.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from taskmanager.schemas.health import HealthResponse
from taskmanager.schemas.task import TaskRead, TaskWrite
from taskmanager.schemas.validation import Invalid, Ok, validate_payload

__all__ = [
    "ForgotPasswordRequest",
    "HealthResponse",
    "Invalid",
    "LoginRequest",
    "MessageResponse",
    "Ok",
    "RegisterRequest",
    "ResetPasswordRequest",
    "TaskRead",
    "TaskWrite",
    "TokenResponse",
    "validate_payload",
]
