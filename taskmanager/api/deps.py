"""Shared route dependencies: service wiring, current user and explicit body validation."""

from typing import Annotated, Any, TypeVar

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from taskmanager.core.config import Settings, get_settings
from taskmanager.core.database import get_db
from taskmanager.core.security import TokenCodec, get_token_codec
from taskmanager.models import User
from taskmanager.schemas.validation import Invalid, validate_payload
from taskmanager.services.auth import AuthService
from taskmanager.services.mailer import SmtpMailDispatcher, get_mail_dispatcher
from taskmanager.services.throttle import LoginThrottle, get_login_throttle

ModelT = TypeVar("ModelT", bound=BaseModel)

security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    throttle: Annotated[LoginThrottle, Depends(get_login_throttle)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    mailer: Annotated[SmtpMailDispatcher, Depends(get_mail_dispatcher)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    """Build an AuthService for this request's DB session."""
    return AuthService.for_session(db, throttle, codec, mailer, settings)


def parse_body(model: type[ModelT], body: Any) -> ModelT:
    """Validate body against model; raise 400 with per-field messages if it does not fit."""
    result = validate_payload(model, body)
    if isinstance(result, Invalid):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Validation failed.", "errors": result.errors},
        )
    return result.value


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Dependency: require a valid Bearer JWT and return its user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = auth.user_for_token(credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
