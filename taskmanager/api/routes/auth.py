"""Auth endpoints: login, register, forgot-password, reset-password."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from taskmanager.api.deps import get_auth_service, parse_body
from taskmanager.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from taskmanager.services.auth import AuthService
from taskmanager.services.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    PersistenceError,
    TooManyAttemptsError,
)

router = APIRouter()

# Same body whether or not the account exists or the email was delivered.
FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)


@router.post("/login", response_model=TokenResponse)
def login(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    body: Annotated[Any, Body()] = None,
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    req = parse_body(LoginRequest, body)
    try:
        token = auth.login(req.email, req.password)
    except TooManyAttemptsError as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=e.message) from e
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    return TokenResponse(token=token)


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    body: Annotated[Any, Body()] = None,
) -> MessageResponse:
    """Create an account. Username and email must both be unused."""
    req = parse_body(RegisterRequest, body)
    try:
        auth.register(req.username, req.email, req.password, req.roles)
    except DuplicateIdentityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
        ) from e
    return MessageResponse(message="User registered successfully!")


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    body: Annotated[Any, Body()] = None,
) -> MessageResponse:
    """Email a reset link if the account exists. The response never says whether it does."""
    req = parse_body(ForgotPasswordRequest, body)
    auth.forgot_password(req.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    auth: Annotated[AuthService, Depends(get_auth_service)],
    body: Annotated[Any, Body()] = None,
) -> MessageResponse:
    """Redeem a reset token and set a new password. Each token works once."""
    req = parse_body(ResetPasswordRequest, body)
    try:
        auth.reset_password(req.token, req.password)
    except InvalidOrExpiredTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
        ) from e
    return MessageResponse(message="Password has been reset successfully.")
