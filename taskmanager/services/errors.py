"""Domain errors raised by the auth services and translated to HTTP responses by the routes."""


class AuthServiceError(Exception):
    """Base class for auth and credential-lifecycle failures."""

    default_message = "Authentication error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateIdentityError(AuthServiceError):
    """Raised when registering a username or email that is already taken."""

    default_message = "Username or email is already in use."


class InvalidCredentialsError(AuthServiceError):
    """Raised for an unknown email or a wrong password; the two are indistinguishable."""

    default_message = "Invalid email or password."


class TooManyAttemptsError(AuthServiceError):
    """Raised when the email has reached the failed-login threshold."""

    default_message = "Too many failed login attempts. Reset your password to continue."


class InvalidOrExpiredTokenError(AuthServiceError):
    """Raised when a password reset token is unknown, expired or already used."""

    default_message = "Invalid or expired password reset token."


class PersistenceError(AuthServiceError):
    """Raised for unexpected database failures; the cause is logged, not exposed."""

    default_message = "An unexpected error occurred. Please try again later."
