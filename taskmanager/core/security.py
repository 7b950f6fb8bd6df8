"""Password hashing and JWT issuance/verification for authentication."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from taskmanager.core.config import settings

logger = logging.getLogger(__name__)

# Min/max lengths for request validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 100
EMAIL_MAX_LEN = 50

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


@lru_cache
def dummy_password_hash() -> str:
    """Hash checked against when the account does not exist, so both paths pay for bcrypt."""
    return hash_password("not-a-real-password")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenCodec:
    """
    Issues and verifies HS256 bearer tokens whose subject is the user's email.

    Holds no mutable state beyond its configuration, so one instance can be
    shared by every request. Verification helpers never raise: any failure
    (malformed token, bad signature, missing claims) reads as "no subject"
    and "expired".
    """

    def __init__(
        self,
        secret: str,
        expiration_ms: int,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        self._secret = secret
        self.expiration_ms = expiration_ms
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, subject_email: str) -> str:
        """Create a token with sub and email claims set to subject_email, plus iat and exp."""
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": subject_email,
            "email": subject_email,
            "iat": now,
            # PyJWT truncates datetime claims to whole seconds; a float keeps the milliseconds.
            "exp": (now + timedelta(milliseconds=self.expiration_ms)).timestamp(),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def _decode(self, token: str) -> dict[str, Any] | None:
        # Expiry is checked against our own clock, not PyJWT's.
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except jwt.PyJWTError as e:
            logger.debug("Token verification failed: %s", e)
            return None

    def _expired(self, payload: dict[str, Any]) -> bool:
        exp = payload.get("exp")
        if not isinstance(exp, (int, float)):
            return True
        return exp < self._clock().timestamp()

    def _verified_claim(self, token: str, claim: str) -> str | None:
        payload = self._decode(token)
        if payload is None or self._expired(payload):
            return None
        value = payload.get(claim)
        return value if isinstance(value, str) else None

    def verify_subject(self, token: str) -> str | None:
        """Return the subject (email) of a valid, unexpired token, else None."""
        return self._verified_claim(token, "sub")

    def get_email(self, token: str) -> str | None:
        """Return the email claim of a valid, unexpired token, else None."""
        return self._verified_claim(token, "email")

    def is_expired(self, token: str) -> bool:
        """True if the token fails verification or its exp is in the past."""
        payload = self._decode(token)
        if payload is None:
            return True
        return self._expired(payload)

    def validate(self, token: str, expected_identity: str) -> bool:
        """True iff the token's subject equals expected_identity and it has not expired."""
        subject = self.verify_subject(token)
        return subject is not None and subject == expected_identity and not self.is_expired(token)


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide codec built from settings (cached)."""
    return TokenCodec(
        secret=settings.JWT_SECRET.get_secret_value(),
        expiration_ms=settings.JWT_EXPIRATION_MS,
        algorithm=settings.JWT_ALGORITHM,
    )
