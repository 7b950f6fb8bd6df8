"""Password reset lifecycle: issue single-use, time-bounded tokens and redeem them once."""

import logging
import uuid
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskmanager.core.security import Clock, hash_password, utc_now
from taskmanager.models import PasswordResetToken
from taskmanager.services.errors import InvalidOrExpiredTokenError, PersistenceError
from taskmanager.services.interfaces import CredentialStore, MailDispatcher, ResetTokenStore
from taskmanager.services.throttle import LoginThrottle

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_MINUTES = 60


class PasswordResetService:
    """
    Issues and redeems password reset tokens.

    Each user has at most one active token: a new request locks the user row
    and deletes the previous one. Expired tokens are never swept, they simply
    stop matching. Redemption claims the token with a conditional delete inside
    the same transaction as the password update, so a token can succeed only
    once.
    """

    def __init__(
        self,
        db: Session,
        users: CredentialStore,
        reset_tokens: ResetTokenStore,
        mailer: MailDispatcher,
        throttle: LoginThrottle,
        ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
        clock: Clock = utc_now,
    ) -> None:
        self._db = db
        self._users = users
        self._reset_tokens = reset_tokens
        self._mailer = mailer
        self._throttle = throttle
        self._ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock

    def request_reset(self, email: str) -> str | None:
        """
        Issue a token for email and mail the reset link.

        Returns the new token, or None when the email is unknown or the token
        could not be stored. Callers must not reveal which case occurred.
        """
        user = self._users.find_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None

        now = self._clock()
        record = PasswordResetToken(
            token=str(uuid.uuid4()),
            user_id=user.id,
            expiry_date=now + self._ttl,
        )
        try:
            # Concurrent requests for one user queue here, so the lookup below sees the other's token.
            self._users.lock(user.id)
            existing = self._reset_tokens.find_active_for_user(user.id, now)
            if existing is not None:
                self._reset_tokens.delete(existing)
            self._reset_tokens.save(record)
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            logger.exception("Failed to store password reset token for user_id=%s", user.id)
            return None

        logger.info(
            "Password reset token issued",
            extra={"user_id": user.id, "superseded": existing is not None},
        )
        self._mailer.send_password_reset_email(user.email, record.token)
        return record.token

    def redeem(self, token: str, new_password: str) -> None:
        """Set a new password using token; raises InvalidOrExpiredTokenError if it is not redeemable."""
        now = self._clock()
        record = self._reset_tokens.find_active_by_token(token, now)
        if record is None:
            raise InvalidOrExpiredTokenError()

        record_id, user_id = record.id, record.user_id
        new_hash = hash_password(new_password)
        try:
            if not self._reset_tokens.claim(record_id, now):
                self._db.rollback()
                raise InvalidOrExpiredTokenError()
            user = self._users.get(user_id)
            if user is None:
                self._db.rollback()
                raise InvalidOrExpiredTokenError()
            user.password_hash = new_hash
            self._users.save(user)
            email = user.email
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.exception("Failed to reset password for user_id=%s", user_id)
            raise PersistenceError() from e

        # A completed reset also lifts any login block on the account.
        self._throttle.record_success(email)
        logger.info("Password reset completed", extra={"user_id": user_id})
