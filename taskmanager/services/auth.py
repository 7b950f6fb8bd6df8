"""Auth orchestration: login with throttling, registration, password reset, token lookup."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskmanager.core.config import Settings
from taskmanager.core.security import (
    TokenCodec,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from taskmanager.models import Role, User
from taskmanager.services.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    PersistenceError,
    TooManyAttemptsError,
)
from taskmanager.services.interfaces import CredentialStore, MailDispatcher, RoleLookup
from taskmanager.services.password_reset import PasswordResetService
from taskmanager.services.repositories import (
    SqlCredentialStore,
    SqlResetTokenStore,
    SqlRoleLookup,
)
from taskmanager.services.throttle import LoginThrottle

logger = logging.getLogger(__name__)

DEFAULT_ROLE_NAME = "ROLE_USER"


class AuthService:
    """Composes credential store, throttle, token codec and reset lifecycle into the auth use cases."""

    def __init__(
        self,
        db: Session,
        users: CredentialStore,
        roles: RoleLookup,
        throttle: LoginThrottle,
        codec: TokenCodec,
        password_resets: PasswordResetService,
        default_role: str | None = DEFAULT_ROLE_NAME,
    ) -> None:
        self._db = db
        self._users = users
        self._roles = roles
        self._throttle = throttle
        self._codec = codec
        self._password_resets = password_resets
        self._default_role = default_role

    @classmethod
    def for_session(
        cls,
        db: Session,
        throttle: LoginThrottle,
        codec: TokenCodec,
        mailer: MailDispatcher,
        settings: Settings,
    ) -> "AuthService":
        """Wire the SQL-backed stores on db into a service."""
        users = SqlCredentialStore(db)
        password_resets = PasswordResetService(
            db,
            users=users,
            reset_tokens=SqlResetTokenStore(db),
            mailer=mailer,
            throttle=throttle,
            ttl_minutes=settings.PASSWORD_RESET_TOKEN_TTL_MINUTES,
        )
        return cls(
            db,
            users=users,
            roles=SqlRoleLookup(db),
            throttle=throttle,
            codec=codec,
            password_resets=password_resets,
        )

    def login(self, email: str, password: str) -> str:
        """
        Check the throttle, verify the password and return a bearer token.

        A blocked email is refused before any credential check and without
        touching its counter. Unknown email and wrong password both count as a
        failure and raise the same InvalidCredentialsError; both run one bcrypt
        check, so response time does not reveal which emails are registered.
        """
        if self._throttle.is_blocked(email):
            raise TooManyAttemptsError()

        user = self._users.find_by_email(email)
        password_hash = user.password_hash if user is not None else dummy_password_hash()
        if not verify_password(password, password_hash) or user is None:
            self._throttle.record_failure(email)
            raise InvalidCredentialsError()

        self._throttle.record_success(email)
        logger.info("Login succeeded", extra={"user_id": user.id})
        return self._codec.issue(user.email)

    def register(
        self,
        username: str,
        email: str,
        password: str,
        role_refs: list[Any] | None = None,
    ) -> User:
        """Create a user; raises DuplicateIdentityError if username or email is taken."""
        try:
            if self._users.exists_by_username(username):
                raise DuplicateIdentityError("Username is already taken.")
            if self._users.exists_by_email(email):
                raise DuplicateIdentityError("Email is already in use.")

            user = User(
                username=username,
                email=email,
                password_hash=hash_password(password),
            )
            user.roles = self.resolve_roles(role_refs)
            self._users.save(user)
            self._db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent registration for the same identity.
            self._db.rollback()
            logger.warning("Registration hit a uniqueness conflict for username=%s", username)
            raise DuplicateIdentityError() from e
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.exception("Failed to register username=%s", username)
            raise PersistenceError() from e

        logger.info(
            "User registered",
            extra={"user_id": user.id, "roles": [r.name for r in user.roles]},
        )
        return user

    def resolve_roles(self, role_refs: list[Any] | None) -> list[Role]:
        """
        Resolve {"name": ...} / {"id": ...} references (or bare names) to roles.

        Unknown or malformed references are skipped. When nothing resolves, the
        default role is attached if it exists.
        """
        resolved: dict[int, Role] = {}
        for ref in role_refs or []:
            role = self._lookup_role(ref)
            if role is None:
                logger.warning("Skipping unknown role reference %r", ref)
                continue
            resolved[role.id] = role
        if not resolved and self._default_role:
            default = self._roles.find_by_name(self._default_role)
            if default is not None:
                resolved[default.id] = default
        return list(resolved.values())

    def _lookup_role(self, ref: Any) -> Role | None:
        if isinstance(ref, str):
            return self._roles.find_by_name(ref.strip()) if ref.strip() else None
        if not isinstance(ref, dict):
            return None
        name = ref.get("name")
        if isinstance(name, str) and name.strip():
            return self._roles.find_by_name(name.strip())
        role_id = ref.get("id")
        if isinstance(role_id, bool):
            return None
        if isinstance(role_id, int):
            return self._roles.find_by_id(role_id)
        if isinstance(role_id, str) and role_id.strip().isdigit():
            return self._roles.find_by_id(int(role_id.strip()))
        return None

    def forgot_password(self, email: str) -> None:
        self._password_resets.request_reset(email)

    def reset_password(self, token: str, new_password: str) -> None:
        self._password_resets.redeem(token, new_password)

    def user_for_token(self, token: str) -> User | None:
        """Return the user a bearer token belongs to, or None if it is invalid or expired."""
        subject = self._codec.verify_subject(token)
        if subject is None:
            return None
        user = self._users.find_by_email(subject)
        if user is None or not self._codec.validate(token, user.email):
            return None
        return user
