"""
Collaborator interfaces for the auth services.

Services depend on these protocols, not on SQLAlchemy, so tests can pass fakes
and a deployment can swap in other backends (e.g. a shared attempt store).
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from taskmanager.models import PasswordResetToken, Role, User


@runtime_checkable
class CredentialStore(Protocol):
    def get(self, user_id: int) -> User | None: ...

    def lock(self, user_id: int) -> User | None:
        """Load the user row and hold a write lock on it until the transaction ends."""
        ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_username(self, username: str) -> User | None: ...

    def exists_by_email(self, email: str) -> bool: ...

    def exists_by_username(self, username: str) -> bool: ...

    def save(self, user: User) -> User: ...


@runtime_checkable
class RoleLookup(Protocol):
    def find_by_name(self, name: str) -> Role | None: ...

    def find_by_id(self, role_id: int) -> Role | None: ...


@runtime_checkable
class ResetTokenStore(Protocol):
    def find_by_token(self, token: str) -> PasswordResetToken | None: ...

    def find_active_for_user(self, user_id: int, now: datetime) -> PasswordResetToken | None: ...

    def find_active_by_token(self, token: str, now: datetime) -> PasswordResetToken | None: ...

    def save(self, record: PasswordResetToken) -> PasswordResetToken: ...

    def delete(self, record: PasswordResetToken) -> None: ...

    def claim(self, record_id: int, now: datetime) -> bool:
        """Delete the record only if it is still unexpired; True if this call deleted it."""
        ...


@runtime_checkable
class MailDispatcher(Protocol):
    def send_password_reset_email(self, to_email: str, token: str) -> None: ...


@runtime_checkable
class AttemptStore(Protocol):
    """Per-identity failed-attempt counters. Implementations must make each call atomic."""

    def increment(self, key: str) -> int: ...

    def get(self, key: str) -> int | None: ...

    def delete(self, key: str) -> None: ...
