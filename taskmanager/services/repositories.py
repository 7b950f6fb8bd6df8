"""SQLAlchemy-backed implementations of the credential, role and reset-token stores."""

from datetime import datetime

from sqlalchemy.orm import Session

from taskmanager.models import PasswordResetToken, Role, User


class SqlCredentialStore:
    """
    User persistence on a shared Session.

    Mutations flush but never commit; the calling service owns the transaction.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get(self, user_id: int) -> User | None:
        return self._db.get(User, user_id)

    def lock(self, user_id: int) -> User | None:
        # SELECT ... FOR UPDATE; SQLite has no row locks and ignores the clause.
        return self._db.query(User).filter(User.id == user_id).with_for_update().one_or_none()

    def find_by_email(self, email: str) -> User | None:
        return self._db.query(User).filter(User.email == email).first()

    def find_by_username(self, username: str) -> User | None:
        return self._db.query(User).filter(User.username == username).first()

    def exists_by_email(self, email: str) -> bool:
        return self._db.query(User.id).filter(User.email == email).first() is not None

    def exists_by_username(self, username: str) -> bool:
        return self._db.query(User.id).filter(User.username == username).first() is not None

    def save(self, user: User) -> User:
        self._db.add(user)
        self._db.flush()
        return user


class SqlRoleLookup:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_name(self, name: str) -> Role | None:
        return self._db.query(Role).filter(Role.name == name).first()

    def find_by_id(self, role_id: int) -> Role | None:
        return self._db.get(Role, role_id)


class SqlResetTokenStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_token(self, token: str) -> PasswordResetToken | None:
        return (
            self._db.query(PasswordResetToken)
            .filter(PasswordResetToken.token == token)
            .first()
        )

    def find_active_for_user(self, user_id: int, now: datetime) -> PasswordResetToken | None:
        return (
            self._db.query(PasswordResetToken)
            .filter(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.expiry_date > now,
            )
            .first()
        )

    def find_active_by_token(self, token: str, now: datetime) -> PasswordResetToken | None:
        return (
            self._db.query(PasswordResetToken)
            .filter(
                PasswordResetToken.token == token,
                PasswordResetToken.expiry_date > now,
            )
            .first()
        )

    def save(self, record: PasswordResetToken) -> PasswordResetToken:
        self._db.add(record)
        self._db.flush()
        return record

    def delete(self, record: PasswordResetToken) -> None:
        self._db.delete(record)
        self._db.flush()

    def claim(self, record_id: int, now: datetime) -> bool:
        # Conditional delete: of two concurrent redemptions only one sees a row deleted.
        deleted = (
            self._db.query(PasswordResetToken)
            .filter(
                PasswordResetToken.id == record_id,
                PasswordResetToken.expiry_date > now,
            )
            .delete(synchronize_session=False)
        )
        return deleted == 1
