"""ORM model for single-use password reset tokens."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from taskmanager.models.base import Base


class PasswordResetToken(Base):
    """
    Opaque reset token owned by one user, valid until expiry_date.

    At most one active token exists per user; the row is deleted when redeemed
    or superseded and is otherwise left to expire.
    """

    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expiry_date = Column(DateTime(timezone=True), nullable=False)
