"""SQLAlchemy ORM models."""

from taskmanager.models.base import Base
from taskmanager.models.password_reset import PasswordResetToken
from taskmanager.models.task import Task
from taskmanager.models.user import Role, User, user_roles

__all__ = ["Base", "PasswordResetToken", "Role", "Task", "User", "user_roles"]
