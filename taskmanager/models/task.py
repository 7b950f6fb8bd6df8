"""ORM model for tasks."""

from sqlalchemy import Boolean, Column, Integer, String, Text

from taskmanager.models.base import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
