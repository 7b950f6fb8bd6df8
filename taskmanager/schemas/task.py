"""Pydantic schemas for task CRUD."""

from pydantic import BaseModel, ConfigDict, Field

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 10_000


class TaskWrite(BaseModel):
    """Body for creating or replacing a task."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    completed: bool = False


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    completed: bool
