"""Task CRUD endpoints. Any authenticated user may read and modify any task."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskmanager.api.deps import get_current_user, parse_body
from taskmanager.core.database import get_db
from taskmanager.models import Task, User
from taskmanager.schemas.auth import MessageResponse
from taskmanager.schemas.task import TaskRead, TaskWrite

router = APIRouter()


def _get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


@router.get("", response_model=list[TaskRead])
def list_tasks(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
) -> list[TaskRead]:
    tasks = db.query(Task).order_by(Task.id).all()
    return [TaskRead.model_validate(t) for t in tasks]


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
) -> TaskRead:
    return TaskRead.model_validate(_get_task_or_404(db, task_id))


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
    body: Annotated[Any, Body()] = None,
) -> TaskRead:
    req = parse_body(TaskWrite, body)
    task = Task(title=req.title, description=req.description, completed=req.completed)
    db.add(task)
    db.commit()
    db.refresh(task)
    return TaskRead.model_validate(task)


@router.put("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
    body: Annotated[Any, Body()] = None,
) -> TaskRead:
    """Replace title, description and completed on an existing task."""
    req = parse_body(TaskWrite, body)
    task = _get_task_or_404(db, task_id)
    task.title = req.title
    task.description = req.description
    task.completed = req.completed
    db.commit()
    db.refresh(task)
    return TaskRead.model_validate(task)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    task = _get_task_or_404(db, task_id)
    db.delete(task)
    db.commit()
    return MessageResponse(message="Task deleted successfully")
