"""Liveness endpoint reporting version and database reachability."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskmanager.core.config import APP_VERSION, settings
from taskmanager.core.database import check_db_connected, get_db
from taskmanager.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    return HealthResponse(
        version=APP_VERSION,
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
