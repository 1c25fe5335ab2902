from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_path,
    get_db,
    get_optional_user,
    get_telemetry_dispatcher,
    require_admin,
)
from app.models.app_log import LogLevel
from app.schemas.app_log import AppLogCreate, AppLogRead, LogCleanupResult
from app.services import app_logs as app_logs_service

router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("", status_code=status.HTTP_202_ACCEPTED)
def ingest_log(
    payload: AppLogCreate,
    auth=Depends(get_optional_user),
    dispatcher=Depends(get_telemetry_dispatcher),
    current_path: str | None = Depends(get_current_path),
):
    app_logs_service.log_to_store(
        payload.level,
        payload.message,
        stack_trace=payload.stack_trace,
        user_id=payload.user_id,
        current_user_id=auth["user_id"] if auth else None,
        page_path=payload.page_path,
        current_path=current_path,
        dispatcher=dispatcher,
    )
    return {"accepted": True}


@router.get("", response_model=list[AppLogRead])
def list_logs(
    level: LogLevel | None = None,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    return app_logs_service.get_logs(db, level)


@router.get("/range", response_model=list[AppLogRead])
def list_logs_by_range(
    start_date: datetime,
    end_date: datetime,
    level: LogLevel | None = None,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    return app_logs_service.get_logs_by_date_range(db, start_date, end_date, level)


@router.delete("", response_model=LogCleanupResult)
def delete_old_logs(
    days: int = Query(default=app_logs_service.DEFAULT_RETENTION_DAYS, ge=0),
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    return LogCleanupResult(success=app_logs_service.delete_old_logs(db, days), days=days)
