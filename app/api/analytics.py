from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_path,
    get_db,
    get_device_identity,
    get_optional_user,
    get_telemetry_dispatcher,
    require_admin,
)
from app.schemas.analytics import (
    AnalyticsEventCreate,
    AnalyticsEventRead,
    ErrorCodeSearchCount,
    PageViewCount,
    TrackAccepted,
)
from app.services import analytics as analytics_service

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/events", response_model=TrackAccepted, status_code=status.HTTP_202_ACCEPTED)
def track_event(
    payload: AnalyticsEventCreate,
    auth=Depends(get_optional_user),
    identity=Depends(get_device_identity),
    dispatcher=Depends(get_telemetry_dispatcher),
    current_path: str | None = Depends(get_current_path),
):
    analytics_service.track_event(
        payload.event_type,
        user_id=payload.user_id,
        current_user_id=auth["user_id"] if auth else None,
        path=payload.path,
        current_path=current_path,
        meta=payload.meta,
        identity=identity,
        dispatcher=dispatcher,
    )
    return TrackAccepted(device_id=identity.device_id())


@router.get("/events", response_model=list[AnalyticsEventRead])
def list_events(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    return analytics_service.get_analytics(db, start_date, end_date)


@router.get("/summary", response_model=dict[str, int])
def summary(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    return analytics_service.get_analytics_summary(db, start_date, end_date)


@router.get("/top-error-codes", response_model=list[ErrorCodeSearchCount])
def top_error_codes(
    limit: int = Query(default=analytics_service.DEFAULT_TOP_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    return analytics_service.get_most_searched_error_codes(db, limit)


@router.get("/top-pages", response_model=list[PageViewCount])
def top_pages(
    limit: int = Query(default=analytics_service.DEFAULT_TOP_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    _admin=Depends(require_admin),
):
    return analytics_service.get_most_viewed_pages(db, limit)
