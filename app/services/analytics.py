"""Analytics tracker: fire-and-forget event capture plus admin read-side rollups.

Aggregations run in Python over the most recent rows (capped by
``settings.analytics_fetch_limit``) rather than in SQL.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import format_error
from app.models.analytics import AnalyticsEvent, AnalyticsEventType

logger = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 10
UNKNOWN = "unknown"


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _default_identity():
    from app.container import container

    return container.device_identity()


def _default_dispatcher():
    from app.container import container

    return container.telemetry_dispatcher()


def build_event(
    event_type: AnalyticsEventType | str,
    *,
    device_id: str,
    user_id: str | None = None,
    current_user_id: str | None = None,
    path: str | None = None,
    current_path: str | None = None,
    meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Resolve overrides and stamp the event; explicit values win over context."""
    return {
        "event_type": AnalyticsEventType(event_type).value,
        "user_id": user_id or current_user_id or None,
        "device_id": device_id,
        "path": path or current_path or None,
        "meta": meta,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def track_event(
    event_type: AnalyticsEventType | str,
    *,
    user_id: str | None = None,
    current_user_id: str | None = None,
    path: str | None = None,
    current_path: str | None = None,
    meta: dict[str, Any] | None = None,
    identity=None,
    dispatcher=None,
) -> None:
    try:
        identity = identity or _default_identity()
        dispatcher = dispatcher or _default_dispatcher()
        payload = build_event(
            event_type,
            device_id=identity.device_id(),
            user_id=user_id,
            current_user_id=current_user_id,
            path=path,
            current_path=current_path,
            meta=meta,
        )
        dispatcher.analytics(payload)
    except Exception as exc:
        logger.error("analytics_track_failed event_type=%s error=%s", event_type, exc)


def track_page_view(path: str | None = None, **context) -> None:
    track_event(AnalyticsEventType.page_view, path=path, **context)


def track_error_code_search(error_code: str, system_name: str, **context) -> None:
    track_event(
        AnalyticsEventType.error_code_search,
        meta={"errorCode": error_code, "systemName": system_name},
        **context,
    )


def track_button_click(button_label: str, additional_meta: dict[str, Any] | None = None, **context) -> None:
    track_event(
        AnalyticsEventType.button_click,
        meta={"buttonLabel": button_label, **(additional_meta or {})},
        **context,
    )


def track_device_view(brand_name: str, model_name: str, **context) -> None:
    track_event(
        AnalyticsEventType.device_view,
        meta={"brandName": brand_name, "modelName": model_name},
        **context,
    )


def get_analytics(
    db: Session,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[AnalyticsEvent]:
    query = db.query(AnalyticsEvent)
    start_date = _as_utc(start_date)
    end_date = _as_utc(end_date)
    if start_date:
        query = query.filter(AnalyticsEvent.timestamp >= start_date)
    if end_date:
        query = query.filter(AnalyticsEvent.timestamp <= end_date)
    try:
        return (
            query.order_by(AnalyticsEvent.timestamp.desc())
            .limit(settings.analytics_fetch_limit)
            .all()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("analytics_fetch_failed error=%s", format_error(exc))
        return []


def get_analytics_summary(
    db: Session,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> dict[str, int]:
    counts = Counter(event.event_type.value for event in get_analytics(db, start_date, end_date))
    return dict(counts)


def get_most_searched_error_codes(db: Session, limit: int = DEFAULT_TOP_LIMIT) -> list[dict[str, Any]]:
    summary: dict[tuple, dict[str, Any]] = {}
    for event in get_analytics(db):
        if event.event_type != AnalyticsEventType.error_code_search:
            continue
        meta = event.meta if isinstance(event.meta, dict) else {}
        code = meta.get("errorCode")
        system = meta.get("systemName")
        entry = summary.get((code, system))
        if entry:
            entry["count"] += 1
        else:
            summary[(code, system)] = {
                "code": code or UNKNOWN,
                "system": system or UNKNOWN,
                "count": 1,
            }
    ranked = sorted(summary.values(), key=lambda item: item["count"], reverse=True)
    return ranked[:limit]


def get_most_viewed_pages(db: Session, limit: int = DEFAULT_TOP_LIMIT) -> list[dict[str, Any]]:
    counts = Counter(
        event.path or "/"
        for event in get_analytics(db)
        if event.event_type == AnalyticsEventType.page_view
    )
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"path": path, "count": count} for path, count in ranked[:limit]]
