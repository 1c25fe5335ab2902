"""Celery tasks that persist telemetry rows.

Tasks run once (no retries, early ack). A failed write is logged, counted
and dropped; it is never raised back to the worker.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from app.celery_app import celery_app
from app.config import settings
from app.db import SessionLocal
from app.metrics import TELEMETRY_WRITE_FAILURES
from app.models.analytics import AnalyticsEvent, AnalyticsEventType
from app.models.app_log import AppLog, LogLevel
from app.services import app_logs as app_logs_service

logger = logging.getLogger(__name__)


def _parse_timestamp(value) -> datetime:
    """Client timestamp as UTC; naive values are taken to be UTC already."""
    parsed = value if isinstance(value, datetime) else None
    if parsed is None and value:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            parsed = None
    if parsed is None:
        return datetime.now(UTC)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _record_analytics_event(db, payload: dict) -> bool:
    try:
        event = AnalyticsEvent(
            event_type=AnalyticsEventType(payload["event_type"]),
            user_id=payload.get("user_id"),
            device_id=payload.get("device_id"),
            path=payload.get("path"),
            meta=payload.get("meta"),
            timestamp=_parse_timestamp(payload.get("timestamp")),
        )
        db.add(event)
        db.commit()
    except (SQLAlchemyError, KeyError, ValueError) as exc:
        db.rollback()
        TELEMETRY_WRITE_FAILURES.labels(kind="analytics").inc()
        logger.error("analytics_write_failed error=%s", exc)
        return False
    return True


def _record_app_log(db, payload: dict) -> bool:
    try:
        entry = AppLog(
            level=LogLevel(payload["level"]),
            message=payload["message"],
            stack_trace=payload.get("stack_trace"),
            user_id=payload.get("user_id"),
            page_path=payload.get("page_path"),
            timestamp=_parse_timestamp(payload.get("timestamp")),
        )
        db.add(entry)
        db.commit()
    except (SQLAlchemyError, KeyError, ValueError) as exc:
        db.rollback()
        TELEMETRY_WRITE_FAILURES.labels(kind="app_log").inc()
        # Local log only: writing this failure to app_logs could loop.
        logger.error("app_log_write_failed error=%s", exc)
        return False
    return True


@celery_app.task(
    name="app.tasks.telemetry.record_analytics_event",
    max_retries=0,
    acks_late=False,
    ignore_result=True,
)
def record_analytics_event(payload: dict) -> bool:
    session = SessionLocal()
    try:
        return _record_analytics_event(session, payload)
    finally:
        session.close()


@celery_app.task(
    name="app.tasks.telemetry.record_app_log",
    max_retries=0,
    acks_late=False,
    ignore_result=True,
)
def record_app_log(payload: dict) -> bool:
    session = SessionLocal()
    try:
        return _record_app_log(session, payload)
    finally:
        session.close()


@celery_app.task(name="app.tasks.telemetry.cleanup_app_logs", ignore_result=True)
def cleanup_app_logs(days: int | None = None) -> bool:
    session = SessionLocal()
    try:
        return app_logs_service.delete_old_logs(session, days or settings.log_retention_days)
    finally:
        session.close()
