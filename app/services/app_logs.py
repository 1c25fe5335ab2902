from __future__ import annotations

import logging
import traceback
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import format_error
from app.models.app_log import AppLog, LogLevel

logger = logging.getLogger(__name__)
# Local mirror of every stored entry; never routed back into app_logs.
mirror_logger = logging.getLogger("app.client")

DEFAULT_RETENTION_DAYS = 30

_MIRROR_LEVELS = {
    LogLevel.Critical: logging.CRITICAL,
    LogLevel.Urgent: logging.CRITICAL,
    LogLevel.Shutdown: logging.CRITICAL,
    LogLevel.Error: logging.ERROR,
    LogLevel.Warning: logging.WARNING,
    LogLevel.Info: logging.INFO,
    LogLevel.Debug: logging.DEBUG,
}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def normalize_stack_trace(value: str | BaseException | dict | None) -> dict[str, Any] | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return {"message": value}
    if isinstance(value, BaseException):
        stack = "".join(traceback.format_exception(type(value), value, value.__traceback__))
        return {
            "name": type(value).__name__,
            "message": str(value),
            "stack": stack,
        }
    if isinstance(value, dict):
        return value
    return {"message": str(value)}


def build_log_entry(
    level: LogLevel | str,
    message: str,
    *,
    stack_trace: str | BaseException | dict | None = None,
    user_id: str | None = None,
    current_user_id: str | None = None,
    page_path: str | None = None,
    current_path: str | None = None,
) -> dict[str, Any]:
    return {
        "level": LogLevel(level).value,
        "message": message,
        "stack_trace": normalize_stack_trace(stack_trace),
        "user_id": user_id or current_user_id or None,
        "page_path": page_path or current_path or None,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def _mirror(level: LogLevel, message: str, stack_trace) -> None:
    prefix = "[CRITICAL] " if level == LogLevel.Critical else ""
    if stack_trace is not None and stack_trace != "":
        mirror_logger.log(_MIRROR_LEVELS[level], "%s%s %s", prefix, message, stack_trace)
    else:
        mirror_logger.log(_MIRROR_LEVELS[level], "%s%s", prefix, message)


def log_to_store(
    level: LogLevel | str,
    message: str,
    *,
    stack_trace: str | BaseException | dict | None = None,
    user_id: str | None = None,
    current_user_id: str | None = None,
    page_path: str | None = None,
    current_path: str | None = None,
    dispatcher=None,
) -> None:
    """Queue a log row and mirror it locally. Never raises."""
    try:
        level = LogLevel(level)
    except ValueError:
        logger.error("app_log_invalid_level level=%s", level)
        return
    _mirror(level, message, stack_trace)
    try:
        if dispatcher is None:
            from app.container import container

            dispatcher = container.telemetry_dispatcher()
        payload = build_log_entry(
            level,
            message,
            stack_trace=stack_trace,
            user_id=user_id,
            current_user_id=current_user_id,
            page_path=page_path,
            current_path=current_path,
        )
        dispatcher.app_log(payload)
    except Exception as exc:
        # Reported only locally so a failing store cannot trigger more log writes.
        logger.error("app_log_store_failed error=%s", exc)


def log_error(message: str, error: str | BaseException | None = None, user_id: str | None = None, **context) -> None:
    log_to_store(LogLevel.Error, message, stack_trace=error, user_id=user_id, **context)


def log_warning(message: str, user_id: str | None = None, **context) -> None:
    log_to_store(LogLevel.Warning, message, user_id=user_id, **context)


def log_info(message: str, user_id: str | None = None, **context) -> None:
    log_to_store(LogLevel.Info, message, user_id=user_id, **context)


def log_critical(
    message: str, error: str | BaseException | None = None, user_id: str | None = None, **context
) -> None:
    log_to_store(LogLevel.Critical, message, stack_trace=error, user_id=user_id, **context)


def get_logs(db: Session, level: LogLevel | str | None = None) -> list[AppLog]:
    query = db.query(AppLog)
    if level:
        query = query.filter(AppLog.level == LogLevel(level))
    try:
        return query.order_by(AppLog.timestamp.desc()).limit(settings.logs_fetch_limit).all()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("app_log_fetch_failed error=%s", format_error(exc))
        return []


def get_logs_by_date_range(
    db: Session,
    start_date: datetime,
    end_date: datetime,
    level: LogLevel | str | None = None,
) -> list[AppLog]:
    query = (
        db.query(AppLog)
        .filter(AppLog.timestamp >= _as_utc(start_date))
        .filter(AppLog.timestamp <= _as_utc(end_date))
    )
    if level:
        query = query.filter(AppLog.level == LogLevel(level))
    try:
        return query.order_by(AppLog.timestamp.desc()).all()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("app_log_fetch_failed error=%s", format_error(exc))
        return []


def delete_old_logs(db: Session, days: int = DEFAULT_RETENTION_DAYS) -> bool:
    cutoff = datetime.now(UTC) - timedelta(days=days)
    try:
        removed = (
            db.query(AppLog)
            .filter(AppLog.timestamp < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("app_log_cleanup_failed days=%s error=%s", days, format_error(exc))
        return False
    logger.info("app_log_cleanup days=%s removed=%s", days, removed)
    return True
