import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown error occurred"


def format_error(error: object) -> str:
    """Extract a human-readable message from an error of any shape.

    Exceptions and mappings are checked for a ``message`` first and a
    ``code`` second; plain strings pass through unchanged.
    """
    if isinstance(error, str):
        return error or UNKNOWN_ERROR
    if isinstance(error, dict):
        message = error.get("message") or ""
        code = error.get("code") or ""
    else:
        message = getattr(error, "message", None) or ""
        if not message and isinstance(error, BaseException):
            orig = getattr(error, "orig", None)
            message = str(orig) if orig is not None else str(error)
        code = getattr(error, "code", None) or ""
    return str(message or code or UNKNOWN_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SQLAlchemyError)
    async def _database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            "database_error path=%s error=%s",
            request.url.path,
            format_error(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=503, content={"detail": "Database unavailable"})

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception):
        from app.services import app_logs

        actor_id = getattr(request.state, "actor_id", None)
        logger.exception(
            "unhandled_error method=%s path=%s", request.method, request.url.path, exc_info=exc
        )
        app_logs.log_critical(
            f"Unhandled error on {request.method} {request.url.path}",
            exc,
            user_id=actor_id,
            page_path=request.url.path,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
