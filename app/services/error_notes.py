from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import format_error
from app.models.error_note import ErrorNote

logger = logging.getLogger(__name__)


def _store_failure(db: Session, action: str, exc: SQLAlchemyError) -> HTTPException:
    db.rollback()
    message = format_error(exc)
    logger.error("error_note_%s_failed error=%s", action.replace(" ", "_"), message, exc_info=exc)
    return HTTPException(status_code=503, detail=f"Failed to {action}: {message}")


class ErrorNotes:
    """Per-user service notes scoped to a (system, error code) pair."""

    @staticmethod
    def list(db: Session, system_name: str, error_code: str, user_id: str) -> list[ErrorNote]:
        try:
            return (
                db.query(ErrorNote)
                .filter(ErrorNote.system_name == system_name)
                .filter(ErrorNote.error_code == error_code)
                .filter(ErrorNote.user_id == user_id)
                .order_by(ErrorNote.created_at.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise _store_failure(db, "load notes", exc) from exc

    @staticmethod
    def add(
        db: Session,
        system_name: str,
        error_code: str,
        user_id: str | None,
        note: str | None,
    ) -> ErrorNote | None:
        text = (note or "").strip()
        if not text or not user_id:
            return None
        item = ErrorNote(
            system_name=system_name,
            error_code=error_code,
            user_id=user_id,
            note=text,
        )
        try:
            db.add(item)
            db.commit()
            db.refresh(item)
        except SQLAlchemyError as exc:
            raise _store_failure(db, "add note", exc) from exc
        logger.info("error_note_added system=%s code=%s note_id=%s", system_name, error_code, item.id)
        return item

    @staticmethod
    def delete(db: Session, note_id: str, user_id: str | None) -> bool:
        """Delete a note only when it belongs to ``user_id``.

        Unknown, foreign and malformed ids are all a no-op returning False.
        """
        if not user_id:
            return False
        try:
            note_uuid = uuid.UUID(str(note_id))
        except ValueError:
            logger.warning("error_note_delete_skipped note_id=%s reason=invalid_id", note_id)
            return False
        try:
            removed = (
                db.query(ErrorNote)
                .filter(ErrorNote.id == note_uuid)
                .filter(ErrorNote.user_id == user_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError as exc:
            raise _store_failure(db, "delete note", exc) from exc
        if not removed:
            logger.warning("error_note_delete_skipped note_id=%s", note_id)
        return bool(removed)


error_notes = ErrorNotes()
