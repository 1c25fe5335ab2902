from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import format_error
from app.models.fix_step import FixStep
from app.schemas.fix_step import FixStepCreate
from app.services.common import apply_ordering, apply_pagination, get_or_404
from app.services.response import ListResponseMixin

logger = logging.getLogger(__name__)


def validate_draft(payload: FixStepCreate) -> None:
    if not (payload.title or "").strip() or not (payload.content or "").strip():
        raise HTTPException(status_code=400, detail="Title and content are required")


class FixSteps(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload: FixStepCreate, created_by: str | None = None) -> FixStep:
        validate_draft(payload)
        step = FixStep(
            brand=payload.brand,
            model=payload.model,
            error_code=payload.error_code,
            title=payload.title,
            content=payload.content,
            tags=list(payload.tags),
            media_urls=list(payload.media_urls),
            created_by=created_by,
        )
        try:
            db.add(step)
            db.commit()
            db.refresh(step)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("fix_step_create_failed error=%s", format_error(exc), exc_info=exc)
            raise HTTPException(
                status_code=503, detail=f"Error saving fix step: {format_error(exc)}"
            ) from exc
        logger.info("fix_step_created fix_step_id=%s created_by=%s", step.id, created_by)
        return step

    @staticmethod
    def get(db: Session, step_id: str) -> FixStep:
        return get_or_404(db, FixStep, step_id, detail="Fix step not found")

    @staticmethod
    def list(
        db: Session,
        brand: str | None = None,
        model: str | None = None,
        error_code: str | None = None,
        order_by: str = "created_at",
        order_dir: str = "desc",
        limit: int = 100,
        offset: int = 0,
    ) -> list[FixStep]:
        query = db.query(FixStep)
        if brand:
            query = query.filter(FixStep.brand == brand)
        if model:
            query = query.filter(FixStep.model == model)
        if error_code:
            query = query.filter(FixStep.error_code == error_code)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": FixStep.created_at, "title": FixStep.title},
        )
        try:
            return apply_pagination(query, limit, offset).all()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("fix_step_list_failed error=%s", format_error(exc), exc_info=exc)
            raise HTTPException(
                status_code=503, detail="Error loading fix steps: Failed to fetch data from database"
            ) from exc

    @staticmethod
    def delete(db: Session, step_id: str) -> None:
        step = get_or_404(db, FixStep, step_id, detail="Fix step not found")
        try:
            db.delete(step)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("fix_step_delete_failed fix_step_id=%s error=%s", step_id, format_error(exc))
            raise HTTPException(status_code=503, detail="Error deleting fix step") from exc
        logger.info("fix_step_deleted fix_step_id=%s", step_id)


fix_steps = FixSteps()
