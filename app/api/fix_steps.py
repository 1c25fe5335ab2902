from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_path,
    get_db,
    get_device_identity,
    get_optional_user,
    get_telemetry_dispatcher,
    require_admin,
)
from app.schemas.common import ListResponse
from app.schemas.fix_step import FixStepCreate, FixStepRead
from app.services import analytics as analytics_service
from app.services.fix_steps import fix_steps

router = APIRouter(prefix="/fix-steps", tags=["fix-steps"])


@router.get("", response_model=ListResponse[FixStepRead])
def list_fix_steps(
    brand: str | None = None,
    model: str | None = None,
    error_code: str | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    auth=Depends(get_optional_user),
    identity=Depends(get_device_identity),
    dispatcher=Depends(get_telemetry_dispatcher),
    current_path: str | None = Depends(get_current_path),
):
    response = fix_steps.list_response(
        db,
        brand=brand,
        model=model,
        error_code=error_code,
        order_by=order_by,
        order_dir=order_dir,
        limit=limit,
        offset=offset,
    )
    if error_code:
        analytics_service.track_error_code_search(
            error_code,
            brand or "unknown",
            current_user_id=auth["user_id"] if auth else None,
            current_path=current_path,
            identity=identity,
            dispatcher=dispatcher,
        )
    return response


@router.get("/{step_id}", response_model=FixStepRead)
def get_fix_step(step_id: str, db: Session = Depends(get_db)):
    return fix_steps.get(db, step_id)


@router.post("", response_model=ListResponse[FixStepRead], status_code=status.HTTP_201_CREATED)
def create_fix_step(
    payload: FixStepCreate,
    db: Session = Depends(get_db),
    auth=Depends(require_admin),
):
    fix_steps.create(db, payload, created_by=auth["user_id"])
    return fix_steps.list_response(db, limit=100, offset=0)


@router.delete("/{step_id}", response_model=ListResponse[FixStepRead])
def delete_fix_step(
    step_id: str,
    confirm: bool = False,
    db: Session = Depends(get_db),
    auth=Depends(require_admin),
):
    if not confirm:
        raise HTTPException(status_code=400, detail="Confirmation required")
    fix_steps.delete(db, step_id)
    return fix_steps.list_response(db, limit=100, offset=0)
