from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.schemas.error_note import ErrorNoteCreate, ErrorNoteRead
from app.services.error_notes import error_notes

router = APIRouter(prefix="/error-notes", tags=["error-notes"])


@router.get("/{system_name}/{error_code}", response_model=list[ErrorNoteRead])
def list_notes(
    system_name: str,
    error_code: str,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return error_notes.list(db, system_name, error_code, auth["user_id"])


@router.post("/{system_name}/{error_code}", response_model=list[ErrorNoteRead])
def add_note(
    system_name: str,
    error_code: str,
    payload: ErrorNoteCreate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    error_notes.add(db, system_name, error_code, auth["user_id"], payload.note)
    return error_notes.list(db, system_name, error_code, auth["user_id"])


@router.delete("/{system_name}/{error_code}/{note_id}", response_model=list[ErrorNoteRead])
def delete_note(
    system_name: str,
    error_code: str,
    note_id: str,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    error_notes.delete(db, note_id, auth["user_id"])
    return error_notes.list(db, system_name, error_code, auth["user_id"])
