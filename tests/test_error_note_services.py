import uuid
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base
from app.models.error_note import ErrorNote
from app.services.error_notes import error_notes


def test_add_note_strips_text(db_session):
    note = error_notes.add(db_session, "Daikin", "E7", "user-1", "  replaced fan motor  ")
    assert note is not None
    assert note.note == "replaced fan motor"
    assert note.user_id == "user-1"


@pytest.mark.parametrize("text", ["", "   ", None])
def test_add_blank_note_is_ignored(db_session, text):
    assert error_notes.add(db_session, "Daikin", "E7", "user-1", text) is None
    assert error_notes.list(db_session, "Daikin", "E7", "user-1") == []


def test_add_note_requires_user(db_session):
    assert error_notes.add(db_session, "Daikin", "E7", None, "hello") is None


def test_list_is_scoped_and_newest_first(db_session):
    now = datetime.now(UTC)
    older = ErrorNote(
        system_name="Daikin", error_code="E7", user_id="user-1", note="old", created_at=now - timedelta(hours=1)
    )
    newer = ErrorNote(system_name="Daikin", error_code="E7", user_id="user-1", note="new", created_at=now)
    other_user = ErrorNote(system_name="Daikin", error_code="E7", user_id="user-2", note="theirs", created_at=now)
    other_code = ErrorNote(system_name="Daikin", error_code="U4", user_id="user-1", note="other", created_at=now)
    db_session.add_all([older, newer, other_user, other_code])
    db_session.commit()

    notes = error_notes.list(db_session, "Daikin", "E7", "user-1")
    assert [n.note for n in notes] == ["new", "old"]


def test_delete_only_removes_own_note(db_session):
    note = error_notes.add(db_session, "Daikin", "E7", "user-1", "mine")
    assert error_notes.delete(db_session, str(note.id), "user-2") is False
    assert len(error_notes.list(db_session, "Daikin", "E7", "user-1")) == 1
    assert error_notes.delete(db_session, str(note.id), "user-1") is True
    assert error_notes.list(db_session, "Daikin", "E7", "user-1") == []


def test_delete_unknown_note_returns_false(db_session):
    assert error_notes.delete(db_session, str(uuid.uuid4()), "user-1") is False


def test_delete_malformed_id_is_a_noop(db_session):
    error_notes.add(db_session, "Daikin", "E7", "user-1", "keep me")
    assert error_notes.delete(db_session, "not-a-uuid", "user-1") is False
    assert [n.note for n in error_notes.list(db_session, "Daikin", "E7", "user-1")] == ["keep me"]


@pytest.fixture()
def committing_session():
    # Real commits against a private database so a rollback cannot reach seeded rows.
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def _db_down(*args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("database is down"))


def test_add_failure_surfaces_and_keeps_existing_notes(committing_session, monkeypatch):
    error_notes.add(committing_session, "Daikin", "E7", "user-1", "existing")
    monkeypatch.setattr(committing_session, "commit", _db_down)

    with pytest.raises(HTTPException) as exc:
        error_notes.add(committing_session, "Daikin", "E7", "user-1", "new note")
    assert exc.value.status_code == 503
    assert exc.value.detail == "Failed to add note: database is down"

    monkeypatch.undo()
    assert [n.note for n in error_notes.list(committing_session, "Daikin", "E7", "user-1")] == ["existing"]


def test_delete_failure_surfaces_and_keeps_note(committing_session, monkeypatch):
    note = error_notes.add(committing_session, "Daikin", "E7", "user-1", "existing")
    monkeypatch.setattr(committing_session, "commit", _db_down)

    with pytest.raises(HTTPException) as exc:
        error_notes.delete(committing_session, str(note.id), "user-1")
    assert exc.value.status_code == 503
    assert exc.value.detail == "Failed to delete note: database is down"

    monkeypatch.undo()
    assert [n.note for n in error_notes.list(committing_session, "Daikin", "E7", "user-1")] == ["existing"]


def test_list_failure_surfaces(committing_session, monkeypatch):
    monkeypatch.setattr(committing_session, "query", _db_down)
    with pytest.raises(HTTPException) as exc:
        error_notes.list(committing_session, "Daikin", "E7", "user-1")
    assert exc.value.status_code == 503
    assert exc.value.detail == "Failed to load notes: database is down"
