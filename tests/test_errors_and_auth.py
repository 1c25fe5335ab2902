import pytest
from fastapi import HTTPException
from jose import jwt
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.errors import UNKNOWN_ERROR, format_error
from app.services.auth_dependencies import _auth_from_payload, decode_access_token


class _CodedError(Exception):
    code = "PGRST116"


def test_format_error_shapes():
    assert format_error("plain") == "plain"
    assert format_error({"message": "from dict", "code": "X"}) == "from dict"
    assert format_error({"code": "X"}) == "X"
    assert format_error(ValueError("boom")) == "boom"
    assert format_error(_CodedError()) == "PGRST116"
    assert format_error(None) == UNKNOWN_ERROR
    assert format_error({}) == UNKNOWN_ERROR


def test_format_error_uses_driver_message():
    exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert format_error(exc) == "connection refused"


def test_decode_access_token_rejects_bad_tokens():
    with pytest.raises(HTTPException) as exc:
        decode_access_token("not-a-token")
    assert exc.value.status_code == 401

    no_sub = jwt.encode({"roles": ["admin"]}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(HTTPException):
        decode_access_token(no_sub)


def test_roles_claim_accepts_string_or_list():
    assert _auth_from_payload({"sub": "u", "roles": "admin editor"})["roles"] == ["admin", "editor"]
    assert _auth_from_payload({"sub": "u", "roles": ["admin"]})["roles"] == ["admin"]
    assert _auth_from_payload({"sub": "u"}) == {"user_id": "u", "roles": []}


def test_invalid_token_is_treated_as_anonymous(client, dispatcher):
    response = client.post(
        "/analytics/events",
        json={"event_type": "page_view"},
        headers={"Authorization": "Bearer garbage"},
    )
    assert response.status_code == 202
    assert dispatcher.analytics_events[0]["user_id"] is None
