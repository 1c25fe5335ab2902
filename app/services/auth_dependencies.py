from fastapi import Depends, Header, HTTPException, Request
from jose import JWTError, jwt

from app.config import settings


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip()
    return None


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return payload


def _auth_from_payload(payload: dict) -> dict:
    roles_claim = payload.get("roles")
    if isinstance(roles_claim, str):
        roles = roles_claim.split()
    elif isinstance(roles_claim, (list, tuple, set)):
        roles = [str(role) for role in roles_claim]
    else:
        roles = []
    return {"user_id": str(payload["sub"]), "roles": roles}


def get_optional_user(
    request: Request = None,  # type: ignore[assignment]
    authorization: str | None = Header(default=None),
):
    """Return the authenticated user, or ``None`` for anonymous callers."""
    token = _extract_bearer_token(authorization)
    if not token and request is not None:
        token = request.cookies.get("session_token")
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except HTTPException:
        return None
    auth = _auth_from_payload(payload)
    if request is not None:
        request.state.actor_id = auth["user_id"]
    return auth


def require_user_auth(auth=Depends(get_optional_user)):
    if not auth:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return auth


def require_role(role_name: str):
    def _require_role(auth=Depends(require_user_auth)):
        if role_name in set(auth.get("roles") or []):
            return auth
        raise HTTPException(status_code=403, detail="Forbidden")

    return _require_role
