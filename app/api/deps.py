from urllib.parse import urlparse

from fastapi import Depends, Header, Request, Response

from app.config import settings
from app.db import get_db  # noqa: F401
from app.services.auth_dependencies import (  # noqa: F401
    get_optional_user,
    require_role,
    require_user_auth,
)
from app.services.device_identity import CookieIdentityStore, DeviceIdentityProvider


def get_current_user(auth=Depends(require_user_auth)):
    """Authenticated user info: a dict with user_id and roles."""
    return auth


require_admin = require_role(settings.admin_role)


# -------------------------------------------------------------------------
# Container-based Dependencies
# -------------------------------------------------------------------------
# Resolved from the DI container so tests can override the providers.


def get_device_directory():
    from app.container import container

    return container.device_directory()


def get_telemetry_dispatcher():
    from app.container import container

    return container.telemetry_dispatcher()


def get_wizard_rules():
    from app.container import container

    return container.wizard_rules()


def get_device_identity(request: Request, response: Response) -> DeviceIdentityProvider:
    """Per-browser identity kept in a long-lived cookie."""
    return DeviceIdentityProvider(
        CookieIdentityStore(
            request,
            response,
            cookie_name=settings.device_id_cookie_name,
            max_age=settings.device_id_cookie_max_age,
            secure=settings.cookie_secure,
        )
    )


def get_current_path(
    x_page_path: str | None = Header(default=None),
    referer: str | None = Header(default=None),
) -> str | None:
    """Page the caller is on: explicit header, else the Referer path.

    ``None`` when the caller sent neither; the API route itself is never a page.
    """
    if x_page_path:
        return x_page_path
    if referer:
        parsed = urlparse(referer)
        path = parsed.path or "/"
        if parsed.fragment:
            return f"{path}#{parsed.fragment}"
        return path
    return None
