"""Anonymous per-install device identity.

A device id is generated once (random UUID4) the first time it is needed and
read back from its store on every later call. Stores decide where the id
lives::

    provider = DeviceIdentityProvider(FileIdentityStore("data/device_id.json"))
    provider.device_id()  # same value for the lifetime of the file

HTTP requests use :class:`CookieIdentityStore`, which keeps the id in a
long-lived browser cookie.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from threading import Lock

from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class IdentityStore:
    """Base interface for a single persisted device-id slot."""

    def load(self) -> str | None:
        raise NotImplementedError

    def save(self, device_id: str) -> None:
        raise NotImplementedError


class InMemoryIdentityStore(IdentityStore):
    def __init__(self, device_id: str | None = None) -> None:
        self._device_id = device_id

    def load(self) -> str | None:
        return self._device_id

    def save(self, device_id: str) -> None:
        self._device_id = device_id


class FileIdentityStore(IdentityStore):
    """Keeps the id in a small JSON file, e.g. for workers and scripts."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("device_id_file_unreadable path=%s", self._path)
            return None
        value = data.get("device_id") if isinstance(data, dict) else None
        return str(value) if value else None

    def save(self, device_id: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"device_id": device_id}), encoding="utf-8")


class CookieIdentityStore(IdentityStore):
    """Reads the id from the request cookie and writes it back on the response."""

    def __init__(
        self,
        request: Request,
        response: Response,
        cookie_name: str,
        max_age: int,
        secure: bool = False,
    ) -> None:
        self._request = request
        self._response = response
        self._cookie_name = cookie_name
        self._max_age = max_age
        self._secure = secure

    def load(self) -> str | None:
        return self._request.cookies.get(self._cookie_name) or None

    def save(self, device_id: str) -> None:
        self._response.set_cookie(
            self._cookie_name,
            device_id,
            max_age=self._max_age,
            httponly=True,
            samesite="lax",
            secure=self._secure,
        )


class DeviceIdentityProvider:
    def __init__(self, store: IdentityStore) -> None:
        self._store = store
        self._lock = Lock()
        self._cached: str | None = None

    def device_id(self) -> str:
        if self._cached:
            return self._cached
        with self._lock:
            if self._cached:
                return self._cached
            device_id = self._store.load()
            if not device_id:
                device_id = str(uuid.uuid4())
                self._store.save(device_id)
                logger.info("device_id_created")
            self._cached = device_id
            return device_id
