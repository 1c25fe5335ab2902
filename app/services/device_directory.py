"""HTTP client for the external device directory (brands -> models)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from app.schemas.wizard import BrandRead, DeviceModelRead
from app.telemetry import get_tracer


class DeviceDirectoryError(Exception):
    pass


class DeviceDirectoryClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {"Accept": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._transport = transport

    def _get(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        with get_tracer(__name__).start_as_current_span("device_directory.get") as span:
            span.set_attribute("http.url", url)
            try:
                with httpx.Client(
                    timeout=self._timeout, headers=self._headers, transport=self._transport
                ) as client:
                    response = client.get(url)
                    response.raise_for_status()
                    return response.json()
            except httpx.HTTPStatusError as exc:
                raise DeviceDirectoryError(
                    f"Device directory returned {exc.response.status_code} for {path}"
                ) from exc
            except (httpx.HTTPError, ValueError) as exc:
                raise DeviceDirectoryError(f"Device directory request failed: {exc}") from exc

    @staticmethod
    def _items(data: Any) -> list[dict]:
        if isinstance(data, dict):
            data = data.get("items") or data.get("data") or []
        if not isinstance(data, list):
            raise DeviceDirectoryError("Unexpected device directory payload")
        return [item for item in data if isinstance(item, dict)]

    def get_all_brands(self) -> list[BrandRead]:
        return [
            BrandRead(id=str(item.get("id")), name=str(item.get("name") or ""))
            for item in self._items(self._get("/brands"))
        ]

    def get_brand_models(self, brand_id: str) -> list[DeviceModelRead]:
        if not brand_id:
            return []
        return [
            DeviceModelRead(
                id=str(item.get("id")),
                name=str(item.get("name") or ""),
                brand_id=str(item.get("brand_id") or brand_id),
            )
            for item in self._items(self._get(f"/brands/{quote(str(brand_id), safe='')}/models"))
        ]
