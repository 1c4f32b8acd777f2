# -*- coding: utf-8 -*-
"""Async client for the upstream IoT cloud service."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from sensorboard.core.config import UPSTREAM

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
}


class UpstreamError(Exception):
    """Network failure, non-2xx status or unreadable body from the upstream."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamClient:
    """Thin JSON client over ``httpx.AsyncClient``.

    Every call returns the decoded JSON body or raises :class:`UpstreamError`.
    Parameters left as ``None`` come from the ``upstream`` section of
    settings.yaml. ``transport`` lets tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        relay_id: Optional[int] = None,
        timeout_s: Optional[float] = None,
        update_method: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or UPSTREAM["base_url"]).rstrip("/")
        self.relay_id = relay_id if relay_id is not None else UPSTREAM["relay_id"]
        self.update_method = (update_method or UPSTREAM["update_method"]).upper()
        timeout = float(timeout_s if timeout_s is not None else UPSTREAM["timeout_s"])
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=DEFAULT_HEADERS,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @property
    def relay_path(self) -> str:
        return f"/relay/{self.relay_id}"

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            logger.warning("%s %s error response: %s", method, path, response.text)
            raise UpstreamError(
                f"API responded with status: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(f"{method} {path} returned invalid JSON", status_code=response.status_code) from exc
        logger.debug("%s %s -> HTTP %d", method, path, response.status_code)
        return data

    # ------------------------------------------------------------------
    # Sensor history
    # ------------------------------------------------------------------
    async def get_humidity(self) -> Any:
        return await self._request("GET", "/humidity")

    async def get_statistik(self) -> Any:
        return await self._request("GET", "/statistik")

    async def get_celcius(self) -> Any:
        return await self._request("GET", "/celcius")

    # ------------------------------------------------------------------
    # Relay
    # ------------------------------------------------------------------
    async def get_relay(self) -> Any:
        return await self._request("GET", self.relay_path)

    async def update_relay(self, changes: Dict[str, Any], method: Optional[str] = None) -> Any:
        """Send a partial relay update (``mode`` and/or ``reported_status``)."""
        verb = (method or self.update_method).upper()
        if verb not in ("PUT", "PATCH"):
            raise ValueError(f"Unsupported relay update method {verb!r}")
        logger.info("%s %s %s", verb, self.relay_path, changes)
        return await self._request(verb, self.relay_path, json=changes)

    # ------------------------------------------------------------------
    # Device endpoints (not proxied)
    # ------------------------------------------------------------------
    async def toggle_device(self, state: str) -> Any:
        state = str(state).lower()
        if state not in ("on", "off"):
            raise ValueError(f"Device state must be 'on' or 'off', got {state!r}")
        return await self._request("POST", "/device/toggle", json={"state": state})

    async def get_device_status(self) -> Any:
        return await self._request("GET", "/device/status")

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["UpstreamClient", "UpstreamError"]
