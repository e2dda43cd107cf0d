# -*- coding: utf-8 -*-
"""Async HTTP client for the device's JSON REST API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from epdconsole.core.config import settings

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class DeviceClient:
    """Thin wrapper around ``httpx.AsyncClient``.

    Every method returns the raw ``httpx.Response``; deciding what counts as
    success is left to the caller. Transport problems surface as
    ``httpx.HTTPError`` subclasses.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.DEVICE_URL).rstrip("/")
        self.username = settings.DEVICE_USERNAME if username is None else username
        self.password = settings.DEVICE_PASSWORD if password is None else password
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=self._basic_auth(self.username, self.password),
            timeout=timeout if timeout is not None else settings.DEVICE_TIMEOUT_S,
            transport=transport,
        )

    @staticmethod
    def _basic_auth(username: str, password: str) -> Optional[httpx.BasicAuth]:
        if not username:
            return None
        return httpx.BasicAuth(username, password or "")

    def set_credentials(self, username: str, password: str) -> None:
        """Switch credentials after the device's admin account was changed."""
        self.username = username
        self.password = password
        self._client.auth = self._basic_auth(username, password)
        logging.info("Device credentials updated for user '%s'", username)

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Device routes
    # ------------------------------------------------------------------
    async def get_config(self) -> httpx.Response:
        return await self._client.get("/api/config", headers=NO_CACHE_HEADERS)

    async def post_config(self, payload: Dict[str, Any]) -> httpx.Response:
        return await self._client.post("/api/config", json=payload)

    async def reboot(self) -> httpx.Response:
        return await self._client.post("/api/reboot", headers={"Content-Type": "application/json"})

    async def mqtt_test(self) -> httpx.Response:
        return await self._client.post("/api/mqtt/test")

    async def wifi_scan(self) -> httpx.Response:
        return await self._client.get("/api/wifi/scan", headers=NO_CACHE_HEADERS)

    async def dashboard(self) -> httpx.Response:
        return await self._client.get("/api/dashboard", headers=NO_CACHE_HEADERS)

    async def logs(self) -> httpx.Response:
        return await self._client.get("/api/logs", headers=NO_CACHE_HEADERS)

    async def ping(self, page: str) -> httpx.Response:
        return await self._client.post("/ping", data={"page": page})


def json_body(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Decode a JSON object body; anything else yields ``None``."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    return data


__all__ = ["DeviceClient", "json_body", "NO_CACHE_HEADERS"]
