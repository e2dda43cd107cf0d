# -*- coding: utf-8 -*-
"""Live dashboard: log tail polling, reachability signal and keep-alive ping."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from epdconsole.core.config import DASHBOARD
from epdconsole.core.device_client import DeviceClient, json_body
from epdconsole.core.models import FormState


class DashboardPoller:
    """Fetches the log tail; failures are expected during a reboot and ignored."""

    def __init__(self, client: DeviceClient, state: FormState, mode: Optional[str] = None,
                 reachable_clear_s: Optional[float] = None):
        self.client = client
        self.state = state
        self.mode = mode or DASHBOARD["mode"]
        if reachable_clear_s is None:
            reachable_clear_s = float(DASHBOARD["reachable_clear_ms"]) / 1000.0
        self.reachable_clear_s = reachable_clear_s

    async def _fetch_logs(self) -> Optional[str]:
        if self.mode == "legacy":
            response = await self.client.logs()
            if not response.is_success:
                return None
            return response.text
        response = await self.client.dashboard()
        if not response.is_success:
            return None
        body = json_body(response)
        if body is None or not body.get("ok"):
            return None
        logs = body.get("logs")
        if not isinstance(logs, str):
            return None
        return logs

    async def tick(self) -> bool:
        try:
            logs = await self._fetch_logs()
        except (httpx.HTTPError, ValueError) as exc:
            logging.debug("Dashboard poll skipped: %s", exc)
            return False
        if logs is None:
            logging.debug("Dashboard poll skipped: device answered with an error")
            return False
        # ostatnia zakończona odpowiedź wygrywa
        self.state.logs.show(logs)
        self.state.reachability.show(self.reachable_clear_s)
        return True


class KeepAlive:
    """Fire-and-forget liveness ping used by the legacy dashboard."""

    def __init__(self, client: DeviceClient, page_id: Optional[str] = None):
        self.client = client
        self.page_id = page_id or DASHBOARD["page_id"]

    async def ping(self) -> None:
        try:
            await self.client.ping(self.page_id)
        except httpx.HTTPError as exc:
            logging.debug("Ping failed: %s", exc)


__all__ = ["DashboardPoller", "KeepAlive"]
