# -*- coding: utf-8 -*-
# epdconsole/core/controller.py – właściciel stanu formularza, timery i akcje użytkownika
import asyncio
import logging
from typing import Any, Dict, List, Optional

from epdconsole.core.actions import ActionDispatcher, Confirm
from epdconsole.core.config import DASHBOARD
from epdconsole.core.config_sync import ConfigSync
from epdconsole.core.dashboard import DashboardPoller, KeepAlive
from epdconsole.core.device_client import DeviceClient
from epdconsole.core.form_helpers import sanitize_form_edits, split_secret_edits
from epdconsole.core.models import FormState
from epdconsole.core.notifications import record_status
from epdconsole.core.scheduler import PeriodicTask
from epdconsole.core.wifi_scan import WifiScanner


class Controller:
    """Single writer of the form/display state.

    Every handler receives the same ``FormState``; timers and user actions run
    as independent tasks on the event loop.
    """

    def __init__(self, client: Optional[DeviceClient] = None, state: Optional[FormState] = None,
                 mode: Optional[str] = None, record_history: bool = True):
        self.client = client or DeviceClient()
        self.state = state or FormState()
        if record_history and self.state.status.listener is None:
            self.state.status.listener = record_status
        self.mode = mode or DASHBOARD["mode"]
        self.config = ConfigSync(self.client, self.state)
        self.dashboard = DashboardPoller(self.client, self.state, mode=self.mode)
        self.keepalive = KeepAlive(self.client)
        self.wifi = WifiScanner(self.client, self.state)
        self.actions = ActionDispatcher(self.client, self.state)
        self._timers: List[PeriodicTask] = []
        self._load_task: Optional[asyncio.Task] = None

    def start(self):
        poll_s = float(DASHBOARD["poll_interval_ms"]) / 1000.0
        self._timers = [PeriodicTask("dashboard", poll_s, self.dashboard.tick)]
        if self.mode == "legacy":
            ping_s = float(DASHBOARD["ping_interval_ms"]) / 1000.0
            self._timers.append(PeriodicTask("ping", ping_s, self.keepalive.ping, run_immediately=False))
        for timer in self._timers:
            timer.start()
        # odczyt konfiguracji przy "otwarciu strony"
        self._load_task = asyncio.create_task(self.config.load())
        logging.info("Console started (%s dashboard, device %s)", self.mode, self.client.base_url)

    async def stop(self):
        for timer in self._timers:
            await timer.stop()
        self._timers = []
        if self._load_task and not self._load_task.done():
            self._load_task.cancel()
            await asyncio.gather(self._load_task, return_exceptions=True)
        await self.client.close()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    def edit(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = sanitize_form_edits(changes, self.state.timezone_values())
        values, secrets = split_secret_edits(sanitized)
        self.state.values.update(values)
        self.state.secrets.update(secrets)
        return sanitized

    async def reload(self) -> bool:
        return await self.config.load()

    async def save(self) -> bool:
        return await self.config.save()

    async def scan(self) -> bool:
        return await self.wifi.scan()

    def select_network(self, ssid: str):
        self.wifi.select(ssid)

    async def reboot(self, confirm: Confirm) -> bool:
        return await self.actions.reboot(confirm)

    async def connectivity_test(self) -> bool:
        return await self.actions.connectivity_test()

    def scroll_logs(self, line: int):
        self.state.logs.scroll_to(line)

    def snapshot(self) -> Dict[str, Any]:
        return self.state.snapshot()
