# -*- coding: utf-8 -*-
# epdconsole/core/actions.py – jednorazowe akcje urządzenia (restart, test MQTT)
import inspect
import logging
from typing import Awaitable, Callable, Union

from epdconsole.core.device_client import DeviceClient
from epdconsole.core.models import FormState

Confirm = Callable[[], Union[bool, Awaitable[bool]]]

SOURCE = "actions"


class ActionDispatcher:
    def __init__(self, client: DeviceClient, state: FormState):
        self.client = client
        self.state = state

    async def reboot(self, confirm: Confirm) -> bool:
        answer = confirm()
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logging.info("Reboot cancelled by user")
            return False
        try:
            response = await self.client.reboot()
        except Exception as exc:
            logging.warning("Reboot request failed: %s", exc)
            self.state.status.show(f"Reboot error: {exc}", error=True, source=SOURCE)
            return False
        if response.is_success:
            self.state.status.show("Reboot in progress...", source=SOURCE)
            return True
        self.state.status.show(f"Reboot error: {response.status_code}", error=True, source=SOURCE)
        return False

    async def connectivity_test(self) -> bool:
        self.state.status.show("Testing MQTT...", severity="info", source=SOURCE)
        try:
            response = await self.client.mqtt_test()
        except Exception as exc:
            logging.warning("MQTT test request failed: %s", exc)
            self.state.status.show(f"MQTT error: {exc}", error=True, source=SOURCE)
            return False
        if response.is_success:
            self.state.status.show("MQTT test succeeded", source=SOURCE)
            return True
        self.state.status.show(f"MQTT test failed: {response.status_code}", error=True, source=SOURCE)
        return False
