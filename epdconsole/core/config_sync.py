# -*- coding: utf-8 -*-
"""Load/save synchronisation between the form and the device configuration."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from epdconsole.core.device_client import DeviceClient, json_body
from epdconsole.core.form_helpers import parse_float, parse_int
from epdconsole.core.models import FORM_DEFAULTS, SECRET_FIELDS, FormState, SelectOption
from epdconsole.core.schemas import ConfigRecord, ConfigSavePayload

INT_FIELDS = ("mqtt_port", "interactive_timeout_ms", "deepsleep_interval_s")
FLOAT_FIELDS = ("temp_offset_c", "hum_offset_pct")
TEXT_FIELDS = ("wifi_ssid", "mqtt_host", "mqtt_user", "mqtt_topic", "device_name", "admin_user", "tz_string")

SOURCE = "config"


def custom_timezone_option(value: str) -> SelectOption:
    return SelectOption(value=value, label=f"Custom ({value})", custom=True)


def select_timezone(state: FormState, value: str) -> None:
    """Select ``value``, inserting a custom option when it is not listed."""
    state.timezones = [opt for opt in state.timezones if not opt.custom]
    if value not in state.timezone_values():
        state.timezones.insert(0, custom_timezone_option(value))
    state.values["tz_string"] = value


class ConfigSync:
    def __init__(self, client: DeviceClient, state: FormState):
        self.client = client
        self.state = state

    async def load(self) -> bool:
        try:
            response = await self.client.get_config()
        except Exception as exc:
            logging.warning("Config load failed: %s", exc)
            self.state.status.show(f"Config fetch error: {exc}", error=True, source=SOURCE)
            return False
        if not response.is_success:
            self.state.status.show(f"Config load error: {response.status_code}", error=True, source=SOURCE)
            return False
        data = json_body(response)
        if data is None:
            self.state.status.show("Config load error: invalid response", error=True, source=SOURCE)
            return False

        record = ConfigRecord.model_validate(data)
        values = record.model_dump()
        app_version = data.get("app_version")

        # pełne nadpisanie dopiero po walidacji całej odpowiedzi
        tz_value = values.pop("tz_string")
        self.state.values.update(values)
        select_timezone(self.state, tz_value)
        self.state.app_version = str(app_version) if app_version is not None else None
        logging.info("Config loaded from device (%s)", self.client.base_url)
        self.state.status.show("Config loaded", source=SOURCE)
        return True

    def gather(self) -> Dict[str, Any]:
        values = self.state.values
        payload: Dict[str, Any] = {}
        for name in TEXT_FIELDS:
            raw = values.get(name)
            payload[name] = "" if raw is None else str(raw)
        payload["mqtt_enabled"] = values.get("mqtt_enabled") is True
        for name in INT_FIELDS:
            payload[name] = parse_int(values.get(name), FORM_DEFAULTS[name])
        for name in FLOAT_FIELDS:
            payload[name] = parse_float(values.get(name), FORM_DEFAULTS[name])
        for name in SECRET_FIELDS:
            secret = self.state.secrets.get(name) or ""
            if secret:
                payload[name] = secret
        return ConfigSavePayload(**payload).to_json()

    async def save(self) -> bool:
        payload = self.gather()
        try:
            response = await self.client.post_config(payload)
        except Exception as exc:
            logging.warning("Config save failed: %s", exc)
            self.state.status.show(f"Config POST error: {exc}", error=True, source=SOURCE)
            return False
        body = json_body(response)
        if not (response.is_success and body is not None and body.get("ok")):
            logging.warning("Config save rejected (HTTP %s)", response.status_code)
            self.state.status.show("Config save error", error=True, source=SOURCE)
            return False

        self._follow_admin_credentials(payload)
        self.state.clear_secrets()
        self.state.status.show("Config saved", source=SOURCE)
        return True

    def _follow_admin_credentials(self, payload: Dict[str, Any]) -> None:
        admin_user = payload.get("admin_user") or ""
        admin_pass: Optional[str] = payload.get("admin_pass") or self.client.password
        if not admin_user:
            return
        if (admin_user, admin_pass) != (self.client.username, self.client.password):
            self.client.set_credentials(admin_user, admin_pass)


__all__ = ["ConfigSync", "select_timezone", "custom_timezone_option"]
