# -*- coding: utf-8 -*-
# epdconsole/core/schemas.py - Pydantic models for the device contract and console API
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, field_validator

from epdconsole.core.models import DEFAULT_TZ


class ConfigRecord(BaseModel):
    """Device configuration as returned by ``GET /api/config``.

    Secrets are not part of the record: the device never echoes them (the
    firmware sends ``*****`` placeholders which are dropped as extra keys).
    Missing, null or malformed fields fall back to their default one by one.
    """

    model_config = ConfigDict(extra="ignore")

    wifi_ssid: str = ""
    mqtt_enabled: StrictBool = False
    mqtt_host: str = ""
    mqtt_port: int = 1883
    mqtt_user: str = ""
    mqtt_topic: str = ""
    interactive_timeout_ms: int = 600000
    deepsleep_interval_s: int = 60
    device_name: str = ""
    admin_user: str = ""
    tz_string: str = DEFAULT_TZ
    temp_offset_c: float = 0.0
    hum_offset_pct: float = 0.0

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_error(cls, value, handler, info):
        default = cls.model_fields[info.field_name].default
        if value is None:
            return default
        try:
            return handler(value)
        except ValidationError:
            return default

    @field_validator("tz_string")
    @classmethod
    def _blank_tz_is_default(cls, value):
        if not value.strip():
            return DEFAULT_TZ
        return value


class ConfigSavePayload(BaseModel):
    """Body of ``POST /api/config``; secrets are omitted when not set."""

    wifi_ssid: str
    wifi_pass: Optional[str] = None
    mqtt_enabled: bool
    mqtt_host: str
    mqtt_port: int
    mqtt_user: str
    mqtt_pass: Optional[str] = None
    mqtt_topic: str
    interactive_timeout_ms: int
    deepsleep_interval_s: int
    device_name: str
    admin_user: str
    admin_pass: Optional[str] = None
    tz_string: str
    temp_offset_c: float
    hum_offset_pct: float

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AccessPointDTO(BaseModel):
    ssid: str
    rssi: Optional[int] = None


class SelectOptionDTO(BaseModel):
    value: str
    label: str
    custom: bool = False


class StatusDTO(BaseModel):
    message: str
    severity: str


class LogPanelDTO(BaseModel):
    text: str
    scroll_top: int


class WifiStateDTO(BaseModel):
    button_enabled: bool
    options: List[SelectOptionDTO]
    selected: str


class StateDTO(BaseModel):
    form: Dict[str, Any]
    secrets_pending: Dict[str, bool]
    timezones: List[SelectOptionDTO]
    app_version: Optional[str] = None
    status: StatusDTO
    logs: LogPanelDTO
    reachable: bool
    wifi: WifiStateDTO


class FormEditPayload(BaseModel):
    values: Dict[str, Any]

    model_config = ConfigDict(extra="forbid")


class WifiSelectPayload(BaseModel):
    ssid: str = Field(..., max_length=32)


class RebootPayload(BaseModel):
    confirm: bool = False


class ActionResultDTO(BaseModel):
    ok: bool
    status: StatusDTO
