# -*- coding: utf-8 -*-
"""Helper utilities for validating user edits and parsing form inputs."""
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Optional

from epdconsole.core.models import SECRET_FIELDS


class FormValidationError(ValueError):
    """Raised when a user edit cannot be applied to the form."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


# max_length = bufor w firmware minus terminator (strlcpy obcina resztę)
FORM_FIELD_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    # Wi-Fi
    "wifi_ssid": {"type": str, "max_length": 31},
    "wifi_pass": {"type": str, "max_length": 63, "secret": True},
    # MQTT
    "mqtt_enabled": {"type": bool},
    "mqtt_host": {"type": str, "max_length": 63},
    "mqtt_port": {"type": int},
    "mqtt_user": {"type": str, "max_length": 31},
    "mqtt_pass": {"type": str, "max_length": 63, "secret": True},
    "mqtt_topic": {"type": str, "max_length": 63},
    # Czasy
    "interactive_timeout_ms": {"type": int},
    "deepsleep_interval_s": {"type": int},
    # Urządzenie
    "device_name": {"type": str, "max_length": 31},
    "admin_user": {"type": str, "max_length": 15},
    "admin_pass": {"type": str, "max_length": 15, "secret": True},
    "tz_string": {"type": "choice", "max_length": 63},
    # Kalibracja czujnika
    "temp_offset_c": {"type": float},
    "hum_offset_pct": {"type": float},
}


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def parse_int(value: Any, default: int) -> int:
    """Parse a numeric input, falling back to ``default`` on empty/garbage."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return default
        return int(number) if math.isfinite(number) else default
    return default


def parse_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default


def sanitize_form_edits(changes: Dict[str, Any], timezones: Iterable[str]) -> Dict[str, Any]:
    """Validate raw edits coming from the rendering layer.

    Numeric inputs are kept as typed so that save-time parsing can fall back
    to defaults; only the field name, the value kind and the timezone choice
    are checked here.
    """
    allowed_tz = set(timezones)
    sanitized: Dict[str, Any] = {}
    for key, value in changes.items():
        meta = FORM_FIELD_DEFINITIONS.get(key)
        if meta is None:
            raise FormValidationError(f"Unknown form field '{key}'", key)
        field_type = meta["type"]
        if field_type is bool:
            sanitized[key] = coerce_bool(value)
            continue
        if value is None:
            value = ""
        if isinstance(value, (dict, list)):
            raise FormValidationError(f"Invalid value for field '{key}'", key)
        if field_type == "choice":
            value = str(value)
            if value not in allowed_tz:
                raise FormValidationError(f"Timezone '{value}' is not in the option list", key)
        if field_type in ("choice", str):
            value = str(value)
            limit = meta.get("max_length")
            if limit is not None and len(value) > limit:
                raise FormValidationError(f"Field '{key}' is longer than {limit} characters", key)
        sanitized[key] = value
    return sanitized


def split_secret_edits(changes: Dict[str, Any]) -> tuple[Dict[str, Any], Dict[str, str]]:
    values = {k: v for k, v in changes.items() if k not in SECRET_FIELDS}
    secrets = {k: str(v) for k, v in changes.items() if k in SECRET_FIELDS}
    return values, secrets


__all__ = [
    "FormValidationError",
    "FORM_FIELD_DEFINITIONS",
    "coerce_bool",
    "parse_int",
    "parse_float",
    "sanitize_form_edits",
    "split_secret_edits",
]
