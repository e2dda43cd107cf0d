# -*- coding: utf-8 -*-
# epdconsole/core/models.py - runtime models (in-memory) for the form/display state
import asyncio
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional

from epdconsole.core.config import TIMEZONES

SECRET_FIELDS = ("wifi_pass", "mqtt_pass", "admin_pass")

DEFAULT_TZ = "CET-1CEST,M3.5.0/2,M10.5.0/3"

# Domyślne wartości pól formularza (bez sekretów)
FORM_DEFAULTS: Dict[str, Any] = {
    "wifi_ssid": "",
    "mqtt_enabled": False,
    "mqtt_host": "",
    "mqtt_port": 1883,
    "mqtt_user": "",
    "mqtt_topic": "",
    "interactive_timeout_ms": 600000,
    "deepsleep_interval_s": 60,
    "device_name": "",
    "admin_user": "",
    "tz_string": DEFAULT_TZ,
    "temp_offset_c": 0.0,
    "hum_offset_pct": 0.0,
}

NO_SELECTION = ""


@dataclass
class SelectOption:
    value: str
    label: str
    custom: bool = False


@dataclass
class AccessPoint:
    ssid: str
    rssi: Optional[int] = None


@dataclass
class StatusLine:
    message: str = ""
    severity: str = "info"  # info | success | error
    listener: Optional[Callable[[str, str, Optional[str]], None]] = field(default=None, repr=False)

    def show(self, message: str, error: bool = False, severity: Optional[str] = None,
             source: Optional[str] = None):
        self.message = message
        self.severity = severity or ("error" if error else "success")
        if self.listener:
            self.listener(self.message, self.severity, source)

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


@dataclass
class LogPanel:
    """Log tail shown on the dashboard; scroll position is counted in lines."""

    text: str = ""
    scroll_top: int = 0
    writes: int = 0

    @property
    def scroll_height(self) -> int:
        if not self.text:
            return 0
        return len(self.text.splitlines())

    def show(self, text: str) -> bool:
        # exact comparison, no write when unchanged
        if self.text == text:
            return False
        self.text = text
        self.writes += 1
        self.scroll_to_bottom()
        return True

    def scroll_to_bottom(self):
        self.scroll_top = self.scroll_height

    def scroll_to(self, line: int):
        self.scroll_top = max(0, min(int(line), self.scroll_height))


@dataclass
class ReachabilityIndicator:
    visible: bool = False
    shown: int = 0
    _clear_handle: Optional[asyncio.TimerHandle] = field(default=None, repr=False)

    def show(self, clear_after_s: float):
        self.visible = True
        self.shown += 1
        if self._clear_handle is not None:
            self._clear_handle.cancel()
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(clear_after_s, self.clear)

    def clear(self):
        self.visible = False
        self._clear_handle = None


def _placeholder_options() -> List[SelectOption]:
    return [SelectOption(value=NO_SELECTION, label="-- select a network --")]


@dataclass
class WifiScanState:
    button_enabled: bool = True
    access_points: List[AccessPoint] = field(default_factory=list)
    options: List[SelectOption] = field(default_factory=_placeholder_options)
    selected: str = NO_SELECTION


def _timezone_options() -> List[SelectOption]:
    return [SelectOption(value=tz["value"], label=tz["label"]) for tz in TIMEZONES]


@dataclass
class FormState:
    """Single form/display state shared by the console components."""

    values: Dict[str, Any] = field(default_factory=lambda: dict(FORM_DEFAULTS))
    secrets: Dict[str, str] = field(default_factory=lambda: {name: "" for name in SECRET_FIELDS})
    timezones: List[SelectOption] = field(default_factory=_timezone_options)
    app_version: Optional[str] = None
    status: StatusLine = field(default_factory=StatusLine)
    logs: LogPanel = field(default_factory=LogPanel)
    reachability: ReachabilityIndicator = field(default_factory=ReachabilityIndicator)
    wifi: WifiScanState = field(default_factory=WifiScanState)

    def clear_secrets(self):
        for name in SECRET_FIELDS:
            self.secrets[name] = ""

    def timezone_values(self) -> List[str]:
        return [opt.value for opt in self.timezones]

    def snapshot(self) -> Dict[str, Any]:
        return {
            "form": dict(self.values),
            "secrets_pending": {name: bool(value) for name, value in self.secrets.items()},
            "timezones": [asdict(opt) for opt in self.timezones],
            "app_version": self.app_version,
            "status": {"message": self.status.message, "severity": self.status.severity},
            "logs": {"text": self.logs.text, "scroll_top": self.logs.scroll_top},
            "reachable": self.reachability.visible,
            "wifi": {
                "button_enabled": self.wifi.button_enabled,
                "options": [asdict(opt) for opt in self.wifi.options],
                "selected": self.wifi.selected,
            },
        }
