# -*- coding: utf-8 -*-
# epdconsole/core/config.py – konfiguracja aplikacji + settings.yaml
import logging
from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]
CONFIG_DIR = BASE_DIR / "config"
DB_DIR = BASE_DIR / "data"
LOG_DIR = BASE_DIR / "logs"


class Settings(BaseSettings):
    # .env
    ADMIN_TOKEN: str = "change_me"
    DEVICE_URL: str = "http://192.168.4.1"
    DEVICE_USERNAME: str = "admin"
    DEVICE_PASSWORD: str = "admin"
    DEVICE_TIMEOUT_S: float = 5.0
    LOG_LEVEL: str = "INFO"
    # CORS
    cors_allow_origins: list[str] = ["*"]

    # Ścieżki
    db_path: str = str(DB_DIR / "epdconsole.sqlite3")
    settings_yaml: str = str(CONFIG_DIR / "settings.yaml")

    model_config = SettingsConfigDict(env_file=CONFIG_DIR / ".env", extra="ignore")


def load_yaml_settings(path: str):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logging.warning("Failed to read settings.yaml: %s", exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def ensure_dirs():
    DB_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
yaml_cfg = load_yaml_settings(settings.settings_yaml)


# Pomocnicze
def _parse_dashboard_mode(value, default="consolidated") -> str:
    if isinstance(value, str):
        val = value.strip().lower()
        if val in ("consolidated", "legacy"):
            return val
    return default


DEFAULT_TIMEZONES: list[dict] = [
    {"value": "CET-1CEST,M3.5.0/2,M10.5.0/3", "label": "Europe/Paris"},
    {"value": "GMT0BST,M3.5.0/1,M10.5.0", "label": "Europe/London"},
    {"value": "EET-2EEST,M3.5.0/3,M10.5.0/4", "label": "Europe/Helsinki"},
    {"value": "UTC0", "label": "UTC"},
    {"value": "EST5EDT,M3.2.0,M11.1.0", "label": "America/New_York"},
    {"value": "CST6CDT,M3.2.0,M11.1.0", "label": "America/Chicago"},
    {"value": "PST8PDT,M3.2.0,M11.1.0", "label": "America/Los_Angeles"},
    {"value": "JST-9", "label": "Asia/Tokyo"},
    {"value": "AEST-10AEDT,M10.1.0,M4.1.0/3", "label": "Australia/Sydney"},
]

# Kluczowe parametry z YAML
DASHBOARD = yaml_cfg.get("dashboard", {})                  # polling logów + ping
if not isinstance(DASHBOARD, dict):
    DASHBOARD = {}
DASHBOARD["mode"] = _parse_dashboard_mode(DASHBOARD.get("mode"))
DASHBOARD.setdefault("poll_interval_ms", 2000)
DASHBOARD.setdefault("ping_interval_ms", 10000)
DASHBOARD.setdefault("reachable_clear_ms", 1500)
DASHBOARD.setdefault("page_id", "config")

SECURITY = yaml_cfg.get("security", {})                    # token dla operacji wrażliwych
if not isinstance(SECURITY, dict):
    SECURITY = {}
SECURITY.setdefault("require_token", False)

_RAW_TIMEZONES = yaml_cfg.get("timezones", [])             # lista stref czasowych POSIX
TIMEZONES: list[dict] = []
if isinstance(_RAW_TIMEZONES, list):
    seen_values = set()
    for raw in _RAW_TIMEZONES:
        if isinstance(raw, str):
            raw = {"value": raw}
        if not isinstance(raw, dict):
            continue
        value = str(raw.get("value") or "").strip()
        if not value or value in seen_values:
            continue
        label = str(raw.get("label") or value).strip()
        TIMEZONES.append({"value": value, "label": label})
        seen_values.add(value)
if not TIMEZONES:
    TIMEZONES = [dict(tz) for tz in DEFAULT_TIMEZONES]
