# -*- coding: utf-8 -*-
"""Wi-Fi access point scan: reconciliation, ranking and selection."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from epdconsole.core.device_client import DeviceClient, json_body
from epdconsole.core.models import NO_SELECTION, AccessPoint, FormState, SelectOption

# Brak rssi przy deduplikacji = najgorszy sygnał, przy sortowaniu = 0.
# Asymetria jest zachowana celowo, do decyzji produktowej.
DEDUPE_MISSING_RSSI = -999
SORT_MISSING_RSSI = 0

SOURCE = "wifi"


class ScanError(Exception):
    """Raised when the scan response does not satisfy the device contract."""


def _rssi(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def parse_access_points(entries: Iterable[Any]) -> List[AccessPoint]:
    points: List[AccessPoint] = []
    for raw in entries:
        if not isinstance(raw, dict):
            continue
        ssid = raw.get("ssid")
        if not isinstance(ssid, str) or not ssid:
            continue
        points.append(AccessPoint(ssid=ssid, rssi=_rssi(raw.get("rssi"))))
    return points


def dedupe_access_points(points: Iterable[AccessPoint]) -> List[AccessPoint]:
    """Keep one entry per ssid, the one with the highest rssi."""
    best: Dict[str, AccessPoint] = {}
    for ap in points:
        current = best.get(ap.ssid)
        if current is None:
            best[ap.ssid] = ap
            continue
        rssi = ap.rssi if ap.rssi is not None else DEDUPE_MISSING_RSSI
        current_rssi = current.rssi if current.rssi is not None else DEDUPE_MISSING_RSSI
        if rssi > current_rssi:
            best[ap.ssid] = ap
    return list(best.values())


def sort_access_points(points: Iterable[AccessPoint]) -> List[AccessPoint]:
    return sorted(
        points,
        key=lambda ap: ap.rssi if ap.rssi is not None else SORT_MISSING_RSSI,
        reverse=True,
    )


def build_options(points: Iterable[AccessPoint]) -> List[SelectOption]:
    options = [SelectOption(value=NO_SELECTION, label="-- select a network --")]
    for ap in points:
        label = ap.ssid if ap.rssi is None else f"{ap.ssid} ({ap.rssi} dBm)"
        options.append(SelectOption(value=ap.ssid, label=label))
    return options


class WifiScanner:
    def __init__(self, client: DeviceClient, state: FormState):
        self.client = client
        self.state = state

    async def _fetch(self) -> List[Any]:
        response = await self.client.wifi_scan()
        if not response.is_success:
            raise ScanError(f"HTTP {response.status_code}")
        body = json_body(response)
        if body is None:
            raise ScanError("invalid response")
        if not body.get("ok"):
            reason = body.get("err") or body.get("error") or "device reported failure"
            raise ScanError(str(reason))
        aps = body.get("aps")
        if not isinstance(aps, list):
            raise ScanError("missing access point list")
        return aps

    async def scan(self) -> bool:
        wifi = self.state.wifi
        wifi.button_enabled = False
        self.state.status.show("Scanning Wi-Fi networks...", severity="info", source=SOURCE)
        try:
            entries = await self._fetch()
            points = sort_access_points(dedupe_access_points(parse_access_points(entries)))
            wifi.access_points = points
            wifi.options = build_options(points)
            wifi.selected = NO_SELECTION
            self.state.status.show(f"Wi-Fi scan: {len(points)} network(s) found", source=SOURCE)
            return True
        except Exception as exc:
            logging.warning("Wi-Fi scan failed: %s", exc)
            self.state.status.show(f"Wi-Fi scan failed: {exc}", error=True, source=SOURCE)
            return False
        finally:
            wifi.button_enabled = True

    def select(self, ssid: str) -> None:
        """Copy the chosen network into the form; nothing else happens."""
        self.state.wifi.selected = ssid
        if ssid == NO_SELECTION:
            return
        self.state.values["wifi_ssid"] = ssid


__all__ = [
    "WifiScanner",
    "ScanError",
    "parse_access_points",
    "dedupe_access_points",
    "sort_access_points",
    "build_options",
]
