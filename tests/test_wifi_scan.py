import asyncio
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from epdconsole.core.device_client import DeviceClient  # noqa: E402
from epdconsole.core.models import NO_SELECTION, AccessPoint, FormState  # noqa: E402
from epdconsole.core.wifi_scan import (  # noqa: E402
    WifiScanner,
    build_options,
    dedupe_access_points,
    parse_access_points,
    sort_access_points,
)


def rank(entries):
    return sort_access_points(dedupe_access_points(parse_access_points(entries)))


def run_scan(handler, state):
    async def main():
        client = DeviceClient(base_url="http://device.test", username="admin", password="admin",
                              transport=httpx.MockTransport(handler))
        try:
            return await WifiScanner(client, state).scan()
        finally:
            await client.close()

    return asyncio.run(main())


def test_dedupe_keeps_strongest_entry_per_ssid():
    ranked = rank([
        {"ssid": "A", "rssi": -40},
        {"ssid": "A", "rssi": -70},
        {"ssid": "B", "rssi": -60},
    ])
    assert [(ap.ssid, ap.rssi) for ap in ranked] == [("A", -40), ("B", -60)]


def test_entry_with_rssi_beats_entry_without():
    assert dedupe_access_points([AccessPoint("X"), AccessPoint("X", -90)]) == [AccessPoint("X", -90)]
    assert dedupe_access_points([AccessPoint("X", -90), AccessPoint("X")]) == [AccessPoint("X", -90)]


def test_missing_rssi_survives_dedupe_and_sorts_as_zero():
    ranked = rank([
        {"ssid": "weak", "rssi": -80},
        {"ssid": "hidden-rssi"},
        {"ssid": "strong", "rssi": -30},
    ])
    # brak rssi = -999 przy deduplikacji, ale 0 przy sortowaniu
    assert [ap.ssid for ap in ranked] == ["hidden-rssi", "strong", "weak"]
    assert ranked[0].rssi is None


def test_parse_skips_entries_without_usable_ssid():
    points = parse_access_points([{"ssid": ""}, {"rssi": -20}, "junk", {"ssid": "ok", "rssi": "strong"}])
    assert points == [AccessPoint("ok", None)]


def test_options_start_with_placeholder():
    options = build_options([AccessPoint("A", -40), AccessPoint("B")])
    assert options[0].value == NO_SELECTION
    assert [opt.value for opt in options[1:]] == ["A", "B"]
    assert options[1].label == "A (-40 dBm)"
    assert options[2].label == "B"


def test_scan_success_rebuilds_list_and_reenables_button():
    state = FormState()
    state.wifi.options.append(build_options([AccessPoint("stale", -10)])[1])
    seen = {}

    def handler(request):
        seen["button_enabled"] = state.wifi.button_enabled
        seen["status"] = state.status.message
        return httpx.Response(200, json={"ok": True, "aps": [
            {"ssid": "A", "rssi": -40},
            {"ssid": "A", "rssi": -70},
            {"ssid": "B", "rssi": -60},
        ]})

    assert run_scan(handler, state) is True
    assert seen["button_enabled"] is False
    assert seen["status"].startswith("Scanning")
    assert state.wifi.button_enabled is True
    assert [opt.value for opt in state.wifi.options] == [NO_SELECTION, "A", "B"]
    assert state.status.severity == "success"
    assert "2 network" in state.status.message


@pytest.mark.parametrize(
    "response, reason",
    [
        (httpx.Response(500, text="oops"), "HTTP 500"),
        (httpx.Response(200, json={"ok": False, "err": "scan busy"}), "scan busy"),
        (httpx.Response(200, json={"ok": True, "aps": {"ssid": "A"}}), "missing access point list"),
        (httpx.Response(200, text="<html>"), "invalid response"),
    ],
)
def test_scan_failure_reports_reason_and_keeps_previous_list(response, reason):
    state = FormState()
    state.wifi.options = build_options([AccessPoint("previous", -50)])
    assert run_scan(lambda request: response, state) is False
    assert state.status.is_error
    assert reason in state.status.message
    assert state.wifi.button_enabled is True
    assert [opt.value for opt in state.wifi.options] == [NO_SELECTION, "previous"]


def test_scan_transport_error_reenables_button():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    state = FormState()
    assert run_scan(handler, state) is False
    assert state.wifi.button_enabled is True
    assert state.status.is_error


def test_select_copies_ssid_without_requests():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    state = FormState()

    async def main():
        client = DeviceClient(base_url="http://device.test", transport=httpx.MockTransport(handler))
        scanner = WifiScanner(client, state)
        scanner.select("B")
        scanner.select(NO_SELECTION)
        await client.close()

    asyncio.run(main())
    assert state.values["wifi_ssid"] == "B"
    assert state.wifi.selected == NO_SELECTION
    assert calls == []
