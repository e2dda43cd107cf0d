import asyncio
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from epdconsole.core import controller as controller_module  # noqa: E402
from epdconsole.core.device_client import DeviceClient  # noqa: E402
from epdconsole.core.form_helpers import FormValidationError  # noqa: E402


class FakeDevice:
    def __init__(self, logs_error=False):
        self.calls = []
        self.logs_error = logs_error

    def __call__(self, request):
        self.calls.append((request.method, request.url.path))
        path = request.url.path
        if path == "/api/config" and request.method == "GET":
            return httpx.Response(200, json={"wifi_ssid": "home", "device_name": "EPD-Clock"})
        if path == "/api/config":
            return httpx.Response(200, json={"ok": True})
        if path == "/api/dashboard":
            return httpx.Response(200, json={"ok": True, "logs": "[10] ready\n"})
        if path == "/api/logs":
            if self.logs_error:
                raise httpx.ConnectError("rebooting", request=request)
            return httpx.Response(200, text="[10] ready\n")
        if path == "/ping":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404)

    def count(self, path):
        return sum(1 for _, p in self.calls if p == path)


def make_controller(device, mode="consolidated"):
    client = DeviceClient(base_url="http://device.test", transport=httpx.MockTransport(device))
    return controller_module.Controller(client=client, mode=mode, record_history=False)


def test_start_loads_config_and_polls_immediately():
    device = FakeDevice()

    async def main():
        ctrl = make_controller(device)
        ctrl.start()
        await asyncio.sleep(0.05)
        await ctrl.stop()
        return ctrl

    ctrl = asyncio.run(main())
    assert ctrl.state.values["wifi_ssid"] == "home"
    assert ctrl.state.logs.text == "[10] ready\n"
    assert device.count("/api/dashboard") == 1
    assert device.count("/ping") == 0


def test_legacy_mode_keeps_ping_timer_running_when_logs_fail(monkeypatch):
    monkeypatch.setitem(controller_module.DASHBOARD, "poll_interval_ms", 10)
    monkeypatch.setitem(controller_module.DASHBOARD, "ping_interval_ms", 10)
    device = FakeDevice(logs_error=True)

    async def main():
        ctrl = make_controller(device, mode="legacy")
        ctrl.start()
        await asyncio.sleep(0.08)
        await ctrl.stop()
        return ctrl

    ctrl = asyncio.run(main())
    assert device.count("/api/logs") >= 3
    assert device.count("/ping") >= 3
    assert ctrl.state.logs.text == ""
    assert ctrl.state.status.message == "Config loaded"


def test_edit_keeps_secrets_out_of_snapshot():
    device = FakeDevice()

    async def main():
        ctrl = make_controller(device)
        ctrl.edit({"wifi_ssid": "office", "wifi_pass": "hunter2", "mqtt_port": "18 83"})
        snap = ctrl.snapshot()
        await ctrl.client.close()
        return ctrl, snap

    ctrl, snap = asyncio.run(main())
    assert snap["form"]["wifi_ssid"] == "office"
    assert snap["secrets_pending"]["wifi_pass"] is True
    assert "hunter2" not in repr(snap)
    assert ctrl.state.secrets["wifi_pass"] == "hunter2"
    assert ctrl.config.gather()["mqtt_port"] == 1883


def test_edit_rejects_unknown_field():
    device = FakeDevice()

    async def main():
        ctrl = make_controller(device)
        try:
            with pytest.raises(FormValidationError):
                ctrl.edit({"colour": "red"})
        finally:
            await ctrl.client.close()

    asyncio.run(main())


def test_select_network_does_not_scan_or_save():
    device = FakeDevice()

    async def main():
        ctrl = make_controller(device)
        ctrl.select_network("neighbour")
        await ctrl.client.close()
        return ctrl

    ctrl = asyncio.run(main())
    assert ctrl.state.values["wifi_ssid"] == "neighbour"
    assert device.calls == []
