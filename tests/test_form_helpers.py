import math

import pytest

from epdconsole.core.form_helpers import (
    FormValidationError,
    coerce_bool,
    parse_float,
    parse_int,
    sanitize_form_edits,
    split_secret_edits,
)

TIMEZONES = ["CET-1CEST,M3.5.0/2,M10.5.0/3", "UTC0"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1884", 1884),
        (" 42 ", 42),
        ("", 1883),
        ("abc", 1883),
        ("12.7", 12),
        (0, 0),
        (True, 1883),
        (None, 1883),
        (math.inf, 1883),
    ],
)
def test_parse_int_falls_back_on_garbage(value, expected):
    assert parse_int(value, 1883) == expected


@pytest.mark.parametrize(
    "value, expected",
    [("0.5", 0.5), ("-2", -2.0), (3, 3.0), ("", 0.0), ("nan", 0.0), ("x", 0.0)],
)
def test_parse_float_falls_back_on_garbage(value, expected):
    assert parse_float(value, 0.0) == pytest.approx(expected)


def test_coerce_bool_strings():
    assert coerce_bool("on") is True
    assert coerce_bool("off") is False
    assert coerce_bool(1) is True


def test_sanitize_rejects_unknown_field():
    with pytest.raises(FormValidationError) as exc:
        sanitize_form_edits({"mqtt_server": "x"}, TIMEZONES)
    assert exc.value.field == "mqtt_server"


def test_sanitize_rejects_timezone_outside_option_list():
    with pytest.raises(FormValidationError):
        sanitize_form_edits({"tz_string": "MSK-3"}, TIMEZONES)


def test_sanitize_rejects_too_long_ssid():
    with pytest.raises(FormValidationError):
        sanitize_form_edits({"wifi_ssid": "x" * 33}, TIMEZONES)


def test_sanitize_keeps_numeric_input_raw():
    sanitized = sanitize_form_edits(
        {"mqtt_port": "not a port", "mqtt_enabled": "true", "tz_string": "UTC0", "device_name": None},
        TIMEZONES,
    )
    assert sanitized == {"mqtt_port": "not a port", "mqtt_enabled": True, "tz_string": "UTC0", "device_name": ""}


def test_split_secret_edits():
    values, secrets = split_secret_edits({"wifi_ssid": "home", "wifi_pass": "pw"})
    assert values == {"wifi_ssid": "home"}
    assert secrets == {"wifi_pass": "pw"}


@pytest.mark.parametrize(
    "field, longest",
    [("admin_pass", 15), ("admin_user", 15), ("wifi_ssid", 31), ("wifi_pass", 63), ("mqtt_topic", 63)],
)
def test_sanitize_limits_leave_room_for_device_terminator(field, longest):
    assert sanitize_form_edits({field: "p" * longest}, TIMEZONES) == {field: "p" * longest}
    with pytest.raises(FormValidationError) as exc:
        sanitize_form_edits({field: "p" * (longest + 1)}, TIMEZONES)
    assert exc.value.field == field


def test_sanitize_rejects_timezone_longer_than_device_buffer():
    long_tz = "X" * 64
    with pytest.raises(FormValidationError):
        sanitize_form_edits({"tz_string": long_tz}, TIMEZONES + [long_tz])
