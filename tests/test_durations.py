import pytest

from durations import format_duration, format_time


@pytest.mark.parametrize("token,expected", [
    ("PT1H2M3S", "1:02:03"),
    ("PT5M9S", "5:09"),
    ("PT45S", "0:45"),
    ("PT10M", "10:00"),
    ("PT2H", "2:00:00"),
    ("PT1H0M30S", "1:00:30"),
])
def test_format_duration(token, expected):
    assert format_duration(token) == expected


@pytest.mark.parametrize("token", ["", None, "garbage", "P1D"])
def test_format_duration_unrecognized_is_empty(token):
    assert format_duration(token) == ""


@pytest.mark.parametrize("seconds,expected", [
    (0, "0:00"),
    (5, "0:05"),
    (65.9, "1:05"),
    (599.99, "9:59"),
    (3600, "60:00"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


@pytest.mark.parametrize("seconds", [None, float("nan"), float("inf"), -3])
def test_format_time_invalid_positions(seconds):
    assert format_time(seconds) == "0:00"
