from datetime import date, datetime, time

import pytest

from ponto.parsers import parse_date, parse_direction, parse_int, parse_punch, parse_time_of_day


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("08:00", time(8, 0)),
        ("8:05", time(8, 5)),
        ("08:00:59", time(8, 0)),
        (" 17:56 ", time(17, 56)),
        (datetime(2025, 12, 1, 7, 55, 12), time(7, 55)),
    ],
)
def test_parse_time_of_day_ok(raw, expected):
    assert parse_time_of_day(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "nan", "NaT", "24:00", "12:60", "1200", "abc"])
def test_parse_time_of_day_invalido_devuelve_none(raw):
    assert parse_time_of_day(raw) is None


def test_parse_punch_formatos():
    assert parse_punch("2025-12-05 06:55:24") == datetime(2025, 12, 5, 6, 55, 24)
    assert parse_punch("2025-12-05 06:55") == datetime(2025, 12, 5, 6, 55)
    assert parse_punch("2025-12-05T06:55:24") == datetime(2025, 12, 5, 6, 55, 24)
    assert parse_punch("2025/12/05 06:55") == datetime(2025, 12, 5, 6, 55)
    dt = datetime(2025, 1, 1, 8, 0)
    assert parse_punch(dt) is dt


@pytest.mark.parametrize("raw", [None, "", "none", "05/12/2025 06:55", "garbage", "2025-13-01 08:00"])
def test_parse_punch_invalido(raw):
    assert parse_punch(raw) is None


def test_parse_date():
    assert parse_date("2025-12-05") == date(2025, 12, 5)
    assert parse_date("2025-12-05 10:00:00") == date(2025, 12, 5)
    assert parse_date(datetime(2025, 12, 5, 10, 0)) == date(2025, 12, 5)
    assert parse_date(date(2025, 12, 5)) == date(2025, 12, 5)
    assert parse_date("05/12/2025") is None
    assert parse_date(None) is None


def test_parse_direction():
    assert parse_direction("1") == 1
    assert parse_direction("0") == 0
    assert parse_direction("1.0") == 1
    assert parse_direction("") is None
    assert parse_direction("in") is None
    assert parse_direction(None) is None


def test_parse_int():
    assert parse_int(20) == 20
    assert parse_int("30") == 30
    assert parse_int("30.0") == 30
    assert parse_int(15.0) == 15
    assert parse_int(-5) == -5
    assert parse_int(1.5) is None
    assert parse_int(float("nan")) is None
    assert parse_int(True) is None
    assert parse_int("abc") is None
    assert parse_int("") is None
    assert parse_int(None) is None
