from datetime import datetime, time

from ponto.time_utils import (
    minute_delta,
    minutes_to_hhmm,
    minutos_o_cero,
    seconds_between,
    signed_minutes_to_hhmm,
    time_of_day_to_seconds,
    to_minutes_floor,
)


def test_to_minutes_floor_trunca():
    assert to_minutes_floor(0) == 0
    assert to_minutes_floor(59) == 0
    assert to_minutes_floor(119) == 1
    assert to_minutes_floor(120) == 2


def test_minute_delta_descarta_segundos():
    assert minute_delta(time(8, 0, 0), time(8, 0, 59)) == 0
    assert minute_delta(time(8, 0), datetime(2025, 12, 1, 8, 13, 45)) == 13
    assert minute_delta(time(18, 0), datetime(2025, 12, 1, 17, 56, 59)) == -4


def test_seconds_between_trunca_ambos_operandos():
    a = datetime(2025, 12, 1, 8, 13, 59)
    b = datetime(2025, 12, 1, 12, 11, 0)
    assert seconds_between(a, b) == 238 * 60


def test_seconds_between_respeta_fecha():
    a = datetime(2025, 12, 1, 22, 0)
    b = datetime(2025, 12, 2, 2, 0)
    assert seconds_between(a, b) == 4 * 3600


def test_time_of_day_to_seconds():
    assert time_of_day_to_seconds("08:30") == 8 * 3600 + 30 * 60
    assert time_of_day_to_seconds("8:30") == 8 * 3600 + 30 * 60
    assert time_of_day_to_seconds(time(13, 0)) == 13 * 3600
    assert time_of_day_to_seconds("25:00") is None
    assert time_of_day_to_seconds("abc") is None
    assert time_of_day_to_seconds(None) is None


def test_formatos_hhmm():
    assert minutes_to_hhmm(463) == "07:43"
    assert minutes_to_hhmm(0) == "00:00"
    assert minutes_to_hhmm(-5) == "00:00"
    assert signed_minutes_to_hhmm(-17) == "-00:17"
    assert signed_minutes_to_hhmm(25) == "00:25"


def test_minutos_o_cero():
    assert minutos_o_cero(20) == 20
    assert minutos_o_cero("10") == 10
    assert minutos_o_cero(None) == 0
    assert minutos_o_cero("abc") == 0
    assert minutos_o_cero(-5) == 0
