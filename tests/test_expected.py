from datetime import time

from ponto.expected import calcular_previsto
from ponto.models import ScheduleSpec, ShiftKind, ShiftOverride


def test_jornada_completa():
    e = calcular_previsto(ScheduleSpec("08:00", "12:00", "14:00", "18:00"))
    assert e.morning_seconds == 240 * 60
    assert e.afternoon_seconds == 240 * 60
    assert e.total_seconds == 480 * 60


def test_acepta_objetos_time():
    e = calcular_previsto(ScheduleSpec(time(8, 0), time(12, 0), None, None))
    assert e.total_seconds == 240 * 60


def test_ventana_invertida_vale_cero():
    e = calcular_previsto(ScheduleSpec("12:00", "08:00", "13:00", "17:00"))
    assert e.morning_seconds == 0
    assert e.afternoon_seconds == 240 * 60


def test_hora_no_parseable_vale_cero():
    e = calcular_previsto(ScheduleSpec("xx", "12:00", "13:00", "17:00"))
    assert e.morning_seconds == 0
    assert e.total_seconds == 240 * 60


def test_turno_unico_manana_descuenta_descanso():
    spec = ScheduleSpec(morning_start="07:00", afternoon_end="13:20")
    e = calcular_previsto(spec, ShiftOverride(ShiftKind.MORNING_ONLY, 20))
    assert e.morning_seconds == 360 * 60
    assert e.afternoon_seconds == 0


def test_turno_unico_tarde_se_reporta_en_la_tarde():
    spec = ScheduleSpec(afternoon_start="13:00", afternoon_end="19:20")
    e = calcular_previsto(spec, ShiftOverride(ShiftKind.AFTERNOON_ONLY, 20))
    assert e.afternoon_seconds == 360 * 60
    assert e.morning_seconds == 0


def test_turno_unico_sin_campos():
    e = calcular_previsto(ScheduleSpec(afternoon_end="13:20"), ShiftOverride(ShiftKind.MORNING_ONLY, 20))
    assert e.total_seconds == 0


def test_turno_unico_descanso_mayor_que_ventana():
    spec = ScheduleSpec(morning_start="07:00", afternoon_end="07:10")
    e = calcular_previsto(spec, ShiftOverride(ShiftKind.MORNING_ONLY, 20))
    assert e.total_seconds == 0
