import json
from datetime import date

import pytest

from ponto.config import AppConfig
from ponto.models import CompensationPolicy, ShiftKind
from ponto.schedules import (
    ScheduleRecord,
    cargar_escalas,
    escala_desde_dict,
    preparar_entrada,
    resolver_escala,
)

LUNES = date(2025, 12, 1)
MIERCOLES = date(2025, 12, 3)
NAVIDAD = date(2025, 12, 24)
DOMINGO = date(2025, 12, 7)

DATA = {
    "policy": "PAYROLL",
    "weekdays": {
        "lunes": {"morning_start": "08:00", "morning_end": "12:00", "afternoon_start": "13:00", "afternoon_end": "17:00"},
        "2": {"morning_start": "08:00", "morning_end": "12:00", "afternoon_start": "13:00", "afternoon_end": "17:00"},
    },
    "overrides": {
        "2025-12-24": {"morning_start": "08:00", "morning_end": "12:00"},
    },
}


def test_default_por_dia_de_semana():
    emp = escala_desde_dict("1", DATA)
    assert emp.policy == CompensationPolicy.PAYROLL
    rec = resolver_escala(emp, LUNES)
    assert rec.afternoon_end == "17:00"
    assert resolver_escala(emp, "2025-12-03") == emp.weekdays[2]


def test_excepcion_reemplaza_completo():
    emp = escala_desde_dict("1", DATA)
    assert NAVIDAD.weekday() == 2
    rec = resolver_escala(emp, NAVIDAD)
    assert rec.morning_end == "12:00"
    assert rec.afternoon_start is None
    assert rec.afternoon_end is None


def test_dia_sin_escala():
    emp = escala_desde_dict("1", DATA)
    assert resolver_escala(emp, DOMINGO) is None
    assert resolver_escala(emp, "no-es-fecha") is None


def test_preparar_jornada_completa():
    rec = ScheduleRecord("08:00", "12:00", "13:00", "17:00", interval_tolerance_minutes=5)
    spec, ov, tol = preparar_entrada(rec)
    assert ov is None
    assert spec.morning_end == "12:00"
    assert tol == 5


def test_preparar_turno_manana_descarta_comida():
    rec = ScheduleRecord("07:00", "10:00", "10:20", "13:20", shift_type="MORNING_ONLY")
    spec, ov, tol = preparar_entrada(rec, AppConfig(tolerancia_intervalo_min=3))
    assert spec.morning_start == "07:00"
    assert spec.afternoon_end == "13:20"
    assert spec.morning_end is None and spec.afternoon_start is None
    assert ov.kind == ShiftKind.MORNING_ONLY
    assert ov.break_minutes == 20
    assert tol == 3


def test_preparar_turno_tarde_con_descanso():
    rec = ScheduleRecord(None, None, "13:00", "19:20", shift_type="AFTERNOON_ONLY", break_minutes=30)
    spec, ov, _ = preparar_entrada(rec)
    assert spec.afternoon_start == "13:00"
    assert spec.morning_start is None
    assert ov.kind == ShiftKind.AFTERNOON_ONLY
    assert ov.break_minutes == 30


def test_cargar_escalas(tmp_path):
    p = tmp_path / "escalas.json"
    p.write_text(json.dumps({"empleados": {"7": DATA, "8": {"weekdays": {"0": {"morning_start": "9:00", "morning_end": "13:00"}}}}}), encoding="utf-8")
    escalas = cargar_escalas(p)
    assert set(escalas) == {"7", "8"}
    assert escalas["8"].policy == CompensationPolicy.HOUR_BANK
    assert escalas["8"].weekdays[0].morning_start == "09:00"


def test_cargar_escalas_id_con_ceros(tmp_path):
    p = tmp_path / "escalas.json"
    p.write_text(json.dumps({"7": DATA}), encoding="utf-8")
    escalas = cargar_escalas(p, AppConfig(id_min_width=3))
    assert set(escalas) == {"007"}


@pytest.mark.parametrize(
    "bad",
    [
        {"weekdays": {"0": {"morning_start": "25:00"}}},
        {"weekdays": {"9": {"morning_start": "08:00"}}},
        {"weekdays": {"0": {"shift_type": "NIGHT"}}},
        {"policy": "XYZ"},
        {"overrides": {"24/12/2025": {}}},
    ],
)
def test_cargar_escalas_invalidas(tmp_path, bad):
    p = tmp_path / "escalas.json"
    p.write_text(json.dumps({"1": bad}), encoding="utf-8")
    with pytest.raises(ValueError):
        cargar_escalas(p)


def test_cargar_escalas_errores_de_archivo(tmp_path):
    with pytest.raises(FileNotFoundError):
        cargar_escalas(tmp_path / "no.json")
    p = tmp_path / "roto.json"
    p.write_text("{no json", encoding="utf-8")
    with pytest.raises(ValueError):
        cargar_escalas(p)


def test_cargar_escalas_id_vacio(tmp_path):
    p = tmp_path / "escalas.json"
    p.write_text(json.dumps({" ": DATA}), encoding="utf-8")
    with pytest.raises(ValueError, match="vac|empty"):
        cargar_escalas(p)
