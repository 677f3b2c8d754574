"""Escalas por empleado: default por día de semana + excepciones por fecha."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .config import AppConfig
from .models import CompensationPolicy, ScheduleSpec, ShiftKind, ShiftOverride
from .parsers import parse_date
from .utils import normalize_id
from .validaciones import (
    validate_non_empty_string,
    validate_non_negative_int,
    validate_policy,
    validate_shift_type,
    validate_time_of_day,
    validate_weekday,
)

__all__ = [
    "ScheduleRecord",
    "EmployeeSchedule",
    "resolver_escala",
    "preparar_entrada",
    "escala_desde_dict",
    "cargar_escalas",
]

log = logging.getLogger("ponto.schedules")

WEEKDAY_NAMES = {
    "lunes": 0, "martes": 1, "miercoles": 2, "miércoles": 2, "jueves": 3,
    "viernes": 4, "sabado": 5, "sábado": 5, "domingo": 6,
}


@dataclass(frozen=True)
class ScheduleRecord:
    """Horario de un día (tal cual viene de la escala)."""

    morning_start: Optional[str] = None
    morning_end: Optional[str] = None
    afternoon_start: Optional[str] = None
    afternoon_end: Optional[str] = None
    shift_type: str = "FULL_DAY"
    break_minutes: Optional[int] = None
    interval_tolerance_minutes: Optional[int] = None

    @property
    def is_single_shift(self) -> bool:
        return self.shift_type in ("MORNING_ONLY", "AFTERNOON_ONLY")


@dataclass
class EmployeeSchedule:
    employee_id: str
    weekdays: Dict[int, ScheduleRecord] = field(default_factory=dict)  # 0=Lunes
    overrides: Dict[date, ScheduleRecord] = field(default_factory=dict)
    policy: CompensationPolicy = CompensationPolicy.HOUR_BANK


def resolver_escala(emp: EmployeeSchedule, work_date: Union[date, str]) -> Optional[ScheduleRecord]:
    """La excepción de la fecha reemplaza por completo al default del día de semana."""
    d = parse_date(work_date)
    if d is None:
        return None
    if d in emp.overrides:
        log.info("Usando excepción de escala para %s en %s", emp.employee_id, d.isoformat())
        return emp.overrides[d]
    return emp.weekdays.get(d.weekday())


def preparar_entrada(
    record: ScheduleRecord, cfg: Optional[AppConfig] = None
) -> Tuple[ScheduleSpec, Optional[ShiftOverride], int]:
    """
    Traduce el registro de escala a la entrada del motor: (ScheduleSpec, override, tolerancia de intervalo).

    - MORNING_ONLY: solo morning_start + afternoon_end (sin comida programada)
    - AFTERNOON_ONLY: afternoon_start + afternoon_end
    - Turno único sin descanso configurado: default_break_minutes (20)
    """
    cfg = cfg or AppConfig()
    tolerancia = record.interval_tolerance_minutes
    if tolerancia is None:
        tolerancia = cfg.tolerancia_intervalo_min

    if record.shift_type == "MORNING_ONLY":
        spec = ScheduleSpec(morning_start=record.morning_start, afternoon_end=record.afternoon_end)
    elif record.shift_type == "AFTERNOON_ONLY":
        spec = ScheduleSpec(afternoon_start=record.afternoon_start, afternoon_end=record.afternoon_end)
    else:
        spec = ScheduleSpec(
            morning_start=record.morning_start,
            morning_end=record.morning_end,
            afternoon_start=record.afternoon_start,
            afternoon_end=record.afternoon_end,
        )
        return spec, None, int(tolerancia)

    descanso = record.break_minutes if record.break_minutes is not None else cfg.default_break_minutes
    override = ShiftOverride(kind=ShiftKind(record.shift_type), break_minutes=int(descanso))
    return spec, override, int(tolerancia)


def _opt_int(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return validate_non_negative_int(int(value), name)


def _registro(d: Mapping[str, Any], ctx: str) -> ScheduleRecord:
    return ScheduleRecord(
        morning_start=validate_time_of_day(d.get("morning_start"), f"{ctx}.morning_start"),
        morning_end=validate_time_of_day(d.get("morning_end"), f"{ctx}.morning_end"),
        afternoon_start=validate_time_of_day(d.get("afternoon_start"), f"{ctx}.afternoon_start"),
        afternoon_end=validate_time_of_day(d.get("afternoon_end"), f"{ctx}.afternoon_end"),
        shift_type=validate_shift_type(d.get("shift_type"), f"{ctx}.shift_type"),
        break_minutes=_opt_int(d.get("break_minutes"), f"{ctx}.break_minutes"),
        interval_tolerance_minutes=_opt_int(d.get("interval_tolerance_minutes"), f"{ctx}.interval_tolerance_minutes"),
    )


def _weekday_key(k: object) -> int:
    s = str(k).strip().lower()
    if s in WEEKDAY_NAMES:
        return WEEKDAY_NAMES[s]
    return validate_weekday(int(s))


def escala_desde_dict(emp_id: str, data: Mapping[str, Any], default_policy: str = "HOUR_BANK") -> EmployeeSchedule:
    """
    {
      "policy": "HOUR_BANK" | "PAYROLL",
      "weekdays": {"0": {...}, "lunes": {...}},
      "overrides": {"2025-12-24": {...}}
    }
    """
    emp = EmployeeSchedule(
        employee_id=emp_id,
        policy=CompensationPolicy(validate_policy(data.get("policy") or default_policy)),
    )
    for k, v in (data.get("weekdays") or {}).items():
        emp.weekdays[_weekday_key(k)] = _registro(v or {}, f"{emp_id}.weekdays.{k}")
    for k, v in (data.get("overrides") or {}).items():
        d = parse_date(k)
        if d is None:
            raise ValueError(f"{emp_id}.overrides: fecha inválida {k!r}")
        emp.overrides[d] = _registro(v or {}, f"{emp_id}.overrides.{k}")
    return emp


def cargar_escalas(path: Path, cfg: Optional[AppConfig] = None) -> Dict[str, EmployeeSchedule]:
    """Carga el JSON de escalas: {"empleados": {"<ID>": {...}}} o directamente {"<ID>": {...}}.

    Lanza FileNotFoundError / ValueError (JSON o valores inválidos).
    """
    cfg = cfg or AppConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No existe el archivo de escalas: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"JSON de escalas inválido ({path.name}): {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("El JSON de escalas debe ser un objeto")
    empleados = data.get("empleados", data)
    out: Dict[str, EmployeeSchedule] = {}
    for raw_id, emp_data in empleados.items():
        emp_id = normalize_id(raw_id, cfg.id_min_width)
        try:
            validate_non_empty_string(emp_id)
            out[emp_id] = escala_desde_dict(emp_id, emp_data or {}, cfg.politica_padrao)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Escala inválida para {emp_id}: {exc}") from exc
    log.info("Escalas cargadas: %s empleados", len(out))
    return out
