"""Núcleo de cálculo: resumen del día de un empleado.

saldo = trabajadas - previstas, siempre; la tolerancia CLT va por separado.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Union

from .clt import TETO_DIARIO_MIN, TOLERANCIA_EVENTO_MIN, aplicar_tolerancia_clt
from .config import AppConfig
from .expected import calcular_previsto
from .indicators import calcular_indicadores, deltas_jornada
from .interval import calcular_exceso_intervalo
from .models import (
    CltResult,
    CompensationPolicy,
    DayStatus,
    DaySummary,
    PunchSet,
    ScheduleSpec,
    ShiftOverride,
)
from .parsers import parse_date, parse_time_of_day
from .time_utils import to_minutes_floor
from .worked import calcular_trabajado

__all__ = ["tiene_batidas_requeridas", "compute_day_summary"]

log = logging.getLogger("ponto.core")


def tiene_batidas_requeridas(punches: PunchSet, schedule: ScheduleSpec) -> bool:
    """
    Checadas mínimas según la forma de la escala:
      - mañana + tarde programadas: las 4
      - solo mañana: entrada + salida a comer
      - solo tarde: regreso + salida final
      - sin escala: cualquier entrada
    """
    manana = bool(parse_time_of_day(schedule.morning_start) and parse_time_of_day(schedule.morning_end))
    tarde = bool(parse_time_of_day(schedule.afternoon_start) and parse_time_of_day(schedule.afternoon_end))

    if manana and tarde:
        return bool(punches.morning_entry and punches.lunch_exit and punches.afternoon_entry and punches.final_exit)
    if manana:
        return bool(punches.morning_entry and punches.lunch_exit)
    if tarde:
        return bool(punches.afternoon_entry and punches.final_exit)
    return bool(punches.morning_entry or punches.afternoon_entry)


def _fecha_str(work_date: Union[date, datetime, str]) -> str:
    d = parse_date(work_date)
    return d.isoformat() if d is not None else str(work_date or "")


def compute_day_summary(
    punches: PunchSet,
    schedule: ScheduleSpec,
    work_date: Union[date, datetime, str],
    shift_override: Optional[ShiftOverride] = None,
    tolerance_minutes: int = 0,
    policy: Union[CompensationPolicy, str] = CompensationPolicy.HOUR_BANK,
    cfg: Optional[AppConfig] = None,
) -> DaySummary:
    """
    Calcula el resumen completo del día.

    Pasos:
      (A) trabajadas por pares reales (segundos, floor una vez al total)
      (B) previstas por la escala
      (C) saldo = trabajadas - previstas
      (D) indicadores informativos de inicio/fin
      (E) exceso de intervalo (tolerance_minutes = tolerancia del intervalo)
      (F) tolerancia CLT + política de compensación

    No lanza por checadas/escala sucias: lo no parseable vale 0 y la falta de
    checadas queda en `status`. Las líneas de auditoría son solo para diagnóstico.
    """
    tol_evento = cfg.tolerancia_evento_min if cfg is not None else TOLERANCIA_EVENTO_MIN
    teto = cfg.teto_diario_min if cfg is not None else TETO_DIARIO_MIN

    lines: List[str] = []
    try:
        pol = CompensationPolicy.from_value(policy)
    except ValueError:
        pol = CompensationPolicy.HOUR_BANK
        lines.append(f"Política desconocida {policy!r}, se usa HOUR_BANK")
        log.warning("Política de compensación desconocida %r, se usa HOUR_BANK", policy)

    completo = tiene_batidas_requeridas(punches, schedule)
    status = DayStatus.OK if completo else DayStatus.INCONSISTENT
    if not completo:
        lines.append("INCONSISTENT: faltan checadas requeridas por la escala")
    lines.append(f"Checadas: {punches.count()}/4")
    if shift_override is not None:
        lines.append(f"Turno único {shift_override.kind.value}, descanso {shift_override.break_minutes}min")

    # (A)
    worked = calcular_trabajado(punches, shift_override)
    worked_minutes = to_minutes_floor(worked.total_seconds)
    lines.append(f"Trabajadas ({worked.mode}):")
    lines.append(f"  Mañana: {worked.morning_seconds}s ({to_minutes_floor(worked.morning_seconds)}min)")
    lines.append(f"  Tarde: {worked.afternoon_seconds}s ({to_minutes_floor(worked.afternoon_seconds)}min)")
    lines.append(f"  Total: {worked.total_seconds}s ({worked_minutes}min)")

    # (B)
    expected = calcular_previsto(schedule, shift_override)
    expected_minutes = to_minutes_floor(expected.total_seconds)
    lines.append("Previstas:")
    lines.append(f"  Mañana: {expected.morning_seconds}s ({to_minutes_floor(expected.morning_seconds)}min)")
    lines.append(f"  Tarde: {expected.afternoon_seconds}s ({to_minutes_floor(expected.afternoon_seconds)}min)")
    lines.append(f"  Total: {expected.total_seconds}s ({expected_minutes}min)")

    # (C)
    balance_seconds = worked.total_seconds - expected.total_seconds
    balance_minutes = worked_minutes - expected_minutes
    lines.append(f"Saldo: {balance_minutes}min = {worked_minutes}min trabajadas - {expected_minutes}min previstas")

    # (D)
    ind = calcular_indicadores(punches, schedule)
    lines.append(
        "Indicadores (no afectan saldo): "
        f"atraso={ind.delay_minutes}min llegada_antec={ind.early_arrival_minutes}min "
        f"extra={ind.overtime_minutes}min salida_antec={ind.early_exit_minutes}min"
    )

    # (E)
    exceso = calcular_exceso_intervalo(punches, schedule, shift_override, tolerance_minutes)
    if exceso.seconds > 0:
        lines.append(f"Exceso de intervalo: {exceso.seconds}s ({exceso.minutes}min), tolerancia {tolerance_minutes}min")

    # (F)
    delta_start, delta_end = deltas_jornada(punches, schedule, shift_override)
    if delta_start is not None and delta_end is not None:
        clt = aplicar_tolerancia_clt(delta_start, delta_end, exceso.minutes, pol, tol_evento, teto)
        lines.append(f"CLT: delta inicio={delta_start}min delta fin={delta_end}min")
        lines.append(f"  Tolerado: inicio={clt.tolerated_start}min fin={clt.tolerated_end}min (tope {teto}min)")
        lines.append(
            f"  atraso={clt.late_minutes}min llegada_antec={clt.early_arrival_minutes}min "
            f"extra={clt.overtime_minutes}min salida_antec={clt.early_exit_minutes}min"
        )
        if pol == CompensationPolicy.PAYROLL:
            lines.append(
                f"  Nómina: extra pagable={clt.payable_overtime_minutes}min "
                f"faltante descontable={clt.deductible_shortfall_minutes}min"
            )
        else:
            lines.append(f"  Banco de horas: saldo CLT={clt.net_balance_minutes}min")
    else:
        clt = CltResult()
        lines.append("CLT: sin inicio/fin de jornada comparables, no se aplica tolerancia")

    if status == DayStatus.INCONSISTENT:
        lines.append("Status INCONSISTENT: los cálculos pueden estar incompletos")

    fecha = _fecha_str(work_date)
    log.debug("Resumen %s: status=%s trabajadas=%s previstas=%s", fecha, status.value, worked_minutes, expected_minutes)

    return DaySummary(
        status=status,
        work_date=fecha,
        worked_seconds=worked.total_seconds,
        worked_minutes=worked_minutes,
        expected_seconds=expected.total_seconds,
        expected_minutes=expected_minutes,
        balance_seconds=balance_seconds,
        balance_minutes=balance_minutes,
        delay_minutes=ind.delay_minutes,
        early_arrival_minutes=ind.early_arrival_minutes,
        overtime_minutes=ind.overtime_minutes,
        early_exit_minutes=ind.early_exit_minutes,
        interval_excess_seconds=exceso.seconds,
        interval_excess_minutes=exceso.minutes,
        late_clt_minutes=clt.late_minutes,
        early_arrival_clt_minutes=clt.early_arrival_minutes,
        overtime_clt_minutes=clt.overtime_minutes,
        early_exit_clt_minutes=clt.early_exit_minutes,
        net_balance_clt_minutes=clt.net_balance_minutes,
        payable_overtime_minutes=clt.payable_overtime_minutes,
        deductible_shortfall_minutes=clt.deductible_shortfall_minutes,
        compensation_policy=pol,
        delta_start_minutes=delta_start,
        delta_end_minutes=delta_end,
        morning_worked_seconds=worked.morning_seconds,
        afternoon_worked_seconds=worked.afternoon_seconds,
        morning_expected_seconds=expected.morning_seconds,
        afternoon_expected_seconds=expected.afternoon_seconds,
        schedule_applied=schedule,
        audit_lines=tuple(lines),
    )
