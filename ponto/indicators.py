"""Indicadores informativos de inicio/fin de jornada y deltas para CLT.

Solo se miran los eventos de JORNADA (primera entrada y última salida); las
checadas de comida no generan atraso ni extra aquí.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .models import Indicators, PunchSet, PunchValue, ScheduleSpec, ScheduleValue, ShiftKind, ShiftOverride
from .parsers import parse_punch, parse_time_of_day
from .time_utils import minute_delta

__all__ = ["calcular_indicadores", "deltas_jornada", "evento_inicio", "evento_fin"]

Evento = Tuple[PunchValue, ScheduleValue]


def evento_inicio(punches: PunchSet, schedule: ScheduleSpec) -> Optional[Evento]:
    """Entrada de mañana contra morning_start; si no hay mañana programada, la de la tarde."""
    if punches.morning_entry and schedule.morning_start:
        return punches.morning_entry, schedule.morning_start
    if punches.afternoon_entry and schedule.afternoon_start and not schedule.morning_start:
        return punches.afternoon_entry, schedule.afternoon_start
    return None


def evento_fin(punches: PunchSet, schedule: ScheduleSpec) -> Optional[Evento]:
    """Salida final contra afternoon_end; si no hay tarde programada, la salida a comer."""
    if punches.final_exit and schedule.afternoon_end:
        return punches.final_exit, schedule.afternoon_end
    if punches.lunch_exit and schedule.morning_end and not schedule.afternoon_start:
        return punches.lunch_exit, schedule.morning_end
    return None


def _delta(evento: Optional[Evento]) -> Optional[int]:
    if evento is None:
        return None
    real = parse_punch(evento[0])
    previsto = parse_time_of_day(evento[1])
    if real is None or previsto is None:
        return None
    return minute_delta(previsto, real)


def calcular_indicadores(punches: PunchSet, schedule: ScheduleSpec) -> Indicators:
    """Atraso / llegada anticipada / extra / salida anticipada, crudos (sin tolerancia).

    Solo para mostrar: no afectan el saldo ni los valores CLT.
    """
    d_ini = _delta(evento_inicio(punches, schedule))
    d_fin = _delta(evento_fin(punches, schedule))
    return Indicators(
        delay_minutes=max(0, d_ini or 0),
        early_arrival_minutes=max(0, -(d_ini or 0)),
        overtime_minutes=max(0, d_fin or 0),
        early_exit_minutes=max(0, -(d_fin or 0)),
    )


def deltas_jornada(
    punches: PunchSet,
    schedule: ScheduleSpec,
    shift_override: Optional[ShiftOverride] = None,
) -> Tuple[Optional[int], Optional[int]]:
    """Deltas (real - previsto) en minutos de inicio y fin de jornada para la tolerancia CLT.

    En turno único la primera checada siempre es la entrada del turno y la cuarta la
    salida: la entrada se compara con morning_start (MORNING_ONLY) o afternoon_start
    (AFTERNOON_ONLY), la salida con afternoon_end.
    None cuando el evento no existe o no es parseable.
    """
    if shift_override is None:
        return _delta(evento_inicio(punches, schedule)), _delta(evento_fin(punches, schedule))

    inicio: Optional[Evento] = None
    previsto_inicio = schedule.morning_start if shift_override.kind == ShiftKind.MORNING_ONLY else schedule.afternoon_start
    if punches.morning_entry and previsto_inicio:
        inicio = (punches.morning_entry, previsto_inicio)
    fin: Optional[Evento] = None
    if punches.final_exit and schedule.afternoon_end:
        fin = (punches.final_exit, schedule.afternoon_end)
    return _delta(inicio), _delta(fin)
