"""Exceso de intervalo de comida (indicador separado; no es atraso)."""

from __future__ import annotations

from typing import Optional

from .models import IntervalExcess, PunchSet, ScheduleSpec, ShiftOverride
from .parsers import parse_punch
from .time_utils import minutos_o_cero, seconds_between, time_of_day_to_seconds

__all__ = ["calcular_exceso_intervalo"]


def calcular_exceso_intervalo(
    punches: PunchSet,
    schedule: ScheduleSpec,
    shift_override: Optional[ShiftOverride] = None,
    tolerance_minutes: int = 0,
) -> IntervalExcess:
    """
    exceso = max(0, real - (previsto + tolerancia)).

    real     = regreso de comer - salida a comer
    previsto = descanso del turno único, o afternoon_start - morning_end en jornada completa

    Sin checadas/campos necesarios o con valores no parseables devuelve 0.
    """
    salida = parse_punch(punches.lunch_exit)
    regreso = parse_punch(punches.afternoon_entry)
    if salida is None or regreso is None:
        return IntervalExcess()

    if shift_override is not None:
        previsto = minutos_o_cero(shift_override.break_minutes) * 60
    else:
        fin_manana = time_of_day_to_seconds(schedule.morning_end)
        inicio_tarde = time_of_day_to_seconds(schedule.afternoon_start)
        if fin_manana is None or inicio_tarde is None:
            return IntervalExcess()
        previsto = inicio_tarde - fin_manana

    permitido = previsto + minutos_o_cero(tolerance_minutes) * 60
    real = seconds_between(salida, regreso)
    return IntervalExcess(seconds=max(0, real - permitido))
