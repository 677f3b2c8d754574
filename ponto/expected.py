"""Horas previstas por la escala del día."""

from __future__ import annotations

from typing import Optional

from .models import ExpectedTime, ScheduleSpec, ScheduleValue, ShiftKind, ShiftOverride
from .time_utils import minutos_o_cero, time_of_day_to_seconds

__all__ = ["calcular_previsto"]


def _ventana(inicio: ScheduleValue, fin: ScheduleValue) -> Optional[int]:
    a = time_of_day_to_seconds(inicio)
    b = time_of_day_to_seconds(fin)
    if a is None or b is None:
        return None
    return b - a


def calcular_previsto(schedule: ScheduleSpec, shift_override: Optional[ShiftOverride] = None) -> ExpectedTime:
    """
    Segundos previstos por la escala.

    - Jornada completa: max(0, fin - inicio) por cada mitad programada. Una ventana
      invertida (error de captura) vale 0, no es error.
    - Turno único: max(0, (afternoon_end - entrada) - descanso). La entrada es
      morning_start (MORNING_ONLY, se reporta en la mañana) o afternoon_start
      (AFTERNOON_ONLY, se reporta en la tarde).
    """
    if shift_override is not None:
        descanso = minutos_o_cero(shift_override.break_minutes) * 60
        if shift_override.kind == ShiftKind.MORNING_ONLY:
            total = _ventana(schedule.morning_start, schedule.afternoon_end)
            if total is None:
                return ExpectedTime()
            return ExpectedTime(morning_seconds=max(0, total - descanso))
        total = _ventana(schedule.afternoon_start, schedule.afternoon_end)
        if total is None:
            return ExpectedTime()
        return ExpectedTime(afternoon_seconds=max(0, total - descanso))

    manana = _ventana(schedule.morning_start, schedule.morning_end)
    tarde = _ventana(schedule.afternoon_start, schedule.afternoon_end)
    return ExpectedTime(
        morning_seconds=max(0, manana or 0),
        afternoon_seconds=max(0, tarde or 0),
    )
