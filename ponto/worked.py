"""Horas trabajadas a partir de los pares de checadas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .models import PunchSet, PunchValue, ShiftOverride, WorkedTime
from .parsers import parse_punch
from .time_utils import seconds_between

__all__ = ["calcular_trabajado"]


def _par(entrada: PunchValue, salida: PunchValue) -> Optional[int]:
    """Segundos entre dos checadas; None si falta alguna o no es parseable."""
    a: Optional[datetime] = parse_punch(entrada)
    b: Optional[datetime] = parse_punch(salida)
    if a is None or b is None:
        return None
    return seconds_between(a, b)


def calcular_trabajado(punches: PunchSet, shift_override: Optional[ShiftOverride] = None) -> WorkedTime:
    """
    Calcula segundos trabajados (mañana, tarde) según las checadas reales.

    Reglas:
      - Turno único (override) con 4 checadas: periodo1 = salida intervalo - entrada,
        periodo2 = salida final - regreso, sumados tal cual (sin recorte a 0). El
        descanso NO se descuenta del trabajado.
      - Jornada completa: cada par (entrada/salida a comer, regreso/salida) cuenta por
        separado; un par invertido (reloj desfasado) vale 0.
      - Sin pares completos pero con entrada + salida final: ese tramo es la jornada.

    Devuelve segundos; la conversión a minutos la hace quien llama, una sola vez
    sobre el total.
    """
    if shift_override is not None:
        p1 = _par(punches.morning_entry, punches.lunch_exit)
        p2 = _par(punches.afternoon_entry, punches.final_exit)
        if p1 is not None and p2 is not None:
            return WorkedTime(morning_seconds=p1, afternoon_seconds=p2, mode="SINGLE_SHIFT")

    manana = _par(punches.morning_entry, punches.lunch_exit)
    tarde = _par(punches.afternoon_entry, punches.final_exit)
    morning_seconds = max(0, manana or 0)
    afternoon_seconds = max(0, tarde or 0)

    if morning_seconds or afternoon_seconds:
        mode = "FULL_DAY" if (manana is not None and tarde is not None) else "PARTIAL"
        return WorkedTime(morning_seconds=morning_seconds, afternoon_seconds=afternoon_seconds, mode=mode)

    # Entrada y salida final sin checadas de comida (turno corrido)
    if not punches.lunch_exit and not punches.afternoon_entry:
        tramo = _par(punches.morning_entry, punches.final_exit)
        if tramo is not None and tramo > 0:
            return WorkedTime(morning_seconds=tramo, afternoon_seconds=0, mode="SPAN")

    return WorkedTime()
