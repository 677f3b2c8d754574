"""Aritmética de tiempo a granularidad de minuto.

Regla única: los segundos de las checadas se descartan (nunca se redondean) y la
conversión segundos -> minutos siempre es `floor`, aplicada una sola vez sobre el total.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Union

from .parsers import parse_int, parse_time_of_day

__all__ = [
    "to_minutes_floor",
    "minute_delta",
    "seconds_between",
    "time_of_day_to_seconds",
    "minutos_o_cero",
    "minutes_to_hhmm",
    "signed_minutes_to_hhmm",
]

Instante = Union[datetime, time]


def to_minutes_floor(seconds: int) -> int:
    return int(seconds) // 60


def _minuto_del_dia(t: Instante) -> int:
    return t.hour * 60 + t.minute


def minute_delta(scheduled: Instante, real: Instante) -> int:
    """Diferencia `real - scheduled` en minutos usando solo hora y minuto.

    08:00:59 y 08:00:00 comparan igual.
    """
    return _minuto_del_dia(real) - _minuto_del_dia(scheduled)


def _truncar(dt: datetime) -> datetime:
    return dt.replace(second=0, microsecond=0)


def seconds_between(start: Instante, end: Instante) -> int:
    """Duración `end - start` en segundos (múltiplo de 60, puede ser negativa).

    Con dos `datetime` se respeta la fecha (checadas en días distintos).
    """
    if isinstance(start, datetime) and isinstance(end, datetime):
        return int((_truncar(end) - _truncar(start)).total_seconds())
    return minute_delta(start, end) * 60


def time_of_day_to_seconds(value: object) -> Optional[int]:
    """'HH:MM' -> segundos desde medianoche. None si no es parseable."""
    t = parse_time_of_day(value)
    if t is None:
        return None
    return t.hour * 3600 + t.minute * 60


def minutos_o_cero(value: object) -> int:
    """Minutos configurados (descanso, tolerancia): entero >= 0; lo no numérico vale 0."""
    n = parse_int(value)
    return max(0, n) if n is not None else 0


def minutes_to_hhmm(total_min: int) -> str:
    if total_min <= 0:
        return "00:00"
    h = total_min // 60
    m = total_min % 60
    return f"{h:02d}:{m:02d}"


def signed_minutes_to_hhmm(total_min: int) -> str:
    """Como `minutes_to_hhmm` pero conserva el signo (saldos)."""
    if total_min < 0:
        return "-" + minutes_to_hhmm(-total_min)
    return minutes_to_hhmm(total_min)
