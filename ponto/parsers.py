"""Parsers de fecha/hora para checadas y escalas.

Principios:
- Tolerante a datos sucios (None/NaN/formatos mixtos).
- Nunca lanza: un valor no parseable devuelve `None`, y quien lo usa decide
  (normalmente, contribuye cero al cálculo).
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

__all__ = ["parse_time_of_day", "parse_punch", "parse_date", "parse_int", "parse_direction"]


_TIME_RE = re.compile(r"^(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?$")

_PUNCH_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
)


def _blank(s: str) -> bool:
    return not s or s.lower() in {"nan", "nat", "none", "null"}


def parse_time_of_day(value: object) -> Optional[time]:
    """Parsea una hora del día ('HH:MM' o 'HH:MM:SS').

    Returns:
        `time` con segundos a 0, o `None` si no es parseable/está fuera de rango.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return time(value.hour, value.minute)
    if isinstance(value, time):
        return time(value.hour, value.minute)
    s = str(value).strip()
    if _blank(s):
        return None
    m = _TIME_RE.match(s)
    if not m:
        return None
    h = int(m.group("h"))
    mi = int(m.group("m"))
    if not (0 <= h <= 23 and 0 <= mi <= 59):
        return None
    return time(hour=h, minute=mi)


def parse_punch(value: object) -> Optional[datetime]:
    """Parsea el instante completo de una checada (fecha + hora).

    Acepta `datetime` o strings 'YYYY-MM-DD HH:MM[:SS]' (también con 'T' o '/').
    Los segundos se conservan aquí; la aritmética los descarta después.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    s = str(value).strip()
    if _blank(s):
        return None
    for fmt in _PUNCH_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def parse_date(value: object) -> Optional[date]:
    """Parsea una fecha ISO (YYYY-MM-DD) o `date`/`datetime`. None si no aplica."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if _blank(s):
        return None
    try:
        return datetime.strptime(s[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_int(value: object) -> Optional[int]:
    """Entero desde int, float entero o texto ('3', '3.0'). None si no aplica."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    s = str(value).strip()
    if _blank(s):
        return None
    if re.fullmatch(r"-?\d+(\.0+)?", s):
        return int(float(s))
    return None


def parse_direction(value: object) -> Optional[int]:
    """Columna In/Out del reloj: entero o None (vacío/no numérico)."""
    return parse_int(value)
