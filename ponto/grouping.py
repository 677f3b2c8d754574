"""Agrupa checadas crudas de un empleado-día en las cuatro posiciones del día."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Tuple

from .models import PunchEvent, PunchSet

__all__ = ["dedupe_batidas", "agrupar_batidas", "agrupar_por_dia"]

log = logging.getLogger("ponto.grouping")

MEDIODIA = 12


def dedupe_batidas(events: Iterable[PunchEvent]) -> List[PunchEvent]:
    """Ordena cronológicamente y quita duplicados de mismo minuto + misma dirección.

    Se conserva la primera ocurrencia (la de menor segundo).
    """
    ordenados = sorted(events, key=lambda e: e.timestamp)
    vistos = set()
    out: List[PunchEvent] = []
    for ev in ordenados:
        key = (ev.timestamp.replace(second=0, microsecond=0), ev.direction)
        if key in vistos:
            continue
        vistos.add(key)
        out.append(ev)
    return out


def agrupar_batidas(events: Iterable[PunchEvent], single_shift: bool = False) -> PunchSet:
    """
    Mapea las checadas del día a PunchSet según cuántas hay:
      - 4 o más: 1ª entrada, 2ª salida a comer, 3ª regreso, 4ª salida (extras se ignoran)
      - 3: posiciones 1-3 (sin salida final)
      - 2: par de mañana si la primera es antes de las 12:00, si no par de tarde
      - 1: entrada de mañana antes de las 12:00, si no entrada de tarde
    En turno único (single_shift): 2 = entrada + salida final, 1 = entrada.
    """
    punches = dedupe_batidas(events)
    ts: List[datetime] = [p.timestamp for p in punches]
    n = len(ts)
    if n > 4:
        log.debug("Se ignoran %s checadas extra (%s)", n - 4, ts[4:])
    if n >= 4:
        return PunchSet(ts[0], ts[1], ts[2], ts[3])
    if n == 3:
        return PunchSet(ts[0], ts[1], ts[2], None)
    if n == 2:
        if single_shift:
            return PunchSet(morning_entry=ts[0], final_exit=ts[1])
        if ts[0].hour < MEDIODIA:
            return PunchSet(morning_entry=ts[0], lunch_exit=ts[1])
        return PunchSet(afternoon_entry=ts[0], final_exit=ts[1])
    if n == 1:
        if single_shift or ts[0].hour < MEDIODIA:
            return PunchSet(morning_entry=ts[0])
        return PunchSet(afternoon_entry=ts[0])
    return PunchSet()


def agrupar_por_dia(events: Iterable[PunchEvent]) -> Dict[Tuple[str, date], List[PunchEvent]]:
    """Checadas por (empleado, fecha), en el orden de entrada."""
    out: Dict[Tuple[str, date], List[PunchEvent]] = defaultdict(list)
    for ev in events:
        out[(ev.employee_id, ev.timestamp.date())].append(ev)
    return dict(out)
