"""Tolerancia CLT (art. 58 §1º + Súmula 366 TST).

Regla legal:
  - 5 minutos de tolerancia por evento de JORNADA (inicio y fin), zona neutra.
  - Tope diario de 10 minutos de tolerancia en total.
  - Si el día supera el tope, el excedente vuelve a ser computable.

Después de la tolerancia:
  - El exceso de intervalo de comida consume primero la hora extra, luego la
    llegada anticipada; lo que sobre se suma al atraso.
  - Política de compensación: banco de horas (saldo neto) o nómina (extra y
    faltante por separado, saldo neto fijo en 0).
"""

from __future__ import annotations

import logging
from typing import Tuple

from .models import CltResult, CompensationPolicy

__all__ = [
    "TOLERANCIA_EVENTO_MIN",
    "TETO_DIARIO_MIN",
    "tolerancia_por_evento",
    "aplicar_teto_diario",
    "descontar_exceso_intervalo",
    "aplicar_tolerancia_clt",
]

log = logging.getLogger("ponto.clt")

TOLERANCIA_EVENTO_MIN = 5
TETO_DIARIO_MIN = 10


def tolerancia_por_evento(delta: int, tolerancia: int = TOLERANCIA_EVENTO_MIN) -> int:
    """Minutos tolerados de un evento: min(|delta|, tolerancia)."""
    return min(abs(int(delta)), max(0, int(tolerancia)))


def aplicar_teto_diario(tol_inicio: int, tol_fin: int, teto: int = TETO_DIARIO_MIN) -> Tuple[int, int]:
    """
    Recorta la suma de tolerados al tope diario.

    El excedente se recupera primero del lado con más minutos tolerados; en empate,
    del inicio. Si ese lado no alcanza, el resto sale del otro.
    """
    exceso = tol_inicio + tol_fin - max(0, int(teto))
    if exceso <= 0:
        return tol_inicio, tol_fin

    if tol_inicio >= tol_fin:
        quita = min(tol_inicio, exceso)
        tol_inicio -= quita
        tol_fin = max(0, tol_fin - (exceso - quita))
    else:
        quita = min(tol_fin, exceso)
        tol_fin -= quita
        tol_inicio = max(0, tol_inicio - (exceso - quita))
    return tol_inicio, tol_fin


def descontar_exceso_intervalo(
    atraso: int, llegada_antec: int, extra: int, exceso_min: int
) -> Tuple[int, int, int]:
    """Exceso de comida -> extra, luego llegada anticipada, el resto suma al atraso.

    Devuelve (atraso, llegada_antec, extra).
    """
    resto = max(0, int(exceso_min))
    if resto == 0:
        return atraso, llegada_antec, extra

    usa = min(extra, resto)
    extra -= usa
    resto -= usa

    usa = min(llegada_antec, resto)
    llegada_antec -= usa
    resto -= usa

    return atraso + resto, llegada_antec, extra


def aplicar_tolerancia_clt(
    delta_start: int,
    delta_end: int,
    interval_excess_minutes: int = 0,
    policy: CompensationPolicy = CompensationPolicy.HOUR_BANK,
    tolerancia_evento: int = TOLERANCIA_EVENTO_MIN,
    teto_diario: int = TETO_DIARIO_MIN,
) -> CltResult:
    """
    Aplica la tolerancia CLT sobre los deltas de inicio y fin de jornada.

    Args:
        delta_start: real - previsto de la primera entrada (positivo = atraso).
        delta_end: real - previsto de la última salida (positivo = extra).
        interval_excess_minutes: exceso de comida ya en minutos.
        policy: HOUR_BANK o PAYROLL.

    Returns:
        `CltResult` con cubetas no negativas; a lo más una de {atraso, llegada
        anticipada} y una de {extra, salida anticipada} distinta de cero.
    """
    abs_ini = abs(int(delta_start))
    abs_fin = abs(int(delta_end))

    tol_ini = tolerancia_por_evento(delta_start, tolerancia_evento)
    tol_fin = tolerancia_por_evento(delta_end, tolerancia_evento)
    tol_ini, tol_fin = aplicar_teto_diario(tol_ini, tol_fin, teto_diario)

    comp_ini = abs_ini - tol_ini
    comp_fin = abs_fin - tol_fin

    atraso = comp_ini if delta_start > 0 else 0
    llegada_antec = comp_ini if delta_start < 0 else 0
    extra = comp_fin if delta_end > 0 else 0
    salida_antec = comp_fin if delta_end < 0 else 0

    atraso, llegada_antec, extra = descontar_exceso_intervalo(
        atraso, llegada_antec, extra, interval_excess_minutes
    )

    pol = CompensationPolicy.from_value(policy)
    if pol == CompensationPolicy.PAYROLL:
        pagable = extra + llegada_antec
        descontable = atraso + salida_antec
        neto = 0
    else:
        pagable = 0
        descontable = 0
        neto = (extra + llegada_antec) - (atraso + salida_antec)

    log.debug(
        "CLT: d_ini=%s d_fin=%s tol=(%s,%s) exceso_intervalo=%s politica=%s neto=%s",
        delta_start, delta_end, tol_ini, tol_fin, interval_excess_minutes, pol.value, neto,
    )

    return CltResult(
        late_minutes=atraso,
        early_arrival_minutes=llegada_antec,
        overtime_minutes=extra,
        early_exit_minutes=salida_antec,
        net_balance_minutes=neto,
        payable_overtime_minutes=pagable,
        deductible_shortfall_minutes=descontable,
        tolerated_start=tol_ini,
        tolerated_end=tol_fin,
    )
