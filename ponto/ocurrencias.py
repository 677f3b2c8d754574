"""Ocurrencias del día (feriado, falta, folga, atestado, declaración).

Se aplican DESPUÉS del cálculo: el resumen del motor no cambia, solo se ajustan
las horas previstas y el saldo del día.
  - COMPLETA: previstas 0 y saldo 0
  - MEIO_PERIODO: previstas = floor(previstas / 2)
  - minutos explícitos: reemplazan las previstas
Sin duración ni minutos, el día queda como lo calculó el motor.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Tuple

from .config import AppConfig
from .models import DaySummary
from .parsers import parse_date, parse_int
from .utils import normalize_id

__all__ = ["TIPOS", "DURACIONES", "Ocurrencia", "cargar_ocurrencias", "aplicar_ocurrencia"]

log = logging.getLogger("ponto.ocurrencias")

TIPOS = ("FERIADO", "FALTA", "FOLGA", "ATESTADO", "DECLARACAO")
DURACIONES = ("COMPLETA", "MEIO_PERIODO")


@dataclass(frozen=True)
class Ocurrencia:
    tipo: str
    duracion: Optional[str] = None
    minutos_previstos: Optional[int] = None


def _ocurrencia(raw: object, ctx: str) -> Ocurrencia:
    if isinstance(raw, str):
        raw = {"tipo": raw}
    if not isinstance(raw, dict):
        raise ValueError(f"{ctx}: se espera un objeto o el tipo de ocurrencia")

    tipo = str(raw.get("tipo") or "").strip().upper()
    if tipo not in TIPOS:
        raise ValueError(f"{ctx}: tipo inválido {raw.get('tipo')!r} (permitidos: {', '.join(TIPOS)})")

    duracion = str(raw.get("duracion") or "").strip().upper() or None
    if duracion is not None and duracion not in DURACIONES:
        raise ValueError(f"{ctx}: duración inválida {raw.get('duracion')!r} (permitidas: {', '.join(DURACIONES)})")

    minutos = None
    if raw.get("minutos_previstos") not in (None, ""):
        minutos = parse_int(raw.get("minutos_previstos"))
        if minutos is None or minutos < 0:
            raise ValueError(f"{ctx}: minutos_previstos debe ser un entero >= 0")

    return Ocurrencia(tipo=tipo, duracion=duracion, minutos_previstos=minutos)


def cargar_ocurrencias(path: Path, cfg: Optional[AppConfig] = None) -> Dict[Tuple[str, date], Ocurrencia]:
    """
    JSON de ocurrencias:
      {"<ID>": {"YYYY-MM-DD": {"tipo": "FOLGA", "duracion": "COMPLETA"}}}
    El valor también puede ser solo el tipo ("FERIADO"), o traer "minutos_previstos".
    """
    cfg = cfg or AppConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No existe el archivo de ocurrencias: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"JSON de ocurrencias inválido ({path.name}): {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("El JSON de ocurrencias debe ser un objeto")

    out: Dict[Tuple[str, date], Ocurrencia] = {}
    for raw_id, por_fecha in data.items():
        emp = normalize_id(raw_id, cfg.id_min_width)
        for raw_fecha, raw in (por_fecha or {}).items():
            d = parse_date(raw_fecha)
            if d is None:
                raise ValueError(f"Ocurrencia con fecha inválida: {raw_id} / {raw_fecha!r}")
            out[(emp, d)] = _ocurrencia(raw, f"{emp} {raw_fecha}")
    log.info("Ocurrencias cargadas: %s", len(out))
    return out


def aplicar_ocurrencia(summary: DaySummary, oc: Ocurrencia) -> DaySummary:
    """Copia del resumen con previstas/saldo ajustados y una línea de auditoría más."""
    trabajados = summary.worked_minutes
    if oc.duracion == "COMPLETA":
        previstos, saldo = 0, 0
        regla = "COMPLETA: previstas 0, saldo 0"
    elif oc.duracion == "MEIO_PERIODO":
        previstos = summary.expected_minutes // 2
        saldo = trabajados - previstos
        regla = f"MEIO_PERIODO: previstas {summary.expected_minutes}min / 2"
    elif oc.minutos_previstos is not None:
        previstos = oc.minutos_previstos
        saldo = trabajados - previstos
        regla = f"previstas fijadas en {previstos}min"
    else:
        return replace(summary, audit_lines=summary.audit_lines + (f"Ocurrencia {oc.tipo}: sin ajuste",))

    linea = f"Ocurrencia {oc.tipo} ({regla}): previstas={previstos}min saldo={saldo}min"
    return replace(
        summary,
        expected_seconds=previstos * 60,
        expected_minutes=previstos,
        balance_seconds=saldo * 60,
        balance_minutes=saldo,
        audit_lines=summary.audit_lines + (linea,),
    )
