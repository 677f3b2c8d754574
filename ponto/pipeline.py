"""Pipeline por lote: checadas -> resúmenes diarios por (empleado, fecha) -> Excel/auditoría."""

from __future__ import annotations

import json
import logging
import shutil
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .audit import registrar_muchos
from .config import AppConfig
from .core import compute_day_summary
from .grouping import agrupar_batidas, agrupar_por_dia
from .io import dataframe_a_eventos, exportar_excel, leer_batidas
from .logger import log_exception
from .models import DayStatus, DaySummary, PunchEvent, PunchSet
from .ocurrencias import Ocurrencia, aplicar_ocurrencia, cargar_ocurrencias
from .parsers import parse_date, parse_punch
from .schedules import EmployeeSchedule, cargar_escalas, preparar_entrada, resolver_escala
from .summaries import construir_resumen_mensual, resumenes_a_dataframe
from .utils import chmod_restringido, normalize_id, sha256_file

__all__ = [
    "ResultadoDia",
    "procesar_batidas",
    "cargar_correcciones",
    "procesar_archivo",
]

log = logging.getLogger("ponto.pipeline")

Clave = Tuple[str, date]

_SLOTS = ("morning_entry", "lunch_exit", "afternoon_entry", "final_exit")


@dataclass(frozen=True)
class ResultadoDia:
    employee_id: str
    name: str
    work_date: date
    punches: PunchSet
    summary: DaySummary
    manual: bool = False
    ocurrencia: Optional[Ocurrencia] = None


def procesar_batidas(
    events: Iterable[PunchEvent],
    escalas: Mapping[str, EmployeeSchedule],
    cfg: Optional[AppConfig] = None,
    correcciones: Optional[Mapping[Clave, PunchSet]] = None,
    ocurrencias: Optional[Mapping[Clave, Ocurrencia]] = None,
) -> Dict[Clave, ResultadoDia]:
    """
    Calcula un resumen por (empleado, fecha).

    - Una corrección manual reemplaza las checadas del archivo para esa clave.
    - Una ocurrencia (folga, feriado...) ajusta previstas/saldo sobre el resumen ya
      calculado; un día con ocurrencia y sin checadas también se reporta.
    - Días sin escala (sin default de semana ni excepción) se omiten con warning.
    - El dict se indexa por (empleado, fecha): recalcular sobreescribe, nunca duplica.
    """
    cfg = cfg or AppConfig()
    correcciones = correcciones or {}
    ocurrencias = ocurrencias or {}
    por_dia = agrupar_por_dia(events)
    claves = sorted(set(por_dia) | set(correcciones) | set(ocurrencias))

    out: Dict[Clave, ResultadoDia] = {}
    for key in claves:
        emp_id, d = key
        evs = por_dia.get(key, [])
        emp = escalas.get(emp_id)
        record = resolver_escala(emp, d) if emp is not None else None
        if record is None:
            log.warning("Empleado %s - %s: sin escala para este día, se omite", emp_id, d.isoformat())
            continue

        spec, override, tol_intervalo = preparar_entrada(record, cfg)
        manual = key in correcciones
        if manual:
            log.info("Usando corrección manual para %s en %s", emp_id, d.isoformat())
            punches = correcciones[key]
        else:
            punches = agrupar_batidas(evs, single_shift=record.is_single_shift)

        summary = compute_day_summary(
            punches, spec, d,
            shift_override=override,
            tolerance_minutes=tol_intervalo,
            policy=emp.policy,
            cfg=cfg,
        )
        nombre = next((e.name for e in evs if e.name), "")
        oc = ocurrencias.get(key)
        if oc is not None:
            summary = aplicar_ocurrencia(summary, oc)
        out[key] = ResultadoDia(emp_id, nombre, d, punches, summary, manual, oc)

    n_inc = sum(1 for r in out.values() if r.summary.status == DayStatus.INCONSISTENT)
    log.info("Días calculados: %s (inconsistentes: %s)", len(out), n_inc)
    return out


def cargar_correcciones(path: Path, cfg: Optional[AppConfig] = None) -> Dict[Clave, PunchSet]:
    """
    JSON de correcciones manuales:
      {"<ID>": {"YYYY-MM-DD": {"morning_entry": "HH:MM" | "YYYY-MM-DD HH:MM", ...}}}
    Las horas sueltas se combinan con la fecha de la clave.
    """
    cfg = cfg or AppConfig()
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("El JSON de correcciones debe ser un objeto")
    out: Dict[Clave, PunchSet] = {}
    for raw_id, por_fecha in data.items():
        emp = normalize_id(raw_id, cfg.id_min_width)
        for raw_fecha, slots in (por_fecha or {}).items():
            d = parse_date(raw_fecha)
            if d is None:
                raise ValueError(f"Corrección con fecha inválida: {raw_id} / {raw_fecha!r}")
            valores = {}
            for slot in _SLOTS:
                v = (slots or {}).get(slot)
                if not v:
                    valores[slot] = None
                    continue
                s = str(v).strip()
                dt = parse_punch(s) or parse_punch(f"{d.isoformat()} {s}")
                if dt is None:
                    raise ValueError(f"Corrección inválida {emp} {d} {slot}: {v!r}")
                valores[slot] = dt
            out[(emp, d)] = PunchSet(**valores)
    return out


def _backup_if_exists(path: Path) -> Optional[Path]:
    """Copia timestamped en ./backups si el archivo ya existe."""
    if not path.exists():
        return None
    bdir = path.parent / "backups"
    bdir.mkdir(parents=True, exist_ok=True)
    chmod_restringido(bdir)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    bkp = bdir / f"{path.stem}_backup_{ts}{path.suffix}"
    shutil.copy2(path, bkp)
    chmod_restringido(bkp)
    return bkp


def _hoja_control(run_id: str, in_path: Path, input_sha256: str, resultados: Dict[Clave, ResultadoDia]) -> pd.DataFrame:
    n_inc = sum(1 for r in resultados.values() if r.summary.status == DayStatus.INCONSISTENT)
    rows = [
        ("run_id", run_id),
        ("entrada", in_path.name),
        ("input_sha256", input_sha256),
        ("generado", datetime.now().isoformat(timespec="seconds")),
        ("dias_calculados", len(resultados)),
        ("dias_inconsistentes", n_inc),
        ("correcciones_manuales", sum(1 for r in resultados.values() if r.manual)),
        ("ocurrencias", sum(1 for r in resultados.values() if r.ocurrencia is not None)),
    ]
    return pd.DataFrame([{"Campo": k, "Valor": str(v)} for k, v in rows])


def procesar_archivo(
    in_path: Path,
    escalas_path: Path,
    *,
    out_path: Optional[Path] = None,
    audit_dir: Optional[Path] = None,
    correcciones_path: Optional[Path] = None,
    ocurrencias_path: Optional[Path] = None,
    cfg: Optional[AppConfig] = None,
    dry_run: bool = False,
) -> Tuple[Dict[Clave, ResultadoDia], Optional[Path]]:
    """
    Lee checadas + escalas, calcula y exporta.

    Retorna (resultados, ruta_xlsx). En dry_run no se escribe Excel ni auditoría
    (ruta_xlsx = None). Errores de formato de entrada se propagan (ValueError /
    KeyError / FileNotFoundError).
    """
    cfg = cfg or AppConfig()
    in_path = Path(in_path)
    run_id = str(uuid.uuid4())
    input_sha256 = sha256_file(in_path) if in_path.exists() else ""

    df_in = leer_batidas(in_path)
    events = dataframe_a_eventos(df_in, cfg)
    escalas = cargar_escalas(Path(escalas_path), cfg)
    correcciones = cargar_correcciones(correcciones_path, cfg) if correcciones_path else None
    ocurrencias = cargar_ocurrencias(ocurrencias_path, cfg) if ocurrencias_path else None
    log.info("run_id=%s | %s checadas | %s empleados con escala", run_id, len(events), len(escalas))

    resultados = procesar_batidas(events, escalas, cfg, correcciones, ocurrencias)
    ordenados: List[ResultadoDia] = [resultados[k] for k in sorted(resultados)]

    out_path = Path(out_path) if out_path else in_path.with_name(f"{in_path.stem}_PONTO.xlsx")
    if dry_run:
        log.info("[DRY-RUN] Se omite escritura de Excel/auditoría. Salida propuesta: %s", out_path.name)
        return resultados, None

    df_diario = resumenes_a_dataframe(ordenados)
    extra = {
        "Resumen mensual": construir_resumen_mensual(df_diario),
        "CONTROL": _hoja_control(run_id, in_path, input_sha256, resultados),
    }
    _backup_if_exists(out_path)
    exportar_excel(df_diario, out_path, extra_sheets=extra, cfg=cfg)
    log.info("Excel generado: %s", out_path)

    if audit_dir is not None:
        try:
            registrar_muchos(
                audit_dir,
                [(r.employee_id, r.work_date.isoformat(), r.summary) for r in ordenados],
                run_id=run_id,
                filename=cfg.audit_filename,
                rotate_max_bytes=cfg.audit_rotate_max_bytes,
            )
        except OSError:
            log_exception("Fallo al escribir auditoría de cálculos", extra={"run_id": run_id}, level=logging.ERROR, logger=log)

    return resultados, out_path
