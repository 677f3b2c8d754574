"""CLI de ponto.

Subcomandos:
- process: calcula los resúmenes diarios de un export del reloj y exporta XLSX
- day: calcula un solo día desde la línea de comandos (diagnóstico)
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .config import AppConfig, cargar_config
from .core import compute_day_summary
from .grouping import agrupar_batidas
from .logger import log_exception, setup_logging
from .models import PunchEvent, ScheduleSpec, ShiftKind, ShiftOverride
from .parsers import parse_date, parse_time_of_day
from .pipeline import procesar_archivo
from .validaciones import validate_policy

log = logging.getLogger("ponto.cli")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Cálculo de ponto (jornada CLT) por empleado y día.")
    sub = p.add_subparsers(dest="cmd")

    # ---- process ----
    p_proc = sub.add_parser("process", help="Procesar export de checadas.")
    p_proc.add_argument("--input", "--in", dest="input_path", required=True, help="Export del reloj (TXT/CSV/XLSX).")
    p_proc.add_argument("--escalas", dest="escalas_path", required=True, help="JSON de escalas por empleado.")
    p_proc.add_argument("--output", "--out", dest="output_path", default="", help="XLSX de salida (default: <input>_PONTO.xlsx).")
    p_proc.add_argument("--correcciones", dest="correcciones_path", default="", help="JSON de correcciones manuales (opcional).")
    p_proc.add_argument("--ocurrencias", dest="ocurrencias_path", default="", help="JSON de ocurrencias (folga, feriado...) por empleado y fecha (opcional).")
    p_proc.add_argument("--audit-dir", dest="audit_dir", default="", help="Carpeta para auditoria_calculos.jsonl (opcional).")
    p_proc.add_argument("--config-dir", dest="config_dir", default="", help="Carpeta de config_ponto.json (default: cwd).")
    p_proc.add_argument("--dry-run", dest="dry_run", action="store_true", help="Calcula sin escribir archivos ni auditoría.")
    p_proc.add_argument("--log-level", dest="log_level", default="INFO", help="DEBUG/INFO/WARNING/ERROR.")
    p_proc.add_argument("--log-file", dest="log_file", default="", help="Archivo de log adicional (opcional).")

    # ---- day ----
    p_day = sub.add_parser("day", help="Calcular un día suelto.")
    p_day.add_argument("--fecha", dest="fecha", required=True, help="YYYY-MM-DD")
    p_day.add_argument("--batidas", dest="batidas", default="", help="Horas separadas por coma: 08:00,12:00,13:00,17:00")
    p_day.add_argument("--escala", dest="escala", default="", help="HH:MM-HH:MM[,HH:MM-HH:MM] (mañana,tarde)")
    p_day.add_argument("--turno", dest="turno", default="", choices=["", "MORNING_ONLY", "AFTERNOON_ONLY"], help="Turno único.")
    p_day.add_argument("--descanso", dest="descanso", type=int, default=None, help="Minutos de descanso en turno único.")
    p_day.add_argument("--tolerancia-intervalo", dest="tolerancia_intervalo", type=int, default=None)
    p_day.add_argument("--politica", dest="politica", default="", help="HOUR_BANK/PAYROLL.")
    p_day.add_argument("--json", dest="as_json", action="store_true", help="Imprime el resumen como JSON.")
    p_day.add_argument("--log-level", dest="log_level", default="WARNING", help="DEBUG/INFO/WARNING/ERROR.")

    return p


def _cfg_from(config_dir: str) -> AppConfig:
    return cargar_config(Path(config_dir) if config_dir else Path.cwd())


def _cmd_process(args: argparse.Namespace) -> int:
    setup_logging(level=str(args.log_level).upper(), log_file=Path(args.log_file) if args.log_file else None)
    in_path = Path(args.input_path)
    if not in_path.exists():
        print(f"ERROR: archivo de entrada no existe: {in_path}")
        return 2
    if in_path.is_dir():
        print(f"ERROR: se esperaba un archivo, no un directorio: {in_path}")
        return 2

    try:
        cfg = _cfg_from(args.config_dir)
        resultados, out = procesar_archivo(
            in_path,
            Path(args.escalas_path),
            out_path=Path(args.output_path) if args.output_path else None,
            audit_dir=Path(args.audit_dir) if args.audit_dir else None,
            correcciones_path=Path(args.correcciones_path) if args.correcciones_path else None,
            ocurrencias_path=Path(args.ocurrencias_path) if args.ocurrencias_path else None,
            cfg=cfg,
            dry_run=bool(args.dry_run),
        )
    except (ValueError, KeyError, FileNotFoundError) as e:
        log_exception("Entrada inválida", extra={"input": str(in_path)}, level=logging.ERROR, logger=log)
        print(f"ERROR: {e}")
        return 2

    if out is None:
        print(f"OK (dry-run): {len(resultados)} días calculados")
    else:
        print(f"OK: {len(resultados)} días calculados -> {out}")
    return 0


def _escala_desde_texto(s: str, turno: str = "") -> ScheduleSpec:
    """'08:00-12:00,13:00-17:00' -> mañana y tarde. Una sola ventana es la tarde si
    empieza a las 12:00 o después, si no la mañana; con turno único es entrada-salida."""
    ventanas = []
    for parte in [x.strip() for x in (s or "").split(",") if x.strip()][:2]:
        ini, _, fin = parte.partition("-")
        if parse_time_of_day(ini) is None or parse_time_of_day(fin) is None:
            raise ValueError(f"Ventana de escala inválida: {parte!r}")
        ventanas.append((ini.strip(), fin.strip()))
    if not ventanas:
        return ScheduleSpec()
    if turno:
        ini, fin = ventanas[0][0], ventanas[-1][1]
        if turno == ShiftKind.MORNING_ONLY.value:
            return ScheduleSpec(morning_start=ini, afternoon_end=fin)
        return ScheduleSpec(afternoon_start=ini, afternoon_end=fin)
    if len(ventanas) == 1:
        ini, fin = ventanas[0]
        if parse_time_of_day(ini).hour >= 12:
            return ScheduleSpec(afternoon_start=ini, afternoon_end=fin)
        return ScheduleSpec(morning_start=ini, morning_end=fin)
    (m_ini, m_fin), (t_ini, t_fin) = ventanas
    return ScheduleSpec(m_ini, m_fin, t_ini, t_fin)


def _cmd_day(args: argparse.Namespace) -> int:
    setup_logging(level=str(args.log_level).upper())
    cfg = AppConfig()
    d = parse_date(args.fecha)
    if d is None:
        print(f"ERROR: fecha inválida: {args.fecha}")
        return 2
    try:
        spec = _escala_desde_texto(args.escala, args.turno)
        politica = validate_policy(args.politica or cfg.politica_padrao)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    eventos: List[PunchEvent] = []
    for h in [x.strip() for x in (args.batidas or "").split(",") if x.strip()]:
        t = parse_time_of_day(h)
        if t is None:
            print(f"ERROR: hora inválida: {h}")
            return 2
        eventos.append(PunchEvent(employee_id="-", timestamp=datetime.combine(d, t)))

    override: Optional[ShiftOverride] = None
    if args.turno:
        descanso = args.descanso if args.descanso is not None else cfg.default_break_minutes
        override = ShiftOverride(kind=ShiftKind(args.turno), break_minutes=descanso)

    punches = agrupar_batidas(eventos, single_shift=override is not None)
    tol = args.tolerancia_intervalo if args.tolerancia_intervalo is not None else cfg.tolerancia_intervalo_min
    summary = compute_day_summary(punches, spec, d, override, tol, politica, cfg)

    if args.as_json:
        print(json.dumps(summary.to_record(), ensure_ascii=False, indent=2, default=str))
    else:
        print(f"{summary.work_date} | {summary.status.value}")
        for line in summary.audit_lines:
            print(line)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "process":
        return _cmd_process(args)
    if args.cmd == "day":
        return _cmd_day(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
