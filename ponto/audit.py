"""Bitácora de cálculos append-only (JSONL).

Contrato:
- auditoria_calculos.jsonl: un objeto JSON por línea, uno por recálculo de (empleado, fecha)
- permisos best-effort: archivo 0600, carpeta 0700
- textos sanitizados (sin caracteres de control, longitud acotada)
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from .models import DaySummary
from .utils import chmod_restringido, harden_permissions

_log = logging.getLogger("ponto.audit")

AUDIT_FILENAME = "auditoria_calculos.jsonl"

CONTROL_CHARS = {chr(i) for i in range(0, 32)} - {"\t"}


def _sanitize_text(s: str, max_len: int = 500) -> str:
    s = (s or "").replace("\r", " ").replace("\n", " ")
    s = "".join((" " if ch in CONTROL_CHARS else ch) for ch in s)
    s = " ".join(s.split())
    if len(s) > max_len:
        s = s[: max_len - 3] + "..."
    return s


def sanitize_record(rec: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in (rec or {}).items():
        kk = _sanitize_text(str(k), max_len=80)
        if isinstance(v, str):
            out[kk] = _sanitize_text(v, max_len=1200)
        elif isinstance(v, (list, tuple)):
            out[kk] = [_sanitize_text(str(x), max_len=300) for x in v]
        elif v is None or isinstance(v, (int, float, bool)):
            out[kk] = v
        else:
            out[kk] = _sanitize_text(str(v), max_len=1200)
    return out


def ensure_dir_secure(d: Path) -> None:
    d.mkdir(parents=True, exist_ok=True)
    chmod_restringido(d)


def _rotar(path: Path, rotate_max_bytes: int) -> None:
    if not rotate_max_bytes or not path.exists() or path.stat().st_size <= int(rotate_max_bytes):
        return
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    rotated = path.with_name(path.stem + f"_{ts}" + path.suffix)
    try:
        path.rename(rotated)
        harden_permissions(rotated)
    except OSError:
        _log.debug("No se pudo rotar archivo de auditoría %s", path, exc_info=True)


def registrar_resumen(
    audit_dir: Path,
    employee_id: str,
    work_date: str,
    summary: DaySummary,
    *,
    run_id: str = "",
    filename: str = AUDIT_FILENAME,
    rotate_max_bytes: int = 0,
) -> Path:
    """Agrega una línea con el resultado del día y sus líneas de auditoría."""
    audit_dir = Path(audit_dir)
    ensure_dir_secure(audit_dir)
    path = audit_dir / filename
    _rotar(path, rotate_max_bytes)

    rec = {
        "ts": datetime.now().isoformat(timespec="seconds"),
        "run_id": run_id,
        "emp_id": employee_id,
        "fecha": work_date,
        "status": summary.status.value,
        "trabajados_min": summary.worked_minutes,
        "previstos_min": summary.expected_minutes,
        "saldo_min": summary.balance_minutes,
        "saldo_clt_min": summary.net_balance_clt_minutes,
        "politica": summary.compensation_policy.value,
        "lineas": list(summary.audit_lines),
    }
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(sanitize_record(rec), ensure_ascii=False) + "\n")
    harden_permissions(path)
    return path


def registrar_muchos(
    audit_dir: Path,
    items: Iterable[Tuple[str, str, DaySummary]],
    **kwargs: Any,
) -> Optional[Path]:
    last: Optional[Path] = None
    for emp, fecha, summary in items:
        last = registrar_resumen(audit_dir, emp, fecha, summary, **kwargs)
    return last


def leer_auditoria(path: Path) -> list[dict[str, Any]]:
    """Lee el JSONL completo (líneas vacías se ignoran)."""
    out: list[dict[str, Any]] = []
    with open(Path(path), encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                out.append(json.loads(line))
    return out
