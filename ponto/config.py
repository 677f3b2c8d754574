"""Configuración de reglas de cálculo y export (persistida en config_ponto.json)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from .logger import log_exception
from .utils import backup_file, chmod_restringido
from .validaciones import validate_non_negative_int, validate_policy

log = logging.getLogger("ponto.config")

CONFIG_FILENAME = "config_ponto.json"


@dataclass
class AppConfig:
    # ---- Reglas CLT ----
    tolerancia_evento_min: int = 5
    teto_diario_min: int = 10
    # Descanso por defecto de turno único cuando la escala no lo trae
    default_break_minutes: int = 20
    tolerancia_intervalo_min: int = 0
    politica_padrao: str = "HOUR_BANK"
    id_min_width: int = 0

    # ---- Auditoría ----
    audit_dir_name: str = "auditoria"
    audit_filename: str = "auditoria_calculos.jsonl"
    audit_rotate_max_bytes: int = 5_000_000

    # Excel export: ancho fijo por nombre de columna (exact match)
    column_widths: Dict[str, float] = field(
        default_factory=lambda: {
            "ID": 10,
            "Nombre": 28,
            "Fecha": 12,
            "Mes": 10,
            "Status": 14,
            "Entrada": 10,
            "Salida a comer": 14,
            "Regreso de comer": 16,
            "Salida": 10,
            "Horas trabajadas": 16,
            "Horas previstas": 16,
            "Saldo": 10,
            "Saldo CLT": 12,
            "Auditoría": 60,
        }
    )


def _config_path(script_dir: Path) -> Path:
    return Path(script_dir) / CONFIG_FILENAME


def cargar_config(script_dir: Path) -> AppConfig:
    """Lee config_ponto.json; si no existe lo crea con defaults."""
    path = _config_path(script_dir)
    if not path.exists():
        cfg = AppConfig()
        guardar_config(script_dir, cfg)
        return cfg
    data = json.loads(path.read_text(encoding="utf-8"))
    cfg = AppConfig()

    reglas = data.get("reglas", {}) or {}
    cfg.tolerancia_evento_min = int(reglas.get("tolerancia_evento_min", cfg.tolerancia_evento_min))
    cfg.teto_diario_min = int(reglas.get("teto_diario_min", cfg.teto_diario_min))
    cfg.default_break_minutes = int(reglas.get("default_break_minutes", cfg.default_break_minutes))
    cfg.tolerancia_intervalo_min = int(reglas.get("tolerancia_intervalo_min", cfg.tolerancia_intervalo_min))
    cfg.politica_padrao = str(reglas.get("politica_padrao", cfg.politica_padrao) or cfg.politica_padrao)
    cfg.id_min_width = int(reglas.get("id_min_width", cfg.id_min_width))

    audit = data.get("audit", {}) or {}
    cfg.audit_dir_name = str(audit.get("audit_dir_name", cfg.audit_dir_name) or cfg.audit_dir_name)
    cfg.audit_filename = str(audit.get("audit_filename", cfg.audit_filename) or cfg.audit_filename)
    cfg.audit_rotate_max_bytes = int(audit.get("audit_rotate_max_bytes", cfg.audit_rotate_max_bytes) or 0)

    excel = data.get("excel", {}) or {}
    cfg.column_widths = excel.get("column_widths", cfg.column_widths) or cfg.column_widths

    defaults = AppConfig()
    for name in ("tolerancia_evento_min", "teto_diario_min", "default_break_minutes", "tolerancia_intervalo_min", "id_min_width"):
        try:
            validate_non_negative_int(getattr(cfg, name), name)
        except (TypeError, ValueError) as exc:
            log_exception(f"Valor inválido en config, usando default: {exc}", level=logging.WARNING, logger=log)
            setattr(cfg, name, getattr(defaults, name))
    try:
        cfg.politica_padrao = validate_policy(cfg.politica_padrao)
    except ValueError as exc:
        log_exception(f"Valor inválido en config, usando default: {exc}", level=logging.WARNING, logger=log)
        cfg.politica_padrao = defaults.politica_padrao

    return cfg


def guardar_config(script_dir: Path, cfg: AppConfig) -> None:
    """Guarda configuración en config_ponto.json.

    Reglas:
    - No sobrescribe si el contenido serializado no cambió (evita backups/spam).
    - Si cambia y existe archivo previo, crea backup timestamped.
    - Endurece permisos best-effort (0600 en POSIX).
    """
    path = _config_path(script_dir)

    data = {
        "reglas": {
            "tolerancia_evento_min": cfg.tolerancia_evento_min,
            "teto_diario_min": cfg.teto_diario_min,
            "default_break_minutes": cfg.default_break_minutes,
            "tolerancia_intervalo_min": cfg.tolerancia_intervalo_min,
            "politica_padrao": cfg.politica_padrao,
            "id_min_width": cfg.id_min_width,
        },
        "audit": {
            "audit_dir_name": cfg.audit_dir_name,
            "audit_filename": cfg.audit_filename,
            "audit_rotate_max_bytes": cfg.audit_rotate_max_bytes,
        },
        "excel": {
            "column_widths": cfg.column_widths,
        },
    }

    new_text = json.dumps(data, ensure_ascii=False, indent=2)

    # Si no hay cambios, NO tocar el archivo (ni backups)
    if path.exists():
        try:
            old = path.read_text(encoding="utf-8")
        except OSError:
            old = ""
        if old.strip() == new_text.strip():
            return

    try:
        backup_file(path, suffix=".bak")
    except OSError:
        log_exception("Fallo best-effort en backup de config", level=logging.WARNING, logger=log)

    path.write_text(new_text, encoding="utf-8")
    chmod_restringido(path)
