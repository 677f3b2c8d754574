"""
Shared helpers (sanitization, backups, permissions, hashing).
"""
from __future__ import annotations

import hashlib
import os
import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd


def safe_str(v: object) -> str:
    """Convierte a string seguro (None -> '')."""
    return "" if v is None else str(v)


def backup_file(path: Path, *, suffix: str = ".bak") -> Optional[Path]:
    """
    Create a timestamped backup before overwriting.
    Returns backup path if created.
    """
    path = Path(path)
    if not path.exists():
        return None
    ts = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    bak = path.with_suffix(path.suffix + f"{suffix}_{ts}")
    shutil.copy2(path, bak)
    return bak


def harden_permissions(path: Path) -> None:
    """
    Best-effort file permission tightening (0600).
    On Windows it may be ignored.
    """
    try:
        os.chmod(str(path), 0o600)
    except OSError:
        pass


def chmod_restringido(path: Path) -> None:
    """Intenta restringir permisos (POSIX): archivos 600, carpetas 700.

    En Windows no hace nada.
    """
    if os.name != "posix":
        return
    try:
        if path.is_dir():
            path.chmod(0o700)
        elif path.exists():
            path.chmod(0o600)
    except OSError:
        return


def normalize_id(v: object, width: int = 0) -> str:
    """Normaliza el ID del reloj (Excel convierte '003' en 3.0); rellena con ceros si width > 0."""
    s = safe_str(v).strip()
    if not s or s.lower() in {"nan", "none"}:
        return ""
    if re.fullmatch(r"\d+\.0+", s):
        s = s.split(".")[0]
    if s.isdigit() and width > 0:
        s = s.zfill(width)
    return s


def _norm(s: object) -> str:
    return "" if s is None else str(s).strip().lower()


def guess_column(df: pd.DataFrame, candidates: Iterable[str]) -> Optional[str]:
    """Devuelve el nombre de la columna del DF que matchea alguno de los candidatos (normalizados)."""
    norm_map = {_norm(c): c for c in df.columns}
    for cand in candidates:
        key = _norm(cand)
        if key in norm_map:
            return norm_map[key]
    return None


def month_key(d: object) -> str:
    ts = pd.to_datetime(d, errors="coerce")
    if pd.isna(ts):
        return ""
    return f"{ts.year:04d}-{ts.month:02d}"


def sha256_file(path: Path) -> str:
    """Devuelve SHA256 hex del archivo (streaming)."""
    h = hashlib.sha256()
    with open(Path(path), "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()
