"""Logging de ponto.

Se configura solo el logger del namespace `ponto` (los módulos usan `ponto.<mod>`);
el logging raíz de quien nos importa no se toca.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .utils import chmod_restringido

DEFAULT_FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
NAMESPACE = "ponto"


def _nivel(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    lvl = getattr(logging, str(level or "INFO").strip().upper(), None)
    return lvl if isinstance(lvl, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[Path] = None,
    fmt: str = DEFAULT_FMT,
) -> logging.Logger:
    """
    Deja el logger `ponto` con un handler de consola y, opcional, uno de archivo.

    Llamarlo varias veces (CLI + tests) solo ajusta el nivel: no duplica handlers.
    El archivo de log queda con permisos restringidos (0600 en POSIX).
    """
    lvl = _nivel(level)
    logger = logging.getLogger(NAMESPACE)
    logger.setLevel(lvl)
    formatter = logging.Formatter(fmt)

    consola = next((h for h in logger.handlers if getattr(h, "_ponto_consola", False)), None)
    if consola is None:
        consola = logging.StreamHandler()
        consola._ponto_consola = True  # type: ignore[attr-defined]
        logger.addHandler(consola)
    consola.setLevel(lvl)
    consola.setFormatter(formatter)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        destino = str(log_file.resolve())
        archivo = next((h for h in logger.handlers if getattr(h, "baseFilename", None) == destino), None)
        if archivo is None:
            archivo = logging.FileHandler(destino, encoding="utf-8")
            logger.addHandler(archivo)
        archivo.setLevel(lvl)
        archivo.setFormatter(formatter)
        chmod_restringido(log_file)

    return logger


def log_exception(
    msg: str,
    *,
    extra: Optional[dict] = None,
    level: int = logging.WARNING,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Registra la excepción en curso con contexto (`k=v`) sin interrumpir el flujo."""
    if extra:
        msg = msg + " | " + " ".join(f"{k}={v!r}" for k, v in extra.items())
    (logger or logging.getLogger(NAMESPACE)).log(level, msg, exc_info=True)
