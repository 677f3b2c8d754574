"""I/O: lectura del export del reloj y export Excel de resúmenes."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .config import AppConfig
from .models import PunchEvent
from .parsers import parse_direction, parse_punch
from .utils import chmod_restringido, guess_column, normalize_id

__all__ = ["parsear_texto_batidas", "leer_batidas", "dataframe_a_eventos", "exportar_excel"]

log = logging.getLogger("ponto.io")

REQUIRED_HEADERS = ("EnNo", "Name", "DateTime")
DIRECTION_HEADER = "In/Out"
MIN_HEADER_COLS = 5

_MULTI_SPACE_RE = re.compile(r"\s{2,}")
_ANY_SPACE_RE = re.compile(r"\s+")


def _splitter(header_line: str):
    """Tab si el encabezado la trae; si no, 2+ espacios; como último recurso cualquier espacio."""
    if "\t" in header_line:
        return lambda s: s.split("\t")
    if _MULTI_SPACE_RE.search(header_line):
        return _MULTI_SPACE_RE.split
    return _ANY_SPACE_RE.split


def _validar_encabezados(headers: List[str]) -> Dict[str, str]:
    if len(headers) < MIN_HEADER_COLS:
        raise ValueError(
            f"Número insuficiente de columnas en el encabezado (encontradas: {len(headers)}, "
            f"esperadas: al menos {MIN_HEADER_COLS}). Verifica el separador (tab o espacios)."
        )
    found: Dict[str, str] = {}
    norm = {h.strip().lower(): h for h in headers}
    for req in REQUIRED_HEADERS + (DIRECTION_HEADER,):
        if req.lower() in norm:
            found[req] = norm[req.lower()]
    missing = [h for h in REQUIRED_HEADERS if h not in found]
    if missing:
        raise ValueError(
            f"Faltan encabezados obligatorios: {', '.join(missing)}. "
            f"Esperados: {', '.join(REQUIRED_HEADERS)}. Encontrados: {', '.join(headers)}"
        )
    return found


def parsear_texto_batidas(content: str) -> pd.DataFrame:
    """
    Parsea el export de texto del reloj (TXT/DAT).

    - Separador: tab si está en el encabezado, si no 2+ espacios.
    - Encabezados obligatorios EnNo, Name, DateTime (sin importar mayúsculas); In/Out opcional.
    - Filas con menos campos que el encabezado se ignoran (se loguean).

    Lanza ValueError si el contenido está vacío, el encabezado es inválido o no queda
    ninguna fila válida.
    """
    if not isinstance(content, str) or not content.strip():
        raise ValueError("Contenido del archivo vacío o inválido")

    lines = [ln.strip() for ln in content.replace("\r\n", "\n").replace("\r", "\n").split("\n")]
    lines = [ln for ln in lines if ln]
    header_line = lines[0]
    split = _splitter(header_line)
    headers = [h.strip() for h in split(header_line) if h.strip()]
    cols = _validar_encabezados(headers)

    rows: List[Dict[str, str]] = []
    for lineno, line in enumerate(lines[1:], start=2):
        values = [v.strip() for v in split(line)]
        while values and values[-1] == "":
            values.pop()
        if len(values) < len(headers):
            log.warning(
                "Línea %s ignorada: columnas insuficientes (esperadas %s, encontradas %s)",
                lineno, len(headers), len(values),
            )
            continue
        rec = dict(zip(headers, values))
        if not rec[cols["EnNo"]] or not rec[cols["Name"]] or not rec[cols["DateTime"]]:
            continue
        rows.append(rec)

    if not rows:
        raise ValueError("No se encontró ningún registro válido. Verifica el formato del archivo.")

    df = pd.DataFrame(rows, columns=headers, dtype=str)
    return df.rename(columns={v: k for k, v in cols.items()})


def _read_csv_flexible(path: Path) -> pd.DataFrame:
    """Lee CSV tolerante a encodings comunes (utf-8-sig, utf-8, latin1) con separador detectado."""
    last_err: Optional[Exception] = None
    for enc in ("utf-8-sig", "utf-8", "latin1"):
        try:
            return pd.read_csv(path, dtype=str, encoding=enc, sep=None, engine="python")
        except Exception as e:
            last_err = e
            continue
    raise ValueError(f"No se pudo leer el CSV {path.name}: {last_err}") from last_err


def _read_text(path: Path) -> str:
    for enc in ("utf-8-sig", "utf-8"):
        try:
            return path.read_text(encoding=enc)
        except UnicodeDecodeError:
            continue
    return path.read_text(encoding="latin1")


def leer_batidas(path: Path) -> pd.DataFrame:
    """
    Lee checadas desde TXT/DAT (export del reloj), CSV o Excel.

    Retorna DataFrame (dtype=str) con al menos EnNo, Name, DateTime y, si existe, In/Out.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No existe el archivo de checadas: {path}")

    suffix = path.suffix.lower()
    if suffix in (".xlsx", ".xlsm", ".xls"):
        df = pd.read_excel(path, dtype=str)
    elif suffix == ".csv":
        df = _read_csv_flexible(path)
    else:
        return parsear_texto_batidas(_read_text(path))

    df.columns = [str(c).replace("\ufeff", "").strip() for c in df.columns]
    cols = _validar_encabezados(list(df.columns))
    df = df.rename(columns={v: k for k, v in cols.items()})
    df = df.dropna(subset=list(REQUIRED_HEADERS))
    if df.empty:
        raise ValueError("No se encontró ningún registro válido. Verifica el formato del archivo.")
    return df.reset_index(drop=True)


def dataframe_a_eventos(df: pd.DataFrame, cfg: Optional[AppConfig] = None) -> List[PunchEvent]:
    """Filas -> PunchEvent. Fechas no parseables se descartan (warning)."""
    cfg = cfg or AppConfig()
    id_col = guess_column(df, ["EnNo", "ID"]) or "EnNo"
    name_col = guess_column(df, ["Name", "Nombre"])
    dir_col = guess_column(df, [DIRECTION_HEADER])

    out: List[PunchEvent] = []
    descartadas = 0
    for rec in df.to_dict(orient="records"):
        ts = parse_punch(rec.get("DateTime"))
        emp = normalize_id(rec.get(id_col), cfg.id_min_width)
        if ts is None or not emp:
            descartadas += 1
            continue
        out.append(
            PunchEvent(
                employee_id=emp,
                timestamp=ts,
                direction=parse_direction(rec.get(dir_col)) if dir_col else None,
                name=str(rec.get(name_col) or "").strip() if name_col else "",
            )
        )
    if descartadas:
        log.warning("Se descartaron %s filas con fecha/ID no parseable", descartadas)
    return out


# Protege contra inyección de fórmulas en Excel (Excel/CSV Injection).
# Si un campo de texto comienza con =, +, -, @, Excel puede interpretarlo como fórmula.
_EXCEL_FORMULA_PREFIXES = ("=", "+", "-", "@")


def _sanitize_excel_injection(df: pd.DataFrame) -> pd.DataFrame:
    """Copia del DF con strings sanitizadas (apóstrofe delante). No toca números ni NaN."""
    if df is None or df.empty:
        return df
    out = df.copy()
    for col in out.columns:
        if str(out[col].dtype) not in ("object", "string"):
            continue

        def _fix(v):
            if v is None or (isinstance(v, float) and pd.isna(v)):
                return v
            if not isinstance(v, str):
                return v
            if v.startswith(_EXCEL_FORMULA_PREFIXES):
                return "'" + v
            return v

        out[col] = out[col].map(_fix)
    return out


def exportar_excel(
    df: pd.DataFrame,
    out_path: Path,
    extra_sheets: Optional[Dict[str, pd.DataFrame]] = None,
    cfg: Optional[AppConfig] = None,
) -> None:
    """Exporta el DataFrame principal (hoja 'Resumen diario') y hojas extra a un XLSX.

    Formato aplicado (determinístico):
    - Congela encabezados (freeze panes A2)
    - Encabezados en negritas
    - AutoFiltro en el rango usado
    - Ancho de columnas por nombre de columna; fallback por longitud de header
    - Columna ID como texto (preserva ceros)
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    extra_sheets = extra_sheets or {}
    cfg = cfg or AppConfig()

    def _expected_width(header: object) -> float:
        h = "" if header is None else str(header)
        if h in (cfg.column_widths or {}):
            return float(cfg.column_widths[h])
        return float(min(45, max(10, len(h) + 2)))

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        _sanitize_excel_injection(df).to_excel(writer, index=False, sheet_name="Resumen diario")
        for sheet_name, sdf in extra_sheets.items():
            if sdf is None or len(sdf) == 0:
                continue
            _sanitize_excel_injection(sdf).to_excel(writer, index=False, sheet_name=str(sheet_name)[:31])

        header_font = Font(bold=True)
        for ws in writer.sheets.values():
            ws.freeze_panes = "A2"
            headers = [ws.cell(row=1, column=c).value for c in range(1, ws.max_column + 1)]
            for c in range(1, ws.max_column + 1):
                ws.cell(row=1, column=c).font = header_font
            ws.auto_filter.ref = f"A1:{get_column_letter(ws.max_column)}{ws.max_row}"

            if "ID" in headers:
                id_col = headers.index("ID") + 1
                for r in range(2, ws.max_row + 1):
                    cell = ws.cell(row=r, column=id_col)
                    if cell.value is None:
                        continue
                    cell.value = normalize_id(cell.value, cfg.id_min_width)
                    cell.number_format = "@"

            for idx, header in enumerate(headers, start=1):
                ws.column_dimensions[get_column_letter(idx)].width = _expected_width(header)

    chmod_restringido(out_path)
