from datetime import datetime

import pandas as pd
import pytest

from ponto.config import AppConfig
from ponto.io import dataframe_a_eventos, leer_batidas, parsear_texto_batidas

HEADER_TAB = "No\tTMNo\tEnNo\tName\tGMNo\tMode\tIn/Out\tVM\tDepartment\tDateTime"


def _fila(no, enno, name, inout, dt):
    return "\t".join([str(no), "1", str(enno), name, "1", "1", str(inout), "FP", "ADM", dt])


def test_separado_por_tabs():
    content = "\n".join([
        HEADER_TAB,
        _fila(1, 1, "Ana", 0, "2025-12-01 08:13:10"),
        _fila(2, 1, "Ana", 1, "2025-12-01 12:11:00"),
    ])
    df = parsear_texto_batidas(content)
    assert len(df) == 2
    assert {"EnNo", "Name", "DateTime", "In/Out"} <= set(df.columns)
    assert df.loc[0, "DateTime"] == "2025-12-01 08:13:10"


def test_separado_por_espacios_multiples():
    content = "\n".join([
        "No  EnNo  Name  Mode  DateTime",
        "1  001  JOAO SILVA  1  2025-12-01 08:00:00",
        "2  001  JOAO SILVA  1  2025-12-01 12:00:00",
    ])
    df = parsear_texto_batidas(content)
    assert list(df["Name"]) == ["JOAO SILVA", "JOAO SILVA"]
    assert df.loc[1, "DateTime"] == "2025-12-01 12:00:00"


def test_encabezados_sin_importar_mayusculas():
    content = "no\tenno\tname\tmode\tdatetime\n1\t5\tBea\t1\t2025-12-01 08:00:00"
    df = parsear_texto_batidas(content)
    assert df.loc[0, "EnNo"] == "5"


def test_pocas_columnas():
    with pytest.raises(ValueError, match="insuficiente"):
        parsear_texto_batidas("EnNo\tName\tDateTime\n1\tAna\t2025-12-01 08:00:00")


def test_faltan_encabezados():
    with pytest.raises(ValueError, match="EnNo"):
        parsear_texto_batidas("No\tTMNo\tID\tName\tMode\tDateTime\n1\t1\t1\tAna\t1\t2025-12-01 08:00:00")


def test_filas_cortas_se_ignoran():
    content = "\n".join([
        HEADER_TAB,
        "1\t1\t1\tAna",
        _fila(2, 1, "Ana", 1, "2025-12-01 12:11:00"),
    ])
    df = parsear_texto_batidas(content)
    assert len(df) == 1


def test_sin_filas_validas():
    with pytest.raises(ValueError, match="registro"):
        parsear_texto_batidas(HEADER_TAB + "\n1\t1\t1\tAna\n")


def test_contenido_vacio():
    with pytest.raises(ValueError):
        parsear_texto_batidas("   \n  ")


def test_leer_batidas_txt_y_csv(tmp_path):
    txt = tmp_path / "reloj.txt"
    txt.write_text(HEADER_TAB + "\n" + _fila(1, 1, "Ana", 0, "2025-12-01 08:00:00") + "\n", encoding="utf-8")
    assert len(leer_batidas(txt)) == 1

    csv = tmp_path / "reloj.csv"
    csv.write_text("EnNo,Name,DateTime,In/Out,Mode\n1,Ana,2025-12-01 08:00:00,0,1\n2,Bea,2025-12-01 09:00:00,0,1\n", encoding="utf-8")
    df = leer_batidas(csv)
    assert list(df["EnNo"]) == ["1", "2"]


def test_leer_batidas_no_existe(tmp_path):
    with pytest.raises(FileNotFoundError):
        leer_batidas(tmp_path / "nada.txt")


def test_dataframe_a_eventos():
    df = pd.DataFrame(
        [
            {"EnNo": "3.0", "Name": "Ana", "DateTime": "2025-12-01 08:13:10", "In/Out": "0"},
            {"EnNo": "3", "Name": "Ana", "DateTime": "basura", "In/Out": "1"},
            {"EnNo": "", "Name": "X", "DateTime": "2025-12-01 09:00:00", "In/Out": ""},
        ]
    )
    eventos = dataframe_a_eventos(df, AppConfig(id_min_width=3))
    assert len(eventos) == 1
    e = eventos[0]
    assert e.employee_id == "003"
    assert e.timestamp == datetime(2025, 12, 1, 8, 13, 10)
    assert e.direction == 0
    assert e.name == "Ana"


def test_leer_csv_ilegible(tmp_path):
    csv = tmp_path / "vacio.csv"
    csv.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="No se pudo leer el CSV"):
        leer_batidas(csv)
