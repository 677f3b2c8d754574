"""Tablas de salida: resumen diario y totales mensuales por empleado."""

from __future__ import annotations

from typing import Iterable, List

import pandas as pd

from .models import DayStatus, PunchValue
from .parsers import parse_punch
from .time_utils import minutes_to_hhmm, signed_minutes_to_hhmm
from .utils import month_key

__all__ = ["COLUMNAS_DIARIO", "resumenes_a_dataframe", "construir_resumen_mensual"]

COLUMNAS_DIARIO = [
    "ID", "Nombre", "Fecha", "Status", "Ocurrencia",
    "Entrada", "Salida a comer", "Regreso de comer", "Salida",
    "Horas trabajadas", "Min trabajados", "Horas previstas", "Min previstos",
    "Saldo", "Saldo min",
    "Atraso", "Llegada anticipada", "Extra", "Salida anticipada",
    "Exceso intervalo min",
    "Atraso CLT", "Llegada anticipada CLT", "Extra CLT", "Salida anticipada CLT",
    "Saldo CLT", "Extra pagable", "Faltante descontable", "Política",
    "Auditoría",
]


def _hhmm(v: PunchValue) -> str:
    dt = parse_punch(v)
    return "" if dt is None else dt.strftime("%H:%M")


def _ocurrencia_txt(oc) -> str:
    if oc is None:
        return ""
    return f"{oc.tipo} {oc.duracion}" if oc.duracion else oc.tipo


def resumenes_a_dataframe(resultados: Iterable) -> pd.DataFrame:
    """Un renglón por (empleado, fecha), ordenado por ID y fecha.

    `resultados`: objetos con employee_id, name, punches, summary y ocurrencia (ver
    pipeline.ResultadoDia). Previstas y saldo ya vienen ajustados por la ocurrencia.
    """
    rows: List[dict] = []
    for r in resultados:
        s = r.summary
        p = r.punches
        rows.append({
            "ID": r.employee_id,
            "Nombre": r.name,
            "Fecha": s.work_date,
            "Status": s.status.value,
            "Ocurrencia": _ocurrencia_txt(r.ocurrencia),
            "Entrada": _hhmm(p.morning_entry),
            "Salida a comer": _hhmm(p.lunch_exit),
            "Regreso de comer": _hhmm(p.afternoon_entry),
            "Salida": _hhmm(p.final_exit),
            "Horas trabajadas": minutes_to_hhmm(s.worked_minutes),
            "Min trabajados": s.worked_minutes,
            "Horas previstas": minutes_to_hhmm(s.expected_minutes),
            "Min previstos": s.expected_minutes,
            "Saldo": signed_minutes_to_hhmm(s.balance_minutes),
            "Saldo min": s.balance_minutes,
            "Atraso": s.delay_minutes,
            "Llegada anticipada": s.early_arrival_minutes,
            "Extra": s.overtime_minutes,
            "Salida anticipada": s.early_exit_minutes,
            "Exceso intervalo min": s.interval_excess_minutes,
            "Atraso CLT": s.late_clt_minutes,
            "Llegada anticipada CLT": s.early_arrival_clt_minutes,
            "Extra CLT": s.overtime_clt_minutes,
            "Salida anticipada CLT": s.early_exit_clt_minutes,
            "Saldo CLT": s.net_balance_clt_minutes,
            "Extra pagable": s.payable_overtime_minutes,
            "Faltante descontable": s.deductible_shortfall_minutes,
            "Política": s.compensation_policy.value,
            "Auditoría": "\n".join(s.audit_lines),
        })
    df = pd.DataFrame(rows, columns=COLUMNAS_DIARIO)
    if len(df):
        df = df.sort_values(["ID", "Fecha"], kind="mergesort").reset_index(drop=True)
    return df


def construir_resumen_mensual(df_diario: pd.DataFrame) -> pd.DataFrame:
    """Totales por ID/Nombre/Mes: días (inconsistentes, con ocurrencia), minutos y saldos."""
    if df_diario is None or len(df_diario) == 0 or "Fecha" not in df_diario.columns:
        return pd.DataFrame()
    df = df_diario.copy()
    df["Mes"] = df["Fecha"].map(month_key)
    df = df[df["Mes"] != ""]
    if len(df) == 0:
        return pd.DataFrame()
    df["_inconsistente"] = (df["Status"] == DayStatus.INCONSISTENT.value).astype(int)
    df["_ocurrencia"] = (df["Ocurrencia"].fillna("") != "").astype(int)

    g = df.groupby(["ID", "Nombre", "Mes"], dropna=False, as_index=False).agg(
        Dias=("Fecha", "nunique"),
        Dias_inconsistentes=("_inconsistente", "sum"),
        Dias_con_ocurrencia=("_ocurrencia", "sum"),
        Min_trabajados=("Min trabajados", "sum"),
        Min_previstos=("Min previstos", "sum"),
        Saldo_min=("Saldo min", "sum"),
        Saldo_CLT=("Saldo CLT", "sum"),
        Extra_pagable=("Extra pagable", "sum"),
        Faltante_descontable=("Faltante descontable", "sum"),
    )
    g["Total horas trabajadas"] = g["Min_trabajados"].map(minutes_to_hhmm)
    g["Total horas previstas"] = g["Min_previstos"].map(minutes_to_hhmm)
    g["Saldo"] = g["Saldo_min"].map(signed_minutes_to_hhmm)
    return g.sort_values(["ID", "Mes"], kind="stable").reset_index(drop=True)
