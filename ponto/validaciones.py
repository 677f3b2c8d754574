"""Funciones de validación de entrada para config y escalas."""

from __future__ import annotations

from typing import Optional

from .models import CompensationPolicy
from .parsers import parse_time_of_day


def validate_input(value: object, expected_type: type | tuple[type, ...]) -> object:
    """Validate input value against the expected type."""
    if not isinstance(value, expected_type):
        if isinstance(expected_type, tuple):
            names = ", ".join(t.__name__ for t in expected_type)
        else:
            names = expected_type.__name__
        raise TypeError(
            f"Expected value of type {names}, but got {type(value).__name__}."
        )
    return value


def validate_non_empty_string(value: object) -> str:
    """Validate that the string is not empty."""
    validate_input(value, str)
    s = str(value).strip()
    if not s:
        raise ValueError("String cannot be empty or just whitespace.")
    return s


def validate_non_negative_int(value: object, name: str = "value") -> int:
    """Validate that the value is a non-negative integer (>= 0)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name}: expected int, got {type(value).__name__}.")
    if value < 0:
        raise ValueError(f"{name}: must be >= 0, got {value}.")
    return value


def validate_weekday(value: int, name: str = "weekday") -> int:
    """Validate weekday number (0=Monday .. 6=Sunday)."""
    validate_non_negative_int(value, name)
    if value > 6:
        raise ValueError(f"{name}: must be 0-6, got {value}.")
    return value


def validate_time_of_day(value: object, name: str = "hora") -> Optional[str]:
    """'HH:MM' válido o vacío (None). Lanza ValueError si viene algo no parseable."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    t = parse_time_of_day(value)
    if t is None:
        raise ValueError(f"{name}: hora inválida {value!r} (se espera HH:MM).")
    return t.strftime("%H:%M")


def validate_shift_type(value: object, name: str = "shift_type") -> str:
    """FULL_DAY / MORNING_ONLY / AFTERNOON_ONLY (vacío = FULL_DAY)."""
    s = str(value or "FULL_DAY").strip().upper()
    if s not in {"FULL_DAY", "MORNING_ONLY", "AFTERNOON_ONLY"}:
        raise ValueError(f"{name}: valor inválido {value!r}.")
    return s


def validate_policy(value: object, name: str = "politica") -> str:
    """HOUR_BANK / PAYROLL (acepta BANCO_DE_HORAS / PAGAMENTO_FOLHA)."""
    try:
        return CompensationPolicy.from_value(value).value
    except ValueError as exc:
        raise ValueError(f"{name}: política inválida {value!r}.") from exc
