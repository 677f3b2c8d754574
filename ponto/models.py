"""Tipos de entrada/salida del motor de resumen diario.

Todos son dataclasses inmutables o enums; el motor no guarda estado entre llamadas.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

__all__ = [
    "ShiftKind",
    "CompensationPolicy",
    "DayStatus",
    "PunchSet",
    "ScheduleSpec",
    "ShiftOverride",
    "PunchEvent",
    "WorkedTime",
    "ExpectedTime",
    "Indicators",
    "IntervalExcess",
    "CltResult",
    "DaySummary",
]

PunchValue = Union[datetime, str, None]
ScheduleValue = Union[time, str, None]


class ShiftKind(str, Enum):
    MORNING_ONLY = "MORNING_ONLY"
    AFTERNOON_ONLY = "AFTERNOON_ONLY"


class CompensationPolicy(str, Enum):
    """HOUR_BANK: saldos se compensan (banco de horas). PAYROLL: extra y faltante van separados a nómina.

    Sin valor (None o vacío) es banco de horas.
    """

    HOUR_BANK = "HOUR_BANK"
    PAYROLL = "PAYROLL"

    @classmethod
    def from_value(cls, value: object) -> "CompensationPolicy":
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().upper()
        if not s:
            return cls.HOUR_BANK
        aliases = {
            "BANCO_DE_HORAS": cls.HOUR_BANK,
            "PAGAMENTO_FOLHA": cls.PAYROLL,
        }
        if s in aliases:
            return aliases[s]
        return cls(s)


class DayStatus(str, Enum):
    OK = "OK"
    INCONSISTENT = "INCONSISTENT"


@dataclass(frozen=True)
class PunchSet:
    """Las cuatro checadas del día (cualquiera puede faltar)."""

    morning_entry: PunchValue = None
    lunch_exit: PunchValue = None
    afternoon_entry: PunchValue = None
    final_exit: PunchValue = None

    def count(self) -> int:
        return sum(1 for v in (self.morning_entry, self.lunch_exit, self.afternoon_entry, self.final_exit) if v)


@dataclass(frozen=True)
class ScheduleSpec:
    """Forma esperada del turno ('HH:MM'). Mañana y/o tarde pueden no estar programadas."""

    morning_start: ScheduleValue = None
    morning_end: ScheduleValue = None
    afternoon_start: ScheduleValue = None
    afternoon_end: ScheduleValue = None


@dataclass(frozen=True)
class ShiftOverride:
    """Turno único continuo con descanso interno (4 checadas = un solo turno)."""

    kind: ShiftKind
    break_minutes: int = 20


@dataclass(frozen=True)
class PunchEvent:
    """Una checada cruda del reloj, antes de agruparse por día."""

    employee_id: str
    timestamp: datetime
    direction: Optional[int] = None
    name: str = ""


@dataclass(frozen=True)
class WorkedTime:
    morning_seconds: int = 0
    afternoon_seconds: int = 0
    mode: str = "NONE"

    @property
    def total_seconds(self) -> int:
        return self.morning_seconds + self.afternoon_seconds


@dataclass(frozen=True)
class ExpectedTime:
    morning_seconds: int = 0
    afternoon_seconds: int = 0

    @property
    def total_seconds(self) -> int:
        return self.morning_seconds + self.afternoon_seconds


@dataclass(frozen=True)
class Indicators:
    delay_minutes: int = 0
    early_arrival_minutes: int = 0
    overtime_minutes: int = 0
    early_exit_minutes: int = 0


@dataclass(frozen=True)
class IntervalExcess:
    seconds: int = 0

    @property
    def minutes(self) -> int:
        return self.seconds // 60


@dataclass(frozen=True)
class CltResult:
    late_minutes: int = 0
    early_arrival_minutes: int = 0
    overtime_minutes: int = 0
    early_exit_minutes: int = 0
    net_balance_minutes: int = 0
    payable_overtime_minutes: int = 0
    deductible_shortfall_minutes: int = 0
    tolerated_start: int = 0
    tolerated_end: int = 0


@dataclass(frozen=True)
class DaySummary:
    status: DayStatus
    work_date: str
    worked_seconds: int
    worked_minutes: int
    expected_seconds: int
    expected_minutes: int
    balance_seconds: int
    balance_minutes: int

    # Indicadores informativos (no afectan saldo ni CLT)
    delay_minutes: int
    early_arrival_minutes: int
    overtime_minutes: int
    early_exit_minutes: int

    interval_excess_seconds: int
    interval_excess_minutes: int

    # CLT art. 58 §1º
    late_clt_minutes: int
    early_arrival_clt_minutes: int
    overtime_clt_minutes: int
    early_exit_clt_minutes: int
    net_balance_clt_minutes: int
    payable_overtime_minutes: int
    deductible_shortfall_minutes: int
    compensation_policy: CompensationPolicy

    delta_start_minutes: Optional[int]
    delta_end_minutes: Optional[int]

    morning_worked_seconds: int
    afternoon_worked_seconds: int
    morning_expected_seconds: int
    afternoon_expected_seconds: int

    schedule_applied: ScheduleSpec = field(default_factory=ScheduleSpec)
    audit_lines: Tuple[str, ...] = ()

    def to_record(self) -> Dict[str, Any]:
        """Fila plana para persistir (una columna por campo), clave (empleado, fecha) la pone el caller."""
        rec = asdict(self)
        rec["status"] = self.status.value
        rec["compensation_policy"] = self.compensation_policy.value
        sched = rec.pop("schedule_applied")
        for k, v in sched.items():
            rec[f"schedule_{k}"] = v.strftime("%H:%M") if isinstance(v, time) else v
        rec["audit_lines"] = "\n".join(self.audit_lines)
        return rec
