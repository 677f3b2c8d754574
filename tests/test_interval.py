from ponto.interval import calcular_exceso_intervalo
from ponto.models import PunchSet, ScheduleSpec, ShiftKind, ShiftOverride

D = "2025-12-01"


def ps(*hhmm):
    vals = [f"{D} {h}:00" if h else None for h in hhmm]
    vals += [None] * (4 - len(vals))
    return PunchSet(*vals)


SCHED = ScheduleSpec("08:00", "12:00", "13:00", "17:00")


def test_exceso_basico():
    ex = calcular_exceso_intervalo(ps("07:55", "12:05", "14:08", "18:00"), SCHED)
    assert ex.minutes == 63
    assert ex.seconds == 63 * 60


def test_tolerancia_de_intervalo():
    ex = calcular_exceso_intervalo(ps("07:55", "12:05", "14:08", "18:00"), SCHED, tolerance_minutes=10)
    assert ex.minutes == 53


def test_intervalo_menor_al_previsto_es_cero():
    ex = calcular_exceso_intervalo(ps("08:00", "12:10", "12:50", "17:00"), SCHED)
    assert ex.seconds == 0


def test_turno_unico_usa_descanso():
    ov = ShiftOverride(ShiftKind.MORNING_ONLY, 20)
    sched = ScheduleSpec(morning_start="07:00", afternoon_end="13:20")
    ex = calcular_exceso_intervalo(ps("07:00", "10:00", "10:35", "13:20"), sched, ov)
    assert ex.minutes == 15


def test_sin_checadas_o_campos_es_cero():
    assert calcular_exceso_intervalo(ps("08:00", "12:00"), SCHED).seconds == 0
    sched = ScheduleSpec(morning_start="08:00", afternoon_end="17:00")
    assert calcular_exceso_intervalo(ps("08:00", "12:00", "14:00", "17:00"), sched).seconds == 0


def test_valor_no_parseable_es_cero():
    punches = PunchSet(f"{D} 08:00:00", "12h00", f"{D} 14:00:00", f"{D} 17:00:00")
    assert calcular_exceso_intervalo(punches, SCHED).seconds == 0
