import random

import pytest

from ponto.clt import (
    aplicar_teto_diario,
    aplicar_tolerancia_clt,
    descontar_exceso_intervalo,
    tolerancia_por_evento,
)
from ponto.models import CompensationPolicy


def test_tolerancia_por_evento():
    assert tolerancia_por_evento(3) == 3
    assert tolerancia_por_evento(-4) == 4
    assert tolerancia_por_evento(13) == 5
    assert tolerancia_por_evento(-60) == 5
    assert tolerancia_por_evento(13, 8) == 8


def test_dentro_de_tolerancia_no_computa():
    r = aplicar_tolerancia_clt(3, -4)
    assert (r.late_minutes, r.early_arrival_minutes, r.overtime_minutes, r.early_exit_minutes) == (0, 0, 0, 0)
    assert r.net_balance_minutes == 0


def test_atraso_fuera_de_tolerancia():
    r = aplicar_tolerancia_clt(13, -4)
    assert r.late_minutes == 8
    assert r.early_exit_minutes == 0
    assert r.net_balance_minutes == -8


def test_atraso_y_extra_se_compensan():
    r = aplicar_tolerancia_clt(7, 7)
    assert r.late_minutes == 2
    assert r.overtime_minutes == 2
    assert r.net_balance_minutes == 0


def test_llegada_anticipada_y_extra():
    r = aplicar_tolerancia_clt(-6, 19)
    assert r.early_arrival_minutes == 1
    assert r.overtime_minutes == 14
    assert r.net_balance_minutes == 15


class TestTetoDiario:
    def test_sin_exceso_no_cambia(self):
        assert aplicar_teto_diario(5, 5, 10) == (5, 5)

    def test_recupera_del_lado_mayor(self):
        assert aplicar_teto_diario(2, 9, 10) == (2, 8)
        assert aplicar_teto_diario(1, 9, 5) == (1, 4)

    def test_empate_recupera_del_inicio(self):
        assert aplicar_teto_diario(3, 3, 4) == (1, 3)

    def test_excedente_pasa_al_otro_lado(self):
        assert aplicar_teto_diario(2, 3, 0) == (0, 0)

    def test_tope_con_tolerancia_configurada(self):
        r = aplicar_tolerancia_clt(8, 6, tolerancia_evento=8, teto_diario=10)
        assert (r.tolerated_start, r.tolerated_end) == (4, 6)
        assert r.late_minutes == 4
        assert r.overtime_minutes == 0

    def test_tope_empate_con_tolerancia_configurada(self):
        r = aplicar_tolerancia_clt(7, -7, tolerancia_evento=8, teto_diario=10)
        assert (r.tolerated_start, r.tolerated_end) == (3, 7)
        assert r.late_minutes == 4
        assert r.early_exit_minutes == 0


class TestExcesoIntervalo:
    def test_consume_extra_y_sobra_atraso(self):
        r = aplicar_tolerancia_clt(-5, 60, interval_excess_minutes=63)
        assert r.overtime_minutes == 0
        assert r.early_arrival_minutes == 0
        assert r.late_minutes == 8
        assert r.net_balance_minutes == -8

    def test_consume_llegada_anticipada_despues_de_extra(self):
        r = aplicar_tolerancia_clt(-20, 10, interval_excess_minutes=12)
        assert r.overtime_minutes == 0
        assert r.early_arrival_minutes == 8
        assert r.late_minutes == 0
        assert r.net_balance_minutes == 8

    def test_descontar_directo(self):
        assert descontar_exceso_intervalo(0, 10, 5, 0) == (0, 10, 5)
        assert descontar_exceso_intervalo(0, 10, 5, 7) == (0, 8, 0)
        assert descontar_exceso_intervalo(3, 0, 0, 7) == (10, 0, 0)


class TestPolitica:
    def test_nomina_separa_pagable_y_descontable(self):
        r = aplicar_tolerancia_clt(-20, 30, policy=CompensationPolicy.PAYROLL)
        assert r.payable_overtime_minutes == 40
        assert r.deductible_shortfall_minutes == 0
        assert r.net_balance_minutes == 0

        r = aplicar_tolerancia_clt(12, -9, policy=CompensationPolicy.PAYROLL)
        assert r.payable_overtime_minutes == 0
        assert r.deductible_shortfall_minutes == 11
        assert r.net_balance_minutes == 0

    def test_banco_de_horas_no_llena_nomina(self):
        r = aplicar_tolerancia_clt(-20, 30)
        assert r.payable_overtime_minutes == 0
        assert r.deductible_shortfall_minutes == 0
        assert r.net_balance_minutes == 40

    def test_alias_de_politica(self):
        r = aplicar_tolerancia_clt(12, -9, policy="PAGAMENTO_FOLHA")
        assert r.deductible_shortfall_minutes == 11

    def test_politica_invalida(self):
        with pytest.raises(ValueError):
            aplicar_tolerancia_clt(0, 0, policy="XYZ")


def test_fuzz_cubetas():
    rng = random.Random(1234)
    for _ in range(2000):
        d_ini = rng.randint(-120, 120)
        d_fin = rng.randint(-120, 120)
        exceso = rng.choice([0, 0, rng.randint(0, 90)])
        tol = rng.randint(0, 10)
        teto = rng.randint(0, 20)
        pol = rng.choice(list(CompensationPolicy))
        r = aplicar_tolerancia_clt(d_ini, d_fin, exceso, pol, tol, teto)

        for v in (r.late_minutes, r.early_arrival_minutes, r.overtime_minutes, r.early_exit_minutes):
            assert v >= 0
        assert not (r.late_minutes and r.early_arrival_minutes)
        assert not (r.overtime_minutes and r.early_exit_minutes)
        assert r.tolerated_start + r.tolerated_end <= teto

        credito = r.overtime_minutes + r.early_arrival_minutes
        debito = r.late_minutes + r.early_exit_minutes
        if pol == CompensationPolicy.PAYROLL:
            assert r.net_balance_minutes == 0
            assert r.payable_overtime_minutes == credito
            assert r.deductible_shortfall_minutes == debito
        else:
            assert r.net_balance_minutes == credito - debito

        if exceso == 0 and abs(d_ini) <= tol and abs(d_fin) <= tol and 2 * tol <= teto:
            assert credito == 0 and debito == 0
