"""
Testes da tabela de tarifas.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from simulador.taxas.fee_table import (
    DEFAULT_FEES,
    TABELA_PAYPAL_BRASIL,
    FeeStructure,
    FeeTable,
    lookup_fees,
)


def test_moedas_desconhecidas_usam_default():
    for codigo in ["XYZ", "ARS", "", "btc"]:
        fees = lookup_fees(codigo)
        assert fees is DEFAULT_FEES, f"{codigo!r} deveria cair no DEFAULT"
        assert fees.fee_percent == 6.40
        assert fees.fixed_fee == 0.30
        assert fees.spread_percent == 4.50
    print("[OK] Moedas desconhecidas usam DEFAULT")


def test_spread_da_tabela_difere_do_default():
    assert lookup_fees("USD").spread_percent == 3.50
    assert DEFAULT_FEES.spread_percent == 4.50


def test_tabela_tem_as_moedas_do_paypal():
    esperadas = {
        "AUD", "CAD", "CZK", "DKK", "EUR", "HKD", "HUF", "ILS", "JPY", "MYR", "MXN", "TWD",
        "NZD", "NOK", "PHP", "PLN", "RUB", "SGD", "SEK", "CHF", "THB", "GBP", "USD",
    }
    assert esperadas.issubset(set(TABELA_PAYPAL_BRASIL))
    for codigo in esperadas:
        fees = TABELA_PAYPAL_BRASIL[codigo]
        assert fees.fee_percent == 6.40
        assert fees.spread_percent == 3.50
        assert fees.micropayment_fee_percent == 10.50
        assert fees.micropayment_fixed_fee < fees.fixed_fee


@pytest.mark.parametrize(
    "codigo,fixa",
    [("USD", 0.30), ("EUR", 0.35), ("GBP", 0.20), ("JPY", 40.00), ("HUF", 90.00), ("CZK", 10.00)],
)
def test_tarifas_fixas_por_moeda(codigo, fixa):
    assert lookup_fees(codigo).fixed_fee == fixa


def test_lookup_normaliza_codigo():
    assert lookup_fees(" eur ") is lookup_fees("EUR")


def test_lookup_idempotente():
    assert lookup_fees("GBP") is lookup_fees("GBP")
    assert lookup_fees("GBP") == FeeStructure(6.40, 0.20, 3.50, 10.50, 0.05)


def test_tabela_imutavel():
    with pytest.raises(TypeError):
        TABELA_PAYPAL_BRASIL._entradas["USD"] = DEFAULT_FEES
    with pytest.raises(AttributeError):
        DEFAULT_FEES.fee_percent = 0


def test_tabela_injetada():
    propria = FeeTable({"usd": FeeStructure(1.0, 0.1, 0.5)}, FeeStructure(2.0, 0.2, 1.0))
    assert lookup_fees("USD", propria).fee_percent == 1.0
    assert lookup_fees("EUR", propria).fee_percent == 2.0
    assert len(propria) == 1
    assert list(propria) == ["USD"]


def test_tabela_vazia_usa_o_proprio_default():
    vazia = FeeTable({}, FeeStructure(9.0, 1.0, 2.0))
    assert lookup_fees("USD", vazia).fee_percent == 9.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fee_percent": -1, "fixed_fee": 0.3, "spread_percent": 3.5},
        {"fee_percent": 6.4, "fixed_fee": -0.3, "spread_percent": 3.5},
        {"fee_percent": 6.4, "fixed_fee": 0.3, "spread_percent": -3.5},
        {"fee_percent": 6.4, "fixed_fee": 0.3, "spread_percent": 3.5, "micropayment_fixed_fee": -1},
    ],
)
def test_valores_negativos_rejeitados(kwargs):
    with pytest.raises(ValueError):
        FeeStructure(**kwargs)
