"""
Testes dos loaders de planilhas (tarifas e entradas da simulação).
"""

import os
import sys

import pandas as pd
import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

from simulador.io.entrada_loader import EntradaLoader
from simulador.taxas.fee_table import DEFAULT_FEES, TABELA_PAYPAL_BRASIL
from simulador.taxas.fee_table_loader import FeeTableLoader
from simulador.utils.logging import ValidationLogger


def test_fee_table_loader_arquivo_inexistente(tmp_path):
    logger = ValidationLogger()
    table = FeeTableLoader(validation_logger=logger).load(str(tmp_path / "nao_existe.csv"))

    assert table is TABELA_PAYPAL_BRASIL
    assert len(logger.filtrar("AVISO")) == 1
    print("[OK] FeeTableLoader usa tabela embutida sem arquivo")


def test_fee_table_loader_csv(tmp_path):
    path = tmp_path / "TAXAS_PAYPAL.csv"
    path.write_text(
        "moeda;fee_percent;fixed_fee;spread_percent;micropayment_fee_percent;micropayment_fixed_fee\n"
        "usd;5,00;0.25;2.0;;\n"
        "XXX;abc;0.30;3.5;;\n"
        "YYY;6.4;-1;3.5;;\n"
        ";6.4;0.3;3.5;;\n"
        "EUR;6.4;0.35;3.5;10.5;0.05\n"
        "DEFAULT;7;0.50;5;;\n",
        encoding="utf-8",
    )
    logger = ValidationLogger()

    table = FeeTableLoader(validation_logger=logger).load(str(path))

    assert sorted(table) == ["EUR", "USD"]
    usd = table.lookup("USD")
    assert usd.fee_percent == pytest.approx(5.0)
    assert usd.fixed_fee == pytest.approx(0.25)
    assert usd.spread_percent == pytest.approx(2.0)
    assert usd.micropayment_fee_percent is None
    assert table.lookup("EUR").micropayment_fixed_fee == pytest.approx(0.05)
    assert table.default.fee_percent == pytest.approx(7.0)
    assert table.lookup("XXX") is table.default
    assert len(logger.filtrar("AVISO")) == 3


def test_fee_table_loader_sem_colunas_obrigatorias():
    logger = ValidationLogger()
    df = pd.DataFrame({"moeda": ["USD"], "fee_percent": ["6.4"]})
    assert FeeTableLoader(logger).from_dataframe(df) is TABELA_PAYPAL_BRASIL
    assert len(logger) == 1


def test_fee_table_loader_xlsx(tmp_path):
    path = tmp_path / "taxas.xlsx"
    pd.DataFrame(
        {
            "Moeda": ["GBP"],
            "Fee_Percent": [4.0],
            "Fixed_Fee": [0.2],
            "Spread_Percent": [3.0],
        }
    ).to_excel(path, sheet_name="TAXAS", index=False)

    table = FeeTableLoader().load(str(path))

    assert table.lookup("GBP").fee_percent == pytest.approx(4.0)
    assert table.default == DEFAULT_FEES


def test_planilha_de_tarifas_do_repositorio_igual_a_embutida():
    table = FeeTableLoader().load(os.path.join(ROOT, "config", "TAXAS_PAYPAL.csv"))

    assert set(table) == set(TABELA_PAYPAL_BRASIL)
    for moeda in TABELA_PAYPAL_BRASIL:
        assert table[moeda] == TABELA_PAYPAL_BRASIL[moeda], moeda
    assert table.default == DEFAULT_FEES


def test_entrada_loader_csv(tmp_path):
    path = tmp_path / "entradas.csv"
    path.write_text(
        "id;moeda;valor\n"
        "a;usd;1000\n"
        ";EUR;1.250,00\n"
        "c;;300\n",
        encoding="utf-8",
    )
    logger = ValidationLogger()

    entradas = EntradaLoader(logger).carregar(str(path))

    assert [(e.id, e.currency, e.amount) for e in entradas] == [
        ("a", "USD", "1000"),
        (2, "EUR", "1.250,00"),
    ]
    assert len(logger.filtrar("AVISO")) == 1


def test_entrada_loader_xlsx_com_nomes_em_ingles(tmp_path):
    path = tmp_path / "entradas.xlsx"
    pd.DataFrame({"Currency": ["USD", "JPY"], "Amount": [1000, 15000.5]}).to_excel(path, index=False)

    entradas = EntradaLoader().carregar(str(path))

    assert [e.id for e in entradas] == [1, 2]
    assert [e.currency for e in entradas] == ["USD", "JPY"]
    assert entradas[1].amount == pytest.approx(15000.5)


def test_entrada_loader_arquivo_inexistente(tmp_path):
    logger = ValidationLogger()
    assert EntradaLoader(logger).carregar(str(tmp_path / "x.csv")) == []
    assert len(logger.filtrar("ERRO")) == 1


def test_entrada_loader_sem_colunas():
    logger = ValidationLogger()
    assert EntradaLoader(logger).from_dataframe(pd.DataFrame({"x": [1]})) == []
    assert len(logger.filtrar("ERRO")) == 1
