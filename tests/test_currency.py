"""
Testes do pacote de cotações (busca na API, cache em JSON e validação).
"""

import json
import os
import sys
from unittest.mock import MagicMock

import pytest
import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from simulador.currency import CotacaoIndisponivelError, RateFetcher, RateStorage, RateValidator


def _resposta(status_code=200, payload=None):
    r = MagicMock()
    r.status_code = status_code
    r.reason = "OK" if status_code == 200 else "Server Error"
    r.text = json.dumps(payload or {})
    r.json.return_value = payload or {}
    return r


def test_fetcher_lista_vazia_nao_chama_api():
    session = MagicMock()
    assert RateFetcher(session=session).buscar_cotacoes([]) == {}
    session.get.assert_not_called()


def test_fetcher_brl_sempre_um():
    session = MagicMock()
    assert RateFetcher(session=session).buscar_cotacoes(["BRL", "brl"]) == {"BRL": 1.0}
    session.get.assert_not_called()


def test_fetcher_uma_requisicao_para_todas_as_moedas():
    session = MagicMock()
    session.get.return_value = _resposta(
        payload={
            "USDBRL": {"code": "USD", "codein": "BRL", "bid": "5.3712"},
            "EURBRL": {"code": "EUR", "codein": "BRL", "bid": "6.2010"},
        }
    )

    cotacoes = RateFetcher(session=session, timeout=3).buscar_cotacoes(["usd", "EUR", "BRL", "USD"])

    assert cotacoes == {"BRL": 1.0, "EUR": pytest.approx(6.2010), "USD": pytest.approx(5.3712)}
    session.get.assert_called_once()
    url = session.get.call_args[0][0]
    assert url.endswith("/json/last/EUR-BRL,USD-BRL")
    assert session.get.call_args[1]["timeout"] == 3


def test_fetcher_moeda_ausente_na_resposta_fica_de_fora():
    session = MagicMock()
    session.get.return_value = _resposta(payload={"USDBRL": {"bid": "5.0"}})

    cotacoes = RateFetcher(session=session).buscar_cotacoes(["USD", "THB"])

    assert cotacoes == {"USD": 5.0}


def test_fetcher_erro_http_levanta_apos_tentativas():
    session = MagicMock()
    session.get.return_value = _resposta(status_code=500)

    with pytest.raises(CotacaoIndisponivelError):
        RateFetcher(session=session, max_retries=3).buscar_cotacoes(["USD"])
    assert session.get.call_count == 3


def test_fetcher_erro_de_rede_e_nova_tentativa():
    session = MagicMock()
    session.get.side_effect = [
        requests.ConnectionError("sem rede"),
        _resposta(payload={"USDBRL": {"bid": "5.1"}}),
    ]

    assert RateFetcher(session=session, max_retries=2).buscar_cotacoes(["USD"]) == {"USD": 5.1}
    assert session.get.call_count == 2


def test_storage_salva_e_recarrega(tmp_path):
    path = tmp_path / "cache" / "cotacoes.json"
    storage = RateStorage(str(path))
    assert storage.carregar_cotacoes() == {}
    assert storage.ultima_atualizacao() is None

    storage.salvar_cotacoes({"usd": 5.2, "EUR": 6.1})

    novo = RateStorage(str(path))
    assert novo.carregar_cotacoes() == {"USD": 5.2, "EUR": 6.1}
    assert novo.obter_cotacao("usd") == 5.2
    assert novo.obter_cotacao("GBP") is None
    assert novo.ultima_atualizacao() is not None

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["cotacoes"]["USD"]["fonte"] == "awesomeapi"
    assert data["metadata"]["schema_version"] == 1


def test_storage_mescla_cotacoes(tmp_path):
    storage = RateStorage(str(tmp_path / "c.json"))
    storage.salvar_cotacoes({"USD": 5.0, "EUR": 6.0})
    storage.salvar_cotacoes({"USD": 5.5}, fonte="manual")

    assert RateStorage(str(tmp_path / "c.json")).carregar_cotacoes() == {"USD": 5.5, "EUR": 6.0}


def test_storage_arquivo_corrompido_vira_cache_vazio(tmp_path):
    path = tmp_path / "c.json"
    path.write_text("{ isto não é json", encoding="utf-8")
    assert RateStorage(str(path)).carregar_cotacoes() == {}


def test_validator_inclui_usd():
    validator = RateValidator()
    assert validator.identificar_cotacoes_faltantes(["EUR", "brl"], {"EUR": 6.0, "BRL": 1.0}) == ["USD"]


def test_validator_cotacao_nao_positiva_conta_como_faltante():
    validator = RateValidator()
    faltantes = validator.identificar_cotacoes_faltantes(["EUR", "GBP"], {"USD": 5.0, "EUR": 0.0})
    assert faltantes == ["EUR", "GBP"]
