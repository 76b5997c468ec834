"""
Módulo responsável por buscar cotações atuais (BRL por unidade da moeda) na
AwesomeAPI.

Uma única requisição cobre todas as moedas:
    https://economia.awesomeapi.com.br/json/last/USD-BRL,EUR-BRL

A resposta traz uma chave por par ("USDBRL", "EURBRL") com o campo "bid".
BRL nunca é consultado: a cotação é sempre 1.0.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

import requests

from ..utils.normalization import normalizar_moeda

logger = logging.getLogger(__name__)

AWESOMEAPI_URL = "https://economia.awesomeapi.com.br/json/last/{pares}"


class CotacaoIndisponivelError(RuntimeError):
    """Falha ao obter cotações na API (HTTP ou rede)."""


class RateFetcher:
    """Responsável exclusivamente por buscar cotações na API."""

    def __init__(
        self,
        timeout: float = 10.0,
        max_retries: int = 2,
        session: Optional[requests.Session] = None,
        url: str = AWESOMEAPI_URL,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.session = session or requests.Session()
        self.url = url

    def _log(self, msg: str, nivel: int = logging.INFO) -> None:
        logger.log(nivel, "[CAMBIO_API] %s", msg)

    def buscar_cotacoes(self, moedas: Iterable[str]) -> Dict[str, float]:
        """
        Busca a cotação de compra (bid) de cada moeda em BRL.

        Args:
            moedas: códigos de moeda (duplicados e caixa são normalizados)

        Returns:
            {moeda: cotacao}. Moedas ausentes na resposta ficam de fora
            (com aviso no log); BRL vale sempre 1.0.

        Raises:
            CotacaoIndisponivelError: resposta não-200 ou erro de rede após
                todas as tentativas.
        """
        codigos = sorted({normalizar_moeda(m) for m in moedas if normalizar_moeda(m)})
        cotacoes: Dict[str, float] = {}
        if not codigos:
            return cotacoes

        if "BRL" in codigos:
            cotacoes["BRL"] = 1.0
        estrangeiras = [c for c in codigos if c != "BRL"]
        if not estrangeiras:
            return cotacoes

        data = self._requisitar(estrangeiras)

        for moeda in estrangeiras:
            par = data.get(f"{moeda}BRL") or {}
            bid = par.get("bid")
            try:
                cotacoes[moeda] = float(bid)
            except (TypeError, ValueError):
                self._log(f"Cotação de {moeda} não encontrada na resposta da API.", logging.WARNING)

        self._log(f"Cotações obtidas: {cotacoes}")
        return cotacoes

    def _requisitar(self, moedas: List[str]) -> Dict:
        url = self.url.format(pares=",".join(f"{m}-BRL" for m in moedas))
        ultimo_erro = ""

        for attempt in range(1, self.max_retries + 1):
            try:
                r = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                ultimo_erro = str(e)
                self._log(
                    f"Falha de rede ao buscar {moedas} (tentativa {attempt}/{self.max_retries}): {e}",
                    logging.WARNING,
                )
                continue

            if r.status_code == 200:
                return r.json()

            ultimo_erro = f"{r.status_code} {r.reason} - {r.text}"
            self._log(
                f"API respondeu {r.status_code} para {moedas} (tentativa {attempt}/{self.max_retries})",
                logging.WARNING,
            )

        self._log(f"Erro ao buscar cotações: {ultimo_erro}", logging.ERROR)
        raise CotacaoIndisponivelError(f"Falha ao buscar cotações: {ultimo_erro}")
