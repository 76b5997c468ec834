"""
Orquestrador da simulação de recebimentos.

Recebe uma lista de entradas (valor + moeda), garante as cotações
necessárias, calcula cada recebimento e agrega os totais. Entradas
inválidas viram None no resultado e um registro no ValidationLogger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .conversao.aggregator import TotaisSimulacao, agregar_resultados
from .conversao.engine import (
    ConversionResult,
    RegimeTaxa,
    calculate_forward,
    calculate_reverse,
)
from .currency.rate_fetcher import CotacaoIndisponivelError, RateFetcher
from .currency.rate_storage import RateStorage
from .currency.rate_validator import RateValidator
from .taxas.fee_table import FeeTable
from .utils.logging import ValidationLogger
from .utils.normalization import normalizar_moeda, parse_valor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntradaSimulacao:
    id: object
    amount: object
    currency: str


class SimulacaoRecebimentos:
    """
    Orquestra busca de cotações, cálculo e agregação.
    """

    def __init__(
        self,
        table: Optional[FeeTable] = None,
        fetcher: Optional[RateFetcher] = None,
        storage: Optional[RateStorage] = None,
        validation_logger: Optional[ValidationLogger] = None,
    ) -> None:
        """
        Args:
            table: Tabela de tarifas (a embutida quando None)
            fetcher: Buscador de cotações; sem ele, `executar` só usa o cache
            storage: Cache de cotações; opcional
            validation_logger: Log de validação (um novo é criado se omitido)
        """
        self.table = table
        self.fetcher = fetcher
        self.storage = storage
        self.validator = RateValidator()
        self.validation_logger = validation_logger if validation_logger is not None else ValidationLogger()

    @staticmethod
    def moedas_necessarias(entradas: Iterable[EntradaSimulacao]) -> List[str]:
        """Moedas das entradas mais USD, sem repetição."""
        moedas = {normalizar_moeda(e.currency) for e in entradas}
        moedas.add("USD")
        moedas.discard("")
        return sorted(moedas)

    def calcular(
        self,
        entradas: Iterable[EntradaSimulacao],
        cotacoes: Dict[str, float],
        regime: Union[RegimeTaxa, bool] = RegimeTaxa.STANDARD,
    ) -> Dict[object, Optional[ConversionResult]]:
        """
        Calcula cada entrada com as cotações disponíveis.

        Returns:
            Dict {id_entrada: ConversionResult}, com None para entradas sem
            cotação (da moeda ou do USD) ou com valor não positivo.
        """
        cotacoes = {normalizar_moeda(k): v for k, v in (cotacoes or {}).items()}
        resultados: Dict[object, Optional[ConversionResult]] = {}
        usd_rate = cotacoes.get("USD")

        for entrada in entradas:
            contexto = {"id": entrada.id, "moeda": entrada.currency}

            if usd_rate is None or usd_rate <= 0:
                self.validation_logger.aviso("Cotação USD indisponível; entrada não calculada.", contexto)
                resultados[entrada.id] = None
                continue

            moeda = normalizar_moeda(entrada.currency)
            rate = cotacoes.get(moeda)
            if rate is None or rate <= 0:
                self.validation_logger.aviso(f"Cotação de {moeda} indisponível; entrada não calculada.", contexto)
                resultados[entrada.id] = None
                continue

            amount = parse_valor(entrada.amount)
            if amount is None or amount <= 0:
                self.validation_logger.aviso(
                    f"Valor inválido ({entrada.amount!r}); entrada ignorada.", contexto
                )
                resultados[entrada.id] = None
                continue

            resultados[entrada.id] = calculate_forward(
                amount, moeda, rate, usd_rate, regime, self.table
            )

        return resultados

    def obter_cotacoes(self, moedas: List[str]) -> Dict[str, float]:
        """
        Busca as cotações na API e atualiza o cache. Se a busca falhar, usa
        o cache (com aviso); sem cache, a falha é propagada.
        """
        if self.fetcher is None:
            if self.storage is None:
                raise CotacaoIndisponivelError("Nenhuma fonte de cotações configurada")
            return self.storage.carregar_cotacoes()

        try:
            cotacoes = self.fetcher.buscar_cotacoes(moedas)
        except CotacaoIndisponivelError as e:
            if self.storage is None:
                raise
            cache = self.storage.carregar_cotacoes()
            if not cache:
                raise
            self.validation_logger.aviso(
                "Falha ao atualizar câmbio; usando últimas cotações em cache.",
                {"erro": str(e), "ultima_atualizacao": self.storage.ultima_atualizacao()},
            )
            return cache

        if self.storage is not None:
            self.storage.salvar_cotacoes(cotacoes)
            # Cotações que a API não devolveu agora ficam com o valor anterior
            return {**self.storage.carregar_cotacoes(), **cotacoes}
        return cotacoes

    def executar(
        self,
        entradas: List[EntradaSimulacao],
        regime: Union[RegimeTaxa, bool] = RegimeTaxa.STANDARD,
        cotacoes: Optional[Dict[str, float]] = None,
    ) -> Tuple[Dict[object, Optional[ConversionResult]], TotaisSimulacao]:
        """
        Fluxo completo: cotações faltantes → cálculo → totais.

        Args:
            entradas: Entradas da simulação
            regime: Regime de tarifas aplicado a todas as entradas
            cotacoes: Cotações já conhecidas; só as faltantes são buscadas
        """
        # Cotação informada zerada ou negativa conta como ausente
        cotacoes = {
            normalizar_moeda(k): v for k, v in (cotacoes or {}).items() if v is not None and v > 0
        }
        moedas = self.moedas_necessarias(entradas)
        faltantes = self.validator.identificar_cotacoes_faltantes(moedas, cotacoes)

        if faltantes:
            logger.info("Buscando cotações faltantes: %s", ", ".join(faltantes))
            obtidas = {normalizar_moeda(k): v for k, v in self.obter_cotacoes(faltantes).items()}
            cotacoes = {**obtidas, **cotacoes}
            for moeda in self.validator.identificar_cotacoes_faltantes(moedas, cotacoes):
                self.validation_logger.aviso(f"Sem cotação para {moeda} após a busca.", {"moeda": moeda})

        resultados = self.calcular(entradas, cotacoes, regime)
        totais = agregar_resultados(resultados.values())
        self.validation_logger.info(
            f"Simulação concluída: {totais.quantidade} de {len(entradas)} entrada(s) calculada(s).",
            {"total_net_brl": round(totais.total_net_brl, 2)},
        )
        return resultados, totais

    def calcular_reverso(
        self,
        alvo_brl: float,
        moeda: str,
        cotacoes: Dict[str, float],
        regime: Union[RegimeTaxa, bool] = RegimeTaxa.STANDARD,
    ) -> ConversionResult:
        """
        Valor a faturar em `moeda` para receber `alvo_brl` líquidos.

        Raises:
            CotacaoIndisponivelError: falta cotação da moeda ou do USD.
            TaxaPercentualInvalidaError: tarifa percentual >= 100%.
        """
        cotacoes = {normalizar_moeda(k): v for k, v in (cotacoes or {}).items()}
        moeda = normalizar_moeda(moeda)
        faltantes = self.validator.identificar_cotacoes_faltantes([moeda], cotacoes)
        if faltantes:
            raise CotacaoIndisponivelError(f"Sem cotação para: {', '.join(faltantes)}")
        return calculate_reverse(alvo_brl, moeda, cotacoes[moeda], cotacoes["USD"], regime, self.table)
