"""
Motor de conversão: valor em moeda estrangeira → BRL líquido, e o inverso.

Fórmulas (cálculo direto):
    taxa_variavel   = valor × fee_percent / 100
    taxa_total      = taxa_variavel + fixed_fee
    cotacao_efetiva = cotacao_mercado × (1 − spread_percent / 100)
    liquido_moeda   = max(0, valor − taxa_total)
    net_brl         = liquido_moeda × cotacao_efetiva
    gross_brl       = valor × cotacao_mercado

Decomposição das perdas (em BRL):
    perda_spread = liquido_moeda × (cotacao_mercado − cotacao_efetiva)
    perda_taxas  = (valor − liquido_moeda) × cotacao_mercado
    perda_total  = gross_brl − net_brl = perda_taxas + perda_spread

O cálculo inverso isola o valor bruto na fórmula das taxas e reaproveita o
cálculo direto, de forma que os dois caminhos nunca divergem.

Nenhuma função deste módulo valida as entradas: valores não positivos ou
cotações ausentes devem ser filtrados antes (ver `simulador.simulacao`).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Optional, Union

from ..taxas.fee_table import FeeStructure, FeeTable, lookup_fees
from ..utils.normalization import normalizar_moeda


class TaxaPercentualInvalidaError(ValueError):
    """Tarifa percentual (ou spread) de 100% ou mais torna o cálculo inverso indefinido."""


class RegimeTaxa(Enum):
    STANDARD = "standard"
    MICROPAYMENT = "micropayment"

    @classmethod
    def from_value(cls, valor: Union["RegimeTaxa", bool, str, None]) -> "RegimeTaxa":
        """Aceita o enum, um bool (flag de micropagamento) ou o nome do regime."""
        if isinstance(valor, cls):
            return valor
        if valor is None:
            return cls.STANDARD
        if isinstance(valor, bool):
            return cls.MICROPAYMENT if valor else cls.STANDARD
        return cls(str(valor).strip().lower())


@dataclass(frozen=True)
class TaxaAplicada:
    """Par (percentual, fixa) já resolvido para um regime, mais o spread."""

    fee_percent: float
    fixed_fee: float
    spread_percent: float

    @classmethod
    def resolver(cls, fees: FeeStructure, regime: RegimeTaxa) -> "TaxaAplicada":
        # Sem variante de micropagamento, o campo ausente cai no valor padrão
        if regime is RegimeTaxa.MICROPAYMENT:
            fee_percent = fees.micropayment_fee_percent
            fixed_fee = fees.micropayment_fixed_fee
            return cls(
                fee_percent=fees.fee_percent if fee_percent is None else fee_percent,
                fixed_fee=fees.fixed_fee if fixed_fee is None else fixed_fee,
                spread_percent=fees.spread_percent,
            )
        return cls(
            fee_percent=fees.fee_percent,
            fixed_fee=fees.fixed_fee,
            spread_percent=fees.spread_percent,
        )

    def cotacao_efetiva(self, market_rate: float) -> float:
        return market_rate * (1 - self.spread_percent / 100)


@dataclass(frozen=True)
class ConversionResult:
    """
    Resultado imutável de uma conversão. Valores em BRL usam a cotação de
    mercado, exceto `net_brl`.

    `fee_loss_brl` é limitado pelo piso (`amount − net_after_fees`), mas os
    componentes `fixed_fee_loss_brl` e `variable_fee_loss_brl` não: quando as
    tarifas superam o valor, a soma dos componentes passa de `fee_loss_brl`.
    """

    amount: float
    currency: str
    regime: RegimeTaxa
    exchange_rate: float
    rate_with_spread: float
    gross_brl: float
    net_brl: float
    gross_usd: float
    net_usd: float
    total_fee_foreign: float
    fixed_fee_foreign: float
    variable_fee_foreign: float
    net_after_fees: float
    total_loss_brl: float
    spread_loss_brl: float
    fee_loss_brl: float
    fixed_fee_loss_brl: float
    variable_fee_loss_brl: float

    def to_dict(self) -> Dict[str, object]:
        dados = asdict(self)
        dados["regime"] = self.regime.value
        return dados


def calculate_forward(
    amount: float,
    currency_code: str,
    market_rate: float,
    usd_rate: float,
    regime: Union[RegimeTaxa, bool] = RegimeTaxa.STANDARD,
    table: Optional[FeeTable] = None,
) -> ConversionResult:
    """
    Calcula quanto chega em BRL de um recebimento de `amount` na moeda
    `currency_code`.

    Args:
        amount: Valor bruto na moeda de origem
        currency_code: Código da moeda (moedas fora da tabela usam o perfil DEFAULT)
        market_rate: BRL por 1 unidade da moeda (1.0 para BRL)
        usd_rate: BRL por 1 USD, usado apenas para expressar os totais em USD
        regime: RegimeTaxa ou flag booleana de micropagamento
        table: Tabela de tarifas; a embutida quando omitida

    Returns:
        ConversionResult com valores brutos/líquidos e a decomposição das perdas.
    """
    regime = RegimeTaxa.from_value(regime)
    moeda = normalizar_moeda(currency_code)
    taxa = TaxaAplicada.resolver(lookup_fees(moeda, table), regime)

    variable_fee = amount * taxa.fee_percent / 100
    fixed_fee = taxa.fixed_fee
    total_fee = variable_fee + fixed_fee

    rate_with_spread = taxa.cotacao_efetiva(market_rate)
    net_after_fees = max(0.0, amount - total_fee)

    net_brl = net_after_fees * rate_with_spread
    gross_brl = amount * market_rate

    return ConversionResult(
        amount=amount,
        currency=moeda,
        regime=regime,
        exchange_rate=market_rate,
        rate_with_spread=rate_with_spread,
        gross_brl=gross_brl,
        net_brl=net_brl,
        gross_usd=gross_brl / usd_rate,
        net_usd=net_brl / usd_rate,
        total_fee_foreign=total_fee,
        fixed_fee_foreign=fixed_fee,
        variable_fee_foreign=variable_fee,
        net_after_fees=net_after_fees,
        total_loss_brl=gross_brl - net_brl,
        spread_loss_brl=net_after_fees * (market_rate - rate_with_spread),
        fee_loss_brl=(amount - net_after_fees) * market_rate,
        fixed_fee_loss_brl=fixed_fee * market_rate,
        variable_fee_loss_brl=variable_fee * market_rate,
    )


def calculate_reverse(
    target_net_brl: float,
    currency_code: str,
    market_rate: float,
    usd_rate: float,
    regime: Union[RegimeTaxa, bool] = RegimeTaxa.STANDARD,
    table: Optional[FeeTable] = None,
) -> ConversionResult:
    """
    Calcula o valor a faturar na moeda de origem para receber
    `target_net_brl` líquidos.

        liquido_moeda = target_net_brl / cotacao_efetiva
        bruto         = (liquido_moeda + fixed_fee) / (1 − fee_percent / 100)

    O bruto encontrado passa pelo `calculate_forward`, então o resultado traz
    todos os campos consistentes com o cálculo direto (`result.amount` é o
    valor a faturar).

    Raises:
        TaxaPercentualInvalidaError: tarifa percentual ou spread >= 100%.
    """
    regime = RegimeTaxa.from_value(regime)
    moeda = normalizar_moeda(currency_code)
    taxa = TaxaAplicada.resolver(lookup_fees(moeda, table), regime)

    if taxa.fee_percent >= 100:
        raise TaxaPercentualInvalidaError(
            f"Tarifa percentual de {taxa.fee_percent}% para {moeda} impede o cálculo inverso"
        )
    if taxa.spread_percent >= 100:
        raise TaxaPercentualInvalidaError(
            f"Spread de {taxa.spread_percent}% para {moeda} zera a cotação efetiva"
        )

    net_foreign = target_net_brl / taxa.cotacao_efetiva(market_rate)
    gross = (net_foreign + taxa.fixed_fee) / (1 - taxa.fee_percent / 100)

    return calculate_forward(gross, moeda, market_rate, usd_rate, regime, table)
