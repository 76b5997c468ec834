"""
Tabela de tarifas do PayPal para recebimentos comerciais internacionais em
conta brasileira.

Tarifa percentual: 4,79% (nacional) + 1,61% (internacional) = 6,40%.
Spread de conversão no recebimento: 3,50%.
Regime de micropagamentos: 10,50% + tarifa fixa reduzida por moeda.

A tabela é imutável e injetada no motor de conversão (`FeeTable`). Moedas
fora da tabela usam o perfil DEFAULT, cujo spread (4,50%) é diferente do
spread da tabela (3,50%) de propósito.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Optional

from ..utils.normalization import normalizar_moeda


@dataclass(frozen=True)
class FeeStructure:
    fee_percent: float
    fixed_fee: float
    spread_percent: float
    micropayment_fee_percent: Optional[float] = None
    micropayment_fixed_fee: Optional[float] = None

    def __post_init__(self) -> None:
        for campo in ("fee_percent", "fixed_fee", "spread_percent"):
            if getattr(self, campo) < 0:
                raise ValueError(f"{campo} não pode ser negativo: {getattr(self, campo)}")
        for campo in ("micropayment_fee_percent", "micropayment_fixed_fee"):
            valor = getattr(self, campo)
            if valor is not None and valor < 0:
                raise ValueError(f"{campo} não pode ser negativo: {valor}")

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "fee_percent": self.fee_percent,
            "fixed_fee": self.fixed_fee,
            "spread_percent": self.spread_percent,
            "micropayment_fee_percent": self.micropayment_fee_percent,
            "micropayment_fixed_fee": self.micropayment_fixed_fee,
        }


class FeeTable(Mapping):
    """
    Mapa imutável moeda → FeeStructure, com perfil padrão para moedas
    desconhecidas.
    """

    def __init__(self, entradas: Mapping[str, FeeStructure], default: FeeStructure) -> None:
        self._entradas = MappingProxyType(
            {normalizar_moeda(codigo): fees for codigo, fees in entradas.items()}
        )
        self._default = default

    @property
    def default(self) -> FeeStructure:
        return self._default

    def lookup(self, currency_code: str) -> FeeStructure:
        """Estrutura da moeda ou o perfil DEFAULT (nunca levanta erro)."""
        return self._entradas.get(normalizar_moeda(currency_code), self._default)

    def __getitem__(self, currency_code: str) -> FeeStructure:
        return self._entradas[normalizar_moeda(currency_code)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entradas)

    def __len__(self) -> int:
        return len(self._entradas)

    def __repr__(self) -> str:
        return f"FeeTable(moedas={len(self)}, default={self._default!r})"


MICROPAYMENT_FEE_PERCENT = 10.50

DEFAULT_FEES = FeeStructure(fee_percent=6.40, fixed_fee=0.30, spread_percent=4.50)


def _paypal(fixed_fee: float, micropayment_fixed_fee: float) -> FeeStructure:
    return FeeStructure(
        fee_percent=6.40,
        fixed_fee=fixed_fee,
        spread_percent=3.50,
        micropayment_fee_percent=MICROPAYMENT_FEE_PERCENT,
        micropayment_fixed_fee=micropayment_fixed_fee,
    )


# (tarifa fixa padrão, tarifa fixa de micropagamento), na própria moeda
_TARIFAS_FIXAS = {
    "AUD": (0.30, 0.05),
    "CAD": (0.30, 0.05),
    "CZK": (10.00, 1.67),
    "DKK": (2.60, 0.43),
    "EUR": (0.35, 0.05),
    "HKD": (2.35, 0.39),
    "HUF": (90.00, 15.00),
    "ILS": (1.20, 0.20),
    "JPY": (40.00, 7.00),
    "MYR": (2.00, 0.20),
    "MXN": (4.00, 0.55),
    "TWD": (10.00, 2.00),
    "NZD": (0.45, 0.08),
    "NOK": (2.80, 0.47),
    "PHP": (15.00, 2.50),
    "PLN": (1.35, 0.23),
    "RUB": (10.00, 2.00),
    "SGD": (0.50, 0.08),
    "SEK": (3.25, 0.54),
    "CHF": (0.55, 0.09),
    "THB": (11.00, 1.80),
    "GBP": (0.20, 0.05),
    "USD": (0.30, 0.05),
}

_ENTRADAS = {codigo: _paypal(*fixas) for codigo, fixas in _TARIFAS_FIXAS.items()}
# Recebimento em reais não passa por conversão
_ENTRADAS["BRL"] = FeeStructure(
    fee_percent=6.40,
    fixed_fee=0.60,
    spread_percent=0.0,
    micropayment_fee_percent=MICROPAYMENT_FEE_PERCENT,
    micropayment_fixed_fee=0.10,
)

TABELA_PAYPAL_BRASIL = FeeTable(_ENTRADAS, DEFAULT_FEES)


def lookup_fees(currency_code: str, table: Optional[FeeTable] = None) -> FeeStructure:
    """
    Retorna a estrutura de tarifas da moeda.

    Moeda desconhecida => perfil DEFAULT da tabela (6,40% + 0,30, spread
    4,50% na tabela embutida). Sem efeitos colaterais.
    """
    if table is None:
        table = TABELA_PAYPAL_BRASIL
    return table.lookup(currency_code)
