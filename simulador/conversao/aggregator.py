"""
Agrega resultados de conversão para os totais da simulação e para o
relatório.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .engine import ConversionResult

COLUNAS_RESULTADOS = [
    "id",
    "currency",
    "regime",
    "amount",
    "exchange_rate",
    "rate_with_spread",
    "total_fee_foreign",
    "fixed_fee_foreign",
    "variable_fee_foreign",
    "net_after_fees",
    "gross_brl",
    "net_brl",
    "gross_usd",
    "net_usd",
    "total_loss_brl",
    "fee_loss_brl",
    "fixed_fee_loss_brl",
    "variable_fee_loss_brl",
    "spread_loss_brl",
]


@dataclass(frozen=True)
class TotaisSimulacao:
    quantidade: int = 0
    total_net_brl: float = 0.0
    total_gross_brl: float = 0.0
    total_net_usd: float = 0.0
    total_gross_usd: float = 0.0
    total_loss_brl: float = 0.0
    total_fee_loss_brl: float = 0.0
    total_spread_loss_brl: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def agregar_resultados(resultados: Iterable[Optional[ConversionResult]]) -> TotaisSimulacao:
    """
    Soma cada campo de forma independente.

    Entradas None (valor inválido, cotação ausente) ficam fora da soma: não
    contam como zero e não entram em `quantidade`.
    """
    validos = [r for r in resultados if r is not None]
    return TotaisSimulacao(
        quantidade=len(validos),
        total_net_brl=sum(r.net_brl for r in validos),
        total_gross_brl=sum(r.gross_brl for r in validos),
        total_net_usd=sum(r.net_usd for r in validos),
        total_gross_usd=sum(r.gross_usd for r in validos),
        total_loss_brl=sum(r.total_loss_brl for r in validos),
        total_fee_loss_brl=sum(r.fee_loss_brl for r in validos),
        total_spread_loss_brl=sum(r.spread_loss_brl for r in validos),
    )


def criar_dataframe_resultados(resultados: Dict[object, Optional[ConversionResult]]) -> pd.DataFrame:
    """
    DataFrame da aba RESULTADOS, uma linha por entrada válida.

    Args:
        resultados: Dict {id_entrada: ConversionResult ou None}
    """
    linhas: List[Dict] = []
    for id_entrada, resultado in resultados.items():
        if resultado is None:
            continue
        linha = resultado.to_dict()
        linha["id"] = id_entrada
        linhas.append(linha)

    if not linhas:
        return pd.DataFrame(columns=COLUNAS_RESULTADOS)

    df = pd.DataFrame(linhas)[COLUNAS_RESULTADOS]
    colunas_numericas = COLUNAS_RESULTADOS[3:]
    df[colunas_numericas] = df[colunas_numericas].astype(float).round(6)
    return df


def criar_resumo_por_moeda(df_resultados: pd.DataFrame) -> pd.DataFrame:
    """
    Resumo agrupado por moeda (aba RESUMO_MOEDA).
    """
    if df_resultados.empty:
        return pd.DataFrame(
            columns=[
                "currency",
                "quantidade",
                "amount",
                "gross_brl",
                "net_brl",
                "total_loss_brl",
                "fee_loss_brl",
                "spread_loss_brl",
            ]
        )

    resumo = (
        df_resultados.groupby("currency")
        .agg(
            quantidade=("id", "count"),
            amount=("amount", "sum"),
            gross_brl=("gross_brl", "sum"),
            net_brl=("net_brl", "sum"),
            total_loss_brl=("total_loss_brl", "sum"),
            fee_loss_brl=("fee_loss_brl", "sum"),
            spread_loss_brl=("spread_loss_brl", "sum"),
        )
        .reset_index()
    )
    return resumo.sort_values("net_brl", ascending=False).reset_index(drop=True)
