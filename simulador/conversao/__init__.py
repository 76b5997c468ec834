"""
Motor de conversão e agregação dos resultados.
"""

from .engine import (
    ConversionResult,
    RegimeTaxa,
    TaxaAplicada,
    TaxaPercentualInvalidaError,
    calculate_forward,
    calculate_reverse,
)
from .aggregator import (
    TotaisSimulacao,
    agregar_resultados,
    criar_dataframe_resultados,
    criar_resumo_por_moeda,
)

__all__ = [
    "ConversionResult",
    "RegimeTaxa",
    "TaxaAplicada",
    "TaxaPercentualInvalidaError",
    "TotaisSimulacao",
    "agregar_resultados",
    "calculate_forward",
    "calculate_reverse",
    "criar_dataframe_resultados",
    "criar_resumo_por_moeda",
]
