"""
Tabela de tarifas do processador de pagamentos.
"""

from .fee_table import (
    DEFAULT_FEES,
    TABELA_PAYPAL_BRASIL,
    FeeStructure,
    FeeTable,
    lookup_fees,
)
from .fee_table_loader import FeeTableLoader

__all__ = [
    "DEFAULT_FEES",
    "TABELA_PAYPAL_BRASIL",
    "FeeStructure",
    "FeeTable",
    "FeeTableLoader",
    "lookup_fees",
]
