"""
Carrega uma tabela de tarifas alternativa a partir de planilha.

Formatos aceitos:
- `config/TAXAS_PAYPAL.csv` separado por ';'
- `.xlsx` com a aba TAXAS

Colunas: moeda, fee_percent, fixed_fee, spread_percent e, opcionalmente,
micropayment_fee_percent, micropayment_fixed_fee. A linha com moeda
DEFAULT substitui o perfil padrão.
"""

import os
from typing import Dict, Optional

import pandas as pd

from ..utils.logging import ValidationLogger
from ..utils.normalization import normalizar_moeda, parse_valor
from .fee_table import DEFAULT_FEES, TABELA_PAYPAL_BRASIL, FeeStructure, FeeTable

COLUNAS_OBRIGATORIAS = ["moeda", "fee_percent", "fixed_fee", "spread_percent"]
COLUNAS_OPCIONAIS = ["micropayment_fee_percent", "micropayment_fixed_fee"]


class FeeTableLoader:
    """
    Lê a planilha de tarifas e devolve um `FeeTable` imutável.
    """

    def __init__(self, validation_logger: Optional[ValidationLogger] = None):
        """
        Args:
            validation_logger: Instância opcional de ValidationLogger para registrar avisos
        """
        self.validation_logger = validation_logger

    def _aviso(self, mensagem: str, contexto: Optional[Dict] = None) -> None:
        if self.validation_logger is not None:
            self.validation_logger.aviso(mensagem, contexto)

    def load(self, path: Optional[str] = "config/TAXAS_PAYPAL.csv") -> FeeTable:
        """
        Carrega a tabela do arquivo informado.

        Se o arquivo não existir ou não puder ser lido, devolve a tabela
        embutida (TABELA_PAYPAL_BRASIL) e registra um aviso.
        """
        if not path or not os.path.exists(path):
            self._aviso(
                f"Arquivo de tarifas {path} não encontrado. Usando tabela embutida.",
                {"path": path},
            )
            return TABELA_PAYPAL_BRASIL

        try:
            df = self._read(path)
        except Exception as e:
            self._aviso(
                f"Falha ao carregar {path}: {e}. Usando tabela embutida.",
                {"path": path},
            )
            return TABELA_PAYPAL_BRASIL

        return self.from_dataframe(df, origem=path)

    def _read(self, path: str) -> pd.DataFrame:
        if path.lower().endswith((".xlsx", ".xls")):
            return pd.read_excel(path, sheet_name="TAXAS", dtype=str)
        return pd.read_csv(path, sep=";", dtype=str, keep_default_na=False)

    def from_dataframe(self, df: pd.DataFrame, origem: str = "DataFrame") -> FeeTable:
        """
        Monta o `FeeTable` a partir de um DataFrame já carregado.

        Linhas com valores ausentes, não numéricos ou negativos são
        ignoradas com aviso. Sem linha DEFAULT, o perfil padrão embutido é
        mantido.
        """
        df = df.copy()
        df.columns = df.columns.astype(str).str.strip().str.lower()

        faltando = [c for c in COLUNAS_OBRIGATORIAS if c not in df.columns]
        if faltando:
            self._aviso(
                f"Colunas obrigatórias ausentes em {origem}: {faltando}. Usando tabela embutida.",
                {"colunas": list(df.columns)},
            )
            return TABELA_PAYPAL_BRASIL

        entradas: Dict[str, FeeStructure] = {}
        default = DEFAULT_FEES

        for idx, row in df.iterrows():
            moeda = normalizar_moeda(row.get("moeda"))
            if not moeda:
                self._aviso(f"Linha {idx} sem moeda em {origem}; ignorada.", {"linha": idx})
                continue

            fees = self._parse_row(row)
            if fees is None:
                self._aviso(
                    f"Tarifas inválidas para {moeda} em {origem}; linha ignorada.",
                    {"linha": idx, "moeda": moeda},
                )
                continue

            if moeda == "DEFAULT":
                default = fees
            else:
                entradas[moeda] = fees

        return FeeTable(entradas, default)

    def _parse_row(self, row: pd.Series) -> Optional[FeeStructure]:
        valores = {}
        for col in COLUNAS_OBRIGATORIAS[1:]:
            valor = parse_valor(row.get(col))
            if valor is None:
                return None
            valores[col] = valor
        for col in COLUNAS_OPCIONAIS:
            valores[col] = parse_valor(row.get(col)) if col in row.index else None
        try:
            return FeeStructure(**valores)
        except ValueError:
            return None
