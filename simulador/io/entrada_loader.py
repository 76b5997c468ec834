"""
Módulo para carregar a planilha de entradas da simulação.

Colunas esperadas (maiúsculas/minúsculas indiferentes):
    moeda (ou currency), valor (ou amount), id (opcional)
"""

import os
from typing import List, Optional

import pandas as pd

from ..simulacao import EntradaSimulacao
from ..utils.logging import ValidationLogger
from ..utils.normalization import normalizar_moeda

ALIASES_COLUNAS = {
    "currency": "moeda",
    "amount": "valor",
}


class EntradaLoader:
    """
    Lê entradas de CSV (';') ou Excel e devolve `EntradaSimulacao`.

    O valor é mantido como veio da planilha; a interpretação (e o descarte
    de valores inválidos) acontece em `SimulacaoRecebimentos.calcular`.
    """

    def __init__(self, validation_logger: Optional[ValidationLogger] = None):
        self.validation_logger = validation_logger

    def _read(self, path: str) -> pd.DataFrame:
        if path.lower().endswith((".xlsx", ".xls")):
            return pd.read_excel(path)
        return pd.read_csv(path, sep=";", dtype=str, keep_default_na=False)

    def carregar(self, path: str) -> List[EntradaSimulacao]:
        """
        Carrega as entradas do arquivo.

        Returns:
            Lista de EntradaSimulacao (vazia se o arquivo não existir ou não
            tiver as colunas obrigatórias, com aviso no ValidationLogger).
        """
        if not os.path.exists(path):
            if self.validation_logger is not None:
                self.validation_logger.erro(f"Arquivo de entradas {path} não encontrado.", {"path": path})
            return []

        df = self._read(path)
        return self.from_dataframe(df, origem=path)

    def from_dataframe(self, df: pd.DataFrame, origem: str = "DataFrame") -> List[EntradaSimulacao]:
        df = df.copy()
        df.columns = df.columns.astype(str).str.strip().str.lower()
        df = df.rename(columns=ALIASES_COLUNAS)

        if not {"moeda", "valor"}.issubset(df.columns):
            if self.validation_logger is not None:
                self.validation_logger.erro(
                    f"Colunas 'moeda' e 'valor' são obrigatórias em {origem}.",
                    {"colunas": list(df.columns)},
                )
            return []

        entradas: List[EntradaSimulacao] = []
        for posicao, (_, row) in enumerate(df.iterrows(), start=1):
            moeda = normalizar_moeda(row["moeda"])
            if not moeda:
                if self.validation_logger is not None:
                    self.validation_logger.aviso(
                        f"Linha {posicao} de {origem} sem moeda; ignorada.", {"linha": posicao}
                    )
                continue

            id_entrada = row.get("id") if "id" in df.columns else None
            if id_entrada is None or pd.isna(id_entrada) or str(id_entrada).strip() == "":
                id_entrada = posicao

            entradas.append(EntradaSimulacao(id=id_entrada, amount=row["valor"], currency=moeda))

        return entradas
