"""
Log de validação das simulações.

Cada entrada descartada (moeda sem cotação, valor inválido, linha de
planilha ilegível...) vira um registro aqui, exportado depois para a aba
AVISOS do relatório e para a resposta do adapter HTTP.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

NIVEIS = {
    "INFO": logging.INFO,
    "AVISO": logging.WARNING,
    "ERRO": logging.ERROR,
}

COLUNAS_LOG = ["Nível", "Mensagem", "Contexto"]


class ValidationLogger:
    """
    Acumula mensagens de validação de uma simulação.

    Além de guardar as entradas, repassa cada mensagem para o logger padrão
    (`logging`) com o nível equivalente.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.validation_log: List[Dict[str, str]] = []
        self._logger = logger or logging.getLogger("simulador.validacao")

    def log(self, nivel: str, mensagem: str, contexto: Optional[Dict] = None):
        """
        Adiciona uma entrada ao log de validação.

        Args:
            nivel: "INFO", "AVISO" ou "ERRO"
            mensagem: Mensagem descritiva
            contexto: Informações adicionais (id da entrada, moeda, etc.)
        """
        self.validation_log.append(
            {"Nível": nivel, "Mensagem": mensagem, "Contexto": str(contexto) if contexto else ""}
        )
        self._logger.log(NIVEIS.get(nivel, logging.INFO), "%s %s", mensagem, contexto or "")

    def info(self, mensagem: str, contexto: Optional[Dict] = None):
        self.log("INFO", mensagem, contexto)

    def aviso(self, mensagem: str, contexto: Optional[Dict] = None):
        self.log("AVISO", mensagem, contexto)

    def erro(self, mensagem: str, contexto: Optional[Dict] = None):
        self.log("ERRO", mensagem, contexto)

    def get_logs(self) -> List[Dict[str, str]]:
        """Retorna uma cópia da lista de logs."""
        return self.validation_log.copy()

    def filtrar(self, nivel: str) -> List[Dict[str, str]]:
        return [e for e in self.validation_log if e["Nível"] == nivel]

    def to_dataframe(self) -> pd.DataFrame:
        """DataFrame pronto para a aba AVISOS."""
        if not self.validation_log:
            return pd.DataFrame(columns=COLUNAS_LOG)
        return pd.DataFrame(self.validation_log, columns=COLUNAS_LOG)

    def __len__(self) -> int:
        return len(self.validation_log)
