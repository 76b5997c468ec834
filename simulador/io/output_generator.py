"""
Gera o arquivo Excel de saída da simulação de recebimentos.
"""

import logging
import os
from datetime import datetime
from typing import Dict, Optional

import pandas as pd

from ..conversao.aggregator import (
    TotaisSimulacao,
    criar_dataframe_resultados,
    criar_resumo_por_moeda,
)
from ..conversao.engine import ConversionResult
from ..utils.logging import ValidationLogger
from ..utils.styling import style_output_workbook

logger = logging.getLogger(__name__)


class SimulacaoOutputGenerator:
    """
    Gera arquivo Excel com as abas RESULTADOS, RESUMO_MOEDA, TOTAIS e AVISOS.
    """

    def gerar(
        self,
        resultados: Dict[object, Optional[ConversionResult]],
        totais: TotaisSimulacao,
        base_path: str = ".",
        validation_logger: Optional[ValidationLogger] = None,
        agora: Optional[datetime] = None,
    ) -> str:
        """
        Gera o arquivo Excel.

        Args:
            resultados: Dict {id_entrada: ConversionResult ou None}
            totais: Totais agregados da simulação
            base_path: Pasta de destino (criada se não existir)
            validation_logger: Log cujas mensagens vão para a aba AVISOS
            agora: Data/hora usada no nome do arquivo

        Returns:
            Caminho do arquivo gerado
        """
        agora = agora or datetime.now()
        filename = f"Simulacao_Recebimentos_{agora:%Y%m%d_%H%M%S}.xlsx"
        os.makedirs(base_path, exist_ok=True)
        filepath = os.path.join(base_path, filename)

        df_resultados = criar_dataframe_resultados(resultados)
        df_resumo = criar_resumo_por_moeda(df_resultados)
        df_totais = pd.DataFrame(
            [{"indicador": chave, "valor": valor} for chave, valor in totais.to_dict().items()]
        )
        df_avisos = (validation_logger if validation_logger is not None else ValidationLogger()).to_dataframe()

        logger.info("[OUTPUT] Gerando %s (%d resultado(s))", filepath, len(df_resultados))
        with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
            df_resultados.to_excel(writer, sheet_name="RESULTADOS", index=False)
            df_resumo.to_excel(writer, sheet_name="RESUMO_MOEDA", index=False)
            df_totais.to_excel(writer, sheet_name="TOTAIS", index=False)
            df_avisos.to_excel(writer, sheet_name="AVISOS", index=False)

        style_output_workbook(filepath)
        logger.info("[OUTPUT] Arquivo gerado: %s", filepath)
        return filepath
