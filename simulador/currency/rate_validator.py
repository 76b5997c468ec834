"""
Detecção de moedas sem cotação utilizável.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..utils.normalization import normalizar_moeda


class RateValidator:
    """
    Identifica quais moedas ainda precisam ser buscadas antes de calcular.

    USD entra sempre na verificação: os totais em dólar dependem dela.
    """

    def __init__(self, moedas_obrigatorias: Iterable[str] = ("USD",)) -> None:
        self.moedas_obrigatorias = [normalizar_moeda(m) for m in moedas_obrigatorias]

    def identificar_cotacoes_faltantes(
        self, moedas: Iterable[str], cotacoes: Optional[Dict[str, float]]
    ) -> List[str]:
        """
        Args:
            moedas: moedas das entradas da simulação
            cotacoes: {moeda: cotacao} já disponíveis

        Returns:
            Lista ordenada de moedas ausentes ou com cotação não positiva.
        """
        cotacoes = {normalizar_moeda(k): v for k, v in (cotacoes or {}).items()}
        faltantes = set()
        for moeda in list(moedas) + self.moedas_obrigatorias:
            codigo = normalizar_moeda(moeda)
            if not codigo:
                continue
            taxa = cotacoes.get(codigo)
            if taxa is None or taxa <= 0:
                faltantes.add(codigo)
        return sorted(faltantes)
