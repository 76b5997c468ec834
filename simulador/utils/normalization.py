"""
Módulo de normalização de dados.
Contém funções para normalizar códigos de moeda e converter valores
digitados (formato brasileiro ou internacional) em float.
"""

import re
import unicodedata
from typing import Optional

import pandas as pd

_SIMBOLOS = re.compile(r"[^\d,.\-]")


def normalize_text(s):
    """
    Normaliza uma string removendo acentos, BOM e espaços extras.

    Exemplos:
        >>> normalize_text(" Dólar  americano ")
        'DOLAR AMERICANO'
        >>> normalize_text(pd.NA)
        ''
    """
    if s is None or pd.isna(s):
        return ""
    s = str(s)
    s = s.replace("\ufeff", "")
    s = unicodedata.normalize("NFKD", s).encode("ASCII", "ignore").decode("ASCII")
    return " ".join(s.strip().upper().split())


def normalizar_moeda(codigo) -> str:
    """
    Normaliza um código de moeda ISO 4217.

    Exemplos:
        >>> normalizar_moeda(" usd ")
        'USD'
        >>> normalizar_moeda(None)
        ''
    """
    return normalize_text(codigo).replace(" ", "")


def parse_valor(valor) -> Optional[float]:
    """
    Converte um valor digitado em float.

    Aceita números, "1.234,56", "1,234.56", "1234.56", "1000" e textos com
    símbolo de moeda ("US$ 1.000,00"). Quando só há vírgula, ela é tratada
    como separador decimal; quando há vários pontos e nenhuma vírgula, os
    pontos são separadores de milhar.

    Returns:
        O float correspondente ou None se o valor não puder ser interpretado.

    Exemplos:
        >>> parse_valor("1.234,56")
        1234.56
        >>> parse_valor("abc") is None
        True
    """
    if valor is None:
        return None
    if isinstance(valor, bool):
        return None
    if isinstance(valor, (int, float)):
        return None if pd.isna(valor) else float(valor)

    texto = _SIMBOLOS.sub("", str(valor).strip())
    if not texto or texto in {"-", ".", ","}:
        return None

    if "," in texto and "." in texto:
        if texto.rfind(",") > texto.rfind("."):
            texto = texto.replace(".", "").replace(",", ".")
        else:
            texto = texto.replace(",", "")
    elif "," in texto:
        texto = texto.replace(".", "").replace(",", ".")
    elif texto.count(".") > 1:
        texto = texto.replace(".", "")

    try:
        return float(texto)
    except ValueError:
        return None
