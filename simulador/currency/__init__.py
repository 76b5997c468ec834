"""
Pacote centralizado para cotações de câmbio.

Responsável por:
- Buscar cotações atuais na API externa
- Manter um cache em JSON das últimas cotações
- Identificar moedas sem cotação antes do cálculo
"""

from .rate_fetcher import CotacaoIndisponivelError, RateFetcher
from .rate_storage import RateStorage
from .rate_validator import RateValidator

__all__ = ["CotacaoIndisponivelError", "RateFetcher", "RateStorage", "RateValidator"]
