"""
Cache em JSON das últimas cotações obtidas.

Formato do arquivo `data/cotacoes/ultimas_cotacoes.json`:

{
  "metadata": {
    "ultima_atualizacao": "2025-11-14T10:30:00",
    "schema_version": 1
  },
  "cotacoes": {
    "USD": {
      "taxa": 5.3712,
      "fonte": "awesomeapi",
      "data_atualizacao": "2025-11-14T10:30:00"
    },
    "EUR": { ... }
  }
}

Novas cotações são mescladas sobre as antigas: uma moeda que não veio na
última busca mantém o valor anterior.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from ..utils.normalization import normalizar_moeda

logger = logging.getLogger(__name__)


class RateStorage:
    """
    Encapsula leitura/escrita do JSON de cotações.

    Não conhece tarifas nem regras de conversão; apenas guarda e recupera
    cotações.
    """

    def __init__(self, json_path: str = "data/cotacoes/ultimas_cotacoes.json") -> None:
        self.json_path = Path(json_path)
        self._data: Dict = {}

    def _estrutura_vazia(self) -> Dict:
        return {
            "metadata": {"ultima_atualizacao": None, "schema_version": 1},
            "cotacoes": {},
        }

    def _load(self) -> Dict:
        """Carrega dados do JSON (lazy). Arquivo ausente ou corrompido = cache vazio."""
        if self._data:
            return self._data
        if not self.json_path.exists():
            self._data = self._estrutura_vazia()
            return self._data
        try:
            self._data = json.loads(self.json_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Cache de cotações ilegível em %s: %s", self.json_path, e)
            self._data = self._estrutura_vazia()
        self._data.setdefault("metadata", {"schema_version": 1})
        self._data.setdefault("cotacoes", {})
        return self._data

    def _save(self) -> None:
        self.json_path.parent.mkdir(parents=True, exist_ok=True)
        self.json_path.write_text(
            json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    def carregar_cotacoes(self) -> Dict[str, float]:
        """Retorna {moeda: taxa} de todas as cotações em cache."""
        data = self._load()
        cotacoes: Dict[str, float] = {}
        for moeda, registro in data["cotacoes"].items():
            try:
                cotacoes[moeda] = float(registro["taxa"])
            except (KeyError, TypeError, ValueError):
                continue
        return cotacoes

    def obter_cotacao(self, moeda: str) -> Optional[float]:
        return self.carregar_cotacoes().get(normalizar_moeda(moeda))

    def salvar_cotacoes(self, cotacoes: Dict[str, float], fonte: str = "awesomeapi") -> None:
        """
        Mescla as cotações informadas no cache e persiste em disco.
        """
        if not cotacoes:
            return
        data = self._load()
        agora = datetime.now().isoformat()
        for moeda, taxa in cotacoes.items():
            data["cotacoes"][normalizar_moeda(moeda)] = {
                "taxa": float(taxa),
                "fonte": str(fonte),
                "data_atualizacao": agora,
            }
        data["metadata"]["ultima_atualizacao"] = agora
        data["metadata"].setdefault("schema_version", 1)
        self._data = data
        self._save()

    def ultima_atualizacao(self) -> Optional[str]:
        return self._load()["metadata"].get("ultima_atualizacao")
