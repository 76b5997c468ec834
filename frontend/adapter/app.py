"""
Adapter FastAPI do simulador de recebimentos.

Expõe o motor de conversão para o front-end web: tabela de tarifas,
cotações, simulação em lote e cálculo inverso. Nenhuma regra de cálculo
vive aqui; tudo é delegado ao pacote `simulador`.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Union

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from simulador import __version__
from simulador.conversao import RegimeTaxa, TaxaPercentualInvalidaError, calculate_reverse
from simulador.currency import CotacaoIndisponivelError, RateFetcher, RateStorage
from simulador.simulacao import EntradaSimulacao, SimulacaoRecebimentos
from simulador.taxas import FeeTable, FeeTableLoader
from simulador.utils.logging import ValidationLogger

# Carregar .env do diretório do adapter
adapter_dir = Path(__file__).parent
load_dotenv(dotenv_path=adapter_dir / ".env")

# Configuração
TAXAS_PATH = os.getenv("TAXAS_PATH", "config/TAXAS_PAYPAL.csv")
COTACOES_CACHE_PATH = os.getenv("COTACOES_CACHE_PATH", "data/cotacoes/ultimas_cotacoes.json")
COTACOES_TIMEOUT = float(os.getenv("COTACOES_TIMEOUT", "10"))
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]
LOG_FILE = os.getenv("ADAPTER_LOG_FILE", str(adapter_dir / "adapter.log"))

# ==================== LOGGING (Arquivo) ====================

_root_logger = logging.getLogger()
_root_logger.setLevel(logging.INFO)
if not any(
    isinstance(h, RotatingFileHandler) and getattr(h, "baseFilename", "") == os.path.abspath(LOG_FILE)
    for h in _root_logger.handlers
):
    _fh = RotatingFileHandler(LOG_FILE, maxBytes=1_000_000, backupCount=2, encoding="utf-8")
    _fh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
    _root_logger.addHandler(_fh)

logger = logging.getLogger("simulador.adapter")

app = FastAPI(
    title="Adapter Simulador de Recebimentos",
    description="Backend do simulador de recebimentos internacionais (tarifas, spread e câmbio)",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Tabela carregada uma vez na subida; imutável
FEE_TABLE: FeeTable = FeeTableLoader(ValidationLogger(logger)).load(TAXAS_PATH)

# ==================== MODELS ====================


class EntradaRequest(BaseModel):
    id: Union[int, str]
    amount: Union[float, str]
    currency: str


class SimularRequest(BaseModel):
    entradas: List[EntradaRequest]
    micropagamento: bool = False
    cotacoes: Dict[str, float] = Field(default_factory=dict)


class ReversoRequest(BaseModel):
    target_net_brl: float = Field(gt=0)
    currency: str
    market_rate: float = Field(gt=0)
    usd_rate: float = Field(gt=0)
    micropagamento: bool = False


# ==================== DEPENDÊNCIAS ====================


def get_fee_table() -> FeeTable:
    return FEE_TABLE


def get_simulacao(table: FeeTable = Depends(get_fee_table)) -> SimulacaoRecebimentos:
    """Uma simulação por requisição (o ValidationLogger não é compartilhado)."""
    return SimulacaoRecebimentos(
        table=table,
        fetcher=RateFetcher(timeout=COTACOES_TIMEOUT),
        storage=RateStorage(COTACOES_CACHE_PATH),
    )


# ==================== ENDPOINTS ====================


@app.get("/health")
async def health():
    return {"status": "ok", "versao": __version__}


@app.get("/taxas")
async def listar_taxas(table: FeeTable = Depends(get_fee_table)):
    """Tabela de tarifas por moeda, mais o perfil DEFAULT."""
    taxas: Dict[str, Any] = {moeda: fees.to_dict() for moeda, fees in table.items()}
    taxas["DEFAULT"] = table.default.to_dict()
    return {"taxas": taxas}


@app.get("/cotacoes")
def obter_cotacoes(
    moedas: str = Query(..., description="Códigos separados por vírgula, ex: USD,EUR"),
    simulacao: SimulacaoRecebimentos = Depends(get_simulacao),
):
    codigos = [m for m in moedas.split(",") if m.strip()]
    try:
        cotacoes = simulacao.obter_cotacoes(codigos)
    except CotacaoIndisponivelError as e:
        logger.error("Falha ao obter cotações: %s", e)
        raise HTTPException(status_code=502, detail="Falha ao atualizar câmbio. Tente novamente.")
    return {"cotacoes": cotacoes, "avisos": simulacao.validation_logger.get_logs()}


@app.post("/simular")
def simular(
    request: SimularRequest,
    simulacao: SimulacaoRecebimentos = Depends(get_simulacao),
):
    """Calcula todas as entradas; entradas inválidas voltam como null."""
    entradas = [EntradaSimulacao(id=e.id, amount=e.amount, currency=e.currency) for e in request.entradas]
    try:
        resultados, totais = simulacao.executar(
            entradas,
            regime=RegimeTaxa.from_value(request.micropagamento),
            cotacoes=request.cotacoes,
        )
    except CotacaoIndisponivelError as e:
        logger.error("Falha ao obter cotações para simulação: %s", e)
        raise HTTPException(status_code=502, detail="Falha ao atualizar câmbio. Tente novamente.")

    return {
        "resultados": [
            {"id": id_entrada, "resultado": r.to_dict() if r is not None else None}
            for id_entrada, r in resultados.items()
        ],
        "totais": totais.to_dict(),
        "avisos": simulacao.validation_logger.get_logs(),
    }


@app.post("/reverso")
async def reverso(request: ReversoRequest, table: FeeTable = Depends(get_fee_table)):
    """Quanto faturar na moeda de origem para receber o valor líquido em BRL."""
    try:
        resultado = calculate_reverse(
            request.target_net_brl,
            request.currency,
            request.market_rate,
            request.usd_rate,
            RegimeTaxa.from_value(request.micropagamento),
            table,
        )
    except TaxaPercentualInvalidaError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"valor_a_faturar": resultado.amount, "resultado": resultado.to_dict()}
