"""
Simulação de recebimentos internacionais pela linha de comando.

Exemplos:
    python simular_recebimento.py --valor 1000:USD --valor 500:EUR
    python simular_recebimento.py --entrada entradas.csv --micropagamento
    python simular_recebimento.py --reverso 5000 --moeda USD

Variáveis de ambiente:
    SIMULADOR_TAXAS_PATH  planilha de tarifas (padrão config/TAXAS_PAYPAL.csv)
    SIMULADOR_SAIDA       pasta do relatório Excel (padrão saida/)
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from simulador.conversao import RegimeTaxa, TaxaPercentualInvalidaError
from simulador.currency import CotacaoIndisponivelError, RateFetcher, RateStorage
from simulador.io.entrada_loader import EntradaLoader
from simulador.io.output_generator import SimulacaoOutputGenerator
from simulador.simulacao import EntradaSimulacao, SimulacaoRecebimentos
from simulador.taxas import FeeTableLoader
from simulador.utils.logging import ValidationLogger

logger = logging.getLogger("simulador.cli")


def _brl(valor: float) -> str:
    texto = f"{valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {texto}"


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulador de recebimentos internacionais")
    parser.add_argument("--entrada", help="CSV (;) ou XLSX com colunas moeda e valor")
    parser.add_argument(
        "--valor",
        action="append",
        default=[],
        metavar="VALOR:MOEDA",
        help="Entrada avulsa, pode repetir (ex: 1000:USD)",
    )
    parser.add_argument("--micropagamento", action="store_true", help="Usa o regime de micropagamentos")
    parser.add_argument("--reverso", type=float, metavar="VALOR_BRL", help="Valor líquido desejado em BRL")
    parser.add_argument("--moeda", default="USD", help="Moeda do cálculo inverso")
    parser.add_argument("--taxas", default=os.environ.get("SIMULADOR_TAXAS_PATH", "config/TAXAS_PAYPAL.csv"))
    parser.add_argument("--saida", default=os.environ.get("SIMULADOR_SAIDA", "saida"))
    parser.add_argument("--cache", default="data/cotacoes/ultimas_cotacoes.json")
    parser.add_argument("--sem-relatorio", action="store_true", help="Não gera o Excel")
    return parser.parse_args(argv)


def _entradas_avulsas(valores: List[str], validation_logger: ValidationLogger) -> List[EntradaSimulacao]:
    entradas = []
    for idx, item in enumerate(valores, start=1):
        valor, sep, moeda = item.rpartition(":")
        if not sep:
            validation_logger.aviso(f"Entrada '{item}' fora do formato VALOR:MOEDA; ignorada.")
            continue
        entradas.append(EntradaSimulacao(id=idx, amount=valor, currency=moeda))
    return entradas


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    args = _parse_args(argv)
    regime = RegimeTaxa.from_value(args.micropagamento)

    validation_logger = ValidationLogger()
    table = FeeTableLoader(validation_logger).load(args.taxas)
    simulacao = SimulacaoRecebimentos(
        table=table,
        fetcher=RateFetcher(),
        storage=RateStorage(args.cache),
        validation_logger=validation_logger,
    )

    try:
        if args.reverso is not None:
            cotacoes = simulacao.obter_cotacoes(sorted({args.moeda.upper(), "USD"}))
            resultado = simulacao.calcular_reverso(args.reverso, args.moeda, cotacoes, regime)
            print(f"Para receber {_brl(args.reverso)} líquidos:")
            print(f"  Faturar: {resultado.amount:,.2f} {resultado.currency}")
            print(f"  Tarifas: {resultado.total_fee_foreign:,.2f} {resultado.currency}")
            print(f"  Cotação com spread: {resultado.rate_with_spread:.4f}")
            return 0

        entradas = EntradaLoader(validation_logger).carregar(args.entrada) if args.entrada else []
        entradas += _entradas_avulsas(args.valor, validation_logger)
        if not entradas:
            print("Nenhuma entrada informada. Use --entrada ou --valor.")
            return 1

        resultados, totais = simulacao.executar(entradas, regime)
    except CotacaoIndisponivelError as e:
        print(f"ERRO: falha ao atualizar câmbio: {e}")
        return 2
    except TaxaPercentualInvalidaError as e:
        print(f"ERRO: {e}")
        return 3

    print("=" * 60)
    print(f"SIMULAÇÃO DE RECEBIMENTOS ({regime.value})")
    print("=" * 60)
    for id_entrada, resultado in resultados.items():
        if resultado is None:
            print(f"[{id_entrada}] ignorada (ver avisos)")
            continue
        print(
            f"[{id_entrada}] {resultado.amount:,.2f} {resultado.currency} -> "
            f"{_brl(resultado.net_brl)} líquido (perdas {_brl(resultado.total_loss_brl)})"
        )
    print("-" * 60)
    print(f"Total bruto:   {_brl(totais.total_gross_brl)} (US$ {totais.total_gross_usd:,.2f})")
    print(f"Total líquido: {_brl(totais.total_net_brl)} (US$ {totais.total_net_usd:,.2f})")
    print(f"Tarifas:       {_brl(totais.total_fee_loss_brl)}")
    print(f"Spread:        {_brl(totais.total_spread_loss_brl)}")

    for aviso in validation_logger.filtrar("AVISO"):
        print(f"[AVISO] {aviso['Mensagem']}")

    if not args.sem_relatorio:
        arquivo = SimulacaoOutputGenerator().gerar(
            resultados, totais, base_path=args.saida, validation_logger=validation_logger
        )
        print(f"Relatório gerado: {arquivo}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
