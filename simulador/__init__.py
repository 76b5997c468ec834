"""
Simulador de recebimentos internacionais: estimativa do valor líquido em BRL
após tarifas e spread do processador de pagamentos, e o cálculo inverso.
"""

__version__ = "1.0.0"
