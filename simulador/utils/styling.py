"""
Módulo de estilização de planilhas Excel.
Contém funções para aplicar cores nas colunas do relatório de simulação.
"""

from openpyxl import load_workbook
from openpyxl.styles import Font, PatternFill


def light_fill(rgb_hex: str) -> PatternFill:
    """
    Cria um PatternFill com cor clara (pastel).

    Args:
        rgb_hex: Código hexadecimal da cor sem '#' (ex: 'E3F2FD')
    """
    return PatternFill(start_color=rgb_hex, end_color=rgb_hex, fill_type="solid")


# Paleta suave (pastéis) para coloração de grupos de colunas
PALETTE = [
    "E3F2FD",  # azul claríssimo
    "E8F5E9",  # verde claríssimo
    "FFF8E1",  # amarelo claríssimo
    "F3E5F5",  # lilás claríssimo
    "FBE9E7",  # pêssego claríssimo
]


# Grupo → padrões de identificação de coluna (substring no cabeçalho).
# A ordem importa: "SPREAD_LOSS_BRL" precisa cair em "spread" antes de "brl".
COLUMN_GROUP_PATTERNS = {
    "spread": [
        "SPREAD",
        "EXCHANGE_RATE",
        "RATE_WITH",
    ],
    "taxa": [
        "FEE",
    ],
    "perda": [
        "TOTAL_LOSS",
        "TOTAL_PERDAS",
    ],
    "usd": [
        "_USD",
    ],
    "brl": [
        "_BRL",
    ],
}


def match_group(header: str):
    """
    Identifica a qual grupo de padrões um cabeçalho de coluna pertence.

    Returns:
        Nome do grupo encontrado ou None se não houver correspondência.
    """
    h = header.upper().strip()
    for group, patterns in COLUMN_GROUP_PATTERNS.items():
        for p in patterns:
            if p in h:
                return group
    return None


def apply_group_fills_to_sheet(ws):
    """
    Pinta as colunas de cada grupo com a cor do grupo, deixa o cabeçalho em
    negrito e formata os números (2 casas para valores, 4 para cotações).
    Não altera valores.
    """
    fills = {
        grupo: light_fill(PALETTE[idx % len(PALETTE)])
        for idx, grupo in enumerate(COLUMN_GROUP_PATTERNS)
    }

    for coluna in ws.iter_cols(min_row=1, max_row=ws.max_row):
        header = coluna[0]
        header.font = Font(bold=True)
        nome = str(header.value) if header.value is not None else ""
        ws.column_dimensions[header.column_letter].width = max(12, len(nome) + 2)

        group = match_group(nome)
        if group is None:
            continue
        formato = "0.0000" if "RATE" in nome.upper() else "#,##0.00"
        for cell in coluna:
            cell.fill = fills[group]
            if cell.row > 1 and isinstance(cell.value, (int, float)):
                cell.number_format = formato


def style_output_workbook(xlsx_path: str, sheets=("RESULTADOS", "RESUMO_MOEDA", "TOTAIS")):
    """
    Carrega o arquivo Excel gerado e aplica a coloração de grupos nas abas
    informadas (as que não existirem são ignoradas).
    """
    wb = load_workbook(xlsx_path)
    for sheet_name in sheets:
        if sheet_name in wb.sheetnames:
            apply_group_fills_to_sheet(wb[sheet_name])
    wb.save(xlsx_path)
