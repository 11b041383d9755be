"""Editable static labels and defaults."""

from __future__ import annotations

from decimal import Decimal

SERVICE_FEE_RATE = Decimal("0.10")

DEFAULT_MIN_STOCK = 5
LONG_WAIT_MINUTES = 60
TABLE_COUNT = 20

DEFAULT_SETTINGS: dict[str, object] = {
    "kioskName": "Estrela do Mar",
    "ownerName": "",
    "contactPhone": "",
    "logoUrl": None,
    "monthlyGoal": 10000,
    "fees": {"credit": 3.5, "debit": 1.5, "pix": 0},
    "securityPin": None,
    "products": [],
}

# Stored values match the enum values so backups stay readable by older exports.
EXPENSE_CATEGORY_LABELS: dict[str, str] = {
    "Pagamento de Funcionário": "Pagamento de Funcionário",
    "Reposição de Estoque": "Reposição de Estoque",
    "Combustível do Veículo": "Combustível / Transporte",
    "Conta de Água": "Conta de Água",
    "Conta de Energia": "Conta de Energia",
    "Conta de Gás": "Gás de Cozinha",
    "Entrada de Dinheiro": "Venda / Entrada",
    "Saída de Dinheiro (Outros)": "Outras Saídas",
}

PAYMENT_METHOD_LABELS: dict[str, str] = {
    "Dinheiro": "Dinheiro (Espécie)",
    "Pix": "Pix",
    "Cartão de Débito": "Débito",
    "Cartão de Crédito": "Crédito",
}

PRODUCT_CATEGORY_LABELS: dict[str, str] = {
    "drink": "Bebidas",
    "food": "Comidas",
    "other": "Outros",
}

MONTH_NAMES: tuple[str, ...] = (
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
)

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "jan",
    "fev",
    "mar",
    "abr",
    "mai",
    "jun",
    "jul",
    "ago",
    "set",
    "out",
    "nov",
    "dez",
)

WEEKDAY_NAMES: tuple[str, ...] = (
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
)

NO_ANALYSIS_TEXT = "Nenhuma análise disponível."

ANALYSIS_PROMPT = """
Você é um assistente financeiro especializado em pequenos comércios (quiosque de praia).
Analise os seguintes dados financeiros do mês.

Os dados incluem:
- Receita e Despesas Totais
- Saldo em Caixa (dinheiro físico estimado)
- Despesas por categoria
- Receita por método de pagamento

Forneça uma análise estratégica curta e direta (máximo 3 parágrafos e alguns bullet points):
1.  **Saúde Financeira:** O quiosque teve lucro? O saldo de caixa está saudável para repor estoque?
2.  **Análise de Gastos:** Identifique onde está indo a maior parte do dinheiro.
3.  **Dica de Ouro:** Sugira uma ação prática para o próximo mês baseada nos dados.

Dados Financeiros:
{data}

Responda em Markdown. Use negrito para destacar valores importantes.
"""
