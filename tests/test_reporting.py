import io
from decimal import Decimal

from kiosk.ledger import new_entry
from kiosk.models import ExpenseCategory, FeeConfig, PaymentMethod
from kiosk.reporting import analysis_data, csv_filename, export_csv, summarize_month


def _entries():
    return [
        new_entry(ExpenseCategory.CASH_IN, "1000", "Comanda: Mesa 1", "2024-06-01", PaymentMethod.CREDIT_CARD),
        new_entry(ExpenseCategory.CASH_IN, "500", "Comanda: Mesa 2", "2024-06-01", PaymentMethod.MONEY),
        new_entry(ExpenseCategory.CASH_IN, "200", "Comanda: Mesa 3", "2024-06-15", PaymentMethod.DEBIT_CARD),
        new_entry(ExpenseCategory.STOCK_REPLENISHMENT, "300", "Gelo e cerveja", "2024-06-02", PaymentMethod.MONEY),
        new_entry(ExpenseCategory.WATER_BILL, "80", "", "2024-06-10", PaymentMethod.PIX),
        new_entry(ExpenseCategory.CASH_IN, "999", "", "2024-07-01", PaymentMethod.MONEY),
    ]


def test_summarize_month_totals():
    summary = summarize_month(_entries(), 2024, 6, FeeConfig(), Decimal("10000"))

    assert summary.entry_count == 5
    assert summary.total_income == Decimal("1700")
    assert summary.total_expenses == Decimal("380")
    assert summary.net_balance == Decimal("1320")
    assert summary.cash_balance == Decimal("200")
    assert summary.estimated_fees == Decimal("38")
    assert summary.goal_percent == Decimal("17")


def test_breakdowns_sorted_descending():
    summary = summarize_month(_entries(), 2024, 6, FeeConfig())

    assert summary.by_category == [
        (ExpenseCategory.STOCK_REPLENISHMENT, Decimal("300")),
        (ExpenseCategory.WATER_BILL, Decimal("80")),
    ]
    assert [m for m, _ in summary.by_payment_method] == [
        PaymentMethod.CREDIT_CARD,
        PaymentMethod.MONEY,
        PaymentMethod.DEBIT_CARD,
    ]


def test_daily_series_covers_every_day():
    summary = summarize_month(_entries(), 2024, 6, FeeConfig())

    assert len(summary.daily) == 30
    assert summary.daily[0].income == Decimal("1500")
    assert summary.daily[1].expense == Decimal("300")
    assert summary.daily[29].income == 0


def test_goal_percent_capped_and_zero_goal():
    assert summarize_month(_entries(), 2024, 6, FeeConfig(), Decimal("100")).goal_percent == 100
    assert summarize_month(_entries(), 2024, 6, FeeConfig(), Decimal("0")).goal_percent == 0


def test_empty_month():
    summary = summarize_month([], 2024, 2, FeeConfig())
    assert summary.total_income == 0
    assert summary.by_category == []
    assert len(summary.daily) == 29


def test_analysis_data_lists_figures():
    text = analysis_data(summarize_month(_entries(), 2024, 6, FeeConfig()))

    assert "Mês/Ano: 6/2024" in text
    assert "Receita Total: R$ 1700.00" in text
    assert "Cartão de Crédito: 1000.00" in text
    assert "Reposição de Estoque: 300.00" in text


def test_export_csv():
    fh = io.StringIO()
    entries = _entries()[3:5]
    entries[1].payment_method = None

    count = export_csv(entries, fh)

    lines = fh.getvalue().splitlines()
    assert count == 2
    assert lines[0] == "date,category,description,paymentMethod,type,amount"
    assert lines[1] == "2024-06-02,Reposição de Estoque,Gelo e cerveja,Dinheiro,expense,300.00"
    assert lines[2] == "2024-06-10,Conta de Água,,N/A,expense,80.00"


def test_csv_filename():
    assert csv_filename(2024, 6) == "relatorio-quiosque-6-2024.csv"
