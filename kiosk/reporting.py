"""Monthly summary, analysis prompt data and CSV export."""

from __future__ import annotations

import calendar
import csv
from dataclasses import dataclass, field
from decimal import Decimal
from typing import IO, Iterable

from kiosk.ledger import filter_by_month
from kiosk.models import EntryType, Expense, ExpenseCategory, FeeConfig, PaymentMethod

CSV_HEADER = ("date", "category", "description", "paymentMethod", "type", "amount")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DailyTotals:
    day: int
    income: Decimal
    expense: Decimal


@dataclass
class MonthlySummary:
    year: int
    month: int
    total_income: Decimal = _ZERO
    total_expenses: Decimal = _ZERO
    cash_income: Decimal = _ZERO
    cash_expenses: Decimal = _ZERO
    estimated_fees: Decimal = _ZERO
    by_category: list[tuple[ExpenseCategory, Decimal]] = field(default_factory=list)
    by_payment_method: list[tuple[PaymentMethod, Decimal]] = field(default_factory=list)
    daily: list[DailyTotals] = field(default_factory=list)
    goal_percent: Decimal = _ZERO
    entry_count: int = 0

    @property
    def net_balance(self) -> Decimal:
        return self.total_income - self.total_expenses

    @property
    def cash_balance(self) -> Decimal:
        return self.cash_income - self.cash_expenses


def summarize_month(
    expenses: Iterable[Expense],
    year: int,
    month: int,
    fees: FeeConfig,
    monthly_goal: Decimal = _ZERO,
) -> MonthlySummary:
    """Aggregate the ledger entries of one month (1-12).

    Entries outside the month are ignored, so callers may pass the whole
    ledger. Estimated fees are ``amount * fee% / 100`` over card and PIX
    income, using the same ``amount`` the closing step writes.
    """
    entries = filter_by_month(expenses, year, month)
    summary = MonthlySummary(year=year, month=month, entry_count=len(entries))
    categories: dict[ExpenseCategory, Decimal] = {}
    payments: dict[PaymentMethod, Decimal] = {}
    days_in_month = calendar.monthrange(year, month)[1]
    income_by_day = [_ZERO] * (days_in_month + 1)
    expense_by_day = [_ZERO] * (days_in_month + 1)

    for entry in entries:
        if entry.type is EntryType.INCOME:
            summary.total_income += entry.amount
            if entry.payment_method is PaymentMethod.MONEY:
                summary.cash_income += entry.amount
            summary.estimated_fees += entry.amount * fees.percent_for(entry.payment_method) / _HUNDRED
            if entry.payment_method is not None:
                payments[entry.payment_method] = payments.get(entry.payment_method, _ZERO) + entry.amount
            income_by_day[entry.day] += entry.amount
        else:
            summary.total_expenses += entry.amount
            if entry.payment_method is PaymentMethod.MONEY:
                summary.cash_expenses += entry.amount
            categories[entry.category] = categories.get(entry.category, _ZERO) + entry.amount
            expense_by_day[entry.day] += entry.amount

    summary.by_category = sorted(
        ((category, amount) for category, amount in categories.items() if amount > 0),
        key=lambda pair: pair[1],
        reverse=True,
    )
    summary.by_payment_method = sorted(payments.items(), key=lambda pair: pair[1], reverse=True)
    summary.daily = [
        DailyTotals(day=day, income=income_by_day[day], expense=expense_by_day[day])
        for day in range(1, days_in_month + 1)
    ]
    if monthly_goal > 0:
        summary.goal_percent = min(summary.total_income / monthly_goal * _HUNDRED, _HUNDRED)
    return summary


def analysis_data(summary: MonthlySummary) -> str:
    """Data block sent to the analysis model."""
    payments = ", ".join(f"{method.value}: {amount:.2f}" for method, amount in summary.by_payment_method)
    categories = ", ".join(f"{category.value}: {amount:.2f}" for category, amount in summary.by_category)
    lines = [
        f"Mês/Ano: {summary.month}/{summary.year}",
        f"Receita Total: R$ {summary.total_income:.2f}",
        f"Despesas Totais: R$ {summary.total_expenses:.2f}",
        f"Saldo Líquido: R$ {summary.net_balance:.2f}",
        f"Saldo em Caixa (Físico): R$ {summary.cash_balance:.2f}",
        f"Taxas Estimadas (Maquininha): R$ {summary.estimated_fees:.2f}",
        f"Métodos de Pagamento (Receita): {payments}",
        f"Categorias: {categories}",
    ]
    return "\n".join(lines)


def export_csv(expenses: Iterable[Expense], fh: IO[str]) -> int:
    """Write entries as CSV rows; returns the number of rows written."""
    writer = csv.writer(fh, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    count = 0
    for entry in expenses:
        writer.writerow(
            (
                entry.date,
                entry.category.value,
                entry.description,
                entry.payment_method.value if entry.payment_method else "N/A",
                entry.type.value,
                f"{entry.amount:.2f}",
            )
        )
        count += 1
    return count


def csv_filename(year: int, month: int) -> str:
    return f"relatorio-quiosque-{month}-{year}.csv"
