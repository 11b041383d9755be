from decimal import Decimal

import pytest

from kiosk.ledger import ExpenseLedger, change_due, filter_by_month, new_entry
from kiosk.models import EntryType, ExpenseCategory, PaymentMethod


def test_new_entry_derives_type():
    income = new_entry(ExpenseCategory.CASH_IN, "150", "Venda avulsa", "2024-05-02", "Pix")
    expense = new_entry("Conta de Água", 80, entry_date="2024-05-03")

    assert income.type is EntryType.INCOME
    assert income.payment_method is PaymentMethod.PIX
    assert income.amount == Decimal("150")
    assert expense.type is EntryType.EXPENSE
    assert expense.payment_method is None


@pytest.mark.parametrize("amount", ["0", "-5", "", "abc"])
def test_new_entry_rejects_non_positive(amount):
    with pytest.raises(ValueError, match="maior que zero"):
        new_entry(ExpenseCategory.CASH_OUT, amount)


def test_new_entry_rejects_bad_date():
    with pytest.raises(ValueError):
        new_entry(ExpenseCategory.CASH_OUT, "5", entry_date="2024-13-01")


def test_change_due():
    assert change_due("37", "50") == Decimal("13")
    assert change_due("37", "20") == 0


def test_filter_by_month_uses_stored_date():
    entries = [
        new_entry(ExpenseCategory.CASH_IN, 10, entry_date="2024-05-31"),
        new_entry(ExpenseCategory.CASH_IN, 10, entry_date="2024-06-01"),
        new_entry(ExpenseCategory.CASH_IN, 10, entry_date="2023-06-15"),
    ]
    assert [e.date for e in filter_by_month(entries, 2024, 6)] == ["2024-06-01"]


def test_ledger_mutations_notify():
    seen = []
    ledger = ExpenseLedger(on_change=lambda entries: seen.append(len(entries)))
    entry = ledger.add(new_entry(ExpenseCategory.GAS_BILL, 120, entry_date="2024-06-02"))
    ledger.add(new_entry(ExpenseCategory.CASH_IN, 40, entry_date="2024-06-02"))
    ledger.delete(entry.id)
    ledger.clear()

    assert seen == [1, 2, 1, 0]
    assert len(ledger) == 0
