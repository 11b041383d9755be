"""Income/expense ledger."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable

from kiosk.models import EntryType, Expense, ExpenseCategory, PaymentMethod
from kiosk.utils import generate_id, local_date_string, to_decimal

logger = logging.getLogger(__name__)


def new_entry(
    category: ExpenseCategory | str,
    amount: object,
    description: str = "",
    entry_date: str | None = None,
    payment_method: PaymentMethod | str | None = None,
) -> Expense:
    """Build a validated entry; the type follows from the category."""
    category = ExpenseCategory(category)
    parsed = to_decimal(amount, Decimal("0"))
    if parsed <= 0:
        raise ValueError("Por favor, insira um valor válido maior que zero.")
    if entry_date is None:
        entry_date = local_date_string()
    else:
        date.fromisoformat(entry_date)
    return Expense(
        id=generate_id(),
        date=entry_date,
        category=category,
        description=description.strip(),
        amount=parsed,
        type=EntryType.INCOME if category.is_income else EntryType.EXPENSE,
        payment_method=PaymentMethod(payment_method) if payment_method else None,
    )


def change_due(amount: object, received: object) -> Decimal:
    """Change to hand back for a cash sale, zero when nothing is owed."""
    amount_value = to_decimal(amount, Decimal("0"))
    received_value = to_decimal(received, Decimal("0"))
    if received_value > amount_value:
        return received_value - amount_value
    return Decimal("0")


def filter_by_month(expenses: Iterable[Expense], year: int, month: int) -> list[Expense]:
    """Entries whose stored date falls in ``month`` (1-12) of ``year``."""
    return [e for e in expenses if e.year == year and e.month == month]


class ExpenseLedger:
    """Append-mostly list of entries; ``on_change`` gets the full list after each mutation."""

    def __init__(
        self,
        entries: Iterable[Expense] = (),
        on_change: Callable[[list[Expense]], None] | None = None,
    ) -> None:
        self.entries: list[Expense] = list(entries)
        self.on_change = on_change

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def add(self, entry: Expense) -> Expense:
        self.entries.append(entry)
        logger.info(
            "ledger_add id=%s type=%s category=%r amount=%s",
            entry.id,
            entry.type.value,
            entry.category.value,
            entry.amount,
        )
        self._changed()
        return entry

    def delete(self, entry_id: str) -> None:
        self.entries = [e for e in self.entries if e.id != entry_id]
        self._changed()

    def clear(self) -> None:
        self.replace_all([])

    def replace_all(self, entries: Iterable[Expense]) -> None:
        self.entries = list(entries)
        self._changed()

    def for_month(self, year: int, month: int) -> list[Expense]:
        return filter_by_month(self.entries, year, month)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.entries)
