"""Closing a tab: order status, ledger income and stock in one command."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from kiosk.catalog import ProductCatalog
from kiosk.ledger import ExpenseLedger
from kiosk.models import EntryType, Expense, ExpenseCategory, Order, PaymentMethod
from kiosk.order_store import OrderStore
from kiosk.utils import generate_id, local_date_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockChange:
    product_id: str
    name: str
    before: int
    after: int
    requested: int

    @property
    def clamped(self) -> bool:
        """True when the shelf held less than the tab consumed."""
        return self.before - self.after < self.requested


@dataclass
class ClosingResult:
    order: Order | None
    entry: Expense
    stock_changes: list[StockChange] = field(default_factory=list)


def close_order(
    order: Order,
    payment_method: PaymentMethod,
    *,
    orders: OrderStore,
    ledger: ExpenseLedger,
    catalog: ProductCatalog,
    today: date | None = None,
) -> ClosingResult:
    """Close ``order`` and record its effects.

    Steps run in order with no rollback: close the stored tab, append one
    CASH_IN income entry for ``order.total``, then take every item off the
    shelf (delivered or not, courtesy or not). Items with no catalog match
    by product id or exact name are skipped. The catalog is persisted once
    when at least one product changed.
    """
    closed = orders.close(order, payment_method)

    entry = Expense(
        id=generate_id(),
        date=local_date_string(today),
        category=ExpenseCategory.CASH_IN,
        description=f"Comanda: {order.table_or_name}",
        amount=order.total,
        type=EntryType.INCOME,
        payment_method=payment_method,
    )
    ledger.add(entry)

    changes: list[StockChange] = []
    for item in order.items:
        product = catalog.match(item.product_id, item.name)
        if product is None:
            logger.debug("stock_skip order=%s item=%r reason=no_catalog_match", order.id, item.name)
            continue
        before = product.stock
        after = catalog.decrement(product, item.quantity)
        changes.append(
            StockChange(product_id=product.id, name=product.name, before=before, after=after, requested=item.quantity)
        )
        logger.debug("stock_decrement product=%s before=%d after=%d qty=%d", product.id, before, after, item.quantity)

    if changes:
        catalog.notify()

    logger.info(
        "order_closed id=%s table=%r total=%s method=%s stock_updates=%d",
        order.id,
        order.table_or_name,
        order.total,
        payment_method.value,
        len(changes),
    )
    return ClosingResult(order=closed, entry=entry, stock_changes=changes)
