"""Order totals engine and the editable tab draft."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from kiosk.constant import SERVICE_FEE_RATE
from kiosk.models import ItemStatus, Order, OrderItem, OrderStatus, Product
from kiosk.utils import generate_id, to_decimal


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    service_fee_value: Decimal
    discount: Decimal
    total: Decimal


def compute_subtotal(items: Iterable[OrderItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


def compute_totals(items: Iterable[OrderItem], discount: object = None, service_fee: bool = False) -> Totals:
    """Subtotal, 10% service fee, absolute discount, total floored at zero."""
    subtotal = compute_subtotal(items)
    discount_value = abs(to_decimal(discount, Decimal("0")))
    fee = subtotal * SERVICE_FEE_RATE if service_fee else Decimal("0")
    total = max(Decimal("0"), subtotal + fee - discount_value)
    return Totals(subtotal=subtotal, service_fee_value=fee, discount=discount_value, total=total)


def split_value(total: Decimal, split_count: int) -> Decimal:
    """Even share per person; the count is clamped to at least one."""
    return total / max(1, split_count)


class OrderDraft:
    """The mutable bill being edited for one tab.

    Rows are value snapshots: adding a catalog product copies its name and
    price, and later catalog edits never reach rows already on the bill.
    """

    def __init__(
        self,
        table_or_name: str = "",
        items: Iterable[OrderItem] = (),
        discount: object = None,
        service_fee: bool = False,
        order_id: str | None = None,
        opened_at: str | None = None,
        status: OrderStatus = OrderStatus.OPEN,
    ) -> None:
        self.table_or_name = table_or_name
        self.items: list[OrderItem] = [replace(item) for item in items]
        self.discount = discount
        self.service_fee = service_fee
        self.split_count = 1
        self.order_id = order_id
        self.opened_at = opened_at
        self.status = status

    @classmethod
    def from_order(cls, order: Order) -> OrderDraft:
        return cls(
            table_or_name=order.table_or_name,
            items=order.items,
            discount=order.discount,
            service_fee=order.service_fee,
            order_id=order.id,
            opened_at=order.opened_at,
            status=order.status,
        )

    @property
    def is_new(self) -> bool:
        return self.order_id is None

    def add_item(self, product: Product) -> OrderItem:
        """Add one unit of a catalog product, stacking onto a matching pending row."""
        for item in self.items:
            same_product = (item.product_id is not None and item.product_id == product.id) or item.name == product.name
            if same_product and not item.is_courtesy and item.status is ItemStatus.PENDING:
                item.quantity += 1
                return item

        item = OrderItem(
            id=generate_id(),
            product_id=product.id,
            name=product.name,
            price=product.price,
        )
        self.items.append(item)
        return item

    def add_custom_item(self, name: str, price: object) -> OrderItem:
        """Add a manual row that has no catalog product behind it."""
        name = name.strip()
        if not name or price in (None, ""):
            raise ValueError("Informe nome e preço do item.")
        parsed = to_decimal(price)
        if parsed < 0:
            raise ValueError("O preço não pode ser negativo")
        item = OrderItem(id=generate_id(), name=name, price=abs(parsed))
        self.items.append(item)
        return item

    def increment_quantity(self, item_id: str) -> OrderItem:
        item = self._item(item_id)
        item.quantity += 1
        return item

    def decrement_quantity(self, item_id: str) -> OrderItem:
        item = self._item(item_id)
        item.quantity = max(1, item.quantity - 1)
        return item

    def remove_item(self, item_id: str) -> None:
        self._item(item_id)
        self.items = [item for item in self.items if item.id != item_id]

    def toggle_delivered(self, item_id: str) -> OrderItem:
        item = self._item(item_id)
        item.status = ItemStatus.DELIVERED if item.status is ItemStatus.PENDING else ItemStatus.PENDING
        return item

    def toggle_courtesy(self, item_id: str) -> OrderItem:
        item = self._item(item_id)
        item.is_courtesy = not item.is_courtesy
        return item

    def product_quantity(self, name: str) -> int:
        return sum(
            item.quantity
            for item in self.items
            if item.name == name and not item.is_courtesy and item.status is ItemStatus.PENDING
        )

    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def set_split_count(self, count: int) -> int:
        self.split_count = max(1, count)
        return self.split_count

    def compute_totals(self) -> Totals:
        return compute_totals(self.items, self.discount, self.service_fee)

    def split_value(self, split_count: int | None = None) -> Decimal:
        count = self.split_count if split_count is None else split_count
        return split_value(self.compute_totals().total, count)

    def to_order(self) -> Order:
        """Snapshot for saving an open tab; keeps the current status."""
        return self._snapshot(self.status, closed_at=None)

    def to_closed_order(self) -> Order:
        """Authoritative snapshot handed to the closing step."""
        return self._snapshot(OrderStatus.CLOSED, closed_at=datetime.now(timezone.utc).isoformat())

    def _snapshot(self, status: OrderStatus, closed_at: str | None) -> Order:
        table = self.table_or_name.strip()
        if not table:
            raise ValueError("Informe a mesa ou nome.")
        totals = self.compute_totals()
        if self.order_id is None:
            self.order_id = generate_id()
        if self.opened_at is None:
            self.opened_at = datetime.now(timezone.utc).isoformat()
        return Order(
            id=self.order_id,
            table_or_name=table,
            items=[replace(item) for item in self.items],
            status=status,
            opened_at=self.opened_at,
            closed_at=closed_at,
            total=totals.total,
            discount=totals.discount,
            service_fee=self.service_fee,
        )

    def _item(self, item_id: str) -> OrderItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)
