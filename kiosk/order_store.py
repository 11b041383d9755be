"""Collection of tabs keyed by id."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from kiosk.constant import LONG_WAIT_MINUTES, TABLE_COUNT
from kiosk.models import Order, OrderStatus, PaymentMethod
from kiosk.utils import parse_iso

logger = logging.getLogger(__name__)


class OrderStore:
    """Owns every Order; ``on_change`` receives the full list after each mutation."""

    def __init__(
        self,
        orders: Iterable[Order] = (),
        on_change: Callable[[list[Order]], None] | None = None,
    ) -> None:
        self.orders: list[Order] = list(orders)
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self.orders)

    def get(self, order_id: str) -> Order | None:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def add(self, order: Order) -> Order:
        stored = order.copy()
        stored.status = OrderStatus.OPEN
        self.orders.append(stored)
        logger.info("order_added id=%s table=%r", stored.id, stored.table_or_name)
        self._changed()
        return stored

    def update(self, order: Order) -> None:
        """Replace the stored order with the same id; status is whatever the caller passed."""
        self.orders = [order.copy() if o.id == order.id else o for o in self.orders]
        self._changed()

    def close(self, final_order: Order, payment_method: PaymentMethod) -> Order | None:
        """Overwrite the stored tab with ``final_order`` and mark it closed.

        The caller's snapshot is authoritative: items, totals, discount and
        fee all come from it. Returns None when no stored order has that id.
        """
        closed: Order | None = None
        for idx, order in enumerate(self.orders):
            if order.id != final_order.id:
                continue
            closed = final_order.copy()
            closed.status = OrderStatus.CLOSED
            closed.closed_at = datetime.now(timezone.utc).isoformat()
            closed.payment_method = payment_method
            self.orders[idx] = closed
            break
        if closed is None:
            logger.warning("order_close_missing id=%s", final_order.id)
        self._changed()
        return closed

    def remove(self, order_id: str) -> None:
        self.orders = [o for o in self.orders if o.id != order_id]
        self._changed()

    def replace_all(self, orders: Iterable[Order]) -> None:
        self.orders = list(orders)
        self._changed()

    def clear(self) -> None:
        self.replace_all([])

    def open_orders(self) -> list[Order]:
        return self._by_status(OrderStatus.OPEN)

    def closed_orders(self) -> list[Order]:
        return self._by_status(OrderStatus.CLOSED)

    def find_open_by_table(self, table_or_name: str) -> Order | None:
        wanted = table_or_name.strip().lower()
        for order in self.orders:
            if order.status is OrderStatus.OPEN and order.table_or_name.strip().lower() == wanted:
                return order
        return None

    def table_map(self) -> list[tuple[str, Order | None]]:
        """Fixed tables ``Mesa 1`` .. ``Mesa N`` with their open tab, if any."""
        tables = []
        for num in range(1, TABLE_COUNT + 1):
            name = f"Mesa {num}"
            tables.append((name, self.find_open_by_table(name)))
        return tables

    def _by_status(self, status: OrderStatus) -> list[Order]:
        selected = [o for o in self.orders if o.status is status]
        selected.sort(key=lambda o: parse_iso(o.opened_at), reverse=True)
        return selected

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.orders)


def minutes_open(order: Order, now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)
    return int((now - parse_iso(order.opened_at)).total_seconds() // 60)


def wait_time(order: Order, now: datetime | None = None) -> str:
    """How long the tab has been open, as ``2h 05m`` or ``12m``."""
    minutes = max(0, minutes_open(order, now))
    hours, minutes = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def is_long_wait(order: Order, now: datetime | None = None) -> bool:
    return minutes_open(order, now) > LONG_WAIT_MINUTES
