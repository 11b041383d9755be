"""The kiosk's owned stores, wired to SQLite."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from kiosk.backup import Backup
from kiosk.catalog import ProductCatalog
from kiosk.closing import ClosingResult, close_order
from kiosk.ledger import ExpenseLedger
from kiosk.models import AppSettings, Order, PaymentMethod
from kiosk.order_store import OrderStore
from kiosk.persistence import (
    bootstrap_schema,
    load_expenses,
    load_orders,
    load_settings,
    save_expenses,
    save_orders,
    save_products,
    save_settings,
)
from kiosk.security import FinanceLock

logger = logging.getLogger(__name__)


@dataclass
class KioskState:
    """Settings, catalog, tabs and ledger for one kiosk.

    The catalog shares its product list with ``settings.products``. Every
    store persists its own collection through ``on_change``.
    """

    settings: AppSettings
    catalog: ProductCatalog
    orders: OrderStore
    ledger: ExpenseLedger
    lock: FinanceLock
    db_path: str | Path | None = None

    @classmethod
    def load(cls, db_path: str | Path | None = None) -> KioskState:
        bootstrap_schema(db_path)
        settings = load_settings(db_path)
        state = cls(
            settings=settings,
            catalog=ProductCatalog(settings.products),
            orders=OrderStore(load_orders(db_path)),
            ledger=ExpenseLedger(load_expenses(db_path)),
            lock=FinanceLock(settings.security_pin),
            db_path=db_path,
        )
        state._wire()
        logger.info(
            "state_loaded orders=%d entries=%d products=%d",
            len(state.orders),
            len(state.ledger),
            len(state.catalog),
        )
        return state

    def _wire(self) -> None:
        self.catalog.on_change = self._persist_products
        self.orders.on_change = lambda orders: save_orders(orders, self.db_path)
        self.ledger.on_change = lambda entries: save_expenses(entries, self.db_path)

    def _persist_products(self, products: list) -> None:
        self.settings.products = products
        save_products(products, self.db_path)

    def save_settings(self) -> None:
        self.settings.products = self.catalog.products
        self.lock.set_pin(self.settings.security_pin)
        save_settings(self.settings, self.db_path)

    def close_order(self, order: Order, payment_method: PaymentMethod, today: date | None = None) -> ClosingResult:
        return close_order(
            order,
            payment_method,
            orders=self.orders,
            ledger=self.ledger,
            catalog=self.catalog,
            today=today,
        )

    def restore(self, backup: Backup) -> None:
        """Replace collections wholesale with a parsed backup."""
        self.settings = backup.settings
        self.catalog.products = backup.settings.products
        self.save_settings()
        self.ledger.replace_all(backup.expenses)
        if backup.orders is not None:
            self.orders.replace_all(backup.orders)
        logger.info("backup_restored entries=%d orders=%s", len(backup.expenses), len(backup.orders or []))

    def clear_data(self) -> None:
        """Wipe the ledger and all tabs; settings and catalog stay."""
        self.ledger.clear()
        self.orders.clear()
        logger.warning("data_cleared")
