"""SQLite persistence for orders, ledger entries and settings.

Each collection is read in full at startup and rewritten in full, inside one
transaction, whenever it changes.
"""

from __future__ import annotations

import json
import sqlite3
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from kiosk.config import DB_PATH
from kiosk.models import (
    AppSettings,
    EntryType,
    Expense,
    ExpenseCategory,
    ItemStatus,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    ProductCategory,
)
from kiosk.schemas import SettingsSchema


def _connect(db_path: str | Path | None = None) -> sqlite3.Connection:
    db_file = Path(db_path or DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def bootstrap_schema(db_path: str | Path | None = None) -> None:
    """Create persistence schema if it does not already exist."""
    with _connect(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS orders (
                id TEXT PRIMARY KEY,
                table_or_name TEXT NOT NULL,
                status TEXT NOT NULL,
                opened_at TEXT NOT NULL,
                closed_at TEXT,
                total TEXT NOT NULL,
                discount TEXT,
                service_fee INTEGER NOT NULL DEFAULT 0,
                payment_method TEXT,
                position INTEGER NOT NULL
            );

            CREATE TABLE IF NOT EXISTS order_items (
                id TEXT NOT NULL,
                order_id TEXT NOT NULL,
                line_index INTEGER NOT NULL,
                product_id TEXT,
                name TEXT NOT NULL,
                price TEXT NOT NULL,
                quantity INTEGER NOT NULL,
                status TEXT NOT NULL,
                is_courtesy INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (order_id, id),
                FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS expenses (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                category TEXT NOT NULL,
                description TEXT NOT NULL,
                amount TEXT NOT NULL,
                type TEXT NOT NULL,
                payment_method TEXT,
                position INTEGER NOT NULL
            );

            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS products (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                price TEXT NOT NULL,
                category TEXT NOT NULL,
                stock INTEGER NOT NULL DEFAULT 0,
                min_stock INTEGER NOT NULL DEFAULT 5,
                barcode TEXT,
                position INTEGER NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
                ON order_items(order_id, line_index);

            CREATE INDEX IF NOT EXISTS idx_expenses_date
                ON expenses(date);
            """
        )
        product_columns = {row[1] for row in conn.execute("PRAGMA table_info(products)")}
        if "unit" not in product_columns:
            conn.execute("ALTER TABLE products ADD COLUMN unit TEXT")


def _optional_payment(value: str | None) -> PaymentMethod | None:
    return PaymentMethod(value) if value else None


def load_orders(db_path: str | Path | None = None) -> list[Order]:
    with _connect(db_path) as conn:
        item_rows = conn.execute(
            """
            SELECT order_id, id, product_id, name, price, quantity, status, is_courtesy
            FROM order_items ORDER BY order_id, line_index
            """
        ).fetchall()
        items_by_order: dict[str, list[OrderItem]] = {}
        for order_id, item_id, product_id, name, price, quantity, status, is_courtesy in item_rows:
            items_by_order.setdefault(order_id, []).append(
                OrderItem(
                    id=item_id,
                    product_id=product_id,
                    name=name,
                    price=Decimal(price),
                    quantity=quantity,
                    status=ItemStatus(status),
                    is_courtesy=bool(is_courtesy),
                )
            )

        orders = []
        for row in conn.execute(
            """
            SELECT id, table_or_name, status, opened_at, closed_at, total, discount, service_fee, payment_method
            FROM orders ORDER BY position
            """
        ):
            order_id, table, status, opened_at, closed_at, total, discount, service_fee, payment = row
            orders.append(
                Order(
                    id=order_id,
                    table_or_name=table,
                    items=items_by_order.get(order_id, []),
                    status=OrderStatus(status),
                    opened_at=opened_at,
                    closed_at=closed_at,
                    total=Decimal(total),
                    discount=Decimal(discount) if discount is not None else None,
                    service_fee=bool(service_fee),
                    payment_method=_optional_payment(payment),
                )
            )
    return orders


def save_orders(orders: Iterable[Order], db_path: str | Path | None = None) -> None:
    """Rewrite the whole orders collection."""
    with _connect(db_path) as conn:
        with conn:
            conn.execute("DELETE FROM order_items")
            conn.execute("DELETE FROM orders")
            for position, order in enumerate(orders):
                conn.execute(
                    """
                    INSERT INTO orders (
                        id, table_or_name, status, opened_at, closed_at, total,
                        discount, service_fee, payment_method, position
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.id,
                        order.table_or_name,
                        order.status.value,
                        order.opened_at,
                        order.closed_at,
                        str(order.total),
                        str(order.discount) if order.discount is not None else None,
                        int(order.service_fee),
                        order.payment_method.value if order.payment_method else None,
                        position,
                    ),
                )
                for idx, item in enumerate(order.items):
                    conn.execute(
                        """
                        INSERT INTO order_items (
                            id, order_id, line_index, product_id, name, price, quantity, status, is_courtesy
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            item.id,
                            order.id,
                            idx,
                            item.product_id,
                            item.name,
                            str(item.price),
                            item.quantity,
                            item.status.value,
                            int(item.is_courtesy),
                        ),
                    )


def load_expenses(db_path: str | Path | None = None) -> list[Expense]:
    with _connect(db_path) as conn:
        rows = conn.execute(
            """
            SELECT id, date, category, description, amount, type, payment_method
            FROM expenses ORDER BY position
            """
        ).fetchall()
    return [
        Expense(
            id=entry_id,
            date=entry_date,
            category=ExpenseCategory(category),
            description=description,
            amount=Decimal(amount),
            type=EntryType(entry_type),
            payment_method=_optional_payment(payment),
        )
        for entry_id, entry_date, category, description, amount, entry_type, payment in rows
    ]


def save_expenses(expenses: Iterable[Expense], db_path: str | Path | None = None) -> None:
    """Rewrite the whole ledger."""
    with _connect(db_path) as conn:
        with conn:
            conn.execute("DELETE FROM expenses")
            conn.executemany(
                """
                INSERT INTO expenses (id, date, category, description, amount, type, payment_method, position)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        e.id,
                        e.date,
                        e.category.value,
                        e.description,
                        str(e.amount),
                        e.type.value,
                        e.payment_method.value if e.payment_method else None,
                        position,
                    )
                    for position, e in enumerate(expenses)
                ],
            )


def load_settings(db_path: str | Path | None = None) -> AppSettings:
    """Settings with products; keys never stored fall back to defaults."""
    with _connect(db_path) as conn:
        stored = {key: json.loads(value) for key, value in conn.execute("SELECT key, value FROM settings")}
        product_rows = conn.execute(
            """
            SELECT id, name, price, category, stock, min_stock, unit, barcode
            FROM products ORDER BY position
            """
        ).fetchall()
    settings = SettingsSchema.model_validate(stored).to_model()
    settings.products = [
        Product(
            id=product_id,
            name=name,
            price=Decimal(price),
            category=ProductCategory(category),
            stock=stock,
            min_stock=min_stock,
            unit=unit,
            barcode=barcode,
        )
        for product_id, name, price, category, stock, min_stock, unit, barcode in product_rows
    ]
    return settings


def save_settings(settings: AppSettings, db_path: str | Path | None = None) -> None:
    """Rewrite settings and the product list together."""
    data = settings.to_dict()
    data.pop("products")
    with _connect(db_path) as conn:
        with conn:
            conn.execute("DELETE FROM settings")
            conn.executemany(
                "INSERT INTO settings (key, value) VALUES (?, ?)",
                [(key, json.dumps(value, ensure_ascii=False)) for key, value in data.items()],
            )
            _write_products(conn, settings.products)


def save_products(products: Iterable[Product], db_path: str | Path | None = None) -> None:
    """Rewrite only the product list, e.g. after stock changes."""
    with _connect(db_path) as conn:
        with conn:
            _write_products(conn, products)


def _write_products(conn: sqlite3.Connection, products: Iterable[Product]) -> None:
    conn.execute("DELETE FROM products")
    conn.executemany(
        """
        INSERT INTO products (id, name, price, category, stock, min_stock, unit, barcode, position)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                p.id,
                p.name,
                str(p.price),
                p.category.value,
                p.stock,
                p.min_stock,
                p.unit,
                p.barcode,
                position,
            )
            for position, p in enumerate(products)
        ],
    )
