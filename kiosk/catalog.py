"""Product catalog with stock counters."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Iterable

from kiosk.constant import DEFAULT_MIN_STOCK
from kiosk.models import Product, ProductCategory
from kiosk.utils import generate_id, to_decimal

logger = logging.getLogger(__name__)

SORT_KEYS = ("name", "stock_asc", "stock_desc", "price_desc")

STOCK_OUT = "out"
STOCK_LOW = "low"
STOCK_NORMAL = "normal"


class ProductCatalog:
    """The single authoritative product list.

    ``on_change`` is called with the full product list after every mutation
    so the owner can persist it as one batch.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        on_change: Callable[[list[Product]], None] | None = None,
    ) -> None:
        self.products: list[Product] = list(products)
        self.on_change = on_change

    def __iter__(self):
        return iter(self.products)

    def __len__(self) -> int:
        return len(self.products)

    def get(self, product_id: str) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def find_by_barcode(self, code: str) -> Product | None:
        code = code.strip()
        if not code:
            return None
        for product in self.products:
            if product.barcode == code:
                return product
        return None

    def find_by_name(self, name: str) -> Product | None:
        for product in self.products:
            if product.name == name:
                return product
        return None

    def match(self, product_id: str | None, name: str) -> Product | None:
        """Resolve a bill row to a product: id first, then exact name."""
        if product_id:
            product = self.get(product_id)
            if product is not None:
                return product
        return self.find_by_name(name)

    def save_product(
        self,
        name: str,
        price: object,
        category: ProductCategory | str = ProductCategory.DRINK,
        stock: object = None,
        min_stock: object = None,
        barcode: str | None = None,
        unit: str | None = None,
        product_id: str | None = None,
    ) -> Product:
        """Create a product, or update the one with ``product_id``."""
        name = name.strip()
        if not name or price in (None, ""):
            raise ValueError("Preencha nome e preço")
        parsed_price = to_decimal(price)
        if parsed_price < 0:
            raise ValueError("O preço não pode ser negativo")

        fields = {
            "name": name,
            "price": parsed_price,
            "category": ProductCategory(category),
            "stock": int(stock) if stock not in (None, "") else 0,
            "min_stock": int(min_stock) if min_stock not in (None, "") else DEFAULT_MIN_STOCK,
            "barcode": (barcode or "").strip() or None,
            "unit": unit or None,
        }
        if fields["stock"] < 0 or fields["min_stock"] < 0:
            raise ValueError("Estoque não pode ser negativo")

        if product_id is not None:
            product = self.get(product_id)
            if product is None:
                raise KeyError(product_id)
            for key, value in fields.items():
                setattr(product, key, value)
            logger.info("product_updated id=%s name=%r", product.id, product.name)
        else:
            product = Product(id=generate_id(), **fields)
            self.products.append(product)
            logger.info("product_added id=%s name=%r", product.id, product.name)
        self._changed()
        return product

    def remove(self, product_id: str) -> None:
        before = len(self.products)
        self.products = [p for p in self.products if p.id != product_id]
        if len(self.products) != before:
            self._changed()

    def replace_all(self, products: Iterable[Product]) -> None:
        self.products = list(products)
        self._changed()

    def set_stock(self, product_id: str, quantity: int) -> Product:
        """Direct quantity edit from the stock screen."""
        if quantity < 0:
            raise ValueError("Estoque não pode ser negativo")
        product = self._require(product_id)
        product.stock = quantity
        self._changed()
        return product

    def adjust_stock(self, product_id: str, delta: int) -> Product:
        product = self._require(product_id)
        product.stock = max(0, product.stock + delta)
        self._changed()
        return product

    def decrement(self, product: Product, quantity: int) -> int:
        """Take ``quantity`` off the shelf, never going below zero.

        Does not notify ``on_change``; batch callers persist once.
        """
        product.stock = max(0, product.stock - quantity)
        return product.stock

    def link_barcode(self, product_id: str, code: str) -> Product:
        product = self._require(product_id)
        product.barcode = code.strip() or None
        self._changed()
        return product

    def search(self, text: str) -> list[Product]:
        needle = text.strip().lower()
        return [p for p in self.products if needle in p.name.lower()]

    def by_category(self, category: ProductCategory | str, text: str = "") -> list[Product]:
        category = ProductCategory(category)
        return [p for p in self.search(text) if p.category is category]

    def low_stock(self) -> list[Product]:
        return [p for p in self.products if p.stock <= p.min_stock]

    def sorted_products(self, sort_by: str = "stock_asc", text: str = "", low_only: bool = False) -> list[Product]:
        if sort_by not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {sort_by}")
        products = self.search(text)
        if low_only:
            products = [p for p in products if p.stock <= p.min_stock]
        if sort_by == "name":
            products.sort(key=lambda p: p.name.lower())
        elif sort_by == "stock_asc":
            products.sort(key=lambda p: p.stock)
        elif sort_by == "stock_desc":
            products.sort(key=lambda p: -p.stock)
        else:
            products.sort(key=lambda p: -p.price)
        return products

    def stock_value(self) -> Decimal:
        return sum((p.price * p.stock for p in self.products), Decimal("0"))

    def notify(self) -> None:
        self._changed()

    def _require(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise KeyError(product_id)
        return product

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.products)


def stock_status(product: Product) -> str:
    if product.stock == 0:
        return STOCK_OUT
    if product.stock <= product.min_stock:
        return STOCK_LOW
    return STOCK_NORMAL
