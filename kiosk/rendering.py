"""Rendering helpers shared by the screens."""

from __future__ import annotations

from rich.text import Text

from kiosk.catalog import STOCK_LOW, STOCK_OUT, stock_status
from kiosk.constant import PAYMENT_METHOD_LABELS, PRODUCT_CATEGORY_LABELS
from kiosk.models import ItemStatus, Order, OrderItem, PaymentMethod, Product, ProductCategory
from kiosk.orders import Totals
from kiosk.utils import format_currency


def badge_style(category: ProductCategory) -> str:
    """Return a consistent badge style for catalog categories."""
    if category is ProductCategory.DRINK:
        return "bold #ffffff on #2f6db5"
    if category is ProductCategory.FOOD:
        return "bold #ffffff on #b23a48"
    return "bold #0b1f0f on #5fbf72"


def stock_style(product: Product) -> str:
    status = stock_status(product)
    if status == STOCK_OUT:
        return "bold #ff6b6b"
    if status == STOCK_LOW:
        return "bold #ffa94d"
    return "#69db7c"


def stock_label(product: Product) -> str:
    status = stock_status(product)
    if status == STOCK_OUT:
        return "Esgotado"
    if status == STOCK_LOW:
        return "Baixo"
    return "Normal"


def payment_label(method: PaymentMethod | None) -> str:
    if method is None:
        return "N/A"
    return PAYMENT_METHOD_LABELS.get(method.value, method.value)


def format_product_label(product: Product, in_ticket: int = 0) -> Text:
    text = Text()
    tag = PRODUCT_CATEGORY_LABELS[product.category.value][:3].upper()
    text.append(tag, style=badge_style(product.category))
    text.append(f" {product.name}  {format_currency(product.price)}")
    text.append(f"  [{product.stock}]", style=stock_style(product))
    if in_ticket:
        text.append(f"  x{in_ticket}", style="bold #ff8787")
    return text


def format_item_label(item: OrderItem) -> Text:
    """One bill row with quantity, price and state tags."""
    text = Text()
    text.append(f"{item.quantity}x ", style="bold")
    text.append(item.name)
    if item.is_courtesy:
        text.append("  CORTESIA", style="bold #1a1a1a on #ffd43b")
        text.append(f"  {format_currency(0)}", style="dim")
    else:
        text.append(f"  {format_currency(item.line_total)}")
    if item.status is ItemStatus.DELIVERED:
        text.append("  ✓ entregue", style="#69db7c")
    else:
        text.append("  pendente", style="dim")
    return text


def format_totals(totals: Totals, service_fee: bool, split_count: int, split: object) -> Text:
    text = Text()
    text.append(f"Subtotal: {format_currency(totals.subtotal)}\n")
    fee_flag = "on" if service_fee else "off"
    text.append(f"Taxa 10% ({fee_flag}): {format_currency(totals.service_fee_value)}\n")
    text.append(f"Desconto: -{format_currency(totals.discount)}\n")
    text.append(f"Total: {format_currency(totals.total)}", style="bold")
    if split_count > 1:
        text.append(f"\n{split_count} pessoas: {format_currency(split)} cada", style="italic")  # type: ignore[arg-type]
    return text


def format_order_label(order: Order, wait: str, long_wait: bool) -> Text:
    text = Text()
    text.append(order.table_or_name, style="bold")
    text.append(f"  {sum(i.quantity for i in order.items)} itens  {format_currency(order.total)}")
    text.append(f"  {wait}", style="bold #ff6b6b" if long_wait else "dim")
    if order.payment_method is not None:
        text.append(f"  {payment_label(order.payment_method)}", style="#69db7c")
    return text
