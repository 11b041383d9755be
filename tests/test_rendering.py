from decimal import Decimal

from kiosk.models import ItemStatus, Order, OrderItem, PaymentMethod, Product
from kiosk.orders import compute_totals
from kiosk.rendering import (
    format_item_label,
    format_order_label,
    format_product_label,
    format_totals,
    payment_label,
    stock_label,
)


def test_stock_label():
    assert stock_label(Product(id="a", name="A", price=Decimal("1"), stock=0)) == "Esgotado"
    assert stock_label(Product(id="a", name="A", price=Decimal("1"), stock=5)) == "Baixo"
    assert stock_label(Product(id="a", name="A", price=Decimal("1"), stock=6)) == "Normal"


def test_payment_label():
    assert payment_label(PaymentMethod.CREDIT_CARD) == "Crédito"
    assert payment_label(None) == "N/A"


def test_item_label_shows_courtesy_and_delivery():
    item = OrderItem(id="i", name="Beer", price=Decimal("10"), quantity=2, is_courtesy=True, status=ItemStatus.DELIVERED)
    plain = format_item_label(item).plain
    assert "2x Beer" in plain
    assert "CORTESIA" in plain
    assert "entregue" in plain


def test_product_label_counts_ticket_quantity():
    product = Product(id="a", name="Coco", price=Decimal("8"), stock=3)
    assert format_product_label(product, in_ticket=2).plain.endswith("x2")


def test_totals_and_order_labels():
    items = [OrderItem(id="i", name="Beer", price=Decimal("10"), quantity=3)]
    text = format_totals(compute_totals(items, 5, True), True, 2, Decimal("14")).plain
    assert "Total: R$ 28,00" in text
    assert "2 pessoas: R$ 14,00 cada" in text

    order = Order(id="o", table_or_name="Mesa 1", opened_at="2024-06-01T12:00:00+00:00", items=items, total=Decimal("30"))
    assert format_order_label(order, "12m", False).plain.startswith("Mesa 1  3 itens  R$ 30,00")
