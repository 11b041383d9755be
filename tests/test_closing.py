from datetime import date
from decimal import Decimal

from kiosk.closing import close_order
from kiosk.models import EntryType, ExpenseCategory, OrderStatus, PaymentMethod
from kiosk.orders import OrderDraft


def _tab(orders, beer, water, beers=3):
    draft = OrderDraft("Mesa 5", service_fee=True, discount="5")
    for _ in range(beers):
        draft.add_item(beer)
    draft.add_item(water)
    water_row = draft.items[-1]
    water_row.product_id = None
    draft.toggle_courtesy(water_row.id)
    orders.add(draft.to_order())
    return draft.to_closed_order()


def test_close_records_income_and_stock(orders, ledger, catalog, beer, water):
    final = _tab(orders, beer, water)

    result = close_order(
        final,
        PaymentMethod.CREDIT_CARD,
        orders=orders,
        ledger=ledger,
        catalog=catalog,
        today=date(2024, 6, 1),
    )

    assert result.order.status is OrderStatus.CLOSED
    assert result.order.payment_method is PaymentMethod.CREDIT_CARD
    assert len(ledger) == 1
    entry = result.entry
    assert entry.category is ExpenseCategory.CASH_IN
    assert entry.type is EntryType.INCOME
    assert entry.amount == Decimal("28")
    assert entry.description == "Comanda: Mesa 5"
    assert entry.date == "2024-06-01"
    assert entry.payment_method is PaymentMethod.CREDIT_CARD
    assert beer.stock == 17
    assert [c.product_id for c in result.stock_changes] == [beer.id]


def test_catalog_persisted_once(orders, ledger, catalog, beer, water):
    calls = []
    catalog.on_change = lambda products: calls.append(len(products))
    final = _tab(orders, beer, water)

    close_order(final, PaymentMethod.MONEY, orders=orders, ledger=ledger, catalog=catalog)

    assert calls == [1]


def test_stock_floors_at_zero(orders, ledger, catalog, beer, water):
    beer.stock = 2
    final = _tab(orders, beer, water, beers=5)

    result = close_order(final, PaymentMethod.PIX, orders=orders, ledger=ledger, catalog=catalog)

    assert beer.stock == 0
    change = result.stock_changes[0]
    assert (change.before, change.after, change.requested) == (2, 0, 5)
    assert change.clamped


def test_courtesy_and_delivered_rows_still_leave_the_shelf(orders, ledger, catalog, beer):
    draft = OrderDraft("Mesa 6")
    item = draft.add_item(beer)
    draft.toggle_courtesy(item.id)
    draft.toggle_delivered(item.id)
    orders.add(draft.to_order())

    result = close_order(draft.to_closed_order(), PaymentMethod.MONEY, orders=orders, ledger=ledger, catalog=catalog)

    assert beer.stock == 19
    assert result.entry.amount == 0
    assert not result.stock_changes[0].clamped


def test_name_match_when_product_id_is_missing(orders, ledger, catalog, beer):
    draft = OrderDraft("Mesa 7")
    draft.add_custom_item("Beer", "10")
    orders.add(draft.to_order())

    close_order(draft.to_closed_order(), PaymentMethod.MONEY, orders=orders, ledger=ledger, catalog=catalog)

    assert beer.stock == 19


def test_unknown_order_still_books_income(orders, ledger, catalog, beer):
    draft = OrderDraft("Balcão")
    draft.add_item(beer)

    result = close_order(draft.to_closed_order(), PaymentMethod.MONEY, orders=orders, ledger=ledger, catalog=catalog)

    assert result.order is None
    assert len(ledger) == 1
    assert beer.stock == 19
