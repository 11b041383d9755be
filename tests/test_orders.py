from decimal import Decimal

import pytest

from kiosk.models import ItemStatus, OrderItem, OrderStatus
from kiosk.orders import OrderDraft, compute_subtotal, compute_totals, split_value
from kiosk.utils import format_currency


def _item(name, price, quantity=1, courtesy=False):
    return OrderItem(id=name.lower(), name=name, price=Decimal(price), quantity=quantity, is_courtesy=courtesy)


def test_totals_with_fee_and_discount():
    items = [_item("Beer", "10", 3), _item("Water", "5", 1, courtesy=True)]

    totals = compute_totals(items, discount=5, service_fee=True)

    assert totals.subtotal == Decimal("30")
    assert totals.service_fee_value == Decimal("3")
    assert totals.discount == Decimal("5")
    assert totals.total == Decimal("28")


def test_totals_without_fee():
    totals = compute_totals([_item("Beer", "10", 2)])
    assert totals.service_fee_value == 0
    assert totals.total == Decimal("20")


def test_total_never_negative():
    totals = compute_totals([_item("Beer", "10")], discount=50)
    assert totals.total == 0


def test_negative_discount_is_taken_as_absolute():
    totals = compute_totals([_item("Beer", "10")], discount="-2")
    assert totals.discount == Decimal("2")
    assert totals.total == Decimal("8")


def test_courtesy_items_contribute_nothing():
    assert compute_subtotal([_item("Beer", "10", 4, courtesy=True)]) == 0


@pytest.mark.parametrize("count,expected", [(1, "30"), (3, "10"), (0, "30"), (-2, "30")])
def test_split_value_clamps_count(count, expected):
    assert split_value(Decimal("30"), count) == Decimal(expected)


def test_split_value_uneven_share_sums_back():
    share = split_value(Decimal("10"), 3)

    assert abs(share * 3 - Decimal("10")) < Decimal("0.0001")
    assert format_currency(share) == "R$ 3,33"


def test_add_item_stacks_pending_rows(beer):
    draft = OrderDraft("Mesa 1")
    draft.add_item(beer)
    draft.add_item(beer)

    assert len(draft.items) == 1
    assert draft.items[0].quantity == 2
    assert draft.items[0].product_id == beer.id
    assert draft.product_quantity("Beer") == 2


def test_add_item_opens_new_row_after_delivery(beer):
    draft = OrderDraft("Mesa 1")
    first = draft.add_item(beer)
    draft.toggle_delivered(first.id)
    draft.add_item(beer)

    assert [i.status for i in draft.items] == [ItemStatus.DELIVERED, ItemStatus.PENDING]


def test_row_keeps_price_snapshot(beer):
    draft = OrderDraft("Mesa 1")
    item = draft.add_item(beer)
    beer.price = Decimal("99")

    assert item.price == Decimal("10")


def test_decrement_floors_at_one(beer):
    draft = OrderDraft("Mesa 1")
    item = draft.add_item(beer)
    draft.increment_quantity(item.id)
    draft.decrement_quantity(item.id)
    draft.decrement_quantity(item.id)

    assert item.quantity == 1


def test_toggle_courtesy_twice_restores_total(beer):
    draft = OrderDraft("Mesa 1")
    item = draft.add_item(beer)
    before = draft.compute_totals().total

    draft.toggle_courtesy(item.id)
    assert draft.compute_totals().total == 0
    draft.toggle_courtesy(item.id)

    assert draft.compute_totals().total == before


def test_custom_item_validation():
    draft = OrderDraft("Mesa 1")
    item = draft.add_custom_item("Milho", "7,50")
    assert item.price == Decimal("7.50")
    assert item.product_id is None

    with pytest.raises(ValueError):
        draft.add_custom_item("  ", "3")
    with pytest.raises(ValueError):
        draft.add_custom_item("Milho", "-1")


def test_unknown_item_raises_key_error():
    with pytest.raises(KeyError):
        OrderDraft("Mesa 1").remove_item("missing")


def test_remove_item(beer):
    draft = OrderDraft("Mesa 1")
    item = draft.add_item(beer)
    draft.remove_item(item.id)
    assert draft.items == []


def test_to_order_requires_name(beer):
    draft = OrderDraft("   ")
    draft.add_item(beer)
    with pytest.raises(ValueError, match="Informe a mesa ou nome."):
        draft.to_order()


def test_to_order_snapshot(beer):
    draft = OrderDraft(" Mesa 2 ", discount="5", service_fee=True)
    draft.add_item(beer)
    draft.add_item(beer)
    draft.add_item(beer)

    order = draft.to_order()

    assert order.table_or_name == "Mesa 2"
    assert order.status is OrderStatus.OPEN
    assert order.total == Decimal("28")
    assert order.discount == Decimal("5")
    assert not draft.is_new
    assert draft.to_order().id == order.id


def test_closed_snapshot_and_split(beer):
    draft = OrderDraft("Mesa 3")
    draft.add_item(beer)
    draft.add_item(beer)
    draft.set_split_count(0)
    assert draft.split_count == 1
    draft.set_split_count(4)

    closed = draft.to_closed_order()

    assert closed.status is OrderStatus.CLOSED
    assert closed.closed_at is not None
    assert draft.split_value() == Decimal("5")
    assert draft.item_count() == 2


def test_from_order_copies_rows(beer):
    draft = OrderDraft("Mesa 4")
    draft.add_item(beer)
    order = draft.to_order()

    edit = OrderDraft.from_order(order)
    edit.increment_quantity(edit.items[0].id)

    assert order.items[0].quantity == 1
    assert edit.items[0].quantity == 2
