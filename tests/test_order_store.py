from datetime import datetime, timedelta, timezone
from decimal import Decimal

from kiosk.models import Order, OrderStatus, PaymentMethod
from kiosk.order_store import OrderStore, is_long_wait, wait_time

NOW = datetime(2024, 6, 1, 15, 0, tzinfo=timezone.utc)


def _order(order_id="o1", table="Mesa 1", minutes_ago=10, status=OrderStatus.OPEN):
    return Order(
        id=order_id,
        table_or_name=table,
        opened_at=(NOW - timedelta(minutes=minutes_ago)).isoformat(),
        status=status,
        total=Decimal("20"),
    )


def test_add_forces_open_status():
    store = OrderStore()
    stored = store.add(_order(status=OrderStatus.CLOSED))
    assert stored.status is OrderStatus.OPEN
    assert store.open_orders() == [stored]


def test_on_change_receives_full_list():
    seen = []
    store = OrderStore(on_change=lambda orders: seen.append(len(orders)))
    store.add(_order("o1"))
    store.add(_order("o2"))
    store.remove("o1")
    assert seen == [1, 2, 1]


def test_update_is_idempotent():
    store = OrderStore([_order()])
    changed = _order()
    changed.total = Decimal("50")

    store.update(changed)
    once = [o.to_dict() for o in store.orders]
    store.update(changed)

    assert [o.to_dict() for o in store.orders] == once
    assert store.get("o1").total == Decimal("50")


def test_close_overwrites_with_snapshot():
    store = OrderStore([_order()])
    final = _order()
    final.total = Decimal("33")

    closed = store.close(final, PaymentMethod.PIX)

    assert closed.status is OrderStatus.CLOSED
    assert closed.payment_method is PaymentMethod.PIX
    assert closed.closed_at is not None
    assert closed.total == Decimal("33")
    assert store.open_orders() == []
    assert store.closed_orders() == [closed]


def test_close_missing_order_returns_none():
    assert OrderStore().close(_order(), PaymentMethod.MONEY) is None


def test_lists_are_newest_first():
    store = OrderStore([_order("old", minutes_ago=50), _order("new", minutes_ago=5)])
    assert [o.id for o in store.open_orders()] == ["new", "old"]


def test_find_open_by_table_ignores_case_and_closed():
    store = OrderStore([_order("c", status=OrderStatus.CLOSED), _order("o", table="Mesa 7")])
    assert store.find_open_by_table(" mesa 7 ").id == "o"
    assert store.find_open_by_table("Mesa 1") is None


def test_table_map():
    store = OrderStore([_order("o", table="Mesa 3")])
    tables = store.table_map()
    assert len(tables) == 20
    assert tables[0] == ("Mesa 1", None)
    assert tables[2][1].id == "o"


def test_wait_time_formats():
    assert wait_time(_order(minutes_ago=12), NOW) == "12m"
    assert wait_time(_order(minutes_ago=125), NOW) == "2h 05m"
    assert wait_time(_order(minutes_ago=-3), NOW) == "0m"


def test_long_wait_threshold():
    assert not is_long_wait(_order(minutes_ago=60), NOW)
    assert is_long_wait(_order(minutes_ago=61), NOW)
