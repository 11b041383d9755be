from decimal import Decimal

import pytest

from kiosk.catalog import STOCK_LOW, STOCK_NORMAL, STOCK_OUT, ProductCatalog, stock_status
from kiosk.models import Product, ProductCategory


def _catalog():
    return ProductCatalog(
        [
            Product(id="a", name="Água", price=Decimal("4"), category=ProductCategory.DRINK, stock=30),
            Product(id="b", name="Batata", price=Decimal("18"), category=ProductCategory.FOOD, stock=3),
            Product(id="c", name="Cerveja", price=Decimal("10"), category=ProductCategory.DRINK, stock=0),
        ]
    )


def test_save_product_creates_with_defaults():
    catalog = ProductCatalog()
    product = catalog.save_product(" Coco ", "8,50", category="food")

    assert product.name == "Coco"
    assert product.price == Decimal("8.50")
    assert product.category is ProductCategory.FOOD
    assert product.stock == 0
    assert product.min_stock == 5
    assert catalog.get(product.id) is product


def test_save_product_updates_existing():
    catalog = _catalog()
    catalog.save_product("Água Gelada", 5, stock=12, product_id="a")

    product = catalog.get("a")
    assert product.name == "Água Gelada"
    assert product.stock == 12
    assert len(catalog) == 3


@pytest.mark.parametrize(
    "name,price,message",
    [("", "5", "Preencha nome e preço"), ("Coco", "", "Preencha nome e preço"), ("Coco", "-1", "negativo")],
)
def test_save_product_validation(name, price, message):
    with pytest.raises(ValueError, match=message):
        ProductCatalog().save_product(name, price)


def test_stock_edits():
    catalog = _catalog()
    catalog.adjust_stock("b", -10)
    assert catalog.get("b").stock == 0

    catalog.set_stock("b", 7)
    assert catalog.get("b").stock == 7

    with pytest.raises(ValueError):
        catalog.set_stock("b", -1)
    with pytest.raises(KeyError):
        catalog.adjust_stock("zzz", 1)


def test_decrement_does_not_notify():
    calls = []
    catalog = _catalog()
    catalog.on_change = calls.append

    assert catalog.decrement(catalog.get("a"), 40) == 0
    assert calls == []


def test_lookups():
    catalog = _catalog()
    catalog.link_barcode("c", " 789 ")

    assert catalog.find_by_barcode("789").id == "c"
    assert catalog.find_by_barcode("") is None
    assert catalog.match("missing", "Batata").id == "b"
    assert catalog.match(None, "Nada") is None
    assert [p.id for p in catalog.search("at")] == ["b"]
    assert [p.id for p in catalog.by_category("drink")] == ["a", "c"]


def test_low_stock_and_status():
    catalog = _catalog()

    assert {p.id for p in catalog.low_stock()} == {"b", "c"}
    assert stock_status(catalog.get("a")) == STOCK_NORMAL
    assert stock_status(catalog.get("b")) == STOCK_LOW
    assert stock_status(catalog.get("c")) == STOCK_OUT


def test_sorted_products():
    catalog = _catalog()

    assert [p.id for p in catalog.sorted_products("stock_asc")] == ["c", "b", "a"]
    assert [p.id for p in catalog.sorted_products("stock_desc")] == ["a", "b", "c"]
    assert [p.id for p in catalog.sorted_products("price_desc")] == ["b", "c", "a"]
    assert [p.id for p in catalog.sorted_products("name", low_only=True)] == ["b", "c"]
    with pytest.raises(ValueError):
        catalog.sorted_products("color")


def test_stock_value_and_remove():
    catalog = _catalog()
    assert catalog.stock_value() == Decimal("174")

    catalog.remove("a")
    assert catalog.get("a") is None
