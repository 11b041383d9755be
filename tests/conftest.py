from decimal import Decimal

import pytest

from kiosk.catalog import ProductCatalog
from kiosk.ledger import ExpenseLedger
from kiosk.models import Product, ProductCategory
from kiosk.order_store import OrderStore
from kiosk.state import KioskState


@pytest.fixture
def beer() -> Product:
    return Product(
        id="p-beer",
        name="Beer",
        price=Decimal("10"),
        category=ProductCategory.DRINK,
        stock=20,
        min_stock=5,
        barcode="7891000100103",
    )


@pytest.fixture
def water() -> Product:
    """Not registered in the catalog; sold as a loose item."""
    return Product(id="p-water", name="Water", price=Decimal("5"), category=ProductCategory.DRINK, stock=0)


@pytest.fixture
def catalog(beer: Product) -> ProductCatalog:
    return ProductCatalog([beer])


@pytest.fixture
def orders() -> OrderStore:
    return OrderStore()


@pytest.fixture
def ledger() -> ExpenseLedger:
    return ExpenseLedger()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "kiosk.db"


@pytest.fixture
def state(db_path) -> KioskState:
    """A state bound to a fresh SQLite file."""
    return KioskState.load(db_path)
