"""Domain models for the kiosk ledger.

Every model serializes to the camelCase dict layout used by backup files,
and ``kiosk.schemas`` validates that layout on the way back in.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any

from kiosk.constant import DEFAULT_MIN_STOCK, DEFAULT_SETTINGS


class ExpenseCategory(str, Enum):
    EMPLOYEE_PAYMENT = "Pagamento de Funcionário"
    STOCK_REPLENISHMENT = "Reposição de Estoque"
    VEHICLE_FUEL = "Combustível do Veículo"
    WATER_BILL = "Conta de Água"
    ELECTRICITY_BILL = "Conta de Energia"
    GAS_BILL = "Conta de Gás"
    CASH_IN = "Entrada de Dinheiro"
    CASH_OUT = "Saída de Dinheiro (Outros)"

    @property
    def is_income(self) -> bool:
        return self is ExpenseCategory.CASH_IN


class PaymentMethod(str, Enum):
    MONEY = "Dinheiro"
    PIX = "Pix"
    CREDIT_CARD = "Cartão de Crédito"
    DEBIT_CARD = "Cartão de Débito"


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class ProductCategory(str, Enum):
    FOOD = "food"
    DRINK = "drink"
    OTHER = "other"


class ItemStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"


class OrderStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


def _money_out(value: Decimal) -> float | int:
    return int(value) if value == value.to_integral_value() else float(value)


@dataclass
class Product:
    """A catalog entry with its stock counter."""

    id: str
    name: str
    price: Decimal
    category: ProductCategory = ProductCategory.OTHER
    stock: int = 0
    min_stock: int = DEFAULT_MIN_STOCK
    unit: str | None = None
    barcode: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": _money_out(self.price),
            "category": self.category.value,
            "stock": self.stock,
            "minStock": self.min_stock,
        }
        if self.unit:
            data["unit"] = self.unit
        if self.barcode:
            data["barcode"] = self.barcode
        return data

@dataclass
class OrderItem:
    """A bill row. ``name`` and ``price`` are snapshots taken when the row was added."""

    id: str
    name: str
    price: Decimal
    quantity: int = 1
    product_id: str | None = None
    status: ItemStatus = ItemStatus.PENDING
    is_courtesy: bool = False

    @property
    def line_total(self) -> Decimal:
        if self.is_courtesy:
            return Decimal("0")
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "price": _money_out(self.price),
            "status": self.status.value,
            "isCourtesy": self.is_courtesy,
        }
        if self.product_id:
            data["productId"] = self.product_id
        return data

@dataclass
class Order:
    """A tab (comanda). ``total`` is stored redundantly when saved or closed."""

    id: str
    table_or_name: str
    opened_at: str
    items: list[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.OPEN
    closed_at: str | None = None
    total: Decimal = Decimal("0")
    discount: Decimal | None = None
    service_fee: bool = False
    payment_method: PaymentMethod | None = None

    def copy(self) -> Order:
        return replace(self, items=[replace(item) for item in self.items])

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "tableOrName": self.table_or_name,
            "items": [item.to_dict() for item in self.items],
            "status": self.status.value,
            "openedAt": self.opened_at,
            "total": _money_out(self.total),
            "serviceFee": self.service_fee,
        }
        if self.closed_at:
            data["closedAt"] = self.closed_at
        if self.discount is not None:
            data["discount"] = _money_out(self.discount)
        if self.payment_method is not None:
            data["paymentMethod"] = self.payment_method.value
        return data

@dataclass
class Expense:
    """A ledger entry. ``amount`` is always positive; ``type`` decides the direction."""

    id: str
    date: str
    category: ExpenseCategory
    description: str
    amount: Decimal
    type: EntryType
    payment_method: PaymentMethod | None = None

    @property
    def year(self) -> int:
        return int(self.date.split("-")[0])

    @property
    def month(self) -> int:
        return int(self.date.split("-")[1])

    @property
    def day(self) -> int:
        return int(self.date.split("-")[2])

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "date": self.date,
            "category": self.category.value,
            "description": self.description,
            "amount": _money_out(self.amount),
            "type": self.type.value,
        }
        if self.payment_method is not None:
            data["paymentMethod"] = self.payment_method.value
        return data

@dataclass
class FeeConfig:
    """Card/PIX fee percentages applied to income for the estimated-fees figure."""

    credit: Decimal = Decimal("3.5")
    debit: Decimal = Decimal("1.5")
    pix: Decimal = Decimal("0")

    def percent_for(self, method: PaymentMethod | None) -> Decimal:
        if method is PaymentMethod.CREDIT_CARD:
            return self.credit
        if method is PaymentMethod.DEBIT_CARD:
            return self.debit
        if method is PaymentMethod.PIX:
            return self.pix
        return Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        return {"credit": _money_out(self.credit), "debit": _money_out(self.debit), "pix": _money_out(self.pix)}

@dataclass
class AppSettings:
    """Kiosk configuration and the owner of the product list."""

    kiosk_name: str = str(DEFAULT_SETTINGS["kioskName"])
    owner_name: str = ""
    contact_phone: str = ""
    logo_url: str | None = None
    monthly_goal: Decimal = Decimal("10000")
    fees: FeeConfig = field(default_factory=FeeConfig)
    security_pin: str | None = None
    products: list[Product] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kioskName": self.kiosk_name,
            "ownerName": self.owner_name,
            "contactPhone": self.contact_phone,
            "logoUrl": self.logo_url,
            "monthlyGoal": _money_out(self.monthly_goal),
            "fees": self.fees.to_dict(),
            "securityPin": self.security_pin,
            "products": [product.to_dict() for product in self.products],
        }
