"""Pydantic schemas for JSON coming from outside the app.

Backup files and the stored settings row use camelCase keys. Each schema
validates one record and converts it to the dataclass from ``kiosk.models``.
Null and empty-string values count as missing, so the field default applies.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from kiosk.constant import DEFAULT_MIN_STOCK, DEFAULT_SETTINGS
from kiosk.models import (
    AppSettings,
    EntryType,
    Expense,
    ExpenseCategory,
    FeeConfig,
    ItemStatus,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    ProductCategory,
)
from kiosk.utils import parse_iso, to_decimal

_DEFAULT_FEES: dict[str, Any] = DEFAULT_SETTINGS["fees"]  # type: ignore[assignment]


def _money(value: Any) -> Decimal:
    return to_decimal(value)


# Accepts numbers and "12,50"-style strings.
Money = Annotated[Decimal, BeforeValidator(_money)]


class CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_empty(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None and v != ""}
        return data


class ProductSchema(CamelSchema):
    id: str
    name: str = Field(..., min_length=1)
    price: Money = Field(Decimal("0"), ge=0)
    category: ProductCategory = ProductCategory.OTHER
    stock: int = Field(0, ge=0)
    # Missing means the default; an explicit 0 is kept, same as the products table.
    min_stock: int = Field(DEFAULT_MIN_STOCK, ge=0)
    unit: str | None = None
    barcode: str | None = None

    def to_model(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            price=self.price,
            category=self.category,
            stock=self.stock,
            min_stock=self.min_stock,
            unit=self.unit,
            barcode=self.barcode,
        )


class OrderItemSchema(CamelSchema):
    id: str
    name: str
    price: Money = Field(Decimal("0"), ge=0)
    quantity: int = Field(1, ge=1)
    product_id: str | None = None
    status: ItemStatus = ItemStatus.PENDING
    is_courtesy: bool = False

    def to_model(self) -> OrderItem:
        return OrderItem(
            id=self.id,
            name=self.name,
            price=self.price,
            quantity=self.quantity,
            product_id=self.product_id,
            status=self.status,
            is_courtesy=self.is_courtesy,
        )


class OrderSchema(CamelSchema):
    id: str
    table_or_name: str = ""
    opened_at: str
    items: list[OrderItemSchema] = []
    status: OrderStatus = OrderStatus.OPEN
    closed_at: str | None = None
    total: Money = Field(Decimal("0"), ge=0)
    discount: Money | None = None
    service_fee: bool = False
    payment_method: PaymentMethod | None = None

    @field_validator("opened_at", "closed_at")
    @classmethod
    def iso_timestamp(cls, value: str | None) -> str | None:
        if value is not None:
            parse_iso(value)
        return value

    def to_model(self) -> Order:
        return Order(
            id=self.id,
            table_or_name=self.table_or_name,
            opened_at=self.opened_at,
            items=[item.to_model() for item in self.items],
            status=self.status,
            closed_at=self.closed_at,
            total=self.total,
            discount=self.discount,
            service_fee=self.service_fee,
            payment_method=self.payment_method,
        )


class ExpenseSchema(CamelSchema):
    id: str
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    category: ExpenseCategory
    description: str = ""
    amount: Money = Field(..., ge=0)
    type: EntryType = EntryType.EXPENSE
    payment_method: PaymentMethod | None = None

    @field_validator("date")
    @classmethod
    def calendar_date(cls, value: str) -> str:
        # 2024-02-30 matches the pattern but is not a day.
        return date.fromisoformat(value).isoformat()

    def to_model(self) -> Expense:
        return Expense(
            id=self.id,
            date=self.date,
            category=self.category,
            description=self.description,
            amount=self.amount,
            type=self.type,
            payment_method=self.payment_method,
        )


class FeeConfigSchema(CamelSchema):
    credit: Money = Field(to_decimal(_DEFAULT_FEES["credit"]), ge=0)
    debit: Money = Field(to_decimal(_DEFAULT_FEES["debit"]), ge=0)
    pix: Money = Field(to_decimal(_DEFAULT_FEES["pix"]), ge=0)

    def to_model(self) -> FeeConfig:
        return FeeConfig(credit=self.credit, debit=self.debit, pix=self.pix)


class SettingsSchema(CamelSchema):
    kiosk_name: str = str(DEFAULT_SETTINGS["kioskName"])
    owner_name: str = ""
    contact_phone: str = ""
    logo_url: str | None = None
    monthly_goal: Money = Field(to_decimal(DEFAULT_SETTINGS["monthlyGoal"]), ge=0)
    fees: FeeConfigSchema = FeeConfigSchema()
    security_pin: str | None = Field(None, pattern=r"^\d{4}$")
    products: list[ProductSchema] = []

    def to_model(self) -> AppSettings:
        return AppSettings(
            kiosk_name=self.kiosk_name,
            owner_name=self.owner_name,
            contact_phone=self.contact_phone,
            logo_url=self.logo_url,
            monthly_goal=self.monthly_goal,
            fees=self.fees.to_model(),
            security_pin=self.security_pin,
            products=[product.to_model() for product in self.products],
        )


class BackupSchema(BaseModel):
    settings: SettingsSchema
    expenses: list[ExpenseSchema]
    orders: list[OrderSchema] | None = None

    @field_validator("settings", mode="before")
    @classmethod
    def settings_present(cls, value: Any) -> Any:
        if not value:
            raise ValueError("settings is empty")
        return value
