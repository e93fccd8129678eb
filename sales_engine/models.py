"""
Canonical Models - Star Schema Design

Typed records produced by the per-source transformers. The schema consists of:

Fact Tables:
- Sale: order lines merged from every sales period

Dimension Tables:
- Product: product catalog
- Customer: customer master data

Supporting Tables:
- Return: returned order lines (references Sale, Product)
- Fee: channel fees per country (grouped by channel + country)
- Shipping: shipment per order (references Sale)
- Target: monthly sales targets (grouped by salesperson + month)

Records are immutable. Money stays Decimal on the records and becomes
Float64 when a record list is materialised as a polars table.
"""

from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple

import polars as pl


def _table_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


class CanonicalRecord:
    """Mixin for canonical entity dataclasses"""

    entity: ClassVar[str]
    natural_key: ClassVar[Tuple[str, ...]]
    polars_schema: ClassVar[Dict[str, pl.DataType]]

    def key(self) -> Tuple[Any, ...]:
        """Natural key values of this record"""
        return tuple(getattr(self, name) for name in self.natural_key)

    def to_row(self) -> Dict[str, Any]:
        """Plain dict suitable for a polars DataFrame"""
        return {f.name: _table_value(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class Sale(CanonicalRecord):
    """Order line fact"""
    order_id: str
    order_date: date
    customer_id: str
    product_sku: str
    quantity: int
    unit_price: Decimal
    currency: Optional[str] = None
    order_country: Optional[str] = None
    order_city: Optional[str] = None
    salesperson: Optional[str] = None
    channel: Optional[str] = None
    sales_amount: Optional[Decimal] = None  # quantity × unit_price, set by the integrator

    entity: ClassVar[str] = "sales"
    natural_key: ClassVar[Tuple[str, ...]] = ("order_id",)
    polars_schema: ClassVar[Dict[str, pl.DataType]] = {
        "order_id": pl.Utf8,
        "order_date": pl.Date,
        "customer_id": pl.Utf8,
        "product_sku": pl.Utf8,
        "quantity": pl.Int64,
        "unit_price": pl.Float64,
        "currency": pl.Utf8,
        "order_country": pl.Utf8,
        "order_city": pl.Utf8,
        "salesperson": pl.Utf8,
        "channel": pl.Utf8,
        "sales_amount": pl.Float64,
    }


@dataclass(frozen=True)
class Product(CanonicalRecord):
    """Product catalog dimension"""
    product_sku: str
    name: str
    unit_cost: Decimal
    category: Optional[str] = None
    subcategory: Optional[str] = None
    active: Optional[bool] = None
    supplier: Optional[str] = None
    package_size: Optional[str] = None
    ean: Optional[str] = None

    entity: ClassVar[str] = "products"
    natural_key: ClassVar[Tuple[str, ...]] = ("product_sku",)
    polars_schema: ClassVar[Dict[str, pl.DataType]] = {
        "product_sku": pl.Utf8,
        "name": pl.Utf8,
        "unit_cost": pl.Float64,
        "category": pl.Utf8,
        "subcategory": pl.Utf8,
        "active": pl.Boolean,
        "supplier": pl.Utf8,
        "package_size": pl.Utf8,
        "ean": pl.Utf8,
    }


@dataclass(frozen=True)
class Customer(CanonicalRecord):
    """Customer master dimension"""
    customer_id: str
    name: str
    ascii_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    segment: Optional[str] = None
    join_date: Optional[date] = None
    vat: Optional[str] = None

    entity: ClassVar[str] = "customers"
    natural_key: ClassVar[Tuple[str, ...]] = ("customer_id",)
    polars_schema: ClassVar[Dict[str, pl.DataType]] = {
        "customer_id": pl.Utf8,
        "name": pl.Utf8,
        "ascii_name": pl.Utf8,
        "email": pl.Utf8,
        "phone": pl.Utf8,
        "country": pl.Utf8,
        "city": pl.Utf8,
        "segment": pl.Utf8,
        "join_date": pl.Date,
        "vat": pl.Utf8,
    }


@dataclass(frozen=True)
class Return(CanonicalRecord):
    """Returned order line"""
    return_id: str
    order_id: str
    return_date: Optional[date] = None
    product_sku: Optional[str] = None
    quantity: Optional[int] = None
    refund_amount: Optional[Decimal] = None
    reason: Optional[str] = None

    entity: ClassVar[str] = "returns"
    natural_key: ClassVar[Tuple[str, ...]] = ("return_id",)
    polars_schema: ClassVar[Dict[str, pl.DataType]] = {
        "return_id": pl.Utf8,
        "order_id": pl.Utf8,
        "return_date": pl.Date,
        "product_sku": pl.Utf8,
        "quantity": pl.Int64,
        "refund_amount": pl.Float64,
        "reason": pl.Utf8,
    }


@dataclass(frozen=True)
class Fee(CanonicalRecord):
    """Sales channel fee for one country"""
    channel: str
    country: str
    fee_rate: Optional[Decimal] = None
    fixed_fee: Optional[Decimal] = None

    entity: ClassVar[str] = "fees"
    natural_key: ClassVar[Tuple[str, ...]] = ("channel", "country")
    polars_schema: ClassVar[Dict[str, pl.DataType]] = {
        "channel": pl.Utf8,
        "country": pl.Utf8,
        "fee_rate": pl.Float64,
        "fixed_fee": pl.Float64,
    }


@dataclass(frozen=True)
class Shipping(CanonicalRecord):
    """Shipment of one order"""
    order_id: str
    carrier: Optional[str] = None
    ship_date: Optional[date] = None
    delivery_date: Optional[date] = None
    shipping_cost: Optional[Decimal] = None

    entity: ClassVar[str] = "shipping"
    natural_key: ClassVar[Tuple[str, ...]] = ("order_id",)
    polars_schema: ClassVar[Dict[str, pl.DataType]] = {
        "order_id": pl.Utf8,
        "carrier": pl.Utf8,
        "ship_date": pl.Date,
        "delivery_date": pl.Date,
        "shipping_cost": pl.Float64,
    }


@dataclass(frozen=True)
class Target(CanonicalRecord):
    """Monthly sales target of one salesperson"""
    salesperson: str
    month: date
    target_amount: Optional[Decimal] = None

    entity: ClassVar[str] = "targets"
    natural_key: ClassVar[Tuple[str, ...]] = ("salesperson", "month")
    polars_schema: ClassVar[Dict[str, pl.DataType]] = {
        "salesperson": pl.Utf8,
        "month": pl.Date,
        "target_amount": pl.Float64,
    }


ENTITY_TYPES = (Sale, Product, Customer, Return, Fee, Shipping, Target)


def to_frame(records: Iterable[CanonicalRecord], record_type: type) -> pl.DataFrame:
    """Materialise records of one entity type as a polars DataFrame."""
    rows = [record.to_row() for record in records]
    return pl.DataFrame(rows, schema=record_type.polars_schema)
