"""
Source Schemas

Column mappings for every source table. Column candidates are matched
case-insensitively after row cleaning, so "Order #", "order_no" and
"ORDER_NO" all resolve to the same field. The quarterly sales exports use
different headers per period; SALES_SCHEMA lists the headers of both.

Only supplier and VAT number are nullable; an unreadable value anywhere
else excludes the row.
"""

from typing import Dict

from sales_engine.exceptions import UnknownSourceError
from sales_engine.models import Customer, Fee, Product, Return, Sale, Shipping, Target
from sales_engine.parsing import (
    normalize_country,
    normalize_text,
    parse_code,
    parse_currency,
    parse_date,
    parse_ean,
    parse_email,
    parse_identifier,
    parse_integer,
    parse_logical,
    parse_month,
    parse_number,
    parse_package_size,
    parse_phone,
    parse_rate,
    strip_diacritics,
)
from .transformers import DerivedField, FieldSpec, SourceSchema


SALES_SCHEMA = SourceSchema(
    name="sales",
    record_type=Sale,
    fields=(
        FieldSpec("order_id", ("order_id", "orderid", "order #", "order_number", "nr_zamowienia"), parse_identifier, required=True),
        FieldSpec("order_date", ("order_date", "orderdate", "date", "data_zamowienia"), parse_date, required=True),
        FieldSpec("customer_id", ("customer_id", "customerid", "client_id", "id_klienta"), parse_identifier, required=True),
        FieldSpec("product_sku", ("product_sku", "sku", "product_id", "productsku"), parse_identifier, required=True),
        FieldSpec("quantity", ("quantity", "qty", "units", "ilosc"), parse_integer, required=True),
        FieldSpec("unit_price", ("unit_price", "unitprice", "price", "cena"), parse_number, required=True),
        FieldSpec("currency", ("currency", "curr", "waluta"), parse_currency),
        FieldSpec("order_country", ("order_country", "country", "kraj"), normalize_country),
        FieldSpec("order_city", ("order_city", "city", "miasto"), normalize_text),
        FieldSpec("salesperson", ("salesperson", "sales_rep", "seller", "handlowiec"), normalize_text),
        FieldSpec("channel", ("channel", "sales_channel", "kanal"), normalize_text),
    ),
)


PRODUCTS_SCHEMA = SourceSchema(
    name="products",
    record_type=Product,
    fields=(
        FieldSpec("product_sku", ("product_sku", "sku", "product_id"), parse_identifier, required=True),
        FieldSpec("name", ("name", "product_name", "nazwa"), normalize_text, required=True),
        FieldSpec("unit_cost", ("unit_cost", "cost", "cost_price", "koszt"), parse_number, required=True),
        FieldSpec("category", ("category", "kategoria"), normalize_text),
        FieldSpec("subcategory", ("subcategory", "sub_category", "podkategoria"), normalize_text),
        FieldSpec("active", ("active", "is_active", "aktywny"), parse_logical),
        FieldSpec("supplier", ("supplier", "vendor", "dostawca"), normalize_text, nullable=True),
        FieldSpec("package_size", ("package_size", "pack_size", "package", "opakowanie"), parse_package_size),
        FieldSpec("ean", ("ean", "ean13", "barcode"), parse_ean),
    ),
)


CUSTOMERS_SCHEMA = SourceSchema(
    name="customers",
    record_type=Customer,
    fields=(
        FieldSpec("customer_id", ("customer_id", "customerid", "client_id", "id_klienta"), parse_identifier, required=True),
        FieldSpec("name", ("name", "customer_name", "full_name", "nazwa"), normalize_text, required=True),
        FieldSpec("email", ("email", "e-mail", "mail"), parse_email),
        FieldSpec("phone", ("phone", "phone_number", "telefon"), parse_phone),
        FieldSpec("country", ("country", "kraj"), normalize_country),
        FieldSpec("city", ("city", "miasto"), normalize_text),
        FieldSpec("segment", ("segment", "customer_segment"), normalize_text),
        FieldSpec("join_date", ("join_date", "joined", "registration_date", "data_rejestracji"), parse_date),
        FieldSpec("vat", ("vat", "vat_id", "nip"), parse_code, nullable=True),
    ),
    derived=(
        DerivedField("ascii_name", lambda values: strip_diacritics(values["name"])),
    ),
)


RETURNS_SCHEMA = SourceSchema(
    name="returns",
    record_type=Return,
    fields=(
        FieldSpec("return_id", ("return_id", "returnid", "return #", "rma"), parse_identifier, required=True),
        FieldSpec("order_id", ("order_id", "orderid", "order #", "order_number"), parse_identifier, required=True),
        FieldSpec("return_date", ("return_date", "date", "data_zwrotu"), parse_date),
        FieldSpec("product_sku", ("product_sku", "sku"), parse_identifier),
        FieldSpec("quantity", ("quantity", "qty"), parse_integer),
        FieldSpec("refund_amount", ("refund_amount", "refund", "amount"), parse_number),
        FieldSpec("reason", ("reason", "return_reason", "powod"), normalize_text),
    ),
)


FEES_SCHEMA = SourceSchema(
    name="fees",
    record_type=Fee,
    fields=(
        FieldSpec("channel", ("channel", "sales_channel", "kanal"), normalize_text, required=True),
        FieldSpec("country", ("country", "kraj"), normalize_country, required=True),
        FieldSpec("fee_rate", ("fee_rate", "fee_pct", "commission", "prowizja"), parse_rate),
        FieldSpec("fixed_fee", ("fixed_fee", "flat_fee", "oplata_stala"), parse_number),
    ),
)


SHIPPING_SCHEMA = SourceSchema(
    name="shipping",
    record_type=Shipping,
    fields=(
        FieldSpec("order_id", ("order_id", "orderid", "order #", "order_number"), parse_identifier, required=True),
        FieldSpec("carrier", ("carrier", "courier", "przewoznik"), normalize_text),
        FieldSpec("ship_date", ("ship_date", "shipped", "data_wysylki"), parse_date),
        FieldSpec("delivery_date", ("delivery_date", "delivered", "data_dostawy"), parse_date),
        FieldSpec("shipping_cost", ("shipping_cost", "cost", "koszt_wysylki"), parse_number),
    ),
)


TARGETS_SCHEMA = SourceSchema(
    name="targets",
    record_type=Target,
    fields=(
        FieldSpec("salesperson", ("salesperson", "sales_rep", "seller", "handlowiec"), normalize_text, required=True),
        FieldSpec("month", ("month", "period", "miesiac"), parse_month, required=True),
        FieldSpec("target_amount", ("target_amount", "target", "cel"), parse_number),
    ),
)


SOURCE_SCHEMAS: Dict[str, SourceSchema] = {
    schema.name: schema
    for schema in (
        SALES_SCHEMA,
        PRODUCTS_SCHEMA,
        CUSTOMERS_SCHEMA,
        RETURNS_SCHEMA,
        FEES_SCHEMA,
        SHIPPING_SCHEMA,
        TARGETS_SCHEMA,
    )
}


def get_source_schema(name: str) -> SourceSchema:
    """
    Look up a built-in source schema by name.

    Raises:
        UnknownSourceError: no schema is registered under this name
    """
    try:
        return SOURCE_SCHEMAS[name]
    except KeyError:
        raise UnknownSourceError(name) from None
