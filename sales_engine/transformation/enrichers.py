"""
Integration Module

Denormalizes the sales fact table against its dimensions.
Includes:
- Derived sale amounts (quantity × unit price)
- Product and customer lookups (left outer joins)
- Margin and calendar attributes

Joins never drop sales. A sale whose product or customer is unknown keeps
null enrichment columns, which the orphan checks of the validator report.
"""

from dataclasses import replace
from typing import Iterable, Sequence, Tuple

import polars as pl
import structlog

from sales_engine.models import Customer, Product, Sale, to_frame

logger = structlog.get_logger(__name__)


_ROW_INDEX = "_row_nr"

PRODUCT_COLUMNS = {
    "name": "product_name",
    "category": "category",
    "subcategory": "subcategory",
    "unit_cost": "unit_cost",
    "supplier": "supplier",
    "package_size": "package_size",
}

CUSTOMER_COLUMNS = {
    "name": "customer_name",
    "segment": "customer_segment",
    "country": "customer_country",
    "city": "customer_city",
}


def with_sales_amount(sales: Iterable[Sale]) -> Tuple[Sale, ...]:
    """Fill sales_amount = quantity × unit_price on every sale (exact Decimal)."""
    return tuple(
        replace(sale, sales_amount=sale.unit_price * sale.quantity)
        for sale in sales
    )


class DataEnricher:
    """
    Builds the denormalized sales fact table.

    Dimension inputs must already be deduplicated; a dimension key appearing
    twice would duplicate the matching sales.

    Example:
        enricher = DataEnricher()
        fact = enricher.build_fact_sales(sales, products, customers)
    """

    def _dimension_frame(
        self,
        records: Sequence,
        record_type: type,
        key: str,
        columns: dict,
    ) -> pl.DataFrame:
        """Dimension table reduced to its key and renamed lookup columns"""
        frame = to_frame(records, record_type)
        return frame.select(
            [pl.col(key)] + [pl.col(source).alias(target) for source, target in columns.items()]
        )

    def join_products(self, sales_df: pl.DataFrame, products: Sequence[Product]) -> pl.DataFrame:
        """Left join product attributes on product_sku"""
        dim = self._dimension_frame(products, Product, "product_sku", PRODUCT_COLUMNS)
        return sales_df.join(dim, on="product_sku", how="left")

    def join_customers(self, sales_df: pl.DataFrame, customers: Sequence[Customer]) -> pl.DataFrame:
        """Left join customer attributes on customer_id"""
        dim = self._dimension_frame(customers, Customer, "customer_id", CUSTOMER_COLUMNS)
        return sales_df.join(dim, on="customer_id", how="left")

    def add_derived_columns(self, df: pl.DataFrame) -> pl.DataFrame:
        """Add margin and calendar attributes"""
        return df.with_columns([
            (pl.col("sales_amount") - pl.col("quantity") * pl.col("unit_cost"))
            .alias("gross_margin"),
            pl.col("order_date").dt.year().alias("order_year"),
            pl.col("order_date").dt.month().alias("order_month"),
            pl.col("order_date").dt.strftime("%Y%m%d").cast(pl.Int32).alias("order_date_key"),
        ])

    def build_fact_sales(
        self,
        sales: Iterable[Sale],
        products: Sequence[Product],
        customers: Sequence[Customer],
    ) -> pl.DataFrame:
        """
        Denormalize sales against products and customers.

        Args:
            sales: Deduplicated sales
            products: Deduplicated products
            customers: Deduplicated customers

        Returns:
            One row per sale, in input order, with enrichment columns
        """
        sales = with_sales_amount(sales)
        df = to_frame(sales, Sale).with_row_index(_ROW_INDEX)

        df = self.join_products(df, products)
        df = self.join_customers(df, customers)
        df = self.add_derived_columns(df)
        df = df.sort(_ROW_INDEX).drop(_ROW_INDEX)

        unmatched_products = df.filter(
            pl.col("product_sku").is_not_null() & pl.col("product_name").is_null()
        ).height
        unmatched_customers = df.filter(
            pl.col("customer_id").is_not_null() & pl.col("customer_name").is_null()
        ).height

        logger.info(
            "Fact table built",
            rows=df.height,
            unmatched_products=unmatched_products,
            unmatched_customers=unmatched_customers,
        )

        return df


def build_fact_sales(
    sales: Iterable[Sale],
    products: Sequence[Product],
    customers: Sequence[Customer],
) -> pl.DataFrame:
    """
    Convenience function to build the denormalized fact table.

    Args:
        sales: Deduplicated sales
        products: Deduplicated products
        customers: Deduplicated customers

    Returns:
        Denormalized fact DataFrame
    """
    return DataEnricher().build_fact_sales(sales, products, customers)
