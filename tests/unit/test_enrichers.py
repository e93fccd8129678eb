"""
Unit Tests - Integration
"""
from datetime import date
from decimal import Decimal

import polars as pl
import pytest

from sales_engine.models import Sale, to_frame
from sales_engine.transformation.enrichers import DataEnricher, build_fact_sales, with_sales_amount


class TestSalesAmount:
    """Tests for with_sales_amount"""

    def test_exact_decimal_product(self):
        """Test amount is quantity times unit price without float error"""
        sale = Sale("A", date(2023, 1, 1), "C1", "SKU-1", 3, Decimal("19.99"))

        (result,) = with_sales_amount([sale])

        assert result.sales_amount == Decimal("59.97")
        assert sale.sales_amount is None


class TestDataEnricher:
    """Tests for DataEnricher"""

    def test_one_row_per_sale(self, sample_sales, sample_products, sample_customers):
        """Test joins neither drop nor duplicate sales"""
        fact = build_fact_sales(sample_sales, sample_products, sample_customers)

        assert fact.height == len(sample_sales)
        assert fact["order_id"].to_list() == ["ORD-1", "ORD-2", "ORD-3"]

    def test_product_and_customer_columns(self, sample_sales, sample_products, sample_customers):
        """Test dimension attributes are attached under their fact names"""
        fact = build_fact_sales(sample_sales, sample_products, sample_customers)
        first = fact.row(0, named=True)

        assert first["product_name"] == "Sok Jabłkowy"
        assert first["category"] == "Beverages"
        assert first["customer_name"] == "Łukasz Wiśniewski"
        assert first["customer_segment"] == "Vip"
        assert first["customer_country"] == "Poland"

    def test_orphan_product_keeps_null_columns(self, sample_sales, sample_products, sample_customers):
        """Test a sale with an unknown SKU survives with null product columns"""
        fact = build_fact_sales(sample_sales, sample_products, sample_customers)
        orphan = fact.filter(pl.col("order_id") == "ORD-2").row(0, named=True)

        assert orphan["product_sku"] == "SKU-404"
        assert orphan["product_name"] is None
        assert orphan["unit_cost"] is None
        assert orphan["gross_margin"] is None
        assert orphan["customer_name"] == "Jürgen Groß"

    def test_orphan_customer_keeps_null_columns(self, sample_sales, sample_products, sample_customers):
        """Test a sale with an unknown customer survives with null customer columns"""
        fact = build_fact_sales(sample_sales, sample_products, sample_customers)
        orphan = fact.filter(pl.col("order_id") == "ORD-3").row(0, named=True)

        assert orphan["customer_name"] is None
        assert orphan["product_name"] == "Sok Jabłkowy"

    def test_derived_columns(self, sample_sales, sample_products, sample_customers):
        """Test amount, margin and calendar attributes"""
        fact = build_fact_sales(sample_sales, sample_products, sample_customers)
        first = fact.row(0, named=True)

        assert first["sales_amount"] == pytest.approx(21.0)
        assert first["gross_margin"] == pytest.approx(13.0)
        assert first["order_year"] == 2023
        assert first["order_month"] == 1
        assert first["order_date_key"] == 20230115

    def test_empty_sales(self, sample_products, sample_customers):
        """Test an empty sales input yields an empty fact table"""
        fact = DataEnricher().build_fact_sales([], sample_products, sample_customers)

        assert fact.height == 0
        assert "product_name" in fact.columns


class TestToFrame:
    """Tests for to_frame"""

    def test_money_as_float(self, sample_sales):
        """Test Decimal money columns become Float64"""
        df = to_frame(sample_sales, Sale)

        assert df.schema["unit_price"] == pl.Float64
        assert df.schema["order_date"] == pl.Date
        assert df["unit_price"].to_list() == [10.5, 99.99, 19.99]
