"""
Unit Tests - Deduplication
"""
from datetime import date
from decimal import Decimal

import pytest

from sales_engine.config.settings import DedupSettings, Settings
from sales_engine.models import Customer, Fee, Sale
from sales_engine.transformation.deduplication import (
    DedupPolicy,
    DedupStrategy,
    Deduplicator,
    default_dedup_policies,
)


def _sale(order_id: str, quantity: int, order_date: date = date(2023, 1, 1)) -> Sale:
    return Sale(order_id, order_date, "C1", "SKU-1", quantity, Decimal("1"))


def _customer(customer_id: str, name: str, join_date=None) -> Customer:
    return Customer(customer_id, name, join_date=join_date)


class TestDefaultPolicies:
    """Tests for default_dedup_policies"""

    def test_defaults(self, test_settings):
        """Test customers keep the latest record, everything else the first"""
        policies = default_dedup_policies(test_settings)

        assert policies["customers"] == DedupPolicy(("customer_id",), DedupStrategy.KEEP_LATEST, "join_date")
        assert policies["sales"].strategy == DedupStrategy.KEEP_FIRST
        assert policies["products"].strategy == DedupStrategy.KEEP_FIRST
        assert policies["fees"].key == ("channel", "country")

    def test_customer_strategy_from_settings(self):
        """Test the customer strategy is configurable"""
        settings = Settings(dedup=DedupSettings(customer_strategy="keep_first"))

        policies = default_dedup_policies(settings)

        assert policies["customers"].strategy == DedupStrategy.KEEP_FIRST
        assert policies["customers"].order_by is None

    def test_keep_latest_requires_order_by(self):
        """Test keep_latest without a date field is rejected"""
        with pytest.raises(ValueError):
            DedupPolicy(("customer_id",), DedupStrategy.KEEP_LATEST)


class TestDeduplicator:
    """Tests for Deduplicator"""

    def test_keep_first(self, test_settings):
        """Test the first sale per order id wins"""
        dedup = Deduplicator(default_dedup_policies(test_settings))

        result = dedup.deduplicate([_sale("A", 1), _sale("B", 2), _sale("A", 9)], "sales")

        assert [(s.order_id, s.quantity) for s in result.records] == [("A", 1), ("B", 2)]
        assert result.input_rows == 3
        assert result.duplicates_removed == 1

    def test_keep_latest(self, test_settings):
        """Test the customer with the latest join date wins in first-appearance position"""
        dedup = Deduplicator(default_dedup_policies(test_settings))
        records = [
            _customer("C1", "Old", date(2022, 1, 1)),
            _customer("C2", "Other", date(2022, 6, 1)),
            _customer("C1", "New", date(2023, 3, 1)),
        ]

        result = dedup.deduplicate(records, "customers")

        assert [(c.customer_id, c.name) for c in result.records] == [("C1", "New"), ("C2", "Other")]

    def test_keep_latest_missing_date_loses(self, test_settings):
        """Test a record without a date never beats a dated one"""
        dedup = Deduplicator(default_dedup_policies(test_settings))

        undated_last = dedup.deduplicate(
            [_customer("C1", "Dated", date(2022, 1, 1)), _customer("C1", "Undated")], "customers"
        )
        undated_first = dedup.deduplicate(
            [_customer("C1", "Undated"), _customer("C1", "Dated", date(2022, 1, 1))], "customers"
        )

        assert undated_last.records[0].name == "Dated"
        assert undated_first.records[0].name == "Dated"

    def test_keep_latest_tie_keeps_earlier(self, test_settings):
        """Test equal dates keep the earlier record"""
        dedup = Deduplicator(default_dedup_policies(test_settings))
        same_day = date(2022, 1, 1)

        result = dedup.deduplicate(
            [_customer("C1", "First", same_day), _customer("C1", "Second", same_day)], "customers"
        )

        assert result.records[0].name == "First"

    def test_composite_key(self, test_settings):
        """Test fees are unique per channel and country"""
        dedup = Deduplicator(default_dedup_policies(test_settings))
        fees = [
            Fee("Online", "Poland", Decimal("0.1")),
            Fee("Online", "Germany", Decimal("0.2")),
            Fee("Online", "Poland", Decimal("0.3")),
        ]

        result = dedup.deduplicate(fees, "fees")

        assert [f.fee_rate for f in result.records] == [Decimal("0.1"), Decimal("0.2")]

    def test_explicit_policy(self, test_settings):
        """Test a policy passed to deduplicate overrides the configured one"""
        dedup = Deduplicator(default_dedup_policies(test_settings))
        policy = DedupPolicy(("order_id",), DedupStrategy.KEEP_LATEST, "order_date")

        result = dedup.deduplicate(
            [_sale("A", 1, date(2023, 1, 1)), _sale("A", 2, date(2023, 4, 1))], "sales", policy=policy
        )

        assert result.records[0].quantity == 2

    def test_idempotent(self, test_settings):
        """Test deduplicating survivors again removes nothing"""
        dedup = Deduplicator(default_dedup_policies(test_settings))
        once = dedup.deduplicate([_sale("A", 1), _sale("A", 2), _sale("B", 3)], "sales")

        twice = dedup.deduplicate(once.records, "sales")

        assert twice.records == once.records
        assert twice.duplicates_removed == 0

    def test_unknown_entity(self, test_settings):
        """Test entities without a policy raise"""
        dedup = Deduplicator(default_dedup_policies(test_settings))

        with pytest.raises(KeyError):
            dedup.deduplicate([], "invoices")
