"""
Test Suite Configuration
"""
from datetime import date
from decimal import Decimal

import pytest

from sales_engine.config import Settings
from sales_engine.models import Customer, Product, Sale


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def q1_sales_rows() -> list:
    """First quarter export: US dates, numeric cells, "Order ID" headers"""
    return [
        {
            "Order ID": "ORD-1",
            "Order Date": "01/15/2023",
            "Customer ID": "C1",
            "SKU": "SKU-1",
            "Qty": 2,
            "Unit Price": 10.5,
            "Currency": "pln",
            "Country": "polska",
            "City": " warszawa ",
            "Sales Rep": "anna kowalska",
            "Channel": "online",
        },
        {
            "Order ID": "ORD-2",
            "Order Date": "02/03/2023",
            "Customer ID": "C2",
            "SKU": "SKU-2",
            "Qty": 1,
            "Unit Price": 99.99,
            "Currency": "PLN",
            "Country": "DE",
            "City": "Berlin",
            "Sales Rep": "Zofia Nowak",
            "Channel": "retail",
        },
        {
            "Order ID": None,
            "Order Date": "",
            "Customer ID": "  ",
            "SKU": None,
            "Qty": None,
            "Unit Price": None,
            "Currency": None,
            "Country": None,
            "City": None,
            "Sales Rep": None,
            "Channel": None,
        },
    ]


@pytest.fixture
def q2_sales_rows() -> list:
    """Second quarter export: serial dates, comma decimals, "Order #" headers"""
    return [
        {
            "Order #": " ORD-1 ",
            "Date": 45031,
            "Client_ID": "C1",
            "Product SKU": "SKU-1",
            "Quantity": "5",
            "Price": "11,00 zł",
            "Country": "Poland",
        },
        {
            "Order #": "ORD-3",
            "Date": "2023-04-20",
            "Client_ID": "C3",
            "Product SKU": "SKU-404",
            "Quantity": "3",
            "Price": "19,99",
            "Country": "czechy",
        },
    ]


@pytest.fixture
def product_rows() -> list:
    """Product catalog rows"""
    return [
        {
            "SKU": "SKU-1",
            "Product Name": "  sok   jabłkowy ",
            "Unit Cost": "4,00",
            "Category": "BEVERAGES",
            "Active": "Y",
            "Package Size": "6x330ml",
            "EAN": 5901234123457.0,
        },
        {
            "SKU": "SKU-2",
            "Product Name": "Orzechy laskowe",
            "Unit Cost": 40,
            "Category": "snacks",
            "Active": 0,
            "Package Size": "500g",
            "EAN": "4006381333931",
        },
    ]


@pytest.fixture
def customer_rows() -> list:
    """Customer master rows, C1 registered twice"""
    return [
        {"Customer ID": "C1", "Name": "łukasz wiśniewski", "E-mail": "Lukasz@Example.PL", "Country": "PL", "Join Date": "2022-01-10"},
        {"Customer ID": "C2", "Name": "Jürgen Groß", "E-mail": "jurgen@example.de", "Country": "Niemcy", "Join Date": "5 stycznia 2022"},
        {"Customer ID": "C1", "Name": "Łukasz Wiśniewski", "E-mail": "lukasz.w@example.pl", "Country": "Polska", "Join Date": "2023-03-01", "Segment": "vip"},
        {"Customer ID": "C3", "Name": "Jana Nováková", "Country": "cz", "Join Date": None},
    ]


@pytest.fixture
def sample_sales() -> list:
    """Canonical sales records"""
    return [
        Sale("ORD-1", date(2023, 1, 15), "C1", "SKU-1", 2, Decimal("10.50")),
        Sale("ORD-2", date(2023, 2, 3), "C2", "SKU-404", 1, Decimal("99.99")),
        Sale("ORD-3", date(2023, 3, 9), "C9", "SKU-1", 3, Decimal("19.99")),
    ]


@pytest.fixture
def sample_products() -> list:
    """Canonical product records"""
    return [
        Product("SKU-1", "Sok Jabłkowy", Decimal("4.00"), category="Beverages"),
        Product("SKU-2", "Orzechy Laskowe", Decimal("40"), category="Snacks"),
    ]


@pytest.fixture
def sample_customers() -> list:
    """Canonical customer records"""
    return [
        Customer("C1", "Łukasz Wiśniewski", ascii_name="Lukasz Wisniewski", country="Poland", segment="Vip"),
        Customer("C2", "Jürgen Groß", ascii_name="Jurgen Gross", country="Germany"),
    ]
