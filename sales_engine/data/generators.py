"""
Sample Source Generator

Generates messy raw source rows for development and smoke tests.
Includes:
- Two quarterly sales exports with different headers and date formats
- Product catalog with composite package sizes and mixed flags
- Customer master with diacritics, duplicate IDs and mixed country spellings
- Returns, shipments, channel fees and monthly targets

The rows imitate what a spreadsheet reader hands over: text, numbers and
dates mixed freely, comma decimals, stray whitespace and blank rows.
"""

import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from faker import Faker

from sales_engine.parsing.lookups import SERIAL_EPOCH


# =============================================================================
# CONFIGURATION
# =============================================================================

CATEGORIES = [
    ("beverages", ["Juice", "Water", "Soda", "Beer"]),
    ("snacks", ["Chips", "Nuts", "Cookies"]),
    ("household", ["Cleaning", "Paper", "Laundry"]),
]

PACKAGE_SIZES = ["6x330ml", "12 X 0,5 l", "500g", "1 × 2 kg", "4x250 ml", "24x", "750ml"]
CHANNELS = ["online", "retail", "Marketplace", "wholesale"]
COUNTRY_SPELLINGS = ["PL", "polska", "Poland", "DE", "Niemcy", "Czechy", "cz", "Slovakia"]
SEGMENTS = ["retail", "b2b", "vip"]
CARRIERS = ["DPD", "InPost", "DHL", "UPS"]
RETURN_REASONS = ["damaged", "wrong item", "not needed", "late delivery"]
LOGICAL_VALUES = ["Y", "YES", "true", 1, "N", 0, "no"]
SALESPEOPLE = ["Anna Kowalska", "Łukasz Wiśniewski", "Zofia Nowak", "Piotr Zieliński"]

ORPHAN_SKU = "SKU-9999"
EAN_PREFIXES = ("590",)  # GS1 Poland, never a leading zero


def _comma_decimal(value: float) -> str:
    return f"{value:.2f}".replace(".", ",")


def _serial(day: date) -> int:
    return (day - SERIAL_EPOCH).days


# =============================================================================
# GENERATOR
# =============================================================================

class SourceDataGenerator:
    """
    Generate raw rows for every source table.

    Example:
        sources = SourceDataGenerator(seed=7).generate()
        sources["sales_q1"][0]
    """

    def __init__(self, seed: int = 42, locale: str = "pl_PL", year: int = 2023):
        self.fake = Faker(locale)
        self.fake.seed_instance(seed)
        self.random = random.Random(seed)
        self.year = year

    def _maybe(self, value: Any, probability: float = 0.1) -> Any:
        """Replace a value with a blank now and then"""
        return None if self.random.random() < probability else value

    def _padded(self, text: str) -> str:
        return self.random.choice(["", " ", "  "]) + text + self.random.choice(["", " "])

    def _ean(self) -> str:
        return self.fake.ean13(prefixes=EAN_PREFIXES)

    def _day_in_quarter(self, quarter: int) -> date:
        start = date(self.year, 3 * (quarter - 1) + 1, 1)
        return start + timedelta(days=self.random.randint(0, 88))

    def generate_products(self, n: int = 30) -> List[Dict[str, Any]]:
        """Generate n product catalog rows"""
        rows = []
        for i in range(1, n + 1):
            category, subcategories = self.random.choice(CATEGORIES)
            rows.append({
                "SKU": f"SKU-{i:04d}",
                "Product Name": self._padded(f"{self.fake.color_name()} {self.random.choice(subcategories)}"),
                "Category": category.upper() if i % 3 else category,
                "Subcategory": self.random.choice(subcategories),
                "Unit Cost": _comma_decimal(self.random.uniform(1, 40)) if i % 2 else round(self.random.uniform(1, 40), 2),
                "Active": self.random.choice(LOGICAL_VALUES),
                "Supplier": self._maybe(self.fake.company(), 0.2),
                "Package Size": self.random.choice(PACKAGE_SIZES),
                "EAN": self._ean() if i % 5 else float(self._ean()),
            })
        return rows

    def generate_customers(self, n: int = 40, duplicates: int = 3) -> List[Dict[str, Any]]:
        """Generate n customers plus re-registered duplicates with later join dates"""
        rows = []
        for i in range(1, n + 1):
            joined = date(self.year - 1, 1, 1) + timedelta(days=self.random.randint(0, 360))
            rows.append({
                "Customer ID": f"C{i:05d}",
                "Name": self._padded(self.fake.name()),
                "E-mail": self.fake.email(),
                "Phone": self.fake.phone_number(),
                "Country": self.random.choice(COUNTRY_SPELLINGS),
                "City": self.fake.city(),
                "Segment": self.random.choice(SEGMENTS),
                "Join Date": joined.strftime("%m.%d.%Y") if i % 2 else _serial(joined),
                "VAT": self._maybe(f"PL{self.fake.random_number(digits=10, fix_len=True)}", 0.5),
            })
        for row in self.random.sample(rows, min(duplicates, len(rows))):
            newer = dict(row)
            newer["Join Date"] = date(self.year, 1, 15).isoformat()
            newer["Segment"] = "vip"
            rows.append(newer)
        rows.append({key: None for key in rows[0]})
        return rows

    def _sale(self, order_id: str, quarter: int, skus: Sequence[str], customers: Sequence[str]) -> Dict[str, Any]:
        unit_price = self.random.uniform(2, 80)
        return {
            "order_id": order_id,
            "day": self._day_in_quarter(quarter),
            "customer": self.random.choice(customers),
            "sku": self.random.choice(skus),
            "quantity": self.random.randint(1, 12),
            "unit_price": unit_price,
            "country": self.random.choice(COUNTRY_SPELLINGS),
            "city": self.fake.city(),
            "salesperson": self.random.choice(SALESPEOPLE),
            "channel": self.random.choice(CHANNELS),
        }

    def generate_sales(
        self,
        quarter: int,
        n: int,
        skus: Sequence[str],
        customers: Sequence[str],
        first_order: int = 1,
        shared_order: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Generate one quarterly sales export.

        Q1 uses US dates and "Order ID" headers; later quarters use ISO or
        serial dates, comma decimals and "Order #" headers.
        """
        sales = [
            self._sale(f"ORD-{first_order + i:06d}", quarter, skus, customers)
            for i in range(n)
        ]
        if shared_order is not None:
            sales.append(shared_order)

        rows = []
        for sale in sales:
            if quarter == 1:
                rows.append({
                    "Order ID": sale["order_id"],
                    "Order Date": sale["day"].strftime("%m/%d/%Y"),
                    "Customer ID": sale["customer"],
                    "SKU": sale["sku"],
                    "Qty": sale["quantity"],
                    "Unit Price": round(sale["unit_price"], 2),
                    "Currency": "pln",
                    "Country": sale["country"],
                    "City": sale["city"],
                    "Sales Rep": sale["salesperson"],
                    "Channel": sale["channel"],
                })
            else:
                order_date = sale["day"].isoformat() if self.random.random() < 0.5 else _serial(sale["day"])
                rows.append({
                    "Order #": self._padded(sale["order_id"]),
                    "Date": order_date,
                    "Client_ID": sale["customer"],
                    "Product SKU": sale["sku"],
                    "Quantity": str(sale["quantity"]),
                    "Price": _comma_decimal(sale["unit_price"]) + " zł",
                    "Currency": "PLN",
                    "Country": sale["country"],
                    "City": sale["city"].upper(),
                    "Salesperson": sale["salesperson"],
                    "Sales Channel": sale["channel"],
                })
        return rows

    def generate_returns(self, orders: Sequence[Dict[str, Any]], share: float = 0.1) -> List[Dict[str, Any]]:
        """Generate returns for a share of the given Q1 sales rows"""
        rows = []
        for i, order in enumerate(o for o in orders if self.random.random() < share):
            rows.append({
                "Return ID": f"R{i + 1:05d}",
                "Order ID": order["Order ID"],
                "Return Date": (date(self.year, 4, 1) + timedelta(days=self.random.randint(0, 20))).isoformat(),
                "SKU": order["SKU"],
                "Qty": 1,
                "Refund": _comma_decimal(float(order["Unit Price"])),
                "Reason": self.random.choice(RETURN_REASONS),
            })
        return rows

    def generate_shipping(self, orders: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Generate one shipment per Q1 sales row"""
        rows = []
        for order in orders:
            ordered = date(*[int(part) for part in _us_to_iso(order["Order Date"]).split("-")])
            shipped = ordered + timedelta(days=self.random.randint(0, 3))
            rows.append({
                "Order ID": order["Order ID"],
                "Carrier": self.random.choice(CARRIERS),
                "Ship Date": shipped.isoformat(),
                "Delivery Date": (shipped + timedelta(days=self.random.randint(1, 5))).strftime("%B %d, %Y"),
                "Shipping Cost": _comma_decimal(self.random.uniform(8, 25)),
            })
        return rows

    def generate_fees(self) -> List[Dict[str, Any]]:
        """Generate channel fees per country"""
        rows = []
        for channel in CHANNELS:
            for country in ("PL", "Niemcy", "CZ"):
                rows.append({
                    "Channel": channel,
                    "Country": country,
                    "Fee Rate": f"{self.random.randint(2, 15)}%",
                    "Fixed Fee": _comma_decimal(self.random.uniform(0, 2)),
                })
        return rows

    def generate_targets(self) -> List[Dict[str, Any]]:
        """Generate monthly targets for the first half of the year"""
        rows = []
        for salesperson in SALESPEOPLE:
            for month in range(1, 7):
                rows.append({
                    "Salesperson": salesperson,
                    "Month": f"{self.year}-{month:02d}",
                    "Target": self.random.randint(5, 20) * 1000,
                })
        return rows

    def generate(
        self,
        orders_per_quarter: int = 60,
        products: int = 30,
        customers: int = 40,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Generate every source.

        The Q2 export repeats one Q1 order and a few sales reference a SKU
        missing from the catalog.
        """
        product_rows = self.generate_products(products)
        customer_rows = self.generate_customers(customers)

        skus = [row["SKU"] for row in product_rows]
        customer_ids = sorted({row["Customer ID"] for row in customer_rows if row["Customer ID"]})

        sales_q1 = self.generate_sales(1, orders_per_quarter, skus + [ORPHAN_SKU], customer_ids)
        repeated = self._sale(sales_q1[0]["Order ID"], 2, skus, customer_ids)
        sales_q2 = self.generate_sales(
            2,
            orders_per_quarter,
            skus,
            customer_ids,
            first_order=orders_per_quarter + 1,
            shared_order=repeated,
        )

        return {
            "sales_q1": sales_q1,
            "sales_q2": sales_q2,
            "products": product_rows,
            "customers": customer_rows,
            "returns": self.generate_returns(sales_q1),
            "shipping": self.generate_shipping(sales_q1),
            "fees": self.generate_fees(),
            "targets": self.generate_targets(),
        }


def _us_to_iso(text: str) -> str:
    month, day, year = text.split("/")
    return f"{year}-{month}-{day}"


def generate_sources(seed: int = 42, **kwargs) -> Dict[str, List[Dict[str, Any]]]:
    """
    Convenience function to generate every source.

    Args:
        seed: Random seed
        **kwargs: Passed to SourceDataGenerator.generate

    Returns:
        Source name -> raw rows
    """
    return SourceDataGenerator(seed=seed).generate(**kwargs)
