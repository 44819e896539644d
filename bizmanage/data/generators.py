"""
Demo Data Generator

Generates a small, realistic business for development and demos:
- Branches and suppliers
- Product categories and products
- Per-branch inventory
- Customers with orders and order lines

Every generator takes its own seeded `random.Random` and `Faker`, so the
same seed always yields the same business.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from faker import Faker

from bizmanage.database.models import OrderStatus, utcnow

# =============================================================================
# CONFIGURATION
# =============================================================================

CATEGORIES = [
    ("Electronics", ["Headphones", "Laptop Charger", "Phone Case", "Bluetooth Speaker", "USB Hub"]),
    ("Office Supplies", ["Printer Paper", "Stapler", "Desk Organizer", "Notebook", "Whiteboard"]),
    ("Furniture", ["Office Chair", "Standing Desk", "Bookshelf", "Filing Cabinet", "Desk Lamp"]),
    ("Kitchen", ["Coffee Maker", "Water Bottle", "Travel Mug", "Kettle", "Blender"]),
]

PRICE_RANGES = {
    "Electronics": (15.0, 250.0),
    "Office Supplies": (2.0, 60.0),
    "Furniture": (40.0, 600.0),
    "Kitchen": (8.0, 150.0),
}

ORDER_STATUS_WEIGHTS = [
    (OrderStatus.COMPLETED, 0.70),
    (OrderStatus.PROCESSING, 0.12),
    (OrderStatus.PENDING, 0.12),
    (OrderStatus.CANCELLED, 0.06),
]


@dataclass
class DemoDataset:
    """Rows ready for the store; foreign keys refer to list positions (1-based)."""
    branches: List[Dict[str, Any]] = field(default_factory=list)
    suppliers: List[Dict[str, Any]] = field(default_factory=list)
    categories: List[Dict[str, Any]] = field(default_factory=list)
    products: List[Dict[str, Any]] = field(default_factory=list)
    inventory: List[Dict[str, Any]] = field(default_factory=list)
    customers: List[Dict[str, Any]] = field(default_factory=list)
    orders: List[Dict[str, Any]] = field(default_factory=list)


# =============================================================================
# GENERATORS
# =============================================================================

class DemoDataGenerator:
    """
    Generate a coherent demo business.

    Example:
        dataset = DemoDataGenerator(seed=42).generate()
    """

    def __init__(self, seed: int = 42, now: Optional[datetime] = None):
        self.rng = random.Random(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.now = now or utcnow()

    def generate(
        self,
        n_branches: int = 4,
        n_suppliers: int = 5,
        n_customers: int = 40,
        n_orders: int = 120,
    ) -> DemoDataset:
        dataset = DemoDataset()
        dataset.branches = self.branches(n_branches)
        dataset.suppliers = self.suppliers(n_suppliers)
        dataset.categories, dataset.products = self.catalog()
        dataset.inventory = self.inventory(len(dataset.products), len(dataset.branches))
        dataset.customers = self.customers(n_customers)
        dataset.orders = self.orders(n_orders, dataset.products, len(dataset.customers), len(dataset.branches))
        return dataset

    def branches(self, n: int) -> List[Dict[str, Any]]:
        cities = []
        while len(cities) < n:
            city = self.fake.city()
            if city not in cities:
                cities.append(city)
        return [
            {
                "name": f"{city} Branch",
                "address": self.fake.street_address() + f", {city}",
                "phone_number": self.fake.phone_number(),
                "manager": self.fake.name(),
                "active": True,
            }
            for city in cities
        ]

    def suppliers(self, n: int) -> List[Dict[str, Any]]:
        names: List[str] = []
        while len(names) < n:
            name = self.fake.company()
            if name not in names:
                names.append(name)
        return [
            {
                "name": name,
                "contact_person": self.fake.name(),
                "email": self.fake.company_email(),
                "phone_number": self.fake.phone_number(),
                "address": self.fake.address().replace("\n", ", "),
                "active": self.rng.random() > 0.1,
            }
            for name in names
        ]

    def catalog(self):
        categories = []
        products = []
        for category_index, (category, items) in enumerate(CATEGORIES, start=1):
            categories.append({"name": category, "description": f"{category} products"})
            low, high = PRICE_RANGES[category]
            for item in items:
                sku = f"{category[:2].upper()}-{item[:3].upper()}-{len(products) + 1:03d}"
                products.append({
                    "name": item,
                    "sku": sku,
                    "description": self.fake.sentence(nb_words=8),
                    "price": Decimal(str(round(self.rng.uniform(low, high), 2))),
                    "category_id": category_index,
                    "in_stock": True,
                    "min_stock_level": 10,
                })
        return categories, products

    def inventory(self, n_products: int, n_branches: int) -> List[Dict[str, Any]]:
        rows = []
        for product_id in range(1, n_products + 1):
            for branch_id in range(1, n_branches + 1):
                # Roughly one row in eight is close to running out
                quantity = self.rng.randint(0, 8) if self.rng.random() < 0.125 else self.rng.randint(10, 120)
                rows.append({"product_id": product_id, "branch_id": branch_id, "quantity": quantity})
        return rows

    def customers(self, n: int) -> List[Dict[str, Any]]:
        customers = []
        for _ in range(n):
            customers.append({
                "name": self.fake.name(),
                "email": self.fake.unique.email(),
                "phone_number": self.fake.phone_number(),
                "address": self.fake.address().replace("\n", ", "),
                "loyalty_points": self.rng.randint(0, 500),
                "registered_date": self.now - timedelta(days=self.rng.randint(0, 365)),
            })
        return customers

    def orders(
        self,
        n: int,
        products: List[Dict[str, Any]],
        n_customers: int,
        n_branches: int,
    ) -> List[Dict[str, Any]]:
        """Orders with their `items`; totals are the sum of the lines."""
        statuses = [status for status, _ in ORDER_STATUS_WEIGHTS]
        weights = [weight for _, weight in ORDER_STATUS_WEIGHTS]

        orders = []
        for _ in range(n):
            lines = []
            for product_index in self.rng.sample(range(len(products)), k=self.rng.randint(1, 4)):
                product = products[product_index]
                lines.append({
                    "product_id": product_index + 1,
                    "quantity": self.rng.randint(1, 5),
                    "price": product["price"],
                })
            total = sum((line["price"] * line["quantity"] for line in lines), Decimal("0"))
            status = self.rng.choices(statuses, weights=weights)[0]
            orders.append({
                "customer_id": self.rng.randint(1, n_customers),
                "branch_id": self.rng.randint(1, n_branches),
                "order_date": self.now - timedelta(days=self.rng.randint(0, 180), minutes=self.rng.randint(0, 1440)),
                "total": total.quantize(Decimal("0.01")),
                "status": status,
                "payment_status": status == OrderStatus.COMPLETED,
                "items": lines,
            })
        return orders
