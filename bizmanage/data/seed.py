"""
Startup Seeding

Ensures the default administrator exists and, when enabled, loads the demo
business into an empty store.
"""

from typing import Dict, List, Optional

import structlog

from bizmanage.config import get_settings
from bizmanage.config.settings import SeedSettings
from bizmanage.data.generators import DemoDataGenerator, DemoDataset
from bizmanage.database.connection import get_db
from bizmanage.database.models import User
from bizmanage.database.repository import Storage

logger = structlog.get_logger(__name__)


async def ensure_admin_user(storage: Storage, seed: SeedSettings) -> Optional[User]:
    """Create the default admin account unless the username is taken."""
    if await storage.get_user_by_username(seed.admin_username):
        return None

    user = await storage.create_user({
        "username": seed.admin_username,
        "password": seed.admin_password.get_secret_value(),
        "full_name": "System Administrator",
        "email": seed.admin_email,
        "role": "admin",
        "branch_id": None,
    })
    logger.info("Default admin user created", username=user.username)
    return user


def _remap(position: int, ids: List[int]) -> int:
    return ids[position - 1]


async def load_demo_dataset(storage: Storage, dataset: DemoDataset) -> Dict[str, int]:
    """
    Insert a generated dataset, translating list positions into store ids.

    Returns:
        Row counts per entity type
    """
    branch_ids = [(await storage.create_branch(row)).id for row in dataset.branches]
    for row in dataset.suppliers:
        await storage.create_supplier(row)
    category_ids = [(await storage.create_product_category(row)).id for row in dataset.categories]

    product_ids = []
    for row in dataset.products:
        product = await storage.create_product({**row, "category_id": _remap(row["category_id"], category_ids)})
        product_ids.append(product.id)

    for row in dataset.inventory:
        await storage.create_inventory_item({
            "product_id": _remap(row["product_id"], product_ids),
            "branch_id": _remap(row["branch_id"], branch_ids),
            "quantity": row["quantity"],
        })

    customer_ids = [(await storage.create_customer(row)).id for row in dataset.customers]

    for row in dataset.orders:
        values = {key: value for key, value in row.items() if key not in ("items", "status")}
        values["customer_id"] = _remap(row["customer_id"], customer_ids)
        values["branch_id"] = _remap(row["branch_id"], branch_ids)
        items = [
            {**line, "product_id": _remap(line["product_id"], product_ids)}
            for line in row["items"]
        ]
        order = await storage.create_order(values, items=items)
        if row["status"] != order.status:
            await storage.update_order_status(order.id, row["status"].value)

    return {
        "branches": len(dataset.branches),
        "suppliers": len(dataset.suppliers),
        "product_categories": len(dataset.categories),
        "products": len(dataset.products),
        "inventory": len(dataset.inventory),
        "customers": len(dataset.customers),
        "orders": len(dataset.orders),
    }


async def seed_database() -> None:
    """Run startup seeding against the configured database."""
    settings = get_settings()
    async with get_db() as db:
        storage = Storage(db)
        await ensure_admin_user(storage, settings.seed)

        if not settings.seed.demo_data:
            return
        if await storage.list_branches():
            logger.info("Demo data skipped, store is not empty")
            return

        dataset = DemoDataGenerator(seed=settings.seed.demo_seed).generate()
        counts = await load_demo_dataset(storage, dataset)
        logger.info("Demo data loaded", **counts)
