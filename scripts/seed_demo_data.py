"""
Demo Data Loader

Creates the schema in the configured database and loads a generated demo
business (branches, catalog, inventory, customers and orders).

Usage:
    python scripts/seed_demo_data.py --seed 42 --customers 40 --orders 120
"""

import argparse
import asyncio

import structlog

from bizmanage.config import get_settings
from bizmanage.config.logging import configure_logging
from bizmanage.data.generators import DemoDataGenerator
from bizmanage.data.seed import ensure_admin_user, load_demo_dataset
from bizmanage.database.connection import close_database, get_db, init_database
from bizmanage.database.repository import Storage

logger = structlog.get_logger(__name__)


async def main(seed: int, customers: int, orders: int, force: bool) -> None:
    configure_logging()
    await init_database()
    try:
        async with get_db() as db:
            storage = Storage(db)
            await ensure_admin_user(storage, get_settings().seed)

            if await storage.list_branches() and not force:
                logger.warning("Store already has branches; pass --force to add demo data anyway")
                return

            dataset = DemoDataGenerator(seed=seed).generate(n_customers=customers, n_orders=orders)
            counts = await load_demo_dataset(storage, dataset)
            logger.info("Demo data loaded", **counts)
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Load BizManage Pro demo data")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--customers", type=int, default=40, help="Number of customers")
    parser.add_argument("--orders", type=int, default=120, help="Number of orders")
    parser.add_argument("--force", action="store_true", help="Load even if the store is not empty (use a different --seed)")
    args = parser.parse_args()

    asyncio.run(main(args.seed, args.customers, args.orders, args.force))
