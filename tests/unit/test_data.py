"""
Unit Tests - Demo Data and Seeding
"""
import logging
from datetime import datetime

import pytest
from pydantic import ValidationError

from bizmanage.config import Settings
from bizmanage.config.logging import configure_logging, redact_secrets
from bizmanage.config.settings import SeedSettings
from bizmanage.data.generators import DemoDataGenerator
from bizmanage.data.seed import ensure_admin_user, load_demo_dataset
from bizmanage.database.models import OrderStatus


NOW = datetime(2025, 6, 1, 12, 0, 0)


class TestDemoDataGenerator:
    """Tests for DemoDataGenerator"""

    def test_same_seed_same_business(self):
        first = DemoDataGenerator(seed=7, now=NOW).generate(n_customers=10, n_orders=20)
        second = DemoDataGenerator(seed=7, now=NOW).generate(n_customers=10, n_orders=20)

        assert first.branches == second.branches
        assert first.orders == second.orders

    def test_order_totals_match_lines(self):
        dataset = DemoDataGenerator(seed=3, now=NOW).generate(n_customers=5, n_orders=15)

        for order in dataset.orders:
            lines = sum(line["price"] * line["quantity"] for line in order["items"])
            assert order["total"] == lines
            assert 1 <= order["customer_id"] <= 5
            assert order["status"] in set(OrderStatus)

    def test_inventory_covers_every_product_and_branch(self):
        dataset = DemoDataGenerator(seed=1, now=NOW).generate(n_branches=3)

        pairs = {(row["product_id"], row["branch_id"]) for row in dataset.inventory}
        assert len(pairs) == len(dataset.products) * 3
        assert len({product["sku"] for product in dataset.products}) == len(dataset.products)


class TestSeeding:
    async def test_admin_created_once(self, storage):
        seed = SeedSettings()

        created = await ensure_admin_user(storage, seed)
        again = await ensure_admin_user(storage, seed)

        assert created.role == "admin"
        assert created.username == "admin"
        assert again is None
        assert len(await storage.list_users()) == 1

    async def test_load_demo_dataset(self, storage):
        dataset = DemoDataGenerator(seed=5, now=NOW).generate(n_branches=2, n_suppliers=2, n_customers=6, n_orders=12)

        counts = await load_demo_dataset(storage, dataset)

        assert counts["orders"] == 12
        assert len(await storage.list_orders()) == 12
        assert len(await storage.list_inventory()) == len(dataset.products) * 2
        statuses = [order.status for order in await storage.list_orders()]
        assert statuses == [row["status"] for row in dataset.orders]


class TestSettings:
    def test_environment_is_validated(self):
        with pytest.raises(ValidationError):
            Settings(APP_ENV="moon")

    def test_defaults(self, test_settings):
        assert test_settings.app_env == "testing"
        assert test_settings.inventory.low_stock_threshold == 10
        assert test_settings.inventory.insights_low_stock_threshold == 5
        assert test_settings.ai.max_tokens == 3000
        assert test_settings.ai.timeout_seconds == 60.0


class TestLogging:
    """Tests for configure_logging"""

    def test_library_levels_follow_settings(self, monkeypatch):
        monkeypatch.setenv("DATABASE_ECHO", "true")

        configure_logging("INFO")

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        assert logging.getLogger("anthropic").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").propagate is False

    def test_debug_opens_up_client_logs(self):
        configure_logging("DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("anthropic").level == logging.DEBUG

    def test_secrets_are_masked(self):
        event = redact_secrets(None, "info", {"event": "login", "password": "secret123", "username": "jane"})

        assert event == {"event": "login", "password": "***", "username": "jane"}
