"""
Unit Tests - Insight Service
"""
from decimal import Decimal

import pytest

from bizmanage.config.settings import AISettings, InventorySettings
from bizmanage.exceptions import AIConfigurationError
from bizmanage.insights.client import AI_EMPTY_RESPONSE, AI_TRANSPORT_ERROR, AIResult, AnthropicInsightClient
from bizmanage.insights.parser import FALLBACK_TITLE
from bizmanage.insights.service import InsightService


async def create_sales(storage):
    branch = await storage.create_branch({"name": "Downtown", "address": "1 Main St"})
    category = await storage.create_product_category({"name": "Electronics"})
    product = await storage.create_product({
        "name": "Wireless Headphones",
        "sku": "WH-BT100",
        "price": Decimal("50.00"),
        "category_id": category.id,
    })
    customer = await storage.create_customer({"name": "Mark Johnson"})
    for _ in range(2):
        await storage.create_order(
            {"customer_id": customer.id, "branch_id": branch.id, "total": Decimal("100.00")},
            items=[{"product_id": product.id, "quantity": 2, "price": Decimal("50.00")}],
        )
    await storage.create_inventory_item({"product_id": product.id, "branch_id": branch.id, "quantity": 4})
    return branch, product, customer


class TestGenerate:
    """Tests for the end-to-end insight flow"""

    async def test_valid_completion_is_returned(self, storage, fake_ai, valid_insights_json):
        await create_sales(storage)
        service = InsightService(storage, fake_ai)

        payload = await service.generate("sales", "month")

        assert payload["summary"] == "Sales are healthy but uneven."
        assert len(fake_ai.calls) == 1
        system, prompt = fake_ai.calls[0]
        assert "sales data analysis" in system
        assert "- Total Orders: 2" in prompt
        assert "- Total Revenue: $200.00" in prompt
        assert '"productName": "Wireless Headphones"' in prompt

    @pytest.mark.parametrize(
        "result",
        [
            AIResult.failure(AI_TRANSPORT_ERROR, "connection reset"),
            AIResult.failure(AI_EMPTY_RESPONSE, "no text"),
            AIResult.success("I cannot help with that."),
            AIResult.success('{"insights": "not a list"}'),
        ],
    )
    async def test_failures_fall_back(self, storage, make_fake_ai, result):
        service = InsightService(storage, make_fake_ai(result=result))

        payload = await service.generate("overall", "week")

        assert payload["recommendations"] == []
        assert payload["insights"][0]["title"] == FALLBACK_TITLE

    async def test_client_exception_falls_back(self, storage, make_fake_ai):
        service = InsightService(storage, make_fake_ai(error=TimeoutError("timed out")))

        payload = await service.generate("customers", "day")

        assert payload["insights"][0]["title"] == FALLBACK_TITLE

    async def test_unknown_data_type(self, storage, fake_ai):
        with pytest.raises(ValueError):
            await InsightService(storage, fake_ai).generate("marketing", "day")
        assert fake_ai.calls == []


class TestCollectMetrics:
    """Tests for the per-domain snapshots"""

    async def test_inventory_uses_insights_threshold(self, storage, fake_ai):
        await create_sales(storage)

        strict = InsightService(storage, fake_ai, InventorySettings(INSIGHTS_LOW_STOCK_THRESHOLD=3))
        default = InsightService(storage, fake_ai)

        assert (await strict.collect_metrics("inventory", "day")).low_stock_items == 0
        metrics = await default.collect_metrics("inventory", "day")
        assert metrics.low_stock_items == 1
        assert metrics.stock_out_risk[0].branch_name == "Downtown"

    async def test_customers_and_overall(self, storage, fake_ai):
        await create_sales(storage)
        service = InsightService(storage, fake_ai)

        customers = await service.collect_metrics("customers", "month")
        overall = await service.collect_metrics("overall", "month")

        assert customers.active_customers == 1
        assert customers.engagement_rate == pytest.approx(100.0)
        assert overall.total_orders == 2
        assert overall.total_branches == 1
        assert overall.low_stock_items == 1

    async def test_sales_window_limits_orders(self, storage, fake_ai, monkeypatch):
        await create_sales(storage)
        monkeypatch.setattr("bizmanage.insights.service.order_window", lambda timespan: 1)

        metrics = await InsightService(storage, fake_ai).collect_metrics("sales", "day")

        assert metrics.total_orders == 1
        assert metrics.top_selling_products[0].quantity == 2


class TestAnthropicClient:
    @pytest.mark.parametrize("api_key", [None, "", "   "])
    def test_blank_key_is_not_configured(self, api_key):
        settings = AISettings(api_key=api_key)

        assert settings.is_configured is False
        with pytest.raises(AIConfigurationError):
            AnthropicInsightClient(settings)

    def test_key_is_configured(self):
        settings = AISettings(api_key="sk-ant-test")

        assert settings.is_configured is True
        assert AnthropicInsightClient(settings).settings is settings
