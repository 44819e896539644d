"""
Unit Tests - Insight Prompt Building
"""
from types import SimpleNamespace

import pytest

from bizmanage.insights.metrics import (
    InventoryMetrics,
    StockRisk,
    summarize_customers,
    summarize_overall,
    summarize_sales,
)
from bizmanage.insights.prompts import build_insight_prompt, metrics_payload


class TestMetricsPayload:
    """Tests for the facts stated in the prompt"""

    def test_zero_orders(self):
        payload = metrics_payload("sales", summarize_sales([], [], []), "month")

        assert payload["totalOrders"] == 0
        assert payload["totalRevenue"] == "$0.00"
        assert payload["averageOrderValue"] == "$0.00"
        assert payload["topSellingProducts"] == []

    def test_money_and_percent_formatting(self):
        orders = [
            SimpleNamespace(id=1, customer_id=1, total=10),
            SimpleNamespace(id=2, customer_id=1, total=5.25),
        ]
        payload = metrics_payload("sales", summarize_sales(orders, [], []), "week")

        assert payload["totalRevenue"] == "$15.25"
        assert payload["customerRetentionRate"] == "100.00%"
        assert payload["timespan"] == "week"

    def test_nested_lists_use_camel_case(self):
        metrics = InventoryMetrics(
            total_products=3,
            low_stock_items=1,
            stock_out_risk=[StockRisk(1, "Headphones", 2, 4, "Downtown")],
        )

        payload = metrics_payload("inventory", metrics, "day")

        assert payload["stockOutRisk"] == [
            {"productId": 1, "productName": "Headphones", "quantity": 2, "branchId": 4, "branchName": "Downtown"}
        ]

    def test_rejects_unknown_metrics(self):
        with pytest.raises(ValueError):
            metrics_payload("sales", object(), "day")


class TestBuildInsightPrompt:
    """Tests for the rendered system instruction and user prompt"""

    def test_sales_prompt(self):
        prompt = build_insight_prompt("sales", summarize_sales([], [], []), "month")

        assert "sales data analysis" in prompt.system
        assert "valid JSON" in prompt.system
        assert "- Total Orders: 0" in prompt.user
        assert "- Total Revenue: $0.00" in prompt.user
        assert "3-5 key business insights and 2-3 actionable recommendations" in prompt.user
        assert '"potentialImpact": "string"' in prompt.user
        assert '"analysisDate"' in prompt.user

    def test_domain_wording(self):
        customers = build_insight_prompt("customers", summarize_customers([], []), "year")
        overall = build_insight_prompt("overall", summarize_overall([], [], [], [], [], []), "quarter")

        assert "customer relationship management" in customers.system
        assert "customer relationships and engagement" in customers.user
        assert "- Customer Engagement Rate: 0.00%" in customers.user
        assert "holistic view" in overall.user
        assert "- Total Branches: 0" in overall.user

    def test_unknown_data_type(self):
        with pytest.raises(ValueError):
            build_insight_prompt("marketing", summarize_sales([], [], []), "day")
