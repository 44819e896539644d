"""
Unit Tests - Metrics Aggregation
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from bizmanage.insights.metrics import (
    DEFAULT_ORDER_WINDOW,
    UNKNOWN_BRANCH,
    UNKNOWN_CUSTOMER,
    UNKNOWN_PRODUCT,
    customer_retention_rate,
    low_stock,
    order_totals,
    order_window,
    summarize_customers,
    summarize_inventory,
    summarize_overall,
    summarize_sales,
    top_selling_products,
)


def order(id, customer_id, total):
    return SimpleNamespace(id=id, customer_id=customer_id, total=total)


def item(product_id, quantity):
    return SimpleNamespace(product_id=product_id, quantity=quantity)


def product(id, name, price):
    return SimpleNamespace(id=id, name=name, price=Decimal(str(price)))


def stock(id, product_id, branch_id, quantity):
    return SimpleNamespace(id=id, product_id=product_id, branch_id=branch_id, quantity=quantity)


class TestOrderTotals:
    """Tests for revenue and average order value"""

    def test_average_is_revenue_over_count(self):
        orders = [order(1, 1, Decimal("100.00")), order(2, 2, Decimal("50.50")), order(3, 1, None)]

        count, revenue, average = order_totals(orders)

        assert count == 3
        assert revenue == pytest.approx(150.50)
        assert average == pytest.approx(revenue / count)

    def test_no_orders(self):
        assert order_totals([]) == (0, 0.0, 0.0)


class TestTopSellingProducts:
    """Tests for product ranking"""

    def test_ties_keep_first_seen_order_and_cap_at_five(self):
        items = [
            item(1, 2), item(2, 5), item(3, 2), item(4, 2),
            item(5, 1), item(6, 2), item(7, 2),
        ]
        products = [product(i, f"P{i}", 10) for i in range(1, 8)]

        ranked = top_selling_products(items, products)

        assert [entry.product_id for entry in ranked] == [2, 1, 3, 4, 6]

    def test_quantities_are_summed_and_revenue_uses_catalog_price(self):
        items = [item(1, 2), item(1, 3), item(2, 1)]
        products = [product(1, "Headphones", 20), product(2, "Charger", 35)]

        ranked = top_selling_products(items, products)

        assert ranked[0].product_name == "Headphones"
        assert ranked[0].quantity == 5
        assert ranked[0].revenue == pytest.approx(100.0)

    def test_missing_product_and_quantity(self):
        items = [item(None, 4), item(9, None)]

        ranked = top_selling_products(items, [])

        assert len(ranked) == 1
        assert ranked[0].product_name == UNKNOWN_PRODUCT
        assert ranked[0].quantity == 1
        assert ranked[0].revenue == 0.0


class TestSales:
    """Tests for the sales summary"""

    def test_retention_counts_repeat_customers(self):
        orders = [order(1, 1, 10), order(2, 1, 10), order(3, 2, 10), order(4, None, 10)]

        assert customer_retention_rate(orders) == pytest.approx(50.0)

    def test_empty_window(self):
        metrics = summarize_sales([], [], [])

        assert metrics.total_orders == 0
        assert metrics.average_order_value == 0.0
        assert metrics.customer_retention_rate == 0.0
        assert metrics.top_selling_products == []


class TestInventory:
    """Tests for the stock-out risk summary"""

    def test_low_stock_is_at_or_below_threshold(self):
        rows = [stock(1, 1, 1, 3), stock(2, 2, 1, 8), stock(3, 3, 1, 20)]

        assert [row.id for row in low_stock(rows, 5)] == [1]
        assert [row.id for row in low_stock(rows, 8)] == [1, 2]

    def test_summary_names_products_and_branches(self):
        products = [product(1, "Headphones", 20), product(2, "Charger", 35)]
        branches = [SimpleNamespace(id=1, name="Downtown")]
        rows = [stock(1, 1, 1, 3), stock(2, 2, 1, 8), stock(3, 2, 7, 0)]

        metrics = summarize_inventory(products, rows, branches, threshold=5)

        assert metrics.total_products == 2
        assert metrics.low_stock_items == 2
        assert metrics.stock_out_risk[0].product_name == "Headphones"
        assert metrics.stock_out_risk[0].branch_name == "Downtown"
        assert metrics.stock_out_risk[1].branch_name == UNKNOWN_BRANCH


class TestCustomers:
    """Tests for engagement and spend"""

    def test_engagement_and_average_spend(self):
        customers = [SimpleNamespace(id=i, name=f"C{i}") for i in range(1, 5)]
        orders = [order(1, 1, 100), order(2, 1, 50), order(3, 2, 30)]

        metrics = summarize_customers(customers, orders)

        assert metrics.total_customers == 4
        assert metrics.active_customers == 2
        assert metrics.engagement_rate == pytest.approx(50.0)
        assert metrics.average_customer_spend == pytest.approx(90.0)
        assert metrics.top_customers[0].customer_name == "C1"
        assert metrics.top_customers[0].total_spent == pytest.approx(150.0)
        assert metrics.top_customers[0].order_count == 2

    def test_no_customers(self):
        metrics = summarize_customers([], [])

        assert metrics.engagement_rate == 0.0
        assert metrics.average_customer_spend == 0.0

    def test_orders_of_unknown_customers_are_left_out_of_engagement_and_spend(self):
        customers = [SimpleNamespace(id=1, name="Only")]
        orders = [order(1, 1, 10), order(2, 2, 30)]

        metrics = summarize_customers(customers, orders)

        assert metrics.active_customers == 1
        assert metrics.engagement_rate == pytest.approx(100.0)
        assert metrics.average_customer_spend == pytest.approx(10.0)
        assert metrics.top_customers[0].customer_name == UNKNOWN_CUSTOMER


class TestOverall:
    def test_counts(self):
        metrics = summarize_overall(
            orders=[order(1, 1, 40), order(2, 2, 60)],
            customers=[1, 2, 3],
            products=[1],
            low_stock_items=[1, 2],
            suppliers=[],
            branches=[1, 2],
        )

        assert metrics.total_orders == 2
        assert metrics.total_revenue == pytest.approx(100.0)
        assert metrics.average_order_value == pytest.approx(50.0)
        assert metrics.total_customers == 3
        assert metrics.low_stock_items == 2
        assert metrics.total_suppliers == 0


@pytest.mark.parametrize(
    "timespan,expected",
    [("day", 30), ("week", 50), ("month", 100), ("quarter", 300), ("year", 500), ("decade", DEFAULT_ORDER_WINDOW)],
)
def test_order_window(timespan, expected):
    assert order_window(timespan) == expected
