"""
Business Metrics Aggregation

Pure projections over entity snapshots fetched from the store. Nothing here
performs I/O or mutates its inputs; every rate and average is guarded
against empty inputs.

Inputs are ORM rows (or any objects with the same attribute names). Missing
numeric fields count as 0 and unknown references resolve to placeholder names.
"""

from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

TOP_N = 5

UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_BRANCH = "Unknown Branch"
UNKNOWN_CUSTOMER = "Unknown Customer"

# "Recent" means the last N orders, not a calendar range
TIMESPAN_ORDER_WINDOW: Dict[str, int] = {
    "day": 30,
    "week": 50,
    "month": 100,
    "quarter": 300,
    "year": 500,
}
DEFAULT_ORDER_WINDOW = 100


def order_window(timespan: str) -> int:
    """Number of most recent orders analysed for a timespan."""
    return TIMESPAN_ORDER_WINDOW.get(timespan, DEFAULT_ORDER_WINDOW)


def _amount(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _by_id(entities: Iterable[Any]) -> Dict[int, Any]:
    return {entity.id: entity for entity in entities}


def _rate(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class ProductSales:
    product_id: int
    product_name: str
    quantity: int
    revenue: float


@dataclass(frozen=True)
class StockRisk:
    product_id: int
    product_name: str
    quantity: int
    branch_id: int
    branch_name: str


@dataclass(frozen=True)
class CustomerSpend:
    customer_id: int
    customer_name: str
    total_spent: float
    order_count: int


@dataclass(frozen=True)
class SalesMetrics:
    total_orders: int
    total_revenue: float
    average_order_value: float
    top_selling_products: List[ProductSales] = field(default_factory=list)
    customer_retention_rate: float = 0.0


@dataclass(frozen=True)
class InventoryMetrics:
    total_products: int
    low_stock_items: int
    stock_out_risk: List[StockRisk] = field(default_factory=list)


@dataclass(frozen=True)
class CustomerMetrics:
    total_customers: int
    active_customers: int
    engagement_rate: float
    average_customer_spend: float
    top_customers: List[CustomerSpend] = field(default_factory=list)


@dataclass(frozen=True)
class OverallMetrics:
    total_orders: int
    total_revenue: float
    average_order_value: float
    total_customers: int
    total_products: int
    low_stock_items: int
    total_suppliers: int
    total_branches: int


def metrics_to_dict(metrics: Any) -> Dict[str, Any]:
    """Plain-dict view of any metrics dataclass."""
    return asdict(metrics)


# =============================================================================
# SALES
# =============================================================================

def order_totals(orders: Sequence[Any]) -> Tuple[int, float, float]:
    """(count, revenue, average order value) for a list of orders."""
    count = len(orders)
    revenue = sum(_amount(order.total) for order in orders)
    average = revenue / count if count > 0 else 0.0
    return count, revenue, average


def top_selling_products(
    order_items: Iterable[Any],
    products: Iterable[Any],
    limit: int = TOP_N,
) -> List[ProductSales]:
    """
    Rank products by summed quantity across order items.

    Items without a product reference are skipped and an item without a
    quantity counts as one unit. Equal quantities keep first-seen order.
    Revenue uses the catalog price.
    """
    quantities: "OrderedDict[int, int]" = OrderedDict()
    for item in order_items:
        if not item.product_id:
            continue
        quantity = item.quantity if item.quantity else 1
        quantities[item.product_id] = quantities.get(item.product_id, 0) + quantity

    catalog = _by_id(products)
    ranked = []
    for product_id, quantity in quantities.items():
        product = catalog.get(product_id)
        ranked.append(ProductSales(
            product_id=product_id,
            product_name=product.name if product else UNKNOWN_PRODUCT,
            quantity=quantity,
            revenue=_amount(product.price) * quantity if product else 0.0,
        ))

    ranked.sort(key=lambda entry: entry.quantity, reverse=True)
    return ranked[:limit]


def customer_retention_rate(orders: Iterable[Any]) -> float:
    """Share of ordering customers with more than one order in the window."""
    counts: Dict[int, int] = {}
    for order in orders:
        if order.customer_id:
            counts[order.customer_id] = counts.get(order.customer_id, 0) + 1
    repeat = sum(1 for count in counts.values() if count > 1)
    return _rate(repeat, len(counts))


def summarize_sales(
    orders: Sequence[Any],
    order_items: Iterable[Any],
    products: Iterable[Any],
) -> SalesMetrics:
    count, revenue, average = order_totals(orders)
    return SalesMetrics(
        total_orders=count,
        total_revenue=revenue,
        average_order_value=average,
        top_selling_products=top_selling_products(order_items, products),
        customer_retention_rate=customer_retention_rate(orders),
    )


# =============================================================================
# INVENTORY
# =============================================================================

def low_stock(inventory: Iterable[Any], threshold: int) -> List[Any]:
    """Inventory rows at or below `threshold`, in input order."""
    return [row for row in inventory if (row.quantity or 0) <= threshold]


def summarize_inventory(
    products: Sequence[Any],
    inventory: Iterable[Any],
    branches: Iterable[Any],
    threshold: int = 5,
) -> InventoryMetrics:
    at_risk = low_stock(inventory, threshold)
    catalog = _by_id(products)
    branch_index = _by_id(branches)

    risks = []
    for row in at_risk:
        product = catalog.get(row.product_id)
        branch = branch_index.get(row.branch_id)
        risks.append(StockRisk(
            product_id=row.product_id,
            product_name=product.name if product else UNKNOWN_PRODUCT,
            quantity=row.quantity or 0,
            branch_id=row.branch_id,
            branch_name=branch.name if branch else UNKNOWN_BRANCH,
        ))

    return InventoryMetrics(
        total_products=len(products),
        low_stock_items=len(at_risk),
        stock_out_risk=risks,
    )


# =============================================================================
# CUSTOMERS
# =============================================================================

def summarize_customers(
    customers: Sequence[Any],
    orders: Iterable[Any],
    limit: int = TOP_N,
) -> CustomerMetrics:
    order_counts: "OrderedDict[int, int]" = OrderedDict()
    spend: Dict[int, float] = {}
    for order in orders:
        if not order.customer_id:
            continue
        order_counts[order.customer_id] = order_counts.get(order.customer_id, 0) + 1
        spend[order.customer_id] = spend.get(order.customer_id, 0.0) + _amount(order.total)

    total = len(customers)
    directory = _by_id(customers)
    # Orders of customers missing from the directory only show up in the ranking
    active_ids = [customer_id for customer_id in order_counts if customer_id in directory]
    active = len(active_ids)
    active_spend = sum(spend[customer_id] for customer_id in active_ids)

    top = [
        CustomerSpend(
            customer_id=customer_id,
            customer_name=directory[customer_id].name if customer_id in directory else UNKNOWN_CUSTOMER,
            total_spent=spend[customer_id],
            order_count=count,
        )
        for customer_id, count in order_counts.items()
    ]
    top.sort(key=lambda entry: entry.total_spent, reverse=True)

    return CustomerMetrics(
        total_customers=total,
        active_customers=active,
        engagement_rate=_rate(active, total),
        average_customer_spend=active_spend / active if active > 0 else 0.0,
        top_customers=top[:limit],
    )


# =============================================================================
# OVERALL
# =============================================================================

def summarize_overall(
    orders: Sequence[Any],
    customers: Sequence[Any],
    products: Sequence[Any],
    low_stock_items: Sequence[Any],
    suppliers: Sequence[Any],
    branches: Sequence[Any],
) -> OverallMetrics:
    count, revenue, average = order_totals(orders)
    return OverallMetrics(
        total_orders=count,
        total_revenue=revenue,
        average_order_value=average,
        total_customers=len(customers),
        total_products=len(products),
        low_stock_items=len(low_stock_items),
        total_suppliers=len(suppliers),
        total_branches=len(branches),
    )
