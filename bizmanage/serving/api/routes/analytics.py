"""
Analytics API Endpoints

Dashboard figures computed from the operational store.
"""

from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends
import structlog

from bizmanage.config import get_settings
from bizmanage.database.models import OrderStatus, utcnow
from bizmanage.database.repository import Storage
from bizmanage.insights.metrics import UNKNOWN_CUSTOMER, UNKNOWN_PRODUCT
from bizmanage.serving.api.dependencies import get_storage
from bizmanage.serving.api.routes.activities import with_users
from bizmanage.serving.api.schemas import ActivityWithUser, ApiModel

router = APIRouter()
logger = structlog.get_logger(__name__)

NEW_CUSTOMER_DAYS = 30
RECENT_ORDERS = 5
RECENT_ACTIVITIES = 4
LOW_STOCK_ROWS = 5


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class DashboardStats(ApiModel):
    total_sales: float
    new_customers: int
    inventory_items: int
    revenue: float


class BranchPerformance(ApiModel):
    """Revenue of one branch; `percentage` is relative to the best branch"""
    id: int
    name: str
    revenue: float
    order_count: int
    percentage: float


class RecentOrder(ApiModel):
    id: int
    customer_id: int
    customer_name: str
    date: Optional[str]
    amount: float
    status: str


class LowStockItem(ApiModel):
    id: int
    product_id: int
    branch_id: int
    name: str
    sku: Optional[str]
    quantity: int


class DashboardResponse(ApiModel):
    stats: DashboardStats
    branch_performance: List[BranchPerformance]
    recent_orders: List[RecentOrder]
    low_stock_items: List[LowStockItem]
    recent_activities: List[ActivityWithUser]


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(storage: Storage = Depends(get_storage)) -> DashboardResponse:
    """
    Dashboard overview.

    - totalSales: sum of all order totals
    - newCustomers: customers registered in the last 30 days
    - inventoryItems: units in stock across all branches
    - revenue: sum of completed order totals
    """
    orders = await storage.list_orders()
    customers = await storage.list_customers()
    inventory = await storage.list_inventory()
    branches = await storage.list_branches()
    products = {product.id: product for product in await storage.list_products()}
    directory = {customer.id: customer for customer in customers}

    cutoff = utcnow() - timedelta(days=NEW_CUSTOMER_DAYS)
    stats = DashboardStats(
        total_sales=sum(float(order.total or 0) for order in orders),
        new_customers=sum(
            1 for customer in customers
            if customer.registered_date is not None and customer.registered_date >= cutoff
        ),
        inventory_items=sum(row.quantity or 0 for row in inventory),
        revenue=sum(float(order.total or 0) for order in orders if order.status == OrderStatus.COMPLETED),
    )

    branch_revenue = {branch.id: 0.0 for branch in branches}
    branch_orders = {branch.id: 0 for branch in branches}
    for order in orders:
        if order.branch_id in branch_revenue:
            branch_revenue[order.branch_id] += float(order.total or 0)
            branch_orders[order.branch_id] += 1
    best = max(branch_revenue.values(), default=0.0)
    performance = sorted(
        (
            BranchPerformance(
                id=branch.id,
                name=branch.name,
                revenue=round(branch_revenue[branch.id], 2),
                order_count=branch_orders[branch.id],
                percentage=round(branch_revenue[branch.id] / best * 100, 1) if best > 0 else 0.0,
            )
            for branch in branches
        ),
        key=lambda entry: entry.revenue,
        reverse=True,
    )

    recent_orders = [
        RecentOrder(
            id=order.id,
            customer_id=order.customer_id,
            customer_name=directory[order.customer_id].name if order.customer_id in directory else UNKNOWN_CUSTOMER,
            date=order.order_date.date().isoformat() if order.order_date else None,
            amount=float(order.total or 0),
            status=order.status.value,
        )
        for order in await storage.list_recent_orders(RECENT_ORDERS)
    ]

    threshold = get_settings().inventory.low_stock_threshold
    low_stock_rows = sorted(await storage.list_low_stock_items(threshold), key=lambda row: row.quantity)
    low_stock_items = []
    for row in low_stock_rows[:LOW_STOCK_ROWS]:
        product = products.get(row.product_id)
        low_stock_items.append(LowStockItem(
            id=row.id,
            product_id=row.product_id,
            branch_id=row.branch_id,
            name=product.name if product else UNKNOWN_PRODUCT,
            sku=product.sku if product else None,
            quantity=row.quantity,
        ))

    activities = await with_users(storage, await storage.list_recent_activities(RECENT_ACTIVITIES))

    logger.debug("Dashboard computed", orders=len(orders), customers=len(customers))
    return DashboardResponse(
        stats=stats,
        branch_performance=performance,
        recent_orders=recent_orders,
        low_stock_items=low_stock_items,
        recent_activities=activities,
    )
