"""
Orders API Endpoints

Order creation, listing and status transitions.
"""

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import Field
import structlog

from bizmanage.database.repository import ORDER_STATUSES, Storage
from bizmanage.exceptions import NotFoundError
from bizmanage.serving.api.dependencies import get_current_user_id, get_storage
from bizmanage.serving.api.schemas import (
    ApiModel,
    CustomerOut,
    OrderItemOut,
    OrderOut,
    OrderWithCustomer,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class OrderItemCreate(ApiModel):
    product_id: int
    quantity: int = Field(gt=0)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class OrderCreate(ApiModel):
    customer_id: int
    branch_id: int
    total: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    payment_status: bool = False
    items: List[OrderItemCreate] = Field(default_factory=list)


class OrderStatusUpdate(ApiModel):
    status: Optional[str] = None


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[OrderWithCustomer])
async def list_orders(
    customer_id: Optional[int] = Query(None, alias="customerId"),
    limit: int = Query(10, ge=1, le=500),
    storage: Storage = Depends(get_storage),
):
    """
    List orders with the customer embedded.

    With `customerId`, every order of that customer; otherwise the `limit`
    most recent orders.
    """
    if customer_id is not None:
        orders = await storage.list_orders_by_customer(customer_id)
    else:
        orders = await storage.list_recent_orders(limit)

    directory = {customer.id: customer for customer in await storage.list_customers()}
    enriched = []
    for order in orders:
        item = OrderWithCustomer.model_validate(order)
        customer = directory.get(order.customer_id)
        item.customer = CustomerOut.model_validate(customer) if customer else None
        enriched.append(item)
    return enriched


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: int, storage: Storage = Depends(get_storage)):
    order = await storage.get_order(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


@router.get("/{order_id}/items", response_model=List[OrderItemOut])
async def list_order_items(order_id: int, storage: Storage = Depends(get_storage)):
    if await storage.get_order(order_id) is None:
        raise NotFoundError("Order not found")
    return await storage.list_order_items_by_order(order_id)


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    """Create a pending order and its line items."""
    if await storage.get_customer(body.customer_id) is None:
        raise NotFoundError("Customer not found", details={"customerId": body.customer_id})
    if await storage.get_branch(body.branch_id) is None:
        raise NotFoundError("Branch not found", details={"branchId": body.branch_id})
    for line in body.items:
        if await storage.get_product(line.product_id) is None:
            raise NotFoundError("Product not found", details={"productId": line.product_id})

    order = await storage.create_order(
        body.model_dump(exclude={"items"}),
        items=[line.model_dump() for line in body.items],
    )
    await storage.log_activity("Order created", "order", order.id, actor_id)
    logger.info("Order created", order_id=order.id, items=len(body.items), total=float(order.total))
    return order


@router.put("/{order_id}/status", response_model=OrderOut)
async def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    """
    Move an order to another status.

    Only the four known statuses are accepted; any may follow any other.
    """
    if body.status not in ORDER_STATUSES:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": "Invalid status"})

    order = await storage.update_order_status(order_id, body.status)
    if order is None:
        raise NotFoundError("Order not found")

    await storage.log_activity(f"Order status updated to {body.status}", "order", order.id, actor_id)
    return order
