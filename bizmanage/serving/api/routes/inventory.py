"""
Inventory API Endpoints

Per-branch stock counts. Listings embed the product each row refers to.
"""

from typing import List, Optional, Sequence

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
import structlog

from bizmanage.config import get_settings
from bizmanage.database.models import Inventory
from bizmanage.database.repository import Storage
from bizmanage.exceptions import ConflictError, NotFoundError
from bizmanage.serving.api.dependencies import get_current_user_id, get_storage
from bizmanage.serving.api.schemas import ApiModel, InventoryOut, InventoryWithProduct, ProductOut

router = APIRouter()
logger = structlog.get_logger(__name__)


class InventoryCreate(ApiModel):
    product_id: int
    branch_id: int
    quantity: int = Field(default=0, ge=0)


class InventoryUpdate(ApiModel):
    quantity: int = Field(ge=0)


async def _with_products(storage: Storage, rows: Sequence[Inventory]) -> List[InventoryWithProduct]:
    catalog = {product.id: product for product in await storage.list_products()}
    enriched = []
    for row in rows:
        item = InventoryWithProduct.model_validate(row)
        product = catalog.get(row.product_id)
        item.product = ProductOut.model_validate(product) if product else None
        enriched.append(item)
    return enriched


@router.get("", response_model=List[InventoryWithProduct])
async def list_inventory(
    branch_id: Optional[int] = Query(None, alias="branchId"),
    low_stock: bool = Query(False, alias="lowStock"),
    threshold: Optional[int] = Query(None, ge=0),
    storage: Storage = Depends(get_storage),
):
    """
    List inventory rows.

    Filters:
    - branchId: rows of one branch
    - lowStock=true: rows at or below `threshold` (default from settings)
    """
    if branch_id is not None:
        rows = await storage.list_inventory_by_branch(branch_id)
    elif low_stock:
        limit = threshold if threshold is not None else get_settings().inventory.low_stock_threshold
        rows = await storage.list_low_stock_items(limit)
    else:
        rows = await storage.list_inventory()

    logger.debug("Inventory retrieved", count=len(rows), branch_id=branch_id, low_stock=low_stock)
    return await _with_products(storage, rows)


@router.post("", response_model=InventoryOut, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    body: InventoryCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    """Record stock of a product at a branch; one row per (product, branch)."""
    if await storage.get_product(body.product_id) is None:
        raise NotFoundError("Product not found", details={"productId": body.product_id})
    if await storage.get_branch(body.branch_id) is None:
        raise NotFoundError("Branch not found", details={"branchId": body.branch_id})

    existing = await storage.list_inventory_by_branch(body.branch_id)
    if any(row.product_id == body.product_id for row in existing):
        raise ConflictError(
            "Inventory item already exists for this product and branch",
            details={"productId": body.product_id, "branchId": body.branch_id},
        )

    item = await storage.create_inventory_item(body.model_dump())
    await storage.log_activity("Inventory item created", "inventory", item.id, actor_id)
    return item


@router.put("/{item_id}", response_model=InventoryOut)
async def update_inventory_item(
    item_id: int,
    body: InventoryUpdate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    item = await storage.update_inventory_item(item_id, body.model_dump())
    if item is None:
        raise NotFoundError("Inventory item not found")
    await storage.log_activity("Inventory updated", "inventory", item.id, actor_id)
    return item
