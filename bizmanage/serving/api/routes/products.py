"""
Products API Endpoints

Catalog products and their categories.
"""

from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from bizmanage.database.repository import Storage
from bizmanage.exceptions import ConflictError, NotFoundError
from bizmanage.serving.api.dependencies import get_current_user_id, get_storage
from bizmanage.serving.api.schemas import ApiModel, MessageResponse, ProductCategoryOut, ProductOut

router = APIRouter()
categories_router = APIRouter()


# =============================================================================
# REQUEST MODELS
# =============================================================================

class ProductCategoryCreate(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class ProductCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    sku: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category_id: int
    in_stock: bool = True
    min_stock_level: Optional[int] = Field(default=10, ge=0)


class ProductUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    sku: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    in_stock: Optional[bool] = None
    min_stock_level: Optional[int] = Field(default=None, ge=0)


# =============================================================================
# CATEGORIES
# =============================================================================

@categories_router.get("", response_model=List[ProductCategoryOut])
async def list_product_categories(storage: Storage = Depends(get_storage)):
    return await storage.list_product_categories()


@categories_router.post("", response_model=ProductCategoryOut, status_code=status.HTTP_201_CREATED)
async def create_product_category(
    body: ProductCategoryCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    category = await storage.create_product_category(body.model_dump())
    await storage.log_activity("Product category created", "product_category", category.id, actor_id)
    return category


# =============================================================================
# PRODUCTS
# =============================================================================

async def _require_category(storage: Storage, category_id: int) -> None:
    if await storage.get_product_category(category_id) is None:
        raise NotFoundError("Product category not found", details={"categoryId": category_id})


@router.get("", response_model=List[ProductOut])
async def list_products(storage: Storage = Depends(get_storage)):
    return await storage.list_products()


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: int, storage: Storage = Depends(get_storage)):
    product = await storage.get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    """Create a product; SKUs are unique."""
    await _require_category(storage, body.category_id)
    if await storage.get_product_by_sku(body.sku):
        raise ConflictError("SKU already exists", details={"sku": body.sku})

    product = await storage.create_product(body.model_dump())
    await storage.log_activity("Product created", "product", product.id, actor_id)
    return product


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "category_id" in changes:
        await _require_category(storage, changes["category_id"])

    product = await storage.update_product(product_id, changes)
    if product is None:
        raise NotFoundError("Product not found")
    await storage.log_activity("Product updated", "product", product.id, actor_id)
    return product


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    if not await storage.delete_product(product_id):
        raise NotFoundError("Product not found")
    await storage.log_activity("Product deleted", "product", product_id, actor_id)
    return MessageResponse(message="Product deleted")
