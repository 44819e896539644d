"""
Suppliers API Endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from bizmanage.database.repository import Storage
from bizmanage.exceptions import ConflictError, NotFoundError
from bizmanage.serving.api.dependencies import get_current_user_id, get_storage
from bizmanage.serving.api.schemas import ApiModel, MessageResponse, SupplierOut

router = APIRouter()


class SupplierCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    active: bool = True


class SupplierUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    active: Optional[bool] = None


@router.get("", response_model=List[SupplierOut])
async def list_suppliers(storage: Storage = Depends(get_storage)):
    return await storage.list_suppliers()


@router.get("/{supplier_id}", response_model=SupplierOut)
async def get_supplier(supplier_id: int, storage: Storage = Depends(get_storage)):
    supplier = await storage.get_supplier(supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier not found")
    return supplier


@router.post("", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    body: SupplierCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    if await storage.get_supplier_by_name(body.name):
        raise ConflictError("Supplier name already exists", details={"name": body.name})

    supplier = await storage.create_supplier(body.model_dump())
    await storage.log_activity("Supplier created", "supplier", supplier.id, actor_id)
    return supplier


@router.put("/{supplier_id}", response_model=SupplierOut)
async def update_supplier(
    supplier_id: int,
    body: SupplierUpdate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    supplier = await storage.update_supplier(supplier_id, body.model_dump(exclude_unset=True, exclude_none=True))
    if supplier is None:
        raise NotFoundError("Supplier not found")
    await storage.log_activity("Supplier updated", "supplier", supplier.id, actor_id)
    return supplier


@router.delete("/{supplier_id}", response_model=MessageResponse)
async def delete_supplier(
    supplier_id: int,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    if not await storage.delete_supplier(supplier_id):
        raise NotFoundError("Supplier not found")
    await storage.log_activity("Supplier deleted", "supplier", supplier_id, actor_id)
    return MessageResponse(message="Supplier deleted")
