"""
Customers API Endpoints

REST API for the customer directory.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field
import structlog

from bizmanage.database.repository import Storage
from bizmanage.exceptions import NotFoundError
from bizmanage.serving.api.dependencies import get_current_user_id, get_storage
from bizmanage.serving.api.schemas import ApiModel, CustomerOut, MessageResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


class CustomerCreate(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    loyalty_points: int = Field(default=0, ge=0)


class CustomerUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    loyalty_points: Optional[int] = Field(default=None, ge=0)


@router.get("", response_model=List[CustomerOut])
async def list_customers(storage: Storage = Depends(get_storage)):
    """List all customers."""
    customers = await storage.list_customers()
    logger.debug("Customers retrieved", count=len(customers))
    return customers


@router.get("/{customer_id}", response_model=CustomerOut)
async def get_customer(customer_id: int, storage: Storage = Depends(get_storage)):
    """Get customer details."""
    customer = await storage.get_customer(customer_id)
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
async def create_customer(
    body: CustomerCreate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    customer = await storage.create_customer(body.model_dump())
    await storage.log_activity("Customer created", "customer", customer.id, actor_id)
    return customer


@router.put("/{customer_id}", response_model=CustomerOut)
async def update_customer(
    customer_id: int,
    body: CustomerUpdate,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    customer = await storage.update_customer(customer_id, body.model_dump(exclude_unset=True, exclude_none=True))
    if customer is None:
        raise NotFoundError("Customer not found")
    await storage.log_activity("Customer updated", "customer", customer.id, actor_id)
    return customer


@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer(
    customer_id: int,
    storage: Storage = Depends(get_storage),
    actor_id: Optional[int] = Depends(get_current_user_id),
):
    if not await storage.delete_customer(customer_id):
        raise NotFoundError("Customer not found")
    await storage.log_activity("Customer deleted", "customer", customer_id, actor_id)
    return MessageResponse(message="Customer deleted")
