"""
API Response Models

Entity representations shared by several routers. Everything on the wire
is camelCase; ORM rows are read through `from_attributes`.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from bizmanage.database.models import OrderStatus


class ApiModel(BaseModel):
    """Base for request and response bodies"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str


# =============================================================================
# ENTITIES
# =============================================================================

class UserOut(ApiModel):
    """User account without credentials"""
    id: int
    username: str
    full_name: str
    email: str
    role: str
    branch_id: Optional[int] = None
    active: bool


class BranchOut(ApiModel):
    id: int
    name: str
    address: str
    phone_number: Optional[str] = None
    manager: Optional[str] = None
    active: bool


class SupplierOut(ApiModel):
    id: int
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    active: bool


class ProductCategoryOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None


class ProductOut(ApiModel):
    id: int
    name: str
    sku: str
    description: Optional[str] = None
    price: float
    category_id: int
    in_stock: bool
    min_stock_level: Optional[int] = None


class InventoryOut(ApiModel):
    id: int
    product_id: int
    branch_id: int
    quantity: int
    last_updated: Optional[datetime] = None


class InventoryWithProduct(InventoryOut):
    product: Optional[ProductOut] = None


class CustomerOut(ApiModel):
    id: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    loyalty_points: int = 0
    registered_date: Optional[datetime] = None


class OrderOut(ApiModel):
    id: int
    customer_id: int
    branch_id: int
    order_date: Optional[datetime] = None
    total: float
    status: OrderStatus
    payment_status: bool


class OrderWithCustomer(OrderOut):
    customer: Optional[CustomerOut] = None


class OrderItemOut(ApiModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: float


class ActivityOut(ApiModel):
    id: int
    user_id: Optional[int] = None
    activity: str
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    timestamp: Optional[datetime] = None


class ActivityWithUser(ActivityOut):
    user: Optional[UserOut] = None
