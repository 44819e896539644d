"""
Data Store Repository

`Storage` wraps one `AsyncSession` and exposes the create/read/update/delete
and list operations used by the API and the insight pipeline. Each entity
type has a single `create_*` method; identifiers come from the database.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, TypeVar

import bcrypt
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizmanage.database.models import (
    ActivityLog,
    Base,
    Branch,
    Customer,
    Inventory,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    ProductCategory,
    Supplier,
    User,
)
from bizmanage.exceptions import ConflictError, InvalidOrderStatusError

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

ORDER_STATUSES = frozenset(status.value for status in OrderStatus)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt and a fresh salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


class Storage:
    """
    Repository over the business management schema.

    Example:
        async with get_db() as db:
            storage = Storage(db)
            branch = await storage.create_branch({"name": "Downtown", "address": "1 Main St"})
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # -------------------------------------------------------------------------
    # Generic helpers
    # -------------------------------------------------------------------------

    async def _get(self, model: Type[ModelT], entity_id: int) -> Optional[ModelT]:
        return await self.session.get(model, entity_id)

    async def _find_one(self, model: Type[ModelT], *criteria) -> Optional[ModelT]:
        result = await self.session.execute(select(model).where(*criteria).limit(1))
        return result.scalar_one_or_none()

    async def _list(self, model: Type[ModelT], *criteria, order_by=None, limit: Optional[int] = None) -> List[ModelT]:
        query = select(model)
        if criteria:
            query = query.where(*criteria)
        query = query.order_by(*(order_by if order_by is not None else [model.id]))
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def _create(self, model: Type[ModelT], values: Dict[str, Any]) -> ModelT:
        entity = model(**values)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        logger.debug("Entity created", entity_type=model.__tablename__, entity_id=entity.id)
        return entity

    async def _update(self, model: Type[ModelT], entity_id: int, values: Dict[str, Any]) -> Optional[ModelT]:
        entity = await self._get(model, entity_id)
        if entity is None:
            return None
        for key, value in values.items():
            setattr(entity, key, value)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def _is_referenced(self, *checks) -> bool:
        """True when any `(model, criterion)` pair matches at least one row."""
        for model, criterion in checks:
            if await self._find_one(model, criterion) is not None:
                return True
        return False

    async def _delete(self, model: Type[ModelT], entity_id: int) -> bool:
        entity = await self._get(model, entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.flush()
        return True

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self._get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._find_one(User, User.username == username)

    async def create_user(self, data: Dict[str, Any]) -> User:
        values = dict(data)
        values["password_hash"] = hash_password(values.pop("password"))
        return await self._create(User, values)

    async def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]:
        values = dict(data)
        if "password" in values:
            values["password_hash"] = hash_password(values.pop("password"))
        return await self._update(User, user_id, values)

    async def list_users(self) -> List[User]:
        return await self._list(User)

    async def delete_user(self, user_id: int) -> bool:
        return await self._delete(User, user_id)

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    async def get_branch(self, branch_id: int) -> Optional[Branch]:
        return await self._get(Branch, branch_id)

    async def get_branch_by_name(self, name: str) -> Optional[Branch]:
        return await self._find_one(Branch, Branch.name == name)

    async def create_branch(self, data: Dict[str, Any]) -> Branch:
        return await self._create(Branch, data)

    async def update_branch(self, branch_id: int, data: Dict[str, Any]) -> Optional[Branch]:
        return await self._update(Branch, branch_id, data)

    async def list_branches(self) -> List[Branch]:
        return await self._list(Branch)

    async def delete_branch(self, branch_id: int) -> bool:
        """
        Delete a branch.

        Raises:
            ConflictError: If orders, inventory rows or users still reference it
        """
        if await self._is_referenced(
            (Order, Order.branch_id == branch_id),
            (Inventory, Inventory.branch_id == branch_id),
            (User, User.branch_id == branch_id),
        ):
            raise ConflictError("Branch is still in use", code="BRANCH_IN_USE", details={"branchId": branch_id})
        return await self._delete(Branch, branch_id)

    # -------------------------------------------------------------------------
    # Product categories
    # -------------------------------------------------------------------------

    async def get_product_category(self, category_id: int) -> Optional[ProductCategory]:
        return await self._get(ProductCategory, category_id)

    async def create_product_category(self, data: Dict[str, Any]) -> ProductCategory:
        return await self._create(ProductCategory, data)

    async def list_product_categories(self) -> List[ProductCategory]:
        return await self._list(ProductCategory)

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def get_product(self, product_id: int) -> Optional[Product]:
        return await self._get(Product, product_id)

    async def get_product_by_sku(self, sku: str) -> Optional[Product]:
        return await self._find_one(Product, Product.sku == sku)

    async def create_product(self, data: Dict[str, Any]) -> Product:
        return await self._create(Product, data)

    async def update_product(self, product_id: int, data: Dict[str, Any]) -> Optional[Product]:
        return await self._update(Product, product_id, data)

    async def list_products(self) -> List[Product]:
        return await self._list(Product)

    async def delete_product(self, product_id: int) -> bool:
        if await self._is_referenced(
            (OrderItem, OrderItem.product_id == product_id),
            (Inventory, Inventory.product_id == product_id),
        ):
            raise ConflictError(
                "Product is still in use", code="PRODUCT_IN_USE", details={"productId": product_id}
            )
        return await self._delete(Product, product_id)

    # -------------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------------

    async def create_inventory_item(self, data: Dict[str, Any]) -> Inventory:
        return await self._create(Inventory, data)

    async def update_inventory_item(self, item_id: int, data: Dict[str, Any]) -> Optional[Inventory]:
        return await self._update(Inventory, item_id, data)

    async def list_inventory(self) -> List[Inventory]:
        return await self._list(Inventory)

    async def list_inventory_by_branch(self, branch_id: int) -> List[Inventory]:
        return await self._list(Inventory, Inventory.branch_id == branch_id)

    async def list_low_stock_items(self, threshold: int = 10) -> List[Inventory]:
        """Inventory rows with quantity at or below `threshold`."""
        return await self._list(Inventory, Inventory.quantity <= threshold)

    # -------------------------------------------------------------------------
    # Customers
    # -------------------------------------------------------------------------

    async def get_customer(self, customer_id: int) -> Optional[Customer]:
        return await self._get(Customer, customer_id)

    async def create_customer(self, data: Dict[str, Any]) -> Customer:
        return await self._create(Customer, data)

    async def update_customer(self, customer_id: int, data: Dict[str, Any]) -> Optional[Customer]:
        return await self._update(Customer, customer_id, data)

    async def list_customers(self) -> List[Customer]:
        return await self._list(Customer)

    async def delete_customer(self, customer_id: int) -> bool:
        # Orders are never deleted, so a customer with orders stays.
        if await self._is_referenced((Order, Order.customer_id == customer_id)):
            raise ConflictError(
                "Customer has orders", code="CUSTOMER_HAS_ORDERS", details={"customerId": customer_id}
            )
        return await self._delete(Customer, customer_id)

    # -------------------------------------------------------------------------
    # Suppliers
    # -------------------------------------------------------------------------

    async def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        return await self._get(Supplier, supplier_id)

    async def get_supplier_by_name(self, name: str) -> Optional[Supplier]:
        return await self._find_one(Supplier, Supplier.name == name)

    async def create_supplier(self, data: Dict[str, Any]) -> Supplier:
        return await self._create(Supplier, data)

    async def update_supplier(self, supplier_id: int, data: Dict[str, Any]) -> Optional[Supplier]:
        return await self._update(Supplier, supplier_id, data)

    async def list_suppliers(self) -> List[Supplier]:
        return await self._list(Supplier)

    async def delete_supplier(self, supplier_id: int) -> bool:
        return await self._delete(Supplier, supplier_id)

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    async def get_order(self, order_id: int) -> Optional[Order]:
        return await self._get(Order, order_id)

    async def create_order(
        self,
        data: Dict[str, Any],
        items: Optional[Iterable[Dict[str, Any]]] = None,
    ) -> Order:
        """Create a pending order, plus its line items when given."""
        values = dict(data)
        values["status"] = OrderStatus.PENDING
        order = await self._create(Order, values)
        for item in items or []:
            await self.create_order_item({**item, "order_id": order.id})
        return order

    async def update_order_status(self, order_id: int, status: str) -> Optional[Order]:
        """
        Set an order's status.

        Only the value itself is checked; any known status may follow any other.

        Raises:
            InvalidOrderStatusError: If `status` is not a known order status
        """
        if status not in ORDER_STATUSES:
            raise InvalidOrderStatusError(details={"status": status, "allowed": sorted(ORDER_STATUSES)})
        return await self._update(Order, order_id, {"status": OrderStatus(status)})

    async def list_orders(self) -> List[Order]:
        return await self._list(Order)

    async def list_orders_by_customer(self, customer_id: int) -> List[Order]:
        return await self._list(Order, Order.customer_id == customer_id)

    async def list_recent_orders(self, limit: int = 10) -> List[Order]:
        """Newest orders first, at most `limit`."""
        return await self._list(
            Order,
            order_by=[Order.order_date.desc(), Order.id.desc()],
            limit=limit,
        )

    # -------------------------------------------------------------------------
    # Order items
    # -------------------------------------------------------------------------

    async def create_order_item(self, data: Dict[str, Any]) -> OrderItem:
        return await self._create(OrderItem, data)

    async def list_order_items_by_order(self, order_id: int) -> List[OrderItem]:
        return await self._list(OrderItem, OrderItem.order_id == order_id)

    async def list_order_items_for_orders(self, order_ids: Sequence[int]) -> List[OrderItem]:
        """Items of several orders, grouped in the order of `order_ids`."""
        if not order_ids:
            return []
        items = await self._list(OrderItem, OrderItem.order_id.in_(list(order_ids)))
        position = {order_id: index for index, order_id in enumerate(order_ids)}
        return sorted(items, key=lambda item: position[item.order_id])

    # -------------------------------------------------------------------------
    # Activity logs
    # -------------------------------------------------------------------------

    async def create_activity_log(self, data: Dict[str, Any]) -> ActivityLog:
        return await self._create(ActivityLog, data)

    async def log_activity(
        self,
        activity: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> ActivityLog:
        return await self.create_activity_log({
            "user_id": user_id,
            "activity": activity,
            "entity_type": entity_type,
            "entity_id": entity_id,
        })

    async def list_recent_activities(self, limit: int = 10) -> List[ActivityLog]:
        return await self._list(
            ActivityLog,
            order_by=[ActivityLog.timestamp.desc(), ActivityLog.id.desc()],
            limit=limit,
        )
