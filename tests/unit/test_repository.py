"""
Unit Tests - Storage Repository
"""
from datetime import timedelta
from decimal import Decimal

import bcrypt
import pytest
from sqlalchemy.exc import IntegrityError

from bizmanage.database.models import OrderStatus, utcnow
from bizmanage.exceptions import ConflictError, InvalidOrderStatusError


async def create_catalog(storage):
    """One branch, category, two products and a customer"""
    branch = await storage.create_branch({"name": "Downtown", "address": "1 Main St"})
    category = await storage.create_product_category({"name": "Electronics"})
    headphones = await storage.create_product({
        "name": "Wireless Headphones",
        "sku": "WH-BT100",
        "price": Decimal("59.99"),
        "category_id": category.id,
    })
    charger = await storage.create_product({
        "name": "Laptop Charger 65W",
        "sku": "LC-65W",
        "price": Decimal("29.50"),
        "category_id": category.id,
    })
    customer = await storage.create_customer({"name": "Mark Johnson", "email": "mark@example.com"})
    return branch, headphones, charger, customer


class TestUsers:
    """Tests for user storage"""

    async def test_password_is_hashed(self, storage):
        user = await storage.create_user({
            "username": "jane",
            "password": "secret123",
            "full_name": "Jane Doe",
            "email": "jane@example.com",
        })

        assert user.id is not None
        assert user.role == "user"
        assert user.active is True
        assert "secret123" not in user.password_hash
        assert bcrypt.checkpw(b"secret123", user.password_hash.encode())
        assert not bcrypt.checkpw(b"secret124", user.password_hash.encode())

    async def test_password_change_is_rehashed(self, storage):
        user = await storage.create_user({
            "username": "lee",
            "password": "secret123",
            "full_name": "Lee Park",
            "email": "lee@example.com",
        })

        updated = await storage.update_user(user.id, {"password": "n3w-pass"})

        assert "n3w-pass" not in updated.password_hash
        assert bcrypt.checkpw(b"n3w-pass", updated.password_hash.encode())

    async def test_lookup_and_delete(self, storage):
        user = await storage.create_user({
            "username": "sam",
            "password": "secret123",
            "full_name": "Sam Lee",
            "email": "sam@example.com",
        })

        assert (await storage.get_user_by_username("sam")).id == user.id
        assert await storage.delete_user(user.id) is True
        assert await storage.get_user(user.id) is None
        assert await storage.delete_user(user.id) is False


class TestCatalog:
    """Tests for branches, products and inventory"""

    async def test_ids_are_assigned_and_updates_apply(self, storage):
        branch, headphones, charger, _ = await create_catalog(storage)

        assert headphones.id != charger.id
        updated = await storage.update_product(headphones.id, {"price": Decimal("49.99")})
        assert updated.price == Decimal("49.99")
        assert await storage.update_product(9999, {"price": Decimal("1.00")}) is None
        assert (await storage.get_product_by_sku("LC-65W")).id == charger.id
        assert (await storage.get_branch_by_name("Downtown")).id == branch.id

    async def test_low_stock_threshold_is_inclusive(self, storage):
        branch, headphones, charger, _ = await create_catalog(storage)
        second = await storage.create_branch({"name": "Uptown", "address": "2 High St"})
        await storage.create_inventory_item({"product_id": headphones.id, "branch_id": branch.id, "quantity": 3})
        await storage.create_inventory_item({"product_id": charger.id, "branch_id": branch.id, "quantity": 8})
        await storage.create_inventory_item({"product_id": headphones.id, "branch_id": second.id, "quantity": 20})

        assert [row.quantity for row in await storage.list_low_stock_items(5)] == [3]
        assert [row.quantity for row in await storage.list_low_stock_items(8)] == [3, 8]
        assert len(await storage.list_inventory_by_branch(branch.id)) == 2

    async def test_one_inventory_row_per_product_and_branch(self, storage):
        branch, headphones, _, _ = await create_catalog(storage)
        await storage.create_inventory_item({"product_id": headphones.id, "branch_id": branch.id, "quantity": 3})

        with pytest.raises(IntegrityError):
            await storage.create_inventory_item({"product_id": headphones.id, "branch_id": branch.id, "quantity": 7})


class TestOrders:
    """Tests for orders and their status"""

    async def test_create_order_is_pending_with_items(self, storage):
        branch, headphones, charger, customer = await create_catalog(storage)

        order = await storage.create_order(
            {"customer_id": customer.id, "branch_id": branch.id, "total": Decimal("149.48"), "status": "completed"},
            items=[
                {"product_id": headphones.id, "quantity": 2, "price": Decimal("59.99")},
                {"product_id": charger.id, "quantity": 1, "price": Decimal("29.50")},
            ],
        )

        assert order.status == OrderStatus.PENDING
        items = await storage.list_order_items_by_order(order.id)
        assert [item.product_id for item in items] == [headphones.id, charger.id]

    async def test_status_update_accepts_only_known_values(self, storage):
        branch, _, _, customer = await create_catalog(storage)
        order = await storage.create_order({"customer_id": customer.id, "branch_id": branch.id, "total": Decimal("10")})

        updated = await storage.update_order_status(order.id, "processing")
        assert updated.status == OrderStatus.PROCESSING

        with pytest.raises(InvalidOrderStatusError):
            await storage.update_order_status(order.id, "shipped")

        assert (await storage.get_order(order.id)).status == OrderStatus.PROCESSING
        assert await storage.update_order_status(9999, "completed") is None

    async def test_recent_orders_newest_first(self, storage):
        branch, _, _, customer = await create_catalog(storage)
        now = utcnow()
        old = await storage.create_order({
            "customer_id": customer.id, "branch_id": branch.id, "total": Decimal("5"),
            "order_date": now - timedelta(days=3),
        })
        new = await storage.create_order({
            "customer_id": customer.id, "branch_id": branch.id, "total": Decimal("7"),
            "order_date": now,
        })
        middle = await storage.create_order({
            "customer_id": customer.id, "branch_id": branch.id, "total": Decimal("6"),
            "order_date": now - timedelta(days=1),
        })

        recent = await storage.list_recent_orders(2)

        assert [o.id for o in recent] == [new.id, middle.id]
        assert old.id not in [o.id for o in recent]
        assert len(await storage.list_orders_by_customer(customer.id)) == 3

    async def test_items_for_several_orders_follow_order_ids(self, storage):
        branch, headphones, charger, customer = await create_catalog(storage)
        first = await storage.create_order(
            {"customer_id": customer.id, "branch_id": branch.id, "total": Decimal("59.99")},
            items=[{"product_id": headphones.id, "quantity": 1, "price": Decimal("59.99")}],
        )
        second = await storage.create_order(
            {"customer_id": customer.id, "branch_id": branch.id, "total": Decimal("29.50")},
            items=[{"product_id": charger.id, "quantity": 1, "price": Decimal("29.50")}],
        )

        items = await storage.list_order_items_for_orders([second.id, first.id])

        assert [item.order_id for item in items] == [second.id, first.id]
        assert await storage.list_order_items_for_orders([]) == []


class TestReferencedDeletes:
    """Entities that orders or stock still point at cannot be deleted"""

    async def test_customer_with_orders_is_kept(self, storage):
        branch, headphones, _, customer = await create_catalog(storage)
        await storage.create_order(
            {"customer_id": customer.id, "branch_id": branch.id, "total": Decimal("59.99")},
            items=[{"product_id": headphones.id, "quantity": 1, "price": Decimal("59.99")}],
        )

        with pytest.raises(ConflictError) as exc_info:
            await storage.delete_customer(customer.id)

        assert exc_info.value.code == "CUSTOMER_HAS_ORDERS"
        assert await storage.get_customer(customer.id) is not None

    async def test_branch_and_product_in_use_are_kept(self, storage):
        branch, headphones, charger, _ = await create_catalog(storage)
        await storage.create_inventory_item({"product_id": headphones.id, "branch_id": branch.id, "quantity": 3})

        with pytest.raises(ConflictError):
            await storage.delete_branch(branch.id)
        with pytest.raises(ConflictError):
            await storage.delete_product(headphones.id)

        assert await storage.delete_product(charger.id) is True
        assert await storage.get_branch(branch.id) is not None


class TestActivityLog:
    async def test_recent_activities_newest_first(self, storage):
        await storage.log_activity("Branch created", "branch", 1, None)
        await storage.log_activity("Product created", "product", 2, 7)

        activities = await storage.list_recent_activities(1)

        assert len(activities) == 1
        assert activities[0].activity == "Product created"
        assert activities[0].user_id == 7
