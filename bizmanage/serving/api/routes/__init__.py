"""
API Routes Module
"""
from .health import router as health_router
from .users import router as users_router
from .branches import router as branches_router
from .products import router as products_router, categories_router as product_categories_router
from .inventory import router as inventory_router
from .customers import router as customers_router
from .suppliers import router as suppliers_router
from .orders import router as orders_router
from .activities import router as activities_router
from .analytics import router as analytics_router
from .insights import router as insights_router

__all__ = [
    "health_router",
    "users_router",
    "branches_router",
    "products_router",
    "product_categories_router",
    "inventory_router",
    "customers_router",
    "suppliers_router",
    "orders_router",
    "activities_router",
    "analytics_router",
    "insights_router",
]
