"""
FastAPI Application Factory

Creates and configures the BizManage Pro API application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
import structlog

from bizmanage.config import get_settings
from bizmanage.config.logging import configure_logging
from bizmanage.data.seed import seed_database
from bizmanage.database.connection import close_database, init_database
from bizmanage.exceptions import (
    AIConfigurationError,
    BizManageError,
    ConflictError,
    InvalidOrderStatusError,
    NotFoundError,
)
from bizmanage.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from bizmanage.serving.api.routes import (
    activities_router,
    analytics_router,
    branches_router,
    customers_router,
    health_router,
    insights_router,
    inventory_router,
    orders_router,
    product_categories_router,
    products_router,
    suppliers_router,
    users_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    settings = get_settings()
    logger.info("Starting BizManage Pro API", environment=settings.app_env, version=settings.version)

    await init_database()
    await seed_database()

    yield

    logger.info("Shutting down...")
    await close_database()


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": jsonable_encoder(exc.errors())},
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    content = {"message": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=content)


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=exc.to_dict())


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error", path=request.url.path, error=str(exc.orig))
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=ConflictError("Entity violates a uniqueness or reference constraint").to_dict(),
    )


async def invalid_status_handler(request: Request, exc: InvalidOrderStatusError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": exc.message})


async def ai_configuration_handler(request: Request, exc: AIConfigurationError) -> JSONResponse:
    logger.error("AI insights requested without configuration", code=exc.code)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=exc.to_dict())


async def domain_error_handler(request: Request, exc: BizManageError) -> JSONResponse:
    logger.error("Unhandled domain error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=exc.to_dict())


def create_api_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()
    app = FastAPI(
        title="BizManage Pro API",
        description="Business management API with AI-generated insights",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(InvalidOrderStatusError, invalid_status_handler)
    app.add_exception_handler(AIConfigurationError, ai_configuration_handler)
    app.add_exception_handler(BizManageError, domain_error_handler)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(users_router, prefix="/api/users", tags=["Users"])
    app.include_router(branches_router, prefix="/api/branches", tags=["Branches"])
    app.include_router(product_categories_router, prefix="/api/product-categories", tags=["Products"])
    app.include_router(products_router, prefix="/api/products", tags=["Products"])
    app.include_router(inventory_router, prefix="/api/inventory", tags=["Inventory"])
    app.include_router(customers_router, prefix="/api/customers", tags=["Customers"])
    app.include_router(suppliers_router, prefix="/api/suppliers", tags=["Suppliers"])
    app.include_router(orders_router, prefix="/api/orders", tags=["Orders"])
    app.include_router(activities_router, prefix="/api/activities", tags=["Activities"])
    app.include_router(analytics_router, prefix="/api/analytics", tags=["Analytics"])
    app.include_router(insights_router, prefix="/api/insights", tags=["Insights"])

    return app
