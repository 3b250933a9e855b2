# storefront/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.routers import addresses, admin, carts, catalog, checkout, health, orders, users
from storefront.errors import StorefrontError
from storefront.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Map StorefrontError subclasses to their HTTP status with the common envelope."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc)},
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Storefront",
        version="1.0.0",
    )

    app.add_exception_handler(StorefrontError, storefront_error_handler)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(catalog.router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)
    app.include_router(addresses.router)
    app.include_router(admin.router)

    return app
