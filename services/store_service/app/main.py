"""FastAPI application for the Store Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import configure_logging
from services.store_service.routers import (
    collections_router,
    global_collections_router,
    media_router,
    orders_router,
    promotions_router,
)


def create_app() -> FastAPI:
    """Create and configure the Store Service FastAPI app."""
    configure_logging()

    app = FastAPI(
        title="Marketplace Store Service",
        version="0.1.0",
        description="Seller orders, paid promotion, collections and product media.",
    )
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "store"}

    # Seller routes
    app.include_router(orders_router)
    app.include_router(promotions_router)

    # Curation (public reads, owner/admin writes)
    app.include_router(collections_router)
    app.include_router(global_collections_router)
    app.include_router(media_router)

    return app


app = create_app()
