"""FastAPI application for the Credits Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import configure_logging
from services.credits_service.routers import admin_router, credits_router


def create_app() -> FastAPI:
    """Create and configure the Credits Service FastAPI app."""
    configure_logging()

    app = FastAPI(
        title="Marketplace Credits Service",
        version="0.1.0",
        description="Credit balances, packages and the append-only credit ledger.",
    )
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "credits"}

    app.include_router(credits_router)
    app.include_router(admin_router)

    return app


app = create_app()
