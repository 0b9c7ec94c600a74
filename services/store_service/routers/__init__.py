"""Store service routers package."""

from services.store_service.routers.collections import router as collections_router
from services.store_service.routers.global_collections import (
    router as global_collections_router,
)
from services.store_service.routers.media import router as media_router
from services.store_service.routers.orders import router as orders_router
from services.store_service.routers.promotions import router as promotions_router

__all__ = [
    "collections_router",
    "global_collections_router",
    "media_router",
    "orders_router",
    "promotions_router",
]
