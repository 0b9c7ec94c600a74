"""Store Service models package."""

from services.store_service.models.catalog import (
    Collection,
    CollectionProduct,
    GlobalCollection,
    GlobalCollectionProduct,
    Product,
    ProductMedia,
    PromotionPricing,
    Store,
)
from services.store_service.models.commerce import Order, OrderItem
from services.store_service.models.enums import MediaType, OrderStatus, ProductStatus
from services.store_service.models.ordering import OrderedListCounter

__all__ = [
    "Collection",
    "CollectionProduct",
    "GlobalCollection",
    "GlobalCollectionProduct",
    "MediaType",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderedListCounter",
    "Product",
    "ProductMedia",
    "ProductStatus",
    "PromotionPricing",
    "Store",
]
