"""Ownership lookups shared by seller-facing store operations."""

import uuid
from typing import Optional

from libs.common.errors import Forbidden, NotFound
from services.store_service.models import Collection, Product, Store
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def get_seller_store(db: AsyncSession, seller_id: str) -> Optional[Store]:
    result = await db.execute(select(Store).where(Store.seller_id == seller_id))
    return result.scalar_one_or_none()


async def require_seller_store(db: AsyncSession, seller_id: str) -> Store:
    """The caller's store, or ``Forbidden`` if they do not sell."""
    store = await get_seller_store(db, seller_id)
    if not store:
        raise Forbidden("Seller store required")
    return store


async def require_owned_store(
    db: AsyncSession, seller_id: str, store_id: uuid.UUID
) -> Store:
    store = await db.get(Store, store_id)
    if not store or store.seller_id != seller_id:
        raise Forbidden()
    return store


async def require_owned_product(
    db: AsyncSession,
    seller_id: str,
    product_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Product:
    """Load a product the caller's store owns.

    ``NotFound`` if the product is missing, ``Forbidden`` if it belongs to
    another store (or the caller has none).
    """
    store = await require_seller_store(db, seller_id)

    query = select(Product).where(Product.id == product_id)
    if for_update:
        query = query.with_for_update()
    product = (await db.execute(query)).scalar_one_or_none()

    if not product:
        raise NotFound("Product not found")
    if product.store_id != store.id:
        raise Forbidden("Product belongs to another store")
    return product


async def require_owned_collection(
    db: AsyncSession, seller_id: str, collection_id: uuid.UUID
) -> Collection:
    result = await db.execute(
        select(Collection, Store.seller_id)
        .join(Store, Store.id == Collection.store_id)
        .where(Collection.id == collection_id)
    )
    row = result.first()
    if not row:
        raise NotFound("Collection not found")
    collection, owner_id = row
    if owner_id != seller_id:
        raise Forbidden()
    return collection
