"""Store collections, global collections and product media.

All three are ordered lists; indices come from ``ordered_list``. This module
adds ownership and eligibility checks on top.
"""

import uuid
from typing import Optional

from libs.common.errors import NotEligible, NotFound, SlugTaken
from libs.common.logging import get_logger
from services.store_service.models import (
    Collection,
    CollectionProduct,
    GlobalCollection,
    GlobalCollectionProduct,
    MediaType,
    Product,
    ProductMedia,
    ProductStatus,
)
from services.store_service.services import ordered_list
from services.store_service.services.ordered_list import (
    COLLECTION_PRODUCTS,
    GLOBAL_COLLECTION_PRODUCTS,
    PRODUCT_MEDIA,
    STORE_COLLECTIONS,
)
from services.store_service.services.ownership import (
    require_owned_collection,
    require_owned_product,
    require_owned_store,
    require_seller_store,
)
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


# ============================================================================
# STORE COLLECTIONS
# ============================================================================


async def create_collection(
    db: AsyncSession,
    seller_id: str,
    *,
    name: str,
    description: Optional[str] = None,
) -> Collection:
    store = await require_seller_store(db, seller_id)
    return await ordered_list.append_member(
        db, STORE_COLLECTIONS, store.id, name=name, description=description
    )


async def list_store_collections(
    db: AsyncSession, seller_id: str, store_id: uuid.UUID
) -> list[Collection]:
    await require_owned_store(db, seller_id, store_id)
    return await ordered_list.list_members(db, STORE_COLLECTIONS, store_id)


async def delete_collection(
    db: AsyncSession, seller_id: str, collection_id: uuid.UUID
) -> None:
    """Remove a collection from its store's list; its memberships go with it.

    Sibling collections keep their order_index.
    """
    collection = await require_owned_collection(db, seller_id, collection_id)
    await ordered_list.remove_member(
        db, STORE_COLLECTIONS, collection.store_id, collection.id
    )


async def list_product_collection_ids(
    db: AsyncSession, seller_id: str, product_id: uuid.UUID
) -> list[uuid.UUID]:
    """Ids of the store collections that contain one of my products."""
    product = await require_owned_product(db, seller_id, product_id)
    result = await db.execute(
        select(CollectionProduct.collection_id)
        .where(CollectionProduct.product_id == product.id)
        .order_by(CollectionProduct.created_at)
    )
    return list(result.scalars().all())


async def add_product_to_collection(
    db: AsyncSession,
    seller_id: str,
    collection_id: uuid.UUID,
    product_id: uuid.UUID,
) -> CollectionProduct:
    """Append a product of the collection's own store."""
    collection = await require_owned_collection(db, seller_id, collection_id)

    product = await db.get(Product, product_id)
    if not product or product.store_id != collection.store_id:
        raise NotFound("Product not found")

    return await ordered_list.append_member(
        db, COLLECTION_PRODUCTS, collection.id, product_id
    )


async def remove_product_from_collection(
    db: AsyncSession,
    seller_id: str,
    collection_id: uuid.UUID,
    product_id: uuid.UUID,
) -> bool:
    collection = await require_owned_collection(db, seller_id, collection_id)
    return await ordered_list.remove_member(
        db, COLLECTION_PRODUCTS, collection.id, product_id
    )


async def list_collection_products(
    db: AsyncSession, collection_id: uuid.UUID
) -> list[CollectionProduct]:
    collection = await db.get(Collection, collection_id)
    if not collection:
        raise NotFound("Collection not found")
    return await ordered_list.list_members(db, COLLECTION_PRODUCTS, collection.id)


# ============================================================================
# GLOBAL COLLECTIONS
# ============================================================================


async def get_global_collection(
    db: AsyncSession, slug: str, *, include_inactive: bool = False
) -> GlobalCollection:
    """Public lookups only see active collections; admin edits see all."""
    query = select(GlobalCollection).where(GlobalCollection.slug == slug)
    if not include_inactive:
        query = query.where(GlobalCollection.is_active.is_(True))
    collection = (await db.execute(query)).scalar_one_or_none()
    if not collection:
        raise NotFound("Global collection not found")
    return collection


async def list_global_collections(db: AsyncSession) -> list[GlobalCollection]:
    result = await db.execute(
        select(GlobalCollection)
        .where(GlobalCollection.is_active.is_(True))
        .order_by(GlobalCollection.created_at.desc())
    )
    return list(result.scalars().all())


async def create_global_collection(
    db: AsyncSession,
    *,
    slug: str,
    name: str,
    description: Optional[str] = None,
    cover_image_url: Optional[str] = None,
) -> GlobalCollection:
    existing = await db.execute(
        select(GlobalCollection.id).where(GlobalCollection.slug == slug)
    )
    if existing.first():
        raise SlugTaken()

    collection = GlobalCollection(
        slug=slug,
        name=name,
        description=description,
        cover_image_url=cover_image_url,
        is_active=True,
    )
    db.add(collection)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise SlugTaken() from None
    await db.refresh(collection)

    logger.info("Created global collection %s", slug)
    return collection


async def update_global_collection(
    db: AsyncSession, slug: str, changes: dict
) -> GlobalCollection:
    """Apply the given fields (name, description, cover_image_url, is_active).

    Only description and cover_image_url can be cleared with ``None``.
    """
    collection = await get_global_collection(db, slug, include_inactive=True)
    for field, value in changes.items():
        if value is None and field in ("name", "is_active"):
            continue
        setattr(collection, field, value)
    await db.commit()
    await db.refresh(collection)

    logger.info("Updated global collection %s: %s", slug, sorted(changes))
    return collection


async def delete_global_collection(db: AsyncSession, slug: str) -> None:
    result = await db.execute(
        delete(GlobalCollection).where(GlobalCollection.slug == slug)
    )
    await db.commit()
    if not result.rowcount:
        raise NotFound("Global collection not found")
    logger.info("Deleted global collection %s", slug)


async def list_global_collection_products(
    db: AsyncSession, collection: GlobalCollection
) -> list[GlobalCollectionProduct]:
    return await ordered_list.list_members(
        db, GLOBAL_COLLECTION_PRODUCTS, collection.id
    )


async def add_to_global_collection(
    db: AsyncSession, slug: str, product_id: uuid.UUID
) -> GlobalCollectionProduct:
    """Only promoted, active products can be curated marketplace-wide."""
    collection = await get_global_collection(db, slug)

    product = await db.get(Product, product_id)
    if not product:
        raise NotFound("Product not found")
    if not product.is_promoted or product.status != ProductStatus.ACTIVE:
        logger.warning(
            "Rejected product %s for global collection %s: promoted=%s status=%s",
            product_id,
            slug,
            product.is_promoted,
            product.status.value,
        )
        raise NotEligible("Only promoted, active products can be added")

    return await ordered_list.append_member(
        db, GLOBAL_COLLECTION_PRODUCTS, collection.id, product_id
    )


async def remove_from_global_collection(
    db: AsyncSession, slug: str, product_id: uuid.UUID
) -> bool:
    collection = await get_global_collection(db, slug)
    return await ordered_list.remove_member(
        db, GLOBAL_COLLECTION_PRODUCTS, collection.id, product_id
    )


# ============================================================================
# PRODUCT MEDIA
# ============================================================================


async def _clear_cover(
    db: AsyncSession, product_id: uuid.UUID, keep: Optional[uuid.UUID] = None
) -> None:
    query = update(ProductMedia).where(
        ProductMedia.product_id == product_id, ProductMedia.is_cover.is_(True)
    )
    if keep is not None:
        query = query.where(ProductMedia.id != keep)
    await db.execute(
        query
        .values(is_cover=False)
        .execution_options(synchronize_session=False)
    )


async def add_product_media(
    db: AsyncSession,
    seller_id: str,
    product_id: uuid.UUID,
    *,
    media_url: str,
    media_type: MediaType = MediaType.IMAGE,
    mime_type: Optional[str] = None,
    is_cover: bool = False,
) -> ProductMedia:
    """Append media to the end of the product's gallery.

    ``is_cover=True`` takes the cover flag from any sibling in the same
    transaction.
    """
    product = await require_owned_product(db, seller_id, product_id)
    if is_cover:
        await _clear_cover(db, product.id)

    return await ordered_list.append_member(
        db,
        PRODUCT_MEDIA,
        product.id,
        media_url=media_url,
        media_type=media_type,
        mime_type=mime_type,
        is_cover=is_cover,
    )


async def list_product_media(
    db: AsyncSession, product_id: uuid.UUID
) -> tuple[list[ProductMedia], Optional[ProductMedia]]:
    """Media by order_index together with the effective cover."""
    if not await db.get(Product, product_id):
        raise NotFound("Product not found")
    media = await ordered_list.list_members(db, PRODUCT_MEDIA, product_id)
    return media, ordered_list.select_cover(media)


async def set_cover(
    db: AsyncSession,
    seller_id: str,
    product_id: uuid.UUID,
    media_id: uuid.UUID,
) -> ProductMedia:
    product = await require_owned_product(db, seller_id, product_id)

    media = await db.get(ProductMedia, media_id)
    if not media or media.product_id != product.id:
        raise NotFound("Media not found")

    await _clear_cover(db, product.id, keep=media.id)
    media.is_cover = True
    await db.commit()
    await db.refresh(media)

    logger.info("Media %s set as cover for product %s", media_id, product_id)
    return media


async def remove_product_media(
    db: AsyncSession,
    seller_id: str,
    product_id: uuid.UUID,
    media_id: uuid.UUID,
) -> None:
    product = await require_owned_product(db, seller_id, product_id)
    removed = await ordered_list.remove_member(db, PRODUCT_MEDIA, product.id, media_id)
    if not removed:
        raise NotFound("Media not found")
