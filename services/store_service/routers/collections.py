"""Seller-curated store collections and their product membership."""

import uuid

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    CollectionCreate,
    CollectionResponse,
    MemberAdd,
    MemberAddResponse,
    MemberResponse,
    ProductCollectionsResponse,
    SuccessResponse,
)
from services.store_service.services import curation
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["collections"])


@router.post(
    "/collections",
    response_model=CollectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_collection(
    body: CollectionCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a collection at the end of my store's list."""
    collection = await curation.create_collection(
        db, current_user.user_id, name=body.name, description=body.description
    )
    return CollectionResponse.model_validate(collection)


@router.get("/stores/{store_id}/collections", response_model=list[CollectionResponse])
async def list_store_collections(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    collections = await curation.list_store_collections(
        db, current_user.user_id, store_id
    )
    return [CollectionResponse.model_validate(c) for c in collections]


@router.get(
    "/collections/{collection_id}/products", response_model=list[MemberResponse]
)
async def list_collection_products(
    collection_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Public: products of a collection in display order."""
    members = await curation.list_collection_products(db, collection_id)
    return [MemberResponse.model_validate(m) for m in members]


@router.post(
    "/collections/{collection_id}/products",
    response_model=MemberAddResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_collection_product(
    collection_id: uuid.UUID,
    body: MemberAdd,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    member = await curation.add_product_to_collection(
        db, current_user.user_id, collection_id, body.product_id
    )
    return MemberAddResponse(order_index=member.order_index)


@router.delete(
    "/collections/{collection_id}/products/{product_id}",
    response_model=SuccessResponse,
)
async def remove_collection_product(
    collection_id: uuid.UUID,
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Remove a product; the remaining order is kept as-is."""
    await curation.remove_product_from_collection(
        db, current_user.user_id, collection_id, product_id
    )
    return SuccessResponse()


@router.delete("/collections/{collection_id}", response_model=SuccessResponse)
async def delete_collection(
    collection_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete one of my collections; sibling order is left untouched."""
    await curation.delete_collection(db, current_user.user_id, collection_id)
    return SuccessResponse()


@router.get(
    "/products/{product_id}/collections",
    response_model=ProductCollectionsResponse,
)
async def list_product_collections(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    collection_ids = await curation.list_product_collection_ids(
        db, current_user.user_id, product_id
    )
    return ProductCollectionsResponse(collection_ids=collection_ids)
