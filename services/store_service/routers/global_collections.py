"""Marketplace-wide collections of promoted products."""

import uuid

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    GlobalCollectionCreate,
    GlobalCollectionListResponse,
    GlobalCollectionResponse,
    GlobalCollectionSummary,
    GlobalCollectionUpdate,
    MemberAdd,
    MemberAddResponse,
    MemberResponse,
    SuccessResponse,
)
from services.store_service.services import curation
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/global-collections", tags=["global-collections"])


@router.get("", response_model=GlobalCollectionListResponse)
async def list_global_collections(db: AsyncSession = Depends(get_async_db)):
    """Active collections, newest first."""
    collections = await curation.list_global_collections(db)
    return GlobalCollectionListResponse(
        collections=[GlobalCollectionSummary.model_validate(c) for c in collections]
    )


@router.post(
    "",
    response_model=GlobalCollectionSummary,
    status_code=status.HTTP_201_CREATED,
)
async def create_global_collection(
    body: GlobalCollectionCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    collection = await curation.create_global_collection(
        db,
        slug=body.slug,
        name=body.name,
        description=body.description,
        cover_image_url=body.cover_image_url,
    )
    return GlobalCollectionSummary.model_validate(collection)


@router.get("/{slug}", response_model=GlobalCollectionResponse)
async def get_global_collection(slug: str, db: AsyncSession = Depends(get_async_db)):
    collection = await curation.get_global_collection(db, slug)
    members = await curation.list_global_collection_products(db, collection)
    response = GlobalCollectionResponse.model_validate(collection)
    response.products = [MemberResponse.model_validate(m) for m in members]
    return response


@router.patch("/{slug}", response_model=GlobalCollectionSummary)
async def update_global_collection(
    slug: str,
    body: GlobalCollectionUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Admin: partial update; inactive collections can be reactivated here."""
    collection = await curation.update_global_collection(
        db, slug, body.model_dump(exclude_unset=True)
    )
    return GlobalCollectionSummary.model_validate(collection)


@router.delete("/{slug}", response_model=SuccessResponse)
async def delete_global_collection(
    slug: str,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await curation.delete_global_collection(db, slug)
    return SuccessResponse()


@router.post(
    "/{slug}/products",
    response_model=MemberAddResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_global_collection_product(
    slug: str,
    body: MemberAdd,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Admin: append a promoted, active product."""
    member = await curation.add_to_global_collection(db, slug, body.product_id)
    return MemberAddResponse(order_index=member.order_index)


@router.delete("/{slug}/products/{product_id}", response_model=SuccessResponse)
async def remove_global_collection_product(
    slug: str,
    product_id: uuid.UUID,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await curation.remove_from_global_collection(db, slug, product_id)
    return SuccessResponse()
