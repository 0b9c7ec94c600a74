"""Product media gallery: ordered uploads and cover selection."""

import uuid

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    MediaCreate,
    MediaListResponse,
    MediaResponse,
    SuccessResponse,
)
from services.store_service.services import curation
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/products/{product_id}/media", tags=["product-media"])


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
async def add_media(
    product_id: uuid.UUID,
    body: MediaCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Attach an already-uploaded media URL to my product."""
    media = await curation.add_product_media(
        db,
        current_user.user_id,
        product_id,
        media_url=body.media_url,
        media_type=body.media_type,
        mime_type=body.mime_type,
        is_cover=body.is_cover,
    )
    return MediaResponse.model_validate(media)


@router.get("", response_model=MediaListResponse)
async def list_media(product_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)):
    media, cover = await curation.list_product_media(db, product_id)
    return MediaListResponse(
        media=[MediaResponse.model_validate(m) for m in media],
        cover_id=cover.id if cover else None,
    )


@router.put("/{media_id}/cover", response_model=SuccessResponse)
async def set_cover(
    product_id: uuid.UUID,
    media_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    await curation.set_cover(db, current_user.user_id, product_id, media_id)
    return SuccessResponse()


@router.delete("/{media_id}", response_model=SuccessResponse)
async def delete_media(
    product_id: uuid.UUID,
    media_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    await curation.remove_product_media(db, current_user.user_id, product_id, media_id)
    return SuccessResponse()
