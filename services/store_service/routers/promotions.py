"""Paid product promotion."""

import uuid

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    PromotedProductResponse,
    PromoteRequest,
    PromoteResponse,
    PromotionPricingResponse,
    SuccessResponse,
)
from services.store_service.services import promotion_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["promotions"])


@router.get("/promotion/pricing", response_model=PromotionPricingResponse)
async def get_pricing(db: AsyncSession = Depends(get_async_db)):
    """Public price list (defaults apply when none is configured)."""
    pricing = await promotion_ops.get_promotion_pricing(db)
    return PromotionPricingResponse.model_validate(pricing)


@router.post("/products/{product_id}/promote", response_model=PromoteResponse)
async def promote_product(
    product_id: uuid.UUID,
    body: PromoteRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Spend credits to promote one of my products."""
    result = await promotion_ops.promote_product(
        db, user_id=current_user.user_id, product_id=product_id, days=body.days
    )
    return PromoteResponse(
        product_id=result.product_id,
        cost=result.cost,
        balance=result.balance,
        promoted_until=result.promoted_until,
    )


@router.delete("/products/{product_id}/promote", response_model=SuccessResponse)
async def unpromote_product(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Stop promoting a product. Spent credits are not refunded."""
    await promotion_ops.unpromote_product(
        db, user_id=current_user.user_id, product_id=product_id
    )
    return SuccessResponse()


@router.get("/seller/promotions", response_model=list[PromotedProductResponse])
async def list_my_promotions(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    products = await promotion_ops.list_store_promotions(db, current_user.user_id)
    return [PromotedProductResponse.model_validate(p) for p in products]
