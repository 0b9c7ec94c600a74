"""Seller order management: listing, detail and status transitions."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import OrderStatus
from services.store_service.schemas import (
    OrderDetailResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderStatusUpdateResponse,
)
from services.store_service.services.order_lifecycle import (
    advance_order_status,
    get_seller_order,
    list_seller_orders,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/seller/orders", tags=["seller-orders"])


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[OrderStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Orders containing my store's products, newest first."""
    orders, total = await list_seller_orders(
        db, current_user.user_id, status=status, skip=skip, limit=limit
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Order detail limited to my store's line items."""
    order, items = await get_seller_order(db, current_user.user_id, order_id)
    response = OrderDetailResponse.model_validate(order)
    response.items = [OrderItemResponse.model_validate(i) for i in items]
    return response


@router.patch("/{order_id}", response_model=OrderStatusUpdateResponse)
async def update_order_status(
    order_id: uuid.UUID,
    body: OrderStatusUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Advance (or cancel) an order that contains my store's products."""
    order = await advance_order_status(
        db,
        order_id=order_id,
        requested_status=body.status,
        acting_user_id=current_user.user_id,
    )
    return OrderStatusUpdateResponse(order_id=order.id, status=order.status)
