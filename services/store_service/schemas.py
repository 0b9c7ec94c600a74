"""Pydantic schemas for store service."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.store_service.models import MediaType, OrderStatus, ProductStatus

# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderStatusUpdate(BaseModel):
    # Free-form so unknown values surface as invalid_status, not a 422.
    status: str = Field(..., max_length=50)


class OrderStatusUpdateResponse(BaseModel):
    success: bool = True
    order_id: uuid.UUID
    status: OrderStatus


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price_at_purchase: Decimal


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    buyer_id: str
    status: OrderStatus
    subtotal: Decimal
    shipping_cost: Decimal
    total: Decimal
    paid_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class OrderDetailResponse(OrderResponse):
    items: list[OrderItemResponse] = []


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    skip: int
    limit: int


# ============================================================================
# PROMOTION SCHEMAS
# ============================================================================


class PromotionPricingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price_per_day: Decimal
    min_days: int
    max_days: int


class PromoteRequest(BaseModel):
    days: int


class PromoteResponse(BaseModel):
    success: bool = True
    product_id: uuid.UUID
    cost: Decimal
    balance: Decimal
    promoted_until: datetime


class PromotedProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    status: ProductStatus
    is_promoted: bool
    promoted_start_date: Optional[datetime] = None
    promoted_end_date: Optional[datetime] = None


# ============================================================================
# COLLECTION SCHEMAS
# ============================================================================


class CollectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CollectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    description: Optional[str] = None
    order_index: int
    created_at: datetime


class MemberAdd(BaseModel):
    product_id: uuid.UUID


class MemberAddResponse(BaseModel):
    success: bool = True
    order_index: int


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: uuid.UUID
    order_index: int
    created_at: datetime


class ProductCollectionsResponse(BaseModel):
    collection_ids: list[uuid.UUID]


class GlobalCollectionCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    cover_image_url: Optional[str] = Field(None, max_length=1024)


class GlobalCollectionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    cover_image_url: Optional[str] = Field(None, max_length=1024)
    is_active: Optional[bool] = None


class GlobalCollectionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    name: str
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_active: bool
    created_at: datetime


class GlobalCollectionResponse(GlobalCollectionSummary):
    products: list[MemberResponse] = []


class GlobalCollectionListResponse(BaseModel):
    collections: list[GlobalCollectionSummary]


class SuccessResponse(BaseModel):
    success: bool = True


# ============================================================================
# MEDIA SCHEMAS
# ============================================================================


class MediaCreate(BaseModel):
    media_url: str = Field(..., max_length=1024)
    media_type: MediaType = MediaType.IMAGE
    mime_type: Optional[str] = Field(None, max_length=100)
    is_cover: bool = False


class MediaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    media_url: str
    media_type: MediaType
    mime_type: Optional[str] = None
    order_index: int
    is_cover: bool


class MediaListResponse(BaseModel):
    media: list[MediaResponse]
    cover_id: Optional[uuid.UUID] = None
