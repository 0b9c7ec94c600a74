"""Store catalog models: stores, products, media, collections, promotion pricing."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import MediaType, ProductStatus, enum_values
from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import (
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# STORES
# ============================================================================


class Store(Base):
    """A seller's shop. One per seller."""

    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    seller_id: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    products = relationship("Product", back_populates="store")
    collections = relationship(
        "Collection", back_populates="store", order_by="Collection.order_index"
    )

    def __repr__(self):
        return f"<Store {self.slug}>"


# ============================================================================
# PRODUCTS
# ============================================================================


class Product(Base):
    """A listing owned by a store."""

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), index=True, nullable=False
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    status: Mapped[ProductStatus] = mapped_column(
        SAEnum(
            ProductStatus,
            values_callable=enum_values,
            name="product_status_enum",
        ),
        default=ProductStatus.DRAFT,
        server_default="draft",
    )

    # Promotion (mutated only by promotion_ops)
    is_promoted: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    promoted_start_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    promoted_end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_trending: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        Index("ix_products_promoted_end", "is_promoted", "promoted_end_date"),
    )

    # Relationships
    store = relationship("Store", back_populates="products")
    media = relationship(
        "ProductMedia",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductMedia.order_index",
    )

    def __repr__(self):
        return f"<Product {self.title}>"


class ProductMedia(Base):
    """Ordered product images/videos. Parent: product."""

    __tablename__ = "product_media"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )

    media_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    media_type: Mapped[MediaType] = mapped_column(
        SAEnum(
            MediaType,
            values_callable=enum_values,
            name="product_media_type_enum",
        ),
        default=MediaType.IMAGE,
        server_default="image",
    )
    mime_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    is_cover: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (UniqueConstraint("product_id", "order_index"),)

    # Relationships
    product = relationship("Product", back_populates="media")

    def __repr__(self):
        return f"<ProductMedia {self.id} #{self.order_index}>"


# ============================================================================
# COLLECTIONS
# ============================================================================


class Collection(Base):
    """Seller-curated collection inside a store. Parent: store."""

    __tablename__ = "collections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (UniqueConstraint("store_id", "order_index"),)

    # Relationships
    store = relationship("Store", back_populates="collections")

    def __repr__(self):
        return f"<Collection {self.name}>"


class CollectionProduct(Base):
    """Ordered membership of products in a store collection."""

    __tablename__ = "collection_products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    collection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("collections.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        UniqueConstraint("collection_id", "product_id"),
        UniqueConstraint("collection_id", "order_index"),
    )

    # Relationships
    product = relationship("Product")

    def __repr__(self):
        return f"<CollectionProduct {self.product_id} #{self.order_index}>"


class GlobalCollection(Base):
    """Marketplace-wide curated collection of promoted products."""

    __tablename__ = "global_collections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<GlobalCollection {self.slug}>"


class GlobalCollectionProduct(Base):
    """Ordered membership of promoted products in a global collection."""

    __tablename__ = "global_collection_products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    global_collection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("global_collections.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        UniqueConstraint("global_collection_id", "product_id"),
        UniqueConstraint("global_collection_id", "order_index"),
    )

    # Relationships
    product = relationship("Product")

    def __repr__(self):
        return f"<GlobalCollectionProduct {self.product_id} #{self.order_index}>"


# ============================================================================
# PROMOTION PRICING
# ============================================================================


class PromotionPricing(Base):
    """Promotion price list. The single ``is_active`` row is authoritative."""

    __tablename__ = "promotion_pricing"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    min_days: Mapped[int] = mapped_column(Integer, nullable=False)
    max_days: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    def __repr__(self):
        return f"<PromotionPricing {self.price_per_day}/day {self.min_days}-{self.max_days}>"
