"""Paid product promotion funded by the credit ledger.

The credit debit, its ledger row and the product's promotion fields are
written in one database transaction: ``debit_credits(commit=False)`` runs on
the caller's session and a single commit at the end publishes all three.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import InsufficientCredits, InvalidDuration
from libs.common.logging import get_logger
from services.credits_service.models import CreditTransactionType
from services.credits_service.services.ledger_ops import debit_credits
from services.store_service.models import Product, PromotionPricing
from services.store_service.services.ownership import (
    require_owned_product,
    require_seller_store,
)
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DEFAULT_PRICE_PER_DAY = Decimal("10")
DEFAULT_MIN_DAYS = 1
DEFAULT_MAX_DAYS = 30


@dataclass(frozen=True)
class PricingTerms:
    price_per_day: Decimal
    min_days: int
    max_days: int


DEFAULT_PRICING = PricingTerms(
    DEFAULT_PRICE_PER_DAY, DEFAULT_MIN_DAYS, DEFAULT_MAX_DAYS
)


@dataclass
class PromotionResult:
    product_id: uuid.UUID
    cost: Decimal
    balance: Decimal
    promoted_until: datetime


async def get_promotion_pricing(db: AsyncSession) -> PricingTerms:
    """The active pricing row, or the built-in defaults when none is set."""
    result = await db.execute(
        select(PromotionPricing)
        .where(PromotionPricing.is_active.is_(True))
        .order_by(PromotionPricing.created_at.desc())
        .limit(1)
    )
    row = result.scalar_one_or_none()
    if not row:
        return DEFAULT_PRICING
    return PricingTerms(
        price_per_day=Decimal(row.price_per_day),
        min_days=row.min_days,
        max_days=row.max_days,
    )


def quote_promotion(pricing: PricingTerms, days: int) -> Decimal:
    if days < pricing.min_days or days > pricing.max_days:
        raise InvalidDuration(
            f"Duration must be between {pricing.min_days} and {pricing.max_days} days",
            min_days=pricing.min_days,
            max_days=pricing.max_days,
        )
    return pricing.price_per_day * days


async def promote_product(
    db: AsyncSession,
    *,
    user_id: str,
    product_id: uuid.UUID,
    days: int,
) -> PromotionResult:
    """Charge the seller and mark the product promoted for ``days`` days.

    On ``InsufficientCredits`` nothing is written. A product that is already
    promoted gets a fresh window starting now.
    """
    product = await require_owned_product(db, user_id, product_id, for_update=True)
    pricing = await get_promotion_pricing(db)
    cost = quote_promotion(pricing, days)

    try:
        txn = await debit_credits(
            db,
            user_id=user_id,
            amount=cost,
            transaction_type=CreditTransactionType.PROMOTION_SPEND,
            description=f"Promoted {product.title} for {days} days",
            product_id=product.id,
            promotion_duration_days=days,
            commit=False,
        )
    except InsufficientCredits:
        await db.rollback()
        raise

    now = utc_now()
    product.is_promoted = True
    product.promoted_start_date = now
    product.promoted_end_date = now + timedelta(days=days)

    result = PromotionResult(
        product_id=product.id,
        cost=cost,
        balance=txn.balance_after,
        promoted_until=product.promoted_end_date,
    )
    await db.commit()

    logger.info(
        "Product %s promoted for %d days by %s (cost=%s, balance=%s)",
        product_id,
        days,
        user_id,
        cost,
        result.balance,
    )
    return result


async def unpromote_product(
    db: AsyncSession, *, user_id: str, product_id: uuid.UUID
) -> Product:
    """Clear the promotion. Spent credits are not refunded."""
    product = await require_owned_product(db, user_id, product_id, for_update=True)
    product.is_promoted = False
    product.promoted_start_date = None
    product.promoted_end_date = None
    await db.commit()
    await db.refresh(product)

    logger.info("Product %s unpromoted by %s", product_id, user_id)
    return product


async def list_store_promotions(db: AsyncSession, user_id: str) -> list[Product]:
    """The caller's promoted products, soonest expiry first."""
    store = await require_seller_store(db, user_id)
    result = await db.execute(
        select(Product)
        .where(Product.store_id == store.id, Product.is_promoted.is_(True))
        .order_by(Product.promoted_end_date.asc())
    )
    return list(result.scalars().all())


async def expire_promotions(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Clear ``is_promoted`` on products whose window has ended.

    The start and end dates are left in place as a record of the last
    promotion window.
    """
    now = now or utc_now()
    result = await db.execute(
        update(Product)
        .where(
            Product.is_promoted.is_(True),
            Product.promoted_end_date.is_not(None),
            Product.promoted_end_date <= now,
        )
        .values(is_promoted=False, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    expired = result.rowcount or 0
    if expired:
        logger.info("Expired %d product promotions", expired)
    return expired
