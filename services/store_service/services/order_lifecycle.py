"""Seller-driven order status state machine.

    pending -> paid -> confirmed -> shipped -> delivered
        \\________\\_________\\__________\\-----> cancelled

Forward moves advance exactly one step. ``cancelled`` is reachable from every
non-terminal state. ``delivered`` and ``cancelled`` are terminal.

``advance_order_status`` is the only writer of ``Order.status``. It checks
store ownership and writes inside one transaction, and the ownership
predicate is repeated in the ``UPDATE`` itself, so the write can never land
on an order the caller does not sell into.
"""

import uuid
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import (
    ConcurrentUpdate,
    Forbidden,
    InvalidStatus,
    InvalidTransition,
    NotFound,
    OrderTerminal,
)
from libs.common.logging import get_logger
from services.store_service.models import Order, OrderItem, OrderStatus, Product
from services.store_service.services.ownership import require_seller_store
from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

ORDER_FLOW = (
    OrderStatus.PENDING,
    OrderStatus.PAID,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

STATUS_TIMESTAMPS = {
    OrderStatus.PAID: "paid_at",
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(
            f"Invalid status: {value!r}",
            allowed=[s.value for s in OrderStatus],
        ) from None


def allowed_transitions(current: OrderStatus) -> frozenset[OrderStatus]:
    if current in TERMINAL_STATUSES:
        return frozenset()
    next_step = ORDER_FLOW[ORDER_FLOW.index(current) + 1]
    return frozenset({next_step, OrderStatus.CANCELLED})


def validate_transition(current: OrderStatus, target: OrderStatus) -> None:
    if current in TERMINAL_STATUSES:
        raise OrderTerminal(
            f"Order is already {current.value}", current=current.value
        )
    allowed = allowed_transitions(current)
    if target not in allowed:
        raise InvalidTransition(
            f"Cannot move order from {current.value} to {target.value}",
            current=current.value,
            requested=target.value,
            allowed=sorted(s.value for s in allowed),
        )


def owned_by_store(order_id, store_id: uuid.UUID):
    """EXISTS clause: the order holds at least one item from ``store_id``.

    ``order_id`` may be a value or a column (for correlated listing queries).
    """
    return (
        select(OrderItem.id)
        .join(Product, Product.id == OrderItem.product_id)
        .where(OrderItem.order_id == order_id, Product.store_id == store_id)
        .exists()
    )


async def advance_order_status(
    db: AsyncSession,
    *,
    order_id: uuid.UUID,
    requested_status: str,
    acting_user_id: str,
) -> Order:
    """Move an order to ``requested_status`` on behalf of its seller."""
    store = await require_seller_store(db, acting_user_id)
    target = parse_status(requested_status)

    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if not order:
        raise NotFound("Order not found")

    owns = (await db.execute(select(owned_by_store(order_id, store.id)))).scalar()
    if not owns:
        logger.warning(
            "Seller %s attempted to update order %s of another store",
            acting_user_id,
            order_id,
        )
        raise Forbidden("Order belongs to another store")

    current = order.status
    validate_transition(current, target)

    now = utc_now()
    values = {"status": target, "updated_at": now, STATUS_TIMESTAMPS[target]: now}
    result = await db.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.status == current,
            owned_by_store(order_id, store.id),
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        raise ConcurrentUpdate("Order status changed concurrently")

    await db.commit()
    await db.refresh(order)

    logger.info(
        "Order %s: %s -> %s by seller %s",
        order.order_number,
        current.value,
        target.value,
        acting_user_id,
    )
    return order


# ---------------------------------------------------------------------------
# Seller reads
# ---------------------------------------------------------------------------


async def list_seller_orders(
    db: AsyncSession,
    seller_id: str,
    *,
    status: Optional[OrderStatus] = None,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[Order], int]:
    """Orders containing the seller's products, newest first."""
    store = await require_seller_store(db, seller_id)

    condition = owned_by_store(Order.id, store.id)
    base = select(Order).where(condition)
    count_base = select(func.count()).select_from(Order).where(condition)
    if status:
        base = base.where(Order.status == status)
        count_base = count_base.where(Order.status == status)

    total = (await db.execute(count_base)).scalar() or 0
    result = await db.execute(
        base.options(selectinload(Order.items))
        .order_by(desc(Order.created_at))
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_seller_order(
    db: AsyncSession, seller_id: str, order_id: uuid.UUID
) -> tuple[Order, list[OrderItem]]:
    """An order plus the line items that belong to the seller's store."""
    store = await require_seller_store(db, seller_id)

    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
    )
    order = result.scalar_one_or_none()
    if not order:
        raise NotFound("Order not found")

    items = [item for item in order.items if item.product.store_id == store.id]
    if not items:
        raise Forbidden("Order belongs to another store")
    return order, items
