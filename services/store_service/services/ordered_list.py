"""Append-ordered lists: strictly increasing ``order_index`` per parent.

Four tables share the (parent, member, order_index) shape: collections within
a store, products within a collection, products within a global collection,
and media within a product. Indices are handed out by a per-parent counter
row that the database increments atomically (``INSERT ... ON CONFLICT DO
UPDATE ... RETURNING``). The counter is seeded from the current maximum on
first use and only ever grows, so:

- concurrent appends to one parent serialise on the counter row and never
  share an index;
- removing a member leaves a gap that is never refilled.
"""

import uuid
from dataclasses import dataclass
from typing import Optional, Sequence

from libs.common.datetime_utils import utc_now
from libs.common.errors import DuplicateMember
from libs.common.logging import get_logger
from libs.db.upsert import upsert_insert
from services.store_service.models import (
    Collection,
    CollectionProduct,
    GlobalCollectionProduct,
    OrderedListCounter,
    ProductMedia,
)
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderedList:
    """Describes one ordered-list table.

    ``member_attr`` is None when the row itself is the member (collections,
    media); such lists cannot hold duplicates by construction.
    """

    name: str
    model: type
    parent_attr: str
    member_attr: Optional[str] = None

    @property
    def parent_column(self):
        return getattr(self.model, self.parent_attr)

    @property
    def member_column(self):
        return getattr(self.model, self.member_attr or "id")

    @property
    def index_column(self):
        return self.model.order_index


STORE_COLLECTIONS = OrderedList("store_collections", Collection, "store_id")
COLLECTION_PRODUCTS = OrderedList(
    "collection_products", CollectionProduct, "collection_id", "product_id"
)
GLOBAL_COLLECTION_PRODUCTS = OrderedList(
    "global_collection_products",
    GlobalCollectionProduct,
    "global_collection_id",
    "product_id",
)
PRODUCT_MEDIA = OrderedList("product_media", ProductMedia, "product_id")


async def next_order_index(
    db: AsyncSession, ordered_list: OrderedList, parent_id: uuid.UUID
) -> int:
    """Allocate the next index for ``parent_id`` in a single statement.

    The counter row stays locked until the caller's transaction ends, which
    serialises appends to the same parent. Rolling back releases the index.
    """
    seed = (
        select(func.coalesce(func.max(ordered_list.index_column), -1) + 1)
        .where(ordered_list.parent_column == parent_id)
        .scalar_subquery()
    )
    stmt = upsert_insert(db, OrderedListCounter).values(
        list_name=ordered_list.name,
        parent_id=parent_id,
        last_index=seed,
        updated_at=utc_now(),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["list_name", "parent_id"],
        set_={
            "last_index": OrderedListCounter.last_index + 1,
            "updated_at": utc_now(),
        },
    ).returning(OrderedListCounter.last_index)

    result = await db.execute(stmt)
    return result.scalar_one()


async def is_member(
    db: AsyncSession,
    ordered_list: OrderedList,
    parent_id: uuid.UUID,
    member_id: uuid.UUID,
) -> bool:
    result = await db.execute(
        select(ordered_list.index_column).where(
            ordered_list.parent_column == parent_id,
            ordered_list.member_column == member_id,
        )
    )
    return result.first() is not None


async def append_member(
    db: AsyncSession,
    ordered_list: OrderedList,
    parent_id: uuid.UUID,
    member_id: Optional[uuid.UUID] = None,
    *,
    commit: bool = True,
    **fields,
):
    """Insert a member at the end of ``parent_id``'s list and return the row.

    Raises ``DuplicateMember`` if the (parent, member) pair already exists,
    whether detected up front or by the unique constraint under a race.
    """
    if ordered_list.member_attr:
        if member_id is None:
            raise ValueError(f"{ordered_list.name} requires a member id")
        if await is_member(db, ordered_list, parent_id, member_id):
            raise DuplicateMember()
        fields[ordered_list.member_attr] = member_id

    order_index = await next_order_index(db, ordered_list, parent_id)
    row = ordered_list.model(
        **{ordered_list.parent_attr: parent_id, "order_index": order_index},
        **fields,
    )
    db.add(row)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise DuplicateMember() from None

    if commit:
        await db.commit()
        await db.refresh(row)

    logger.info(
        "Appended to %s parent=%s at index %d",
        ordered_list.name,
        parent_id,
        order_index,
    )
    return row


async def remove_member(
    db: AsyncSession,
    ordered_list: OrderedList,
    parent_id: uuid.UUID,
    member_id: uuid.UUID,
    *,
    commit: bool = True,
) -> bool:
    """Delete the (parent, member) tuple. Remaining indices are untouched."""
    result = await db.execute(
        delete(ordered_list.model).where(
            ordered_list.parent_column == parent_id,
            ordered_list.member_column == member_id,
        )
    )
    if commit:
        await db.commit()

    removed = result.rowcount > 0
    if removed:
        logger.info(
            "Removed %s from %s parent=%s", member_id, ordered_list.name, parent_id
        )
    return removed


async def list_members(
    db: AsyncSession, ordered_list: OrderedList, parent_id: uuid.UUID
) -> list:
    result = await db.execute(
        select(ordered_list.model)
        .where(ordered_list.parent_column == parent_id)
        .order_by(ordered_list.index_column, ordered_list.model.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


def select_cover(media: Sequence[ProductMedia]) -> Optional[ProductMedia]:
    """The flagged cover if any, else the lowest order_index."""
    if not media:
        return None
    flagged = [m for m in media if m.is_cover]
    if flagged:
        return min(flagged, key=lambda m: m.order_index)
    return min(media, key=lambda m: m.order_index)
