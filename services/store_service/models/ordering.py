"""Per-parent index counters for ordered lists."""

import uuid
from datetime import datetime

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class OrderedListCounter(Base):
    """Last order_index handed out for one parent of one ordered list.

    Only ever incremented (see services.ordered_list.next_order_index), so
    indices of removed members are never handed out again.
    """

    __tablename__ = "ordered_list_counters"

    list_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    parent_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    last_index: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<OrderedListCounter {self.list_name}:{self.parent_id}={self.last_index}>"
