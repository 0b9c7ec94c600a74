"""CreditPackage model: the purchasable credit bundles."""

import uuid
from datetime import datetime
from decimal import Decimal

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class CreditPackage(Base):
    """Catalog entry. Read-only for the ledger."""

    __tablename__ = "credit_packages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    credits_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    bonus_credits: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), server_default="0", nullable=False
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", nullable=False
    )
    order_index: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    @property
    def total_credits(self) -> Decimal:
        return self.credits_amount + self.bonus_credits

    def __repr__(self) -> str:
        return f"<CreditPackage {self.name} credits={self.total_credits}>"
