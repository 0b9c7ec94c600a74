"""CreditTransaction model: the append-only ledger."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.credits_service.models.enums import CreditTransactionType, enum_values
from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class CreditTransaction(Base):
    """Write-once ledger entry. ``sum(amount)`` per user equals the balance."""

    __tablename__ = "credit_transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Signed: positive credits the balance, negative debits it
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    balance_after: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    transaction_type: Mapped[CreditTransactionType] = mapped_column(
        SAEnum(
            CreditTransactionType,
            name="credit_transaction_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # References
    package_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    promotion_duration_days: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )

    # Client-supplied retry key (purchases), unique per user
    idempotency_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        CheckConstraint("amount <> 0", name="amount_non_zero"),
        UniqueConstraint("user_id", "idempotency_key"),
        Index("ix_credit_transactions_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CreditTransaction {self.id} {self.transaction_type.value} {self.amount}>"
