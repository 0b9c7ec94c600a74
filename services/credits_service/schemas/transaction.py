"""Ledger transaction schemas."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict
from services.credits_service.models.enums import CreditTransactionType


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    amount: Decimal
    balance_after: Decimal
    transaction_type: CreditTransactionType
    description: str
    package_id: Optional[uuid.UUID] = None
    product_id: Optional[uuid.UUID] = None
    promotion_duration_days: Optional[int] = None
    created_at: datetime


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse]
    total: int
    skip: int
    limit: int
