"""Credit package and purchase schemas."""

import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreditPackageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    credits_amount: Decimal
    bonus_credits: Decimal
    price: Decimal
    order_index: int


class CreditPackageListResponse(BaseModel):
    packages: list[CreditPackageResponse]


class PurchaseRequest(BaseModel):
    package_id: uuid.UUID
    idempotency_key: Optional[str] = Field(None, max_length=255)


class PurchaseResponse(BaseModel):
    success: bool = True
    balance: Decimal
    credits_added: Decimal
    transaction_id: uuid.UUID
