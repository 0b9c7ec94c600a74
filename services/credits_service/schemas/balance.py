"""Balance and reconciliation schemas."""

from decimal import Decimal

from pydantic import BaseModel


class BalanceResponse(BaseModel):
    balance: Decimal


class ReconciliationResponse(BaseModel):
    user_id: str
    balance: Decimal
    ledger_total: Decimal
    consistent: bool
