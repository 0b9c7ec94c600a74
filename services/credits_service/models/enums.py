"""Enums for the Credits Service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class CreditTransactionType(str, enum.Enum):
    PURCHASE = "purchase"
    PROMOTION_SPEND = "promotion_spend"
    REFUND = "refund"
    ADMIN_ADJUSTMENT = "admin_adjustment"
