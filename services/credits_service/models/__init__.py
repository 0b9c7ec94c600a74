"""Credits Service models package.

Re-exports all models and enums so that SQLAlchemy's mapper registry (and
Alembic's env.py) sees every model class on import.
"""

from services.credits_service.models.balance import CreditBalance  # noqa: F401
from services.credits_service.models.enums import CreditTransactionType  # noqa: F401
from services.credits_service.models.package import CreditPackage  # noqa: F401
from services.credits_service.models.transaction import (  # noqa: F401
    CreditTransaction,
)

__all__ = [
    "CreditBalance",
    "CreditPackage",
    "CreditTransaction",
    "CreditTransactionType",
]
