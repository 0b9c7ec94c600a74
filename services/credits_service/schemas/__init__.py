"""Credits Service schemas package.

Re-exports all schemas so routers import from one place.
"""

from services.credits_service.schemas.balance import (  # noqa: F401
    BalanceResponse,
    ReconciliationResponse,
)
from services.credits_service.schemas.package import (  # noqa: F401
    CreditPackageListResponse,
    CreditPackageResponse,
    PurchaseRequest,
    PurchaseResponse,
)
from services.credits_service.schemas.transaction import (  # noqa: F401
    TransactionListResponse,
    TransactionResponse,
)
