"""Admin credits endpoints."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.credits_service.schemas import ReconciliationResponse
from services.credits_service.services.ledger_ops import reconcile_balance
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin/credits", tags=["admin-credits"])


@router.get("/{user_id}/reconcile", response_model=ReconciliationResponse)
async def reconcile_user_balance(
    user_id: str,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Compare a user's stored balance against the sum of their ledger."""
    reconciliation = await reconcile_balance(db, user_id)
    return ReconciliationResponse(
        user_id=reconciliation.user_id,
        balance=reconciliation.balance,
        ledger_total=reconciliation.ledger_total,
        consistent=reconciliation.consistent,
    )
