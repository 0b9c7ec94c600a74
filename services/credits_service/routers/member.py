"""Member-facing credits endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.credits_service.models import CreditTransactionType
from services.credits_service.schemas import (
    BalanceResponse,
    CreditPackageListResponse,
    PurchaseRequest,
    PurchaseResponse,
    TransactionListResponse,
)
from services.credits_service.services.ledger_ops import (
    get_or_create_balance,
    list_packages,
    list_transactions,
    purchase_credits,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/credits", tags=["credits"])


@router.get("/balance", response_model=BalanceResponse)
async def get_my_balance(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get (or lazily create) the caller's credit balance."""
    balance = await get_or_create_balance(db, current_user.user_id)
    return BalanceResponse(balance=balance.balance)


@router.get("/packages", response_model=CreditPackageListResponse)
async def get_packages(db: AsyncSession = Depends(get_async_db)):
    """List purchasable credit packages in display order."""
    packages = await list_packages(db)
    return CreditPackageListResponse(packages=packages)


@router.post("/purchase", response_model=PurchaseResponse)
async def purchase(
    body: PurchaseRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Buy a credit package (simulated: no payment gateway is called)."""
    result = await purchase_credits(
        db,
        user_id=current_user.user_id,
        package_id=body.package_id,
        idempotency_key=body.idempotency_key,
    )
    return PurchaseResponse(
        balance=result.balance,
        credits_added=result.credits_added,
        transaction_id=result.transaction.id,
    )


@router.get("/transactions", response_model=TransactionListResponse)
async def get_my_transactions(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    transaction_type: Optional[CreditTransactionType] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List my ledger entries (newest first, filterable by type)."""
    transactions, total = await list_transactions(
        db,
        current_user.user_id,
        transaction_type=transaction_type,
        skip=skip,
        limit=limit,
    )
    return TransactionListResponse(
        transactions=transactions, total=total, skip=skip, limit=limit
    )
