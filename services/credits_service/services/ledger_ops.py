"""Core ledger operations: atomic balance increments with an append-only log.

Balances are never written from a value computed in application code. Every
mutation is a single ``UPDATE ... SET balance = balance + :delta RETURNING``
and the matching ``CreditTransaction`` row is added to the same database
transaction, so the ledger sum and the balance commit together.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from libs.common.errors import (
    ConcurrentUpdate,
    InsufficientCredits,
    InvalidPackage,
    NotFound,
)
from libs.common.logging import get_logger
from libs.db.upsert import upsert_insert
from services.credits_service.models import (
    CreditBalance,
    CreditPackage,
    CreditTransaction,
    CreditTransactionType,
)
from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass
class PurchaseResult:
    balance: Decimal
    credits_added: Decimal
    transaction: CreditTransaction
    replayed: bool = False


@dataclass
class Reconciliation:
    user_id: str
    balance: Decimal
    ledger_total: Decimal

    @property
    def consistent(self) -> bool:
        return self.balance == self.ledger_total


# ---------------------------------------------------------------------------
# Balance rows
# ---------------------------------------------------------------------------


async def get_balance_row(db: AsyncSession, user_id: str) -> Optional[CreditBalance]:
    # populate_existing: increments bypass the identity map, so never trust a
    # previously loaded instance.
    result = await db.execute(
        select(CreditBalance)
        .where(CreditBalance.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_or_create_balance(db: AsyncSession, user_id: str) -> CreditBalance:
    """Return the user's balance row, creating it at zero on first access.

    Safe under concurrent first access: the insert is
    ``ON CONFLICT (user_id) DO NOTHING`` and the row is re-read afterwards,
    so a losing racer simply sees the winner's row.
    """
    existing = await get_balance_row(db, user_id)
    if existing:
        return existing

    stmt = (
        upsert_insert(db, CreditBalance)
        .values(id=uuid.uuid4(), user_id=user_id, balance=Decimal("0"))
        .on_conflict_do_nothing(index_elements=["user_id"])
    )
    result = await db.execute(stmt)
    await db.commit()

    if result.rowcount:
        logger.info("Created credit balance for user %s", user_id)

    balance = await get_balance_row(db, user_id)
    if balance is None:
        # Only reachable if the row was deleted between insert and read.
        raise NotFound("Credit balance not found")
    return balance


# ---------------------------------------------------------------------------
# Atomic increments
# ---------------------------------------------------------------------------


async def _increment(
    db: AsyncSession,
    user_id: str,
    delta: Decimal,
    *,
    require_funds: bool,
) -> Optional[Decimal]:
    """Apply ``delta`` in one statement and return the resulting balance.

    With ``require_funds`` the guard ``balance + delta >= 0`` is part of the
    same ``UPDATE``; ``None`` means the guard (or the row) was missing.
    """
    stmt = (
        update(CreditBalance)
        .where(CreditBalance.user_id == user_id)
        .values(balance=CreditBalance.balance + delta)
        .returning(CreditBalance.balance)
        .execution_options(synchronize_session=False)
    )
    if require_funds:
        stmt = stmt.where(CreditBalance.balance + delta >= 0)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


def _append(
    db: AsyncSession,
    *,
    user_id: str,
    amount: Decimal,
    balance_after: Decimal,
    transaction_type: CreditTransactionType,
    description: str,
    package_id: Optional[uuid.UUID] = None,
    product_id: Optional[uuid.UUID] = None,
    promotion_duration_days: Optional[int] = None,
    idempotency_key: Optional[str] = None,
) -> CreditTransaction:
    txn = CreditTransaction(
        user_id=user_id,
        amount=amount,
        balance_after=balance_after,
        transaction_type=transaction_type,
        description=description,
        package_id=package_id,
        product_id=product_id,
        promotion_duration_days=promotion_duration_days,
        idempotency_key=idempotency_key,
    )
    db.add(txn)
    return txn


async def credit_balance(
    db: AsyncSession,
    *,
    user_id: str,
    amount: Decimal,
    transaction_type: CreditTransactionType,
    description: str,
    package_id: Optional[uuid.UUID] = None,
    product_id: Optional[uuid.UUID] = None,
    idempotency_key: Optional[str] = None,
    commit: bool = True,
) -> CreditTransaction:
    """Atomically add ``amount`` and log it. The balance row must exist."""
    amount = Decimal(amount)
    if amount <= 0:
        raise ValueError("credit amount must be positive")

    new_balance = await _increment(db, user_id, amount, require_funds=False)
    if new_balance is None:
        raise NotFound("Credit balance not found")

    txn = _append(
        db,
        user_id=user_id,
        amount=amount,
        balance_after=new_balance,
        transaction_type=transaction_type,
        description=description,
        package_id=package_id,
        product_id=product_id,
        idempotency_key=idempotency_key,
    )
    if commit:
        await db.commit()
        await db.refresh(txn)

    logger.info(
        "Credit %s to user %s (%s), balance now %s",
        amount,
        user_id,
        transaction_type.value,
        new_balance,
    )
    return txn


async def debit_credits(
    db: AsyncSession,
    *,
    user_id: str,
    amount: Decimal,
    transaction_type: CreditTransactionType,
    description: str,
    product_id: Optional[uuid.UUID] = None,
    promotion_duration_days: Optional[int] = None,
    commit: bool = True,
) -> CreditTransaction:
    """Atomically subtract ``amount`` if the balance covers it.

    Fails with ``InsufficientCredits`` (balance untouched) otherwise. With
    ``commit=False`` the caller owns the surrounding transaction.
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise ValueError("debit amount must be positive")

    new_balance = await _increment(db, user_id, -amount, require_funds=True)
    if new_balance is None:
        row = await get_balance_row(db, user_id)
        available = row.balance if row else Decimal("0")
        logger.warning(
            "Insufficient credits for user %s: required=%s available=%s",
            user_id,
            amount,
            available,
        )
        raise InsufficientCredits(
            "Insufficient credits",
            required=str(amount),
            available=str(available),
        )

    txn = _append(
        db,
        user_id=user_id,
        amount=-amount,
        balance_after=new_balance,
        transaction_type=transaction_type,
        description=description,
        product_id=product_id,
        promotion_duration_days=promotion_duration_days,
    )
    if commit:
        await db.commit()
        await db.refresh(txn)

    logger.info(
        "Debit %s from user %s (%s), balance now %s",
        amount,
        user_id,
        transaction_type.value,
        new_balance,
    )
    return txn


# ---------------------------------------------------------------------------
# Purchases
# ---------------------------------------------------------------------------


async def get_active_package(db: AsyncSession, package_id: uuid.UUID) -> CreditPackage:
    result = await db.execute(
        select(CreditPackage).where(
            CreditPackage.id == package_id,
            CreditPackage.is_active.is_(True),
        )
    )
    package = result.scalar_one_or_none()
    if not package:
        raise InvalidPackage()
    return package


async def _replay(
    db: AsyncSession, user_id: str, idempotency_key: str
) -> Optional[PurchaseResult]:
    result = await db.execute(
        select(CreditTransaction).where(
            CreditTransaction.idempotency_key == idempotency_key,
            CreditTransaction.user_id == user_id,
        )
    )
    existing = result.scalar_one_or_none()
    if not existing:
        return None
    logger.info("Idempotent replay for key=%s -> txn=%s", idempotency_key, existing.id)
    row = await get_balance_row(db, user_id)
    return PurchaseResult(
        balance=row.balance if row else existing.balance_after,
        credits_added=existing.amount,
        transaction=existing,
        replayed=True,
    )


async def purchase_credits(
    db: AsyncSession,
    *,
    user_id: str,
    package_id: uuid.UUID,
    idempotency_key: Optional[str] = None,
) -> PurchaseResult:
    """Credit the package's credits plus bonus to the user's balance.

    No payment is captured here; a real gateway capture must precede the
    credit once one is integrated.
    """
    if idempotency_key:
        replay = await _replay(db, user_id, idempotency_key)
        if replay:
            return replay

    package = await get_active_package(db, package_id)
    total_credits = package.total_credits
    description = f"Purchased {package.name} package"

    await get_or_create_balance(db, user_id)

    try:
        txn = await credit_balance(
            db,
            user_id=user_id,
            amount=total_credits,
            transaction_type=CreditTransactionType.PURCHASE,
            description=description,
            package_id=package_id,
            idempotency_key=idempotency_key,
        )
    except IntegrityError:
        # A concurrent request with the same idempotency key won the race;
        # our increment was rolled back with the failed insert.
        await db.rollback()
        if idempotency_key:
            replay = await _replay(db, user_id, idempotency_key)
            if replay:
                return replay
        logger.warning(
            "Purchase for user %s conflicted without a replayable transaction",
            user_id,
        )
        raise ConcurrentUpdate() from None

    return PurchaseResult(
        balance=txn.balance_after,
        credits_added=total_credits,
        transaction=txn,
    )


# ---------------------------------------------------------------------------
# Read-only
# ---------------------------------------------------------------------------


async def list_packages(db: AsyncSession) -> list[CreditPackage]:
    result = await db.execute(
        select(CreditPackage)
        .where(CreditPackage.is_active.is_(True))
        .order_by(CreditPackage.order_index)
    )
    return list(result.scalars().all())


async def list_transactions(
    db: AsyncSession,
    user_id: str,
    *,
    transaction_type: Optional[CreditTransactionType] = None,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[CreditTransaction], int]:
    """Newest-first page of a user's ledger with the total count."""
    base = select(CreditTransaction).where(CreditTransaction.user_id == user_id)
    count_base = (
        select(func.count())
        .select_from(CreditTransaction)
        .where(CreditTransaction.user_id == user_id)
    )
    if transaction_type:
        base = base.where(CreditTransaction.transaction_type == transaction_type)
        count_base = count_base.where(
            CreditTransaction.transaction_type == transaction_type
        )

    total = (await db.execute(count_base)).scalar() or 0
    result = await db.execute(
        base.order_by(desc(CreditTransaction.created_at)).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def reconcile_balance(db: AsyncSession, user_id: str) -> Reconciliation:
    """Compare the stored balance with the sum of the user's ledger."""
    row = await get_balance_row(db, user_id)
    if row is None:
        raise NotFound("Credit balance not found")

    ledger_total = (
        await db.execute(
            select(func.coalesce(func.sum(CreditTransaction.amount), 0)).where(
                CreditTransaction.user_id == user_id
            )
        )
    ).scalar()

    reconciliation = Reconciliation(
        user_id=user_id,
        balance=Decimal(row.balance),
        ledger_total=Decimal(ledger_total),
    )
    if not reconciliation.consistent:
        logger.error(
            "Ledger mismatch for user %s: balance=%s ledger=%s",
            user_id,
            reconciliation.balance,
            reconciliation.ledger_total,
        )
    return reconciliation
