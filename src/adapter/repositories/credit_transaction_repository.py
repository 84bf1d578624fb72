"""SQLAlchemy implementation of CreditTransactionRepository

Provides append-only persistence and history queries for CreditTransaction entities.
"""

from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditTransaction, CreditType, TransactionType


class SqlAlchemyCreditTransactionRepository(CreditTransactionRepository):
    """
    SQLAlchemy implementation of CreditTransactionRepository

    Features:
    - Immutable append-only transactions
    - Paginated, filterable history (newest first)
    - Per credit type sums for reconciliation
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Append a new credit transaction

        Args:
            transaction: CreditTransaction entity to persist

        Returns:
            Created CreditTransaction with generated ID
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: int) -> Optional[CreditTransaction]:
        stmt = select(CreditTransaction).where(CreditTransaction.id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_account_id(
        self,
        account_id: str,
        limit: int = 20,
        offset: int = 0,
        credit_type: Optional[CreditType] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> Tuple[List[CreditTransaction], int]:
        """
        Retrieve an account's transactions, newest first

        Ties on created_at are broken by ID so that pages are stable.
        """
        conditions = [CreditTransaction.account_id == account_id]
        if credit_type is not None:
            conditions.append(CreditTransaction.credit_type == credit_type)
        if transaction_type is not None:
            conditions.append(CreditTransaction.transaction_type == transaction_type)

        count_stmt = select(func.count()).select_from(CreditTransaction).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(CreditTransaction)
            .where(*conditions)
            .order_by(CreditTransaction.created_at.desc(), CreditTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_balance_sums(self, credit_account_id: int) -> Dict[CreditType, int]:
        stmt = (
            select(CreditTransaction.credit_type, func.coalesce(func.sum(CreditTransaction.amount), 0))
            .where(CreditTransaction.credit_account_id == credit_account_id)
            .group_by(CreditTransaction.credit_type)
        )
        result = await self.session.execute(stmt)

        sums = {credit_type: 0 for credit_type in CreditType}
        for credit_type, total in result.all():
            sums[CreditType(credit_type)] = int(total)
        return sums
