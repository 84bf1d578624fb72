"""SQLAlchemy implementation of CreditAccountRepository

Provides persistence for CreditAccount entities with pessimistic locking support
to serialize concurrent balance mutations on the same account. On SQLite the
lock comes from the BEGIN IMMEDIATE transactions set up by
serialize_sqlite_writers, since FOR UPDATE is not supported there.
"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_account_repository import CreditAccountRepository
from src.domain.credit_account import CreditAccount


class SqlAlchemyCreditAccountRepository(CreditAccountRepository):
    """
    SQLAlchemy implementation of CreditAccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Lock held until the caller's unit of work commits or rolls back
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account_id(self, account_id: str, for_update: bool = False) -> Optional[CreditAccount]:
        """
        Retrieve account by business account ID with optional row-level locking

        Args:
            account_id: Business account identifier
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            CreditAccount if found, None otherwise
        """
        stmt = select(CreditAccount).where(CreditAccount.account_id == account_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: CreditAccount) -> CreditAccount:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update(self, account: CreditAccount) -> CreditAccount:
        """
        Flush changed balances

        Note:
            Should be called within a transaction with the account already locked
        """
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_all(self) -> List[CreditAccount]:
        stmt = select(CreditAccount).order_by(CreditAccount.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
