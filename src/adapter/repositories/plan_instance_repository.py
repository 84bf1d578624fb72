"""SQLAlchemy implementation of PlanInstanceRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.plan_instance_repository import PlanInstanceRepository
from src.domain.plan_instance import PlanInstance


class SqlAlchemyPlanInstanceRepository(PlanInstanceRepository):
    """
    SQLAlchemy implementation of PlanInstanceRepository

    Features:
    - Optional row-level locking on single instance reads
    - Flush on every write so the partial unique index on active
      instances is checked in statement order
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, instance: PlanInstance) -> PlanInstance:
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: PlanInstance) -> PlanInstance:
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def get_by_id(self, instance_id: int, for_update: bool = False) -> Optional[PlanInstance]:
        stmt = select(PlanInstance).where(PlanInstance.id == instance_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_by_account_id(self, account_id: str) -> Optional[PlanInstance]:
        stmt = select(PlanInstance).where(
            PlanInstance.account_id == account_id,
            PlanInstance.is_active == True,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_reserved_by_account_id(self, account_id: str) -> List[PlanInstance]:
        stmt = (
            select(PlanInstance)
            .where(
                PlanInstance.account_id == account_id,
                PlanInstance.is_reserved == True,  # noqa: E712
            )
            .order_by(PlanInstance.purchased_at, PlanInstance.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_due_active(self, now: datetime) -> List[PlanInstance]:
        stmt = (
            select(PlanInstance)
            .where(
                PlanInstance.is_active == True,  # noqa: E712
                PlanInstance.expires_at <= now,
            )
            .order_by(PlanInstance.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_history(self, account_id: str, limit: int = 10) -> List[PlanInstance]:
        stmt = (
            select(PlanInstance)
            .where(PlanInstance.account_id == account_id)
            .order_by(PlanInstance.purchased_at.desc(), PlanInstance.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
