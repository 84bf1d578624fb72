"""Plan Instance Repository Interface

Defines the contract for plan instance persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.plan_instance import PlanInstance


class PlanInstanceRepository(ABC):
    """Repository interface for PlanInstance persistence"""

    @abstractmethod
    async def create(self, instance: PlanInstance) -> PlanInstance:
        """
        Create a new plan instance

        Args:
            instance: PlanInstance entity to persist

        Returns:
            Created PlanInstance with generated ID
        """
        pass

    @abstractmethod
    async def update(self, instance: PlanInstance) -> PlanInstance:
        """
        Persist a changed plan instance and flush immediately

        Flushing per call keeps the single-active index satisfied when one
        instance is closed and another activated in the same transaction.
        """
        pass

    @abstractmethod
    async def get_by_id(self, instance_id: int, for_update: bool = False) -> Optional[PlanInstance]:
        """
        Retrieve plan instance by ID

        Args:
            instance_id: Plan instance ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            PlanInstance if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_active_by_account_id(self, account_id: str) -> Optional[PlanInstance]:
        """
        Retrieve the account's active instance, expired or not

        Returns:
            PlanInstance with is_active = True if any, None otherwise
        """
        pass

    @abstractmethod
    async def get_reserved_by_account_id(self, account_id: str) -> List[PlanInstance]:
        """
        Retrieve the account's reserved instances, oldest purchase first

        Returns:
            List of reserved PlanInstance entities
        """
        pass

    @abstractmethod
    async def get_due_active(self, now: datetime) -> List[PlanInstance]:
        """
        Retrieve active instances whose validity window has ended

        Args:
            now: Reference instant; instances with expires_at <= now are due

        Returns:
            List of due PlanInstance entities ordered by ID
        """
        pass

    @abstractmethod
    async def get_history(self, account_id: str, limit: int = 10) -> List[PlanInstance]:
        """
        Retrieve the account's most recent instances, newest purchase first

        Args:
            account_id: Business account identifier
            limit: Maximum number of instances to return

        Returns:
            List of PlanInstance entities
        """
        pass
