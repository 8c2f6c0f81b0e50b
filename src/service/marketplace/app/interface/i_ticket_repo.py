from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.domain.entity.ticket_entity import Ticket


class ITicketRepo(ABC):
    """Ticket Repository Interface - tickets are inserted in batches at purchase time"""

    @abstractmethod
    async def save_all(self, *, tickets: List[Ticket]) -> None:
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_vendor(self, *, vendor_id: str) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_customer(self, *, customer_id: str) -> List[Ticket]:
        pass

    @abstractmethod
    async def count_by_vendor(self, *, vendor_ids: List[str]) -> dict[str, int]:
        """
        Count sold tickets per vendor

        Returns:
            Mapping of vendor ID to ticket count; vendors without tickets map to 0
        """
        pass

    @abstractmethod
    async def delete(self, *, ticket_id: str) -> bool:
        """
        Delete a ticket

        Returns:
            True if a ticket was deleted
        """
        pass
