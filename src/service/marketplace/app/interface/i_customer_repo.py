from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.domain.entity.customer_entity import Customer


class ICustomerRepo(ABC):
    """Customer Repository Interface - bound to a unit-of-work session"""

    @abstractmethod
    async def get_by_id(self, *, customer_id: str) -> Optional[Customer]:
        pass

    @abstractmethod
    async def get_by_ids(self, *, customer_ids: List[str]) -> dict[str, Customer]:
        pass

    @abstractmethod
    async def get_by_email(self, *, email: str) -> Optional[Customer]:
        pass

    @abstractmethod
    async def find_by_name(self, *, name: str) -> List[Customer]:
        """Case-insensitive substring match on name"""
        pass

    @abstractmethod
    async def list_active(self) -> List[Customer]:
        pass

    @abstractmethod
    async def save(self, *, customer: Customer) -> Customer:
        """Insert or update by ID"""
        pass

    @abstractmethod
    async def save_all(self, *, customers: List[Customer]) -> None:
        pass
