"""
Vendor Repository Interface

Bound to a unit-of-work session; writes become visible on uow.commit().
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.domain.entity.vendor_entity import Vendor


class IVendorRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, vendor_id: str) -> Optional[Vendor]:
        """
        Get vendor by ID

        Args:
            vendor_id: Vendor ID

        Returns:
            Vendor entity or None if not found
        """
        pass

    @abstractmethod
    async def get_by_ids(self, *, vendor_ids: List[str]) -> dict[str, Vendor]:
        """
        Get several vendors in one query

        Returns:
            Mapping of vendor ID to entity; missing IDs are absent
        """
        pass

    @abstractmethod
    async def get_by_email(self, *, email: str) -> Optional[Vendor]:
        pass

    @abstractmethod
    async def find_by_name(self, *, name: str) -> List[Vendor]:
        """Case-insensitive substring match on name"""
        pass

    @abstractmethod
    async def list_active(self) -> List[Vendor]:
        pass

    @abstractmethod
    async def save(self, *, vendor: Vendor) -> Vendor:
        """Insert or update by ID"""
        pass

    @abstractmethod
    async def save_all(self, *, vendors: List[Vendor]) -> None:
        pass
