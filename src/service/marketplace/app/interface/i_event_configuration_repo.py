from abc import ABC, abstractmethod
from typing import Optional

from src.service.marketplace.domain.entity.event_configuration_entity import EventConfiguration


class IEventConfigurationRepo(ABC):
    """Stores the single active event configuration"""

    @abstractmethod
    async def get(self) -> Optional[EventConfiguration]:
        pass

    @abstractmethod
    async def save(self, *, config: EventConfiguration) -> EventConfiguration:
        """Replace the stored configuration"""
        pass
