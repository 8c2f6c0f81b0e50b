from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.participant.participant_registry import ParticipantRegistry
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.vendor_entity import Vendor
from src.service.marketplace.domain.enum.participant_role import ParticipantRole


class ChangeParticipantActivityUseCase:
    """Deactivate (logout) or reactivate a vendor or customer by id"""

    def __init__(self, *, registry: ParticipantRegistry) -> None:
        self.registry = registry

    @classmethod
    @inject
    def depends(
        cls,
        registry: ParticipantRegistry = Depends(Provide[Container.participant_registry]),
    ) -> Self:
        return cls(registry=registry)

    @Logger.io
    async def deactivate(self, *, role: ParticipantRole, participant_id: str) -> Vendor | Customer:
        if role == ParticipantRole.VENDOR:
            return await self.registry.deactivate_vendor(vendor_id=participant_id)
        return await self.registry.deactivate_customer(customer_id=participant_id)

    @Logger.io
    async def activate(self, *, role: ParticipantRole, participant_id: str) -> Vendor | Customer:
        if role == ParticipantRole.VENDOR:
            return await self.registry.reactivate_vendor(vendor_id=participant_id)
        return await self.registry.reactivate_customer(customer_id=participant_id)
