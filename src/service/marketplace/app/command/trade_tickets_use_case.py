from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.domain.value_object.pool_status import PoolStatus


class TradeTicketsUseCase:
    """One-off release or purchase outside the participant runners"""

    def __init__(self, *, controller: TicketPoolController) -> None:
        self.controller = controller

    @classmethod
    @inject
    def depends(
        cls,
        controller: TicketPoolController = Depends(Provide[Container.ticket_pool_controller]),
    ) -> Self:
        return cls(controller=controller)

    @Logger.io
    async def release(self, *, vendor_id: str, count: int) -> PoolStatus:
        await self.controller.release(vendor_id=vendor_id, count=count)
        return self.controller.get_status()

    @Logger.io
    async def purchase(self, *, customer_id: str, count: int) -> int:
        return await self.controller.purchase(customer_id=customer_id, requested_count=count)
