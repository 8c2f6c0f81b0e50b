from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.domain.value_object.pool_status import PoolStatus


class ReloadPoolUseCase:
    """Rebuild pool counters from stored participants (recovery after manual DB edits)"""

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
    async def execute(self) -> PoolStatus:
        return await self.controller.reload()
