from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.domain.entity.event_configuration_entity import EventConfiguration
from src.service.marketplace.domain.value_object.pool_status import PoolStatus


class GetPoolStatusUseCase:
    def __init__(self, *, controller: TicketPoolController) -> None:
        self.controller = controller

    @classmethod
    @inject
    def depends(
        cls,
        controller: TicketPoolController = Depends(Provide[Container.ticket_pool_controller]),
    ) -> Self:
        return cls(controller=controller)

    def status(self) -> PoolStatus:
        return self.controller.get_status()

    def configuration(self) -> EventConfiguration:
        """Raises NotConfiguredError before the first configure"""
        return self.controller.config_holder.require()
