from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.domain.entity.event_configuration_entity import EventConfiguration


class ConfigureEventUseCase:
    """
    Replace the active event configuration.

    Validation happens inside the controller so a rejected configuration never
    touches the pool; the previous one stays active.
    """

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
    async def execute(
        self,
        *,
        event_name: str,
        max_capacity: int,
        ticket_release_rate: int,
        customer_retrieval_rate: int,
        total_tickets: int = 0,
        event_date: Optional[datetime] = None,
    ) -> EventConfiguration:
        config = EventConfiguration(
            event_name=(event_name or '').strip(),
            max_capacity=max_capacity,
            ticket_release_rate=ticket_release_rate,
            customer_retrieval_rate=customer_retrieval_rate,
            total_tickets=total_tickets,
            **({'event_date': event_date} if event_date else {}),
        )
        return await self.controller.configure(config=config)
