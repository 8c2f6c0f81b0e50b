from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_event_configuration_repo import (
    IEventConfigurationRepo,
)
from src.service.marketplace.domain.entity.event_configuration_entity import EventConfiguration
from src.service.marketplace.driven_adapter.model.event_configuration_model import (
    ACTIVE_CONFIGURATION_ID,
    EventConfigurationModel,
)


class EventConfigurationRepoImpl(IEventConfigurationRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get(self) -> Optional[EventConfiguration]:
        model = await self.session.get(EventConfigurationModel, ACTIVE_CONFIGURATION_ID)
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def save(self, *, config: EventConfiguration) -> EventConfiguration:
        model = await self.session.get(EventConfigurationModel, ACTIVE_CONFIGURATION_ID)
        if model is None:
            model = EventConfigurationModel(id=ACTIVE_CONFIGURATION_ID)
            self.session.add(model)
        model.event_name = config.event_name
        model.event_date = config.event_date
        model.total_tickets = config.total_tickets
        model.max_capacity = config.max_capacity
        model.ticket_release_rate = config.ticket_release_rate
        model.customer_retrieval_rate = config.customer_retrieval_rate
        model.updated_at = config.updated_at or datetime.now(timezone.utc)
        await self.session.flush()
        return self._model_to_entity(model)

    @staticmethod
    def _model_to_entity(model: EventConfigurationModel) -> EventConfiguration:
        return EventConfiguration(
            event_name=model.event_name,
            event_date=model.event_date,
            total_tickets=model.total_tickets,
            max_capacity=model.max_capacity,
            ticket_release_rate=model.ticket_release_rate,
            customer_retrieval_rate=model.customer_retrieval_rate,
            updated_at=model.updated_at,
        )
