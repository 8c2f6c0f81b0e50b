from typing import Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotConfiguredError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.domain.entity.event_configuration_entity import EventConfiguration


class EventConfigurationHolder:
    """
    Holds the single active EventConfiguration.

    Not safe for concurrent use on its own: TicketPoolController calls it only
    while holding its lock, and accepts a configuration only after the
    transaction that persisted it has committed.
    """

    def __init__(self) -> None:
        self._current: Optional[EventConfiguration] = None

    @property
    def current(self) -> Optional[EventConfiguration]:
        return self._current

    @property
    def is_configured(self) -> bool:
        return self._current is not None

    def require(self) -> EventConfiguration:
        if self._current is None:
            raise NotConfiguredError()
        return self._current

    @staticmethod
    def validate(config: EventConfiguration) -> EventConfiguration:
        config.validate()
        return config

    async def persist(
        self, *, uow: AbstractUnitOfWork, config: EventConfiguration
    ) -> EventConfiguration:
        return await uow.event_configuration_repo.save(config=config)

    def accept(self, config: EventConfiguration) -> None:
        self._current = config

    @Logger.io
    async def load(self, *, uow: AbstractUnitOfWork) -> Optional[EventConfiguration]:
        """Stored configuration, or None when absent or no longer valid"""
        stored = await uow.event_configuration_repo.get()
        if stored is None:
            return None
        if violations := stored.collect_violations():
            Logger.base.warning(f'⚠️ [CONFIG] Ignoring stored configuration: {"; ".join(violations)}')
            return None
        return stored
