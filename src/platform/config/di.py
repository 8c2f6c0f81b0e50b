"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.marketplace.app.participant.participant_registry import ParticipantRegistry
from src.service.marketplace.app.pool.event_configuration_holder import EventConfigurationHolder
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database
    database = providers.Singleton(Database)

    # New unit of work per call; pass `unit_of_work.provider` where a factory is expected
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Auth
    password_hasher = providers.Singleton(BcryptPasswordHasher)

    # Ticket pool (one per process)
    event_configuration_holder = providers.Singleton(EventConfigurationHolder)
    ticket_pool_controller = providers.Singleton(
        TicketPoolController,
        config_holder=event_configuration_holder,
        uow_factory=unit_of_work.provider,
    )
    participant_registry = providers.Singleton(
        ParticipantRegistry,
        controller=ticket_pool_controller,
        uow_factory=unit_of_work.provider,
        error_backoff=config_service.provided.PARTICIPANT_ERROR_BACKOFF_SECONDS,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
