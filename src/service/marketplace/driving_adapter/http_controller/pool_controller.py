from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.configure_event_use_case import ConfigureEventUseCase
from src.service.marketplace.app.command.reload_pool_use_case import ReloadPoolUseCase
from src.service.marketplace.app.query.get_pool_status_use_case import GetPoolStatusUseCase
from src.service.marketplace.driving_adapter.schema.pool_schema import (
    EventConfigurationRequest,
    EventConfigurationResponse,
    PoolStatusResponse,
)


router = APIRouter()


@router.get('/status', status_code=status.HTTP_200_OK)
async def get_pool_status(
    use_case: GetPoolStatusUseCase = Depends(GetPoolStatusUseCase.depends),
) -> PoolStatusResponse:
    return PoolStatusResponse.from_status(use_case.status())


@router.get('/configuration', status_code=status.HTTP_200_OK)
@Logger.io
async def get_configuration(
    use_case: GetPoolStatusUseCase = Depends(GetPoolStatusUseCase.depends),
) -> EventConfigurationResponse:
    return EventConfigurationResponse.from_entity(use_case.configuration())


@router.put('/configuration', status_code=status.HTTP_200_OK)
@Logger.io
async def configure_event(
    request: EventConfigurationRequest,
    use_case: ConfigureEventUseCase = Depends(ConfigureEventUseCase.depends),
) -> EventConfigurationResponse:
    """Replace the active configuration; pool counters are rebuilt from stored participants."""
    config = await use_case.execute(
        event_name=request.event_name,
        max_capacity=request.max_capacity,
        ticket_release_rate=request.ticket_release_rate,
        customer_retrieval_rate=request.customer_retrieval_rate,
        total_tickets=request.total_tickets,
        event_date=request.event_date,
    )
    return EventConfigurationResponse.from_entity(config)


@router.post('/reload', status_code=status.HTTP_200_OK)
@Logger.io
async def reload_pool(
    use_case: ReloadPoolUseCase = Depends(ReloadPoolUseCase.depends),
) -> PoolStatusResponse:
    return PoolStatusResponse.from_status(await use_case.execute())
