from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.change_participant_activity_use_case import (
    ChangeParticipantActivityUseCase,
)
from src.service.marketplace.app.command.login_participant_use_case import (
    LoginParticipantUseCase,
)
from src.service.marketplace.app.command.register_vendor_use_case import RegisterVendorUseCase
from src.service.marketplace.app.command.trade_tickets_use_case import TradeTicketsUseCase
from src.service.marketplace.app.query.participant_query_use_case import ParticipantQueryUseCase
from src.service.marketplace.domain.enum.participant_role import ParticipantRole
from src.service.marketplace.driving_adapter.schema.participant_schema import (
    LoginRequest,
    ReleaseRequest,
    VendorRegisterRequest,
    VendorResponse,
)
from src.service.marketplace.driving_adapter.schema.pool_schema import PoolStatusResponse


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def register_vendor(
    request: VendorRegisterRequest,
    use_case: RegisterVendorUseCase = Depends(RegisterVendorUseCase.depends),
) -> VendorResponse:
    vendor = await use_case.execute(
        name=request.name,
        email=request.email,
        password=request.password,
        tickets_per_release=request.tickets_per_release,
        ticket_release_interval=request.ticket_release_interval,
        tickets_to_sell=request.tickets_to_sell,
    )
    return VendorResponse.from_entity(vendor)


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_active_vendors(
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> List[VendorResponse]:
    return [VendorResponse.from_entity(v) for v in await use_case.list_active_vendors()]


@router.get('/search', status_code=status.HTTP_200_OK)
@Logger.io
async def search_vendors(
    name: str = Query(..., min_length=1),
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> List[VendorResponse]:
    return [VendorResponse.from_entity(v) for v in await use_case.search_vendors(name=name)]


@router.post('/login', status_code=status.HTTP_200_OK)
@Logger.io
async def login_vendor(
    request: LoginRequest,
    use_case: LoginParticipantUseCase = Depends(LoginParticipantUseCase.depends),
) -> VendorResponse:
    vendor = await use_case.execute(
        role=ParticipantRole.VENDOR, email=request.email, password=request.password
    )
    return VendorResponse.from_entity(vendor)


@router.get('/{vendor_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_vendor(
    vendor_id: str,
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> VendorResponse:
    return VendorResponse.from_entity(await use_case.get_vendor(vendor_id=vendor_id))


@router.post('/{vendor_id}/logout', status_code=status.HTTP_200_OK)
@Logger.io
async def logout_vendor(
    vendor_id: str,
    use_case: ChangeParticipantActivityUseCase = Depends(ChangeParticipantActivityUseCase.depends),
) -> VendorResponse:
    """Stop the vendor's runner and take its unsold tickets out of the pool."""
    vendor = await use_case.deactivate(role=ParticipantRole.VENDOR, participant_id=vendor_id)
    return VendorResponse.from_entity(vendor)


@router.post('/{vendor_id}/activate', status_code=status.HTTP_200_OK)
@Logger.io
async def activate_vendor(
    vendor_id: str,
    use_case: ChangeParticipantActivityUseCase = Depends(ChangeParticipantActivityUseCase.depends),
) -> VendorResponse:
    vendor = await use_case.activate(role=ParticipantRole.VENDOR, participant_id=vendor_id)
    return VendorResponse.from_entity(vendor)


@router.post('/{vendor_id}/release', status_code=status.HTTP_200_OK)
@Logger.io
async def release_tickets(
    vendor_id: str,
    request: ReleaseRequest,
    use_case: TradeTicketsUseCase = Depends(TradeTicketsUseCase.depends),
) -> PoolStatusResponse:
    pool_status = await use_case.release(vendor_id=vendor_id, count=request.count)
    return PoolStatusResponse.from_status(pool_status)
