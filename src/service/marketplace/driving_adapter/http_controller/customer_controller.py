from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.change_participant_activity_use_case import (
    ChangeParticipantActivityUseCase,
)
from src.service.marketplace.app.command.login_participant_use_case import (
    LoginParticipantUseCase,
)
from src.service.marketplace.app.command.register_customer_use_case import (
    RegisterCustomerUseCase,
)
from src.service.marketplace.app.command.trade_tickets_use_case import TradeTicketsUseCase
from src.service.marketplace.app.query.participant_query_use_case import ParticipantQueryUseCase
from src.service.marketplace.domain.enum.participant_role import ParticipantRole
from src.service.marketplace.driving_adapter.schema.participant_schema import (
    CustomerRegisterRequest,
    CustomerResponse,
    LoginRequest,
    PurchaseRequest,
    PurchaseResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def register_customer(
    request: CustomerRegisterRequest,
    use_case: RegisterCustomerUseCase = Depends(RegisterCustomerUseCase.depends),
) -> CustomerResponse:
    customer = await use_case.execute(
        name=request.name,
        email=request.email,
        password=request.password,
        tickets_to_purchase=request.tickets_to_purchase,
        ticket_retrieval_interval=request.ticket_retrieval_interval,
    )
    return CustomerResponse.from_entity(customer)


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_active_customers(
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> List[CustomerResponse]:
    return [CustomerResponse.from_entity(c) for c in await use_case.list_active_customers()]


@router.get('/search', status_code=status.HTTP_200_OK)
@Logger.io
async def search_customers(
    name: str = Query(..., min_length=1),
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> List[CustomerResponse]:
    return [CustomerResponse.from_entity(c) for c in await use_case.search_customers(name=name)]


@router.post('/login', status_code=status.HTTP_200_OK)
@Logger.io
async def login_customer(
    request: LoginRequest,
    use_case: LoginParticipantUseCase = Depends(LoginParticipantUseCase.depends),
) -> CustomerResponse:
    customer = await use_case.execute(
        role=ParticipantRole.CUSTOMER, email=request.email, password=request.password
    )
    return CustomerResponse.from_entity(customer)


@router.get('/{customer_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_customer(
    customer_id: str,
    use_case: ParticipantQueryUseCase = Depends(ParticipantQueryUseCase.depends),
) -> CustomerResponse:
    return CustomerResponse.from_entity(await use_case.get_customer(customer_id=customer_id))


@router.post('/{customer_id}/logout', status_code=status.HTTP_200_OK)
@Logger.io
async def logout_customer(
    customer_id: str,
    use_case: ChangeParticipantActivityUseCase = Depends(ChangeParticipantActivityUseCase.depends),
) -> CustomerResponse:
    customer = await use_case.deactivate(role=ParticipantRole.CUSTOMER, participant_id=customer_id)
    return CustomerResponse.from_entity(customer)


@router.post('/{customer_id}/activate', status_code=status.HTTP_200_OK)
@Logger.io
async def activate_customer(
    customer_id: str,
    use_case: ChangeParticipantActivityUseCase = Depends(ChangeParticipantActivityUseCase.depends),
) -> CustomerResponse:
    customer = await use_case.activate(role=ParticipantRole.CUSTOMER, participant_id=customer_id)
    return CustomerResponse.from_entity(customer)


@router.post('/{customer_id}/purchase', status_code=status.HTTP_200_OK)
@Logger.io
async def purchase_tickets(
    customer_id: str,
    request: PurchaseRequest,
    use_case: TradeTicketsUseCase = Depends(TradeTicketsUseCase.depends),
) -> PurchaseResponse:
    """Buy up to `count` tickets; `purchased` is 0 when the pool has nothing to offer."""
    purchased = await use_case.purchase(customer_id=customer_id, count=request.count)
    return PurchaseResponse(customer_id=customer_id, requested=request.count, purchased=purchased)
