from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.delete_ticket_use_case import DeleteTicketUseCase
from src.service.marketplace.app.query.list_tickets_use_case import ListTicketsUseCase
from src.service.marketplace.driving_adapter.schema.ticket_schema import TicketResponse


router = APIRouter()


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_tickets(
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> List[TicketResponse]:
    return [TicketResponse.from_entity(t) for t in await use_case.list_all()]


@router.get('/vendor/{vendor_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def list_vendor_tickets(
    vendor_id: str,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> List[TicketResponse]:
    return [TicketResponse.from_entity(t) for t in await use_case.list_by_vendor(vendor_id=vendor_id)]


@router.get('/customer/{customer_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def list_customer_tickets(
    customer_id: str,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.list_by_customer(customer_id=customer_id)
    return [TicketResponse.from_entity(t) for t in tickets]


@router.get('/{ticket_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_ticket(
    ticket_id: str,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> TicketResponse:
    return TicketResponse.from_entity(await use_case.get(ticket_id=ticket_id))


@router.delete('/{ticket_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_ticket(
    ticket_id: str,
    use_case: DeleteTicketUseCase = Depends(DeleteTicketUseCase.depends),
) -> None:
    await use_case.execute(ticket_id=ticket_id)
