from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_ticket_repo import ITicketRepo
from src.service.marketplace.domain.entity.ticket_entity import Ticket
from src.service.marketplace.driven_adapter.model.ticket_model import TicketModel


class TicketRepoImpl(ITicketRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io(truncate_content=True)
    async def save_all(self, *, tickets: List[Ticket]) -> None:
        self.session.add_all(
            [
                TicketModel(
                    id=ticket.id,
                    vendor_id=ticket.vendor_id,
                    customer_id=ticket.customer_id,
                    event_name=ticket.event_name,
                    created_at=ticket.created_at,
                    purchased_at=ticket.purchased_at,
                )
                for ticket in tickets
            ]
        )
        await self.session.flush()

    @Logger.io
    async def get_by_id(self, *, ticket_id: str) -> Optional[Ticket]:
        model = await self.session.get(TicketModel, ticket_id)
        return self._model_to_entity(model) if model else None

    @Logger.io(truncate_content=True)
    async def list_all(self) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel).order_by(TicketModel.purchased_at, TicketModel.id)
        )
        return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io(truncate_content=True)
    async def list_by_vendor(self, *, vendor_id: str) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.vendor_id == vendor_id)
            .order_by(TicketModel.purchased_at, TicketModel.id)
        )
        return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io(truncate_content=True)
    async def list_by_customer(self, *, customer_id: str) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.customer_id == customer_id)
            .order_by(TicketModel.purchased_at, TicketModel.id)
        )
        return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def count_by_vendor(self, *, vendor_ids: List[str]) -> dict[str, int]:
        counts = dict.fromkeys(vendor_ids, 0)
        if not vendor_ids:
            return counts
        result = await self.session.execute(
            select(TicketModel.vendor_id, func.count(TicketModel.id))
            .where(TicketModel.vendor_id.in_(vendor_ids))
            .group_by(TicketModel.vendor_id)
        )
        for vendor_id, count in result.all():
            counts[vendor_id] = count
        return counts

    @Logger.io
    async def delete(self, *, ticket_id: str) -> bool:
        result = await self.session.execute(delete(TicketModel).where(TicketModel.id == ticket_id))
        return bool(result.rowcount)  # type: ignore[attr-defined]

    @staticmethod
    def _model_to_entity(model: TicketModel) -> Ticket:
        return Ticket(
            id=model.id,
            vendor_id=model.vendor_id,
            customer_id=model.customer_id,
            event_name=model.event_name,
            created_at=model.created_at,
            purchased_at=model.purchased_at,
        )
