from typing import Callable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.domain.entity.ticket_entity import Ticket


class ListTicketsUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def list_all(self) -> List[Ticket]:
        async with self.uow_factory() as uow:
            return await uow.ticket_repo.list_all()

    @Logger.io
    async def list_by_vendor(self, *, vendor_id: str) -> List[Ticket]:
        async with self.uow_factory() as uow:
            return await uow.ticket_repo.list_by_vendor(vendor_id=vendor_id)

    @Logger.io
    async def list_by_customer(self, *, customer_id: str) -> List[Ticket]:
        async with self.uow_factory() as uow:
            return await uow.ticket_repo.list_by_customer(customer_id=customer_id)

    @Logger.io
    async def get(self, *, ticket_id: str) -> Ticket:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            raise NotFoundError(f'Ticket {ticket_id} not found')
        return ticket
