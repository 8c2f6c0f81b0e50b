from typing import Callable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.vendor_entity import Vendor


class ParticipantQueryUseCase:
    """Read-only lookups of vendors and customers"""

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
    async def list_active_vendors(self) -> List[Vendor]:
        async with self.uow_factory() as uow:
            return await uow.vendor_repo.list_active()

    @Logger.io
    async def search_vendors(self, *, name: str) -> List[Vendor]:
        async with self.uow_factory() as uow:
            return await uow.vendor_repo.find_by_name(name=name)

    @Logger.io
    async def get_vendor(self, *, vendor_id: str) -> Vendor:
        async with self.uow_factory() as uow:
            vendor = await uow.vendor_repo.get_by_id(vendor_id=vendor_id)
        if vendor is None:
            raise NotFoundError(f'Vendor {vendor_id} not found')
        return vendor

    @Logger.io
    async def list_active_customers(self) -> List[Customer]:
        async with self.uow_factory() as uow:
            return await uow.customer_repo.list_active()

    @Logger.io
    async def search_customers(self, *, name: str) -> List[Customer]:
        async with self.uow_factory() as uow:
            return await uow.customer_repo.find_by_name(name=name)

    @Logger.io
    async def get_customer(self, *, customer_id: str) -> Customer:
        async with self.uow_factory() as uow:
            customer = await uow.customer_repo.get_by_id(customer_id=customer_id)
        if customer is None:
            raise NotFoundError(f'Customer {customer_id} not found')
        return customer
