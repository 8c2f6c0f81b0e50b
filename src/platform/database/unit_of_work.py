"""
Unit of Work Pattern - one database session shared by all marketplace repositories

Architecture:
- UoW owns the session lifecycle
- UoW owns commit/rollback
- Repositories are bound to the UoW session
- The pool controller commits vendor, customer, ticket and configuration
  changes of one operation together
"""

from __future__ import annotations

import abc
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.marketplace.app.interface.i_customer_repo import ICustomerRepo
    from src.service.marketplace.app.interface.i_event_configuration_repo import (
        IEventConfigurationRepo,
    )
    from src.service.marketplace.app.interface.i_ticket_repo import ITicketRepo
    from src.service.marketplace.app.interface.i_vendor_repo import IVendorRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the marketplace

    Usage:
        async with uow_factory() as uow:
            await uow.vendor_repo.save(vendor=vendor)
            await uow.commit()

    Leaving the block without commit() rolls everything back.
    """

    vendor_repo: IVendorRepo
    customer_repo: ICustomerRepo
    ticket_repo: ITicketRepo
    event_configuration_repo: IEventConfigurationRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self, *, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory
        self._session_cm: Optional[AbstractAsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.marketplace.driven_adapter.repo.customer_repo_impl import (
            CustomerRepoImpl,
        )
        from src.service.marketplace.driven_adapter.repo.event_configuration_repo_impl import (
            EventConfigurationRepoImpl,
        )
        from src.service.marketplace.driven_adapter.repo.ticket_repo_impl import TicketRepoImpl
        from src.service.marketplace.driven_adapter.repo.vendor_repo_impl import VendorRepoImpl

        self._session_cm = self.session_factory()
        self.session = await self._session_cm.__aenter__()

        # Repositories share the UoW session
        self.vendor_repo = VendorRepoImpl(session=self.session)
        self.customer_repo = CustomerRepoImpl(session=self.session)
        self.ticket_repo = TicketRepoImpl(session=self.session)
        self.event_configuration_repo = EventConfigurationRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self._session_cm is not None:
                await self._session_cm.__aexit__(*args)
            self._session_cm = None
            self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'commit() outside of `async with uow`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
